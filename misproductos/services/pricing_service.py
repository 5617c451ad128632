"""Order totals (subtotal, tax, total) for cart and checkout summaries."""
from decimal import Decimal
from typing import Any, Dict, Optional

from misproductos.utils.number_format import ZERO, plain_number, to_decimal
from misproductos.value_objects import TenantPricingConfig

TAX_PERCENTAGE = 'percentage'
TAX_FIXED = 'fixed'


def compute_tax(sub_total: Decimal, config: TenantPricingConfig) -> Decimal:
    """Tax for a (non-negative) subtotal; zero when tax is disabled."""
    if not config.enable_tax:
        return ZERO
    tax_value = max(to_decimal(config.tax_value), ZERO)
    if config.tax_type == TAX_FIXED:
        return tax_value
    # Percentage of the subtotal, never compounded
    return sub_total * tax_value / Decimal(100)


def compute_order_totals(subtotal: Any, config: Optional[TenantPricingConfig] = None) -> Dict[str, Decimal]:
    """
    Compute the payable totals for a subtotal.

    Returns:
        Dict with sub_total, tax and total. total is the amount charged.

    Examples:
        compute_order_totals(100, cfg(enable_tax=True, tax_value=21))
            -> {'sub_total': 100, 'tax': 21, 'total': 121}
    """
    config = config or TenantPricingConfig()
    sub_total = max(to_decimal(subtotal), ZERO)
    tax = compute_tax(sub_total, config)
    return {
        'sub_total': sub_total,
        'tax': tax,
        'total': sub_total + tax,
    }


def tax_label(config: TenantPricingConfig) -> str:
    """Checkout label for the tax row, e.g. 'Impuestos (21%)'."""
    tax_value = to_decimal(config.tax_value)
    if config.enable_tax and config.tax_type == TAX_PERCENTAGE and tax_value > 0:
        return f"Impuestos ({plain_number(tax_value)}%)"
    return 'Impuestos'
