"""
Price formatting for storefront templates.

Renders amounts with the tenant's currency, display format and precision.
Never raises: unknown currencies show their ISO code, unknown formats fall
back to symbol-before.
"""
from decimal import Decimal
from typing import Any, Optional, Union

from misproductos.utils.number_format import round_half_up, to_decimal, to_int
from misproductos.value_objects import TenantPricingConfig

# (code, label, symbol) - labels are shown in the back-office currency picker
CURRENCIES = (
    ('USD', 'USD - Dólar estadounidense', '$'),
    ('EUR', 'EUR - Euro', '€'),
    ('ARS', 'ARS - Peso argentino', '$'),
    ('MXN', 'MXN - Peso mexicano', '$'),
    ('CLP', 'CLP - Peso chileno', '$'),
    ('COP', 'COP - Peso colombiano', '$'),
    ('BRL', 'BRL - Real brasileño', 'R$'),
    ('PEN', 'PEN - Sol peruano', 'S/'),
)

CURRENCY_SYMBOLS = {code: symbol for code, _label, symbol in CURRENCIES}

PRICE_FORMATS = ('symbol-before', 'symbol-after', 'code-before', 'code-after')

DEFAULT_CURRENCY = 'USD'
DEFAULT_FORMAT = 'symbol-before'
DEFAULT_DECIMALS = 2
MAX_DECIMALS = 8


def currency_symbol(currency: Optional[str]) -> str:
    """
    Display symbol for an ISO currency code.

    Examples:
        currency_symbol('BRL') -> "R$"
        currency_symbol('GBP') -> "GBP"
    """
    code = (currency or DEFAULT_CURRENCY).upper()
    return CURRENCY_SYMBOLS.get(code, code)


def format_amount(value: Union[int, float, Decimal, str, None], decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Round half-up and render with a fixed number of decimals.

    Examples:
        format_amount(1500) -> "1500.00"
        format_amount(0.125) -> "0.13"
        format_amount(99.5, decimals=0) -> "100"
    """
    decimals = to_int(decimals, default=DEFAULT_DECIMALS)
    if decimals is None or decimals < 0:
        decimals = DEFAULT_DECIMALS
    decimals = min(decimals, MAX_DECIMALS)
    rounded = round_half_up(to_decimal(value), decimals)
    if rounded == 0:
        rounded = abs(rounded)  # no "-0.00"
    return f"{rounded:.{decimals}f}"


def format_price(value: Union[int, float, Decimal, str, None], config: Optional[TenantPricingConfig] = None) -> Optional[str]:
    """
    Format a price with the tenant configuration.

    Args:
        value: Amount to render
        config: Tenant pricing config (defaults apply when None)

    Returns:
        The rendered price, or None when the tenant hides prices.

    Examples:
        format_price(100)                                   -> "$100.00"
        format_price(100, cfg(format='code-after', currency='ARS')) -> "100.00 ARS"
        format_price(100, cfg(show_prices=False))           -> None
    """
    config = config or TenantPricingConfig()
    if config.show_prices is not None and not config.show_prices:
        return None

    currency = (config.currency or DEFAULT_CURRENCY).upper()
    amount = format_amount(value, config.decimals)
    sign = ''
    if amount.startswith('-'):
        sign, amount = '-', amount[1:]

    symbol = currency_symbol(currency)
    fmt = config.format if config.format in PRICE_FORMATS else DEFAULT_FORMAT

    if fmt == 'symbol-after':
        return f"{sign}{amount}{symbol}"
    if fmt == 'code-before':
        return f"{sign}{currency} {amount}"
    if fmt == 'code-after':
        return f"{sign}{amount} {currency}"
    return f"{sign}{symbol}{amount}"


def price_filter(value: Any, config: Optional[TenantPricingConfig] = None) -> str:
    """Jinja filter wrapper: renders nothing when prices are hidden."""
    return format_price(value, config) or ''
