"""
Discount resolution for catalog, product and cart prices.

Given the tenant's rules, a product and the quantity being priced, picks at
most one discount and computes the resulting price and badge. Pure: no
storage, no request context, rules and configs are never mutated. Callers
own loading (see discount_store_service) and cart state (see cart_service).
"""
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from misproductos.utils.formatters import format_price
from misproductos.utils.number_format import ZERO, plain_number, to_decimal
from misproductos.value_objects import (
    DiscountKind, DiscountResolution, DiscountRule, DiscountScope,
    ProductRef, TenantPricingConfig,
)


def scope_matches(rule: DiscountRule, product: ProductRef) -> bool:
    """Check whether the rule targets this product."""
    if rule.scope == DiscountScope.ALL:
        return True
    if rule.scope_id is None:
        return False
    if rule.scope == DiscountScope.PRODUCT:
        return rule.scope_id == product.id
    if rule.scope == DiscountScope.TAG:
        return rule.scope_id in product.tag_ids
    if rule.scope == DiscountScope.CATEGORY:
        return rule.scope_id == product.category_id
    return False


def _is_well_formed(rule: DiscountRule) -> bool:
    if rule.kind == DiscountKind.BUY_X_GET_Y:
        return bool(rule.buy_quantity and rule.buy_quantity > 0
                    and rule.get_quantity and rule.get_quantity > 0)
    return True


def gates_pass(rule: DiscountRule, quantity: Decimal, cart_subtotal: Decimal) -> bool:
    """minQuantity / minCartTotal gates, plus the buy quantity for BUY_X_GET_Y."""
    if quantity < (rule.min_quantity or 0):
        return False
    if cart_subtotal < (rule.min_cart_total or ZERO):
        return False
    if rule.kind == DiscountKind.BUY_X_GET_Y and quantity < rule.buy_quantity:
        return False
    return True


def discount_amount(rule: DiscountRule, unit_price: Decimal, quantity: Decimal) -> Decimal:
    """
    Amount the rule takes off ``unit_price * quantity``.

    Always within [0, line total]. Gates are not checked here.
    """
    line_total = unit_price * quantity
    if line_total <= 0:
        return ZERO

    value = max(rule.value, ZERO)
    if rule.kind == DiscountKind.PERCENTAGE:
        amount = line_total * value / Decimal(100)
    elif rule.kind == DiscountKind.FIXED_AMOUNT:
        amount = min(value, line_total)
    elif rule.kind == DiscountKind.BUY_X_GET_Y:
        if not _is_well_formed(rule) or quantity < rule.buy_quantity:
            return ZERO
        free_units = int(quantity // rule.buy_quantity) * rule.get_quantity
        free_units = min(Decimal(free_units), quantity)
        amount = free_units * unit_price
    else:
        return ZERO

    return min(max(amount, ZERO), line_total)


def default_badge_text(rule: DiscountRule, config: Optional[TenantPricingConfig] = None) -> str:
    """
    Badge generated from the rule when it has no explicit badge_text.

    Examples:
        PERCENTAGE 20            -> "-20%"
        FIXED_AMOUNT 500 (ARS)   -> "-$500.00"
        BUY_X_GET_Y buy=3 get=1  -> "3x2"
    """
    if rule.kind == DiscountKind.PERCENTAGE:
        return f"-{plain_number(max(rule.value, ZERO))}%"
    if rule.kind == DiscountKind.FIXED_AMOUNT:
        value = max(rule.value, ZERO)
        rendered = format_price(value, config) if config is not None else None
        return f"-{rendered}" if rendered else f"-${plain_number(value)}"
    if rule.kind == DiscountKind.BUY_X_GET_Y and _is_well_formed(rule):
        pay = rule.buy_quantity - rule.get_quantity
        # get >= buy has no "NxM" reading
        if pay > 0:
            return f"{rule.buy_quantity}x{pay}"
    return 'Promo'


def badge_text_for(rule: DiscountRule, config: Optional[TenantPricingConfig] = None) -> str:
    return rule.badge_text or default_badge_text(rule, config)


def _no_discount(line_total: Decimal) -> DiscountResolution:
    return DiscountResolution(
        discount=None,
        discount_amount=ZERO,
        final_price=max(line_total, ZERO),
        badge_text=None,
    )


def _ranking_key(candidate: Tuple[int, DiscountRule, Decimal]):
    # Real discounts beat badge-only ones, then priority, then amount;
    # specificity and creation order (earlier index first) break ties.
    index, rule, amount = candidate
    return (amount > 0, rule.priority or 0, amount, rule.scope.specificity, -index)


def resolve(
    rules: Optional[Iterable[DiscountRule]],
    product: ProductRef,
    quantity: Any = 1,
    cart_subtotal: Any = 0,
    check_conditions: bool = True,
    config: Optional[TenantPricingConfig] = None,
) -> DiscountResolution:
    """
    Pick the best discount for ``quantity`` units of ``product``.

    Args:
        rules: Tenant rules by priority, then creation order (inactive ones are skipped)
        product: Product being priced
        quantity: Units considered (1 in catalog grids, line quantity in the cart)
        cart_subtotal: Cart subtotal, only used for minCartTotal gates
        check_conditions: When False, rules whose gates fail still win for
            badge display but with a zero amount
        config: Optional tenant config, used to render fixed-amount badges

    Returns:
        DiscountResolution; ``final_price`` is for the whole quantity.
    """
    unit_price = to_decimal(product.price)
    quantity = to_decimal(quantity)
    cart_subtotal = to_decimal(cart_subtotal)
    line_total = unit_price * quantity

    if unit_price <= 0 or quantity <= 0:
        return _no_discount(line_total)

    candidates: List[Tuple[int, DiscountRule, Decimal]] = []
    for index, rule in enumerate(rules or ()):
        if not rule.active or not _is_well_formed(rule):
            continue
        if not scope_matches(rule, product):
            continue
        if gates_pass(rule, quantity, cart_subtotal):
            amount = discount_amount(rule, unit_price, quantity)
        elif check_conditions:
            continue
        else:
            amount = ZERO
        candidates.append((index, rule, amount))

    if not candidates:
        return _no_discount(line_total)

    _index, winner, amount = max(candidates, key=_ranking_key)
    return DiscountResolution(
        discount=winner,
        discount_amount=amount,
        final_price=max(line_total - amount, ZERO),
        badge_text=badge_text_for(winner, config),
    )


def catalog_badge(
    rules: Optional[Sequence[DiscountRule]],
    product: ProductRef,
    config: Optional[TenantPricingConfig] = None,
) -> DiscountResolution:
    """Resolution for a single unit in catalog grids, showing gated promos too."""
    return resolve(rules, product, quantity=1, cart_subtotal=0, check_conditions=False, config=config)
