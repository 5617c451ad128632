"""
Cart pricing with discounts.

The cart is explicit state owned by the caller (a list of CartLineItem);
every function here returns new values and never mutates its inputs.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from misproductos.services.discount_service import resolve
from misproductos.services.pricing_service import compute_order_totals
from misproductos.utils.number_format import ZERO
from misproductos.value_objects import CartLineItem, DiscountRule, TenantPricingConfig


def line_key(line: CartLineItem) -> str:
    """Same product with the same attributes (size, color...) is the same line."""
    attributes = line.selected_attributes or {}
    if not attributes:
        return line.product_id
    attrs_key = '|'.join(f"{key}:{attributes[key]}" for key in sorted(attributes))
    return f"{line.product_id}|{attrs_key}"


def _with_quantity(line: CartLineItem, quantity: int) -> CartLineItem:
    return CartLineItem(
        product_id=line.product_id,
        unit_price=line.unit_price,
        quantity=quantity,
        category_id=line.category_id,
        tag_ids=line.tag_ids,
        selected_attributes=dict(line.selected_attributes or {}),
        title=line.title,
    )


def add_to_cart(cart: Sequence[CartLineItem], line: CartLineItem) -> List[CartLineItem]:
    """Add a line, merging quantities with an existing identical line."""
    key = line_key(line)
    if not any(line_key(item) == key for item in cart):
        return list(cart) + [line]
    return [
        _with_quantity(item, item.quantity + line.quantity) if line_key(item) == key else item
        for item in cart
    ]


def update_line_quantity(cart: Sequence[CartLineItem], line: CartLineItem, quantity: int) -> List[CartLineItem]:
    """Set the quantity of a line; quantities below 1 remove it."""
    if quantity < 1:
        return remove_from_cart(cart, line)
    key = line_key(line)
    return [_with_quantity(item, quantity) if line_key(item) == key else item for item in cart]


def remove_from_cart(cart: Sequence[CartLineItem], line: CartLineItem) -> List[CartLineItem]:
    key = line_key(line)
    return [item for item in cart if line_key(item) != key]


def total_items(cart: Sequence[CartLineItem]) -> int:
    return sum(max(item.quantity, 0) for item in cart)


def cart_subtotal(cart: Sequence[CartLineItem]) -> Decimal:
    """List-price subtotal (before discounts); used for minCartTotal gates."""
    return sum((max(item.unit_price * item.quantity, ZERO) for item in cart), ZERO)


def price_cart_line(
    line: CartLineItem,
    rules: Optional[Sequence[DiscountRule]],
    cart_total: Any = 0,
    config: Optional[TenantPricingConfig] = None
) -> Dict[str, Any]:
    """
    Price one cart line with its current quantity.

    Only discounts whose gates are met are attached (amount > 0).

    Returns:
        Dict with line, discount (dict or None), final_unit_price, line_total.
    """
    resolution = resolve(rules, line.as_product(), line.quantity, cart_total,
                         check_conditions=True, config=config)

    discount = None
    if resolution.discount is not None and resolution.discount_amount > 0:
        discount = {
            'id': resolution.discount.id,
            'name': resolution.discount.name,
            'discount_amount': resolution.discount_amount,
            'final_price': resolution.final_price,
            'badge_text': resolution.badge_text,
        }

    line_total = resolution.final_price if discount else max(line.unit_price * line.quantity, ZERO)
    if line.quantity > 0:
        final_unit_price = line_total / line.quantity
    else:
        final_unit_price = max(line.unit_price, ZERO)

    return {
        'line': line,
        'discount': discount,
        'final_unit_price': final_unit_price,
        'line_total': line_total,
    }


def summarize_cart(
    cart: Sequence[CartLineItem],
    rules: Optional[Sequence[DiscountRule]],
    config: Optional[TenantPricingConfig] = None
) -> Dict[str, Any]:
    """
    Cart/checkout summary.

    sub_total is at list price; tax is computed on sub_total - discount_total.
    """
    sub_total = cart_subtotal(cart)
    lines = [price_cart_line(line, rules, sub_total, config) for line in cart]
    discount_total = sum(
        (priced['discount']['discount_amount'] for priced in lines if priced['discount']),
        ZERO
    )
    totals = compute_order_totals(sub_total - discount_total, config)

    return {
        'lines': lines,
        'total_items': total_items(cart),
        'sub_total': sub_total,
        'discount_total': discount_total,
        'taxable_total': totals['sub_total'],
        'tax': totals['tax'],
        'total': totals['total'],
    }
