"""
Value objects shared by the pricing core and its collaborators.

Everything here is immutable; the resolver and the formatter only read them.
Numbers are Decimal; builders accept loose input (int, float, str) and
fall back to zero instead of raising.
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from misproductos.utils.number_format import ZERO, to_decimal, to_int


class DiscountKind(enum.Enum):
    """How a discount rule computes its amount."""
    PERCENTAGE = 'PERCENTAGE'
    FIXED_AMOUNT = 'FIXED_AMOUNT'
    BUY_X_GET_Y = 'BUY_X_GET_Y'


class DiscountScope(enum.Enum):
    """Which part of the catalog a rule targets."""
    PRODUCT = 'PRODUCT'
    TAG = 'TAG'
    CATEGORY = 'CATEGORY'
    ALL = 'ALL'

    @property
    def specificity(self) -> int:
        """Higher is more specific: PRODUCT > TAG > CATEGORY > ALL."""
        return _SCOPE_SPECIFICITY[self]


_SCOPE_SPECIFICITY = {
    DiscountScope.PRODUCT: 3,
    DiscountScope.TAG: 2,
    DiscountScope.CATEGORY: 1,
    DiscountScope.ALL: 0,
}


def _id(value: Any) -> Optional[str]:
    if value is None or value == '':
        return None
    return str(value)


def _ids(values: Optional[Iterable[Any]]) -> FrozenSet[str]:
    return frozenset(str(v) for v in (values or ()) if v is not None)


def _enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        return default


@dataclass(frozen=True)
class DiscountRule:
    """A tenant promotion as seen by the resolver."""
    id: str
    name: str
    kind: DiscountKind
    value: Decimal = ZERO
    scope: DiscountScope = DiscountScope.ALL
    scope_id: Optional[str] = None
    badge_text: Optional[str] = None
    min_quantity: int = 1
    min_cart_total: Decimal = ZERO
    buy_quantity: Optional[int] = None
    get_quantity: Optional[int] = None
    priority: int = 0
    active: bool = True
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DiscountRule':
        """Build a rule from a loose mapping (cache payloads, fixtures)."""
        return cls(
            id=str(data.get('id')),
            name=data.get('name') or '',
            kind=_enum(DiscountKind, data.get('kind'), DiscountKind.PERCENTAGE),
            value=to_decimal(data.get('value')),
            scope=_enum(DiscountScope, data.get('scope') or 'ALL', DiscountScope.ALL),
            scope_id=_id(data.get('scope_id')),
            badge_text=data.get('badge_text') or None,
            min_quantity=to_int(data.get('min_quantity'), default=1),
            min_cart_total=to_decimal(data.get('min_cart_total')),
            buy_quantity=to_int(data.get('buy_quantity'), default=None),
            get_quantity=to_int(data.get('get_quantity'), default=None),
            priority=to_int(data.get('priority'), default=0),
            active=bool(data.get('active', True)),
            starts_at=_parse_datetime(data.get('starts_at')),
            ends_at=_parse_datetime(data.get('ends_at')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'kind': self.kind.value,
            'value': self.value,
            'scope': self.scope.value,
            'scope_id': self.scope_id,
            'badge_text': self.badge_text,
            'min_quantity': self.min_quantity,
            'min_cart_total': self.min_cart_total,
            'buy_quantity': self.buy_quantity,
            'get_quantity': self.get_quantity,
            'priority': self.priority,
            'active': self.active,
            'starts_at': self.starts_at,
            'ends_at': self.ends_at,
        }


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


@dataclass(frozen=True)
class ProductRef:
    """The product facts the resolver needs."""
    id: str
    price: Decimal
    category_id: Optional[str] = None
    tag_ids: FrozenSet[str] = frozenset()

    @classmethod
    def build(cls, id, price, category_id=None, tag_ids=None) -> 'ProductRef':
        """
        Build from loose inputs; ids become strings, price goes through to_decimal.

        String prices use the Argentine reading: '12.500' is 12500 and
        '12,5' is 12.5. Pass Decimal or float for machine-formatted prices.
        """
        return cls(id=str(id), price=to_decimal(price), category_id=_id(category_id), tag_ids=_ids(tag_ids))


@dataclass(frozen=True)
class CartLineItem:
    """One product line in a shopper's cart."""
    product_id: str
    unit_price: Decimal
    quantity: int
    category_id: Optional[str] = None
    tag_ids: FrozenSet[str] = frozenset()
    selected_attributes: Mapping[str, Any] = field(default_factory=dict, hash=False, compare=False)
    title: str = ''

    @classmethod
    def build(cls, product_id, unit_price, quantity=1, category_id=None, tag_ids=None,
              selected_attributes=None, title='') -> 'CartLineItem':
        """Build from loose inputs; string prices parse like ProductRef.build."""
        return cls(
            product_id=str(product_id),
            unit_price=to_decimal(unit_price),
            quantity=to_int(quantity, default=0),
            category_id=_id(category_id),
            tag_ids=_ids(tag_ids),
            selected_attributes=dict(selected_attributes or {}),
            title=title or '',
        )

    def as_product(self) -> ProductRef:
        return ProductRef(id=self.product_id, price=self.unit_price,
                          category_id=self.category_id, tag_ids=self.tag_ids)


@dataclass(frozen=True)
class DiscountResolution:
    """Outcome of resolving discounts for one product and quantity."""
    discount: Optional[DiscountRule]
    discount_amount: Decimal
    final_price: Decimal
    badge_text: Optional[str] = None


@dataclass(frozen=True)
class TenantPricingConfig:
    """Per-tenant price display and tax settings."""
    currency: str = 'USD'
    format: str = 'symbol-before'
    show_prices: bool = True
    decimals: int = 2
    enable_tax: bool = False
    tax_type: str = 'percentage'
    tax_value: Decimal = ZERO
