"""
Active discount rules per tenant - Multi-Tenant.

Loads the rules the resolver consumes, by priority then creation order,
and applies each rule's validity window (starts_at / ends_at).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from flask import current_app, has_app_context
from sqlalchemy.orm import Session

from misproductos.exceptions import BusinessLogicError
from misproductos.models import Discount
from misproductos.services.cache_service import cached, invalidate
from misproductos.value_objects import DiscountRule

logger = logging.getLogger(__name__)

CACHE_MODULE = 'discounts'


def discount_to_rule(discount: Discount) -> DiscountRule:
    """Convert an ORM Discount into the resolver's value object."""
    return DiscountRule.from_dict({
        'id': discount.id,
        'name': discount.name,
        'kind': discount.kind,
        'value': discount.value,
        'scope': discount.scope,
        'scope_id': discount.scope_id,
        'badge_text': discount.badge_text,
        'min_quantity': discount.min_quantity,
        'min_cart_total': discount.min_cart_total,
        'buy_quantity': discount.buy_quantity,
        'get_quantity': discount.get_quantity,
        'priority': discount.priority,
        'active': discount.active,
        'starts_at': discount.starts_at,
        'ends_at': discount.ends_at,
    })


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def is_within_window(rule: DiscountRule, now: datetime) -> bool:
    """Check the rule's validity window at ``now``."""
    now = _as_utc(now)
    starts_at = _as_utc(rule.starts_at)
    ends_at = _as_utc(rule.ends_at)
    if starts_at and starts_at > now:
        return False
    if ends_at and ends_at < now:
        return False
    return True


def _load_active_rules(session: Session, tenant_id: int) -> List[Dict[str, Any]]:
    discounts = session.query(Discount).filter(
        Discount.tenant_id == tenant_id,
        Discount.active.is_(True)
    ).order_by(Discount.priority.desc(), Discount.created_at.asc(), Discount.id.asc()).all()
    return [discount_to_rule(d).to_dict() for d in discounts]


def get_active_discount_rules(
    session: Session,
    tenant_id: int,
    now: Optional[datetime] = None,
    use_cache: bool = True
) -> List[DiscountRule]:
    """
    Active rules of a tenant, by priority then creation order, valid at ``now``.

    The active set is cached per tenant; the time window is applied after
    reading the cache so a cached rule expires on time.
    """
    if not tenant_id:
        raise BusinessLogicError('tenant_id es requerido')

    now = now or datetime.now(timezone.utc)
    ttl = current_app.config.get('CACHE_DISCOUNTS_TTL') if has_app_context() else None

    payload = cached(
        tenant_id, CACHE_MODULE, 'active',
        lambda: _load_active_rules(session, tenant_id),
        ttl=ttl, use_cache=use_cache
    )
    rules = [DiscountRule.from_dict(item) for item in payload]
    valid = [rule for rule in rules if is_within_window(rule, now)]

    logger.debug(f"[DISCOUNTS] Tenant {tenant_id}: {len(valid)}/{len(rules)} rules in window")
    return valid


def invalidate_discounts_cache(tenant_id: int) -> int:
    """Drop cached rules after the back-office edits a discount."""
    return invalidate(tenant_id, CACHE_MODULE)
