"""
Tenant price configuration - Multi-Tenant.

Tenants store their price settings as free-form key/value pairs
(prices.currency, prices.taxValue, ...). This module types and defaults them
once into a TenantPricingConfig so nothing downstream handles raw maps.
"""
import logging
from typing import Any, Dict, Mapping, Optional

from flask import current_app, has_app_context
from sqlalchemy.orm import Session

from misproductos.exceptions import BusinessLogicError
from misproductos.models import TenantConfig
from misproductos.services.cache_service import cached, invalidate
from misproductos.utils.formatters import DEFAULT_CURRENCY, DEFAULT_DECIMALS, DEFAULT_FORMAT, MAX_DECIMALS, PRICE_FORMATS
from misproductos.utils.number_format import ZERO, to_decimal, to_int
from misproductos.value_objects import TenantPricingConfig

logger = logging.getLogger(__name__)

PRICES_PREFIX = 'prices.'
CACHE_MODULE = 'price_config'
TAX_TYPES = ('percentage', 'fixed')


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('true', '1', 'yes', 'si', 'sí', 'on'):
            return True
        if lowered in ('false', '0', 'no', 'off'):
            return False
    return default


def build_price_config(configs: Optional[Mapping[str, Any]], default_currency: Optional[str] = None) -> TenantPricingConfig:
    """
    Type a tenant's prices.* map into a TenantPricingConfig.

    Missing or malformed entries fall back to defaults instead of raising.
    """
    configs = configs or {}
    default_currency = (default_currency or DEFAULT_CURRENCY).upper()

    currency = configs.get('prices.currency')
    currency = str(currency).strip().upper() if currency else default_currency

    price_format = configs.get('prices.format')
    if price_format not in PRICE_FORMATS:
        price_format = DEFAULT_FORMAT

    decimals = to_int(configs.get('prices.decimals'), default=DEFAULT_DECIMALS)
    if decimals is None or decimals < 0:
        decimals = DEFAULT_DECIMALS
    decimals = min(decimals, MAX_DECIMALS)

    tax_type = str(configs.get('prices.taxType') or 'percentage').strip().lower()
    if tax_type not in TAX_TYPES:
        tax_type = 'percentage'

    return TenantPricingConfig(
        currency=currency or default_currency,
        format=price_format,
        show_prices=_as_bool(configs.get('prices.showPrices'), True),
        decimals=decimals,
        enable_tax=_as_bool(configs.get('prices.enableTax'), False),
        tax_type=tax_type,
        tax_value=max(to_decimal(configs.get('prices.taxValue')), ZERO),
    )


def _load_price_entries(session: Session, tenant_id: int) -> Dict[str, Any]:
    rows = session.query(TenantConfig).filter(
        TenantConfig.tenant_id == tenant_id,
        TenantConfig.key.like(f'{PRICES_PREFIX}%')
    ).order_by(TenantConfig.key.asc()).all()
    return {row.key: row.value for row in rows}


def load_price_config(session: Session, tenant_id: int, use_cache: bool = True) -> TenantPricingConfig:
    """Load and type the price config of a tenant (cached per tenant)."""
    if not tenant_id:
        raise BusinessLogicError('tenant_id es requerido')

    ttl = None
    default_currency = None
    if has_app_context():
        ttl = current_app.config.get('CACHE_PRICE_CONFIG_TTL')
        default_currency = current_app.config.get('DEFAULT_CURRENCY')

    entries = cached(
        tenant_id, CACHE_MODULE, 'entries',
        lambda: _load_price_entries(session, tenant_id),
        ttl=ttl, use_cache=use_cache
    )
    return build_price_config(entries, default_currency=default_currency)


def save_price_entries(session: Session, tenant_id: int, entries: Mapping[str, Any]) -> None:
    """Upsert prices.* entries for a tenant and drop its cached config."""
    if not tenant_id:
        raise BusinessLogicError('tenant_id es requerido')

    invalid = [key for key in entries if not key.startswith(PRICES_PREFIX)]
    if invalid:
        raise BusinessLogicError(f"Claves de precios inválidas: {', '.join(sorted(invalid))}")

    existing = {
        row.key: row
        for row in session.query(TenantConfig).filter(
            TenantConfig.tenant_id == tenant_id,
            TenantConfig.key.in_(list(entries.keys()))
        ).all()
    }
    for key, value in entries.items():
        if key in existing:
            existing[key].value = value
        else:
            session.add(TenantConfig(tenant_id=tenant_id, key=key, value=value))
    session.commit()

    invalidate(tenant_id, CACHE_MODULE)
    logger.info(f"[PRICES] Tenant {tenant_id} updated {len(entries)} price settings")
