"""Middleware for storefront tenant context."""
from functools import wraps
from flask import g, request, current_app
from sqlalchemy.exc import SQLAlchemyError

from misproductos.database import get_session
from misproductos.exceptions import TenantNotFoundError
from misproductos.services.domain_service import request_domain, resolve_tenant_id
from misproductos.services.price_config_service import load_price_config
from misproductos.value_objects import TenantPricingConfig


def load_tenant_from_host():
    """
    Resolve the tenant owning the request host into g.

    Sets g.domain and g.tenant_id (None for unknown domains).
    """
    g.domain = request_domain(request.host)
    g.tenant_id = None
    g.pop('price_config', None)

    db_session = get_session()
    if not db_session or not g.domain:
        return

    g.tenant_id = resolve_tenant_id(db_session, g.domain)


def get_price_config() -> TenantPricingConfig:
    """
    Price config of the current tenant, loaded once per request.

    Without a tenant, or if the config cannot be read, defaults apply.
    """
    if 'price_config' in g:
        return g.price_config

    config = TenantPricingConfig(currency=current_app.config.get('DEFAULT_CURRENCY', 'USD'))
    tenant_id = g.get('tenant_id')
    if tenant_id:
        try:
            config = load_price_config(get_session(), tenant_id)
        except SQLAlchemyError as e:
            current_app.logger.error(f"[PRICES] Error loading price config for tenant {tenant_id}: {e}")

    g.price_config = config
    return config


def require_tenant(f):
    """
    Decorator: Require the request host to belong to a store.

    Raises TenantNotFoundError (404) for unknown domains.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('tenant_id') is None:
            raise TenantNotFoundError(g.get('domain') or request.host)
        return f(*args, **kwargs)
    return decorated_function
