"""Domain to tenant resolution for storefront requests."""
import logging
from typing import Optional

from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from misproductos.models import Tenant, TenantDomain

logger = logging.getLogger(__name__)


def normalize_hostname(host: Optional[str]) -> Optional[str]:
    """
    Canonical form used to store and look up domains.

    Examples:
        normalize_hostname('WWW.Tienda.com:3000') -> "tienda.com"
        normalize_hostname('') -> None
    """
    if not host:
        return None
    hostname = host.strip().lower().split(':')[0].rstrip('.')
    if hostname.startswith('www.'):
        hostname = hostname[len('www.'):]
    return hostname or None


def request_domain(host: Optional[str]) -> Optional[str]:
    """
    Domain a request is served for.

    In dev every request maps to the configured DOMAIN so a local checkout
    can impersonate any store.
    """
    if has_app_context() and current_app.config.get('ENV', 'dev') == 'dev':
        return normalize_hostname(current_app.config.get('DOMAIN') or 'localhost')
    return normalize_hostname(host)


def resolve_tenant_id(session: Session, hostname: Optional[str]) -> Optional[int]:
    """
    Tenant id owning ``hostname``, or None.

    Inactive tenants resolve to None. Database errors are logged and
    treated as unknown domains so a storefront request never crashes here.
    """
    domain = normalize_hostname(hostname)
    if not domain:
        return None

    try:
        row = session.query(TenantDomain.tenant_id).join(Tenant).filter(
            TenantDomain.domain == domain,
            Tenant.active.is_(True)
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"[TENANT] Error resolving domain {domain}: {e}")
        session.rollback()
        return None

    if row is None:
        logger.info(f"[TENANT] Unknown domain: {domain}")
        return None
    return row.tenant_id
