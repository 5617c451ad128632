"""Models package - exports all SQLAlchemy models."""
from misproductos.models.tenant import Tenant
from misproductos.models.tenant_domain import TenantDomain
from misproductos.models.tenant_config import TenantConfig
from misproductos.models.discount import Discount

__all__ = [
    'Tenant', 'TenantDomain', 'TenantConfig', 'Discount',
]
