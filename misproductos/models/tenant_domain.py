"""TenantDomain model - subdomains and custom domains pointing at a store."""
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from misproductos.database import Base, BigIntPK


class TenantDomain(Base):
    """Hostname owned by a tenant (e.g. tienda.misproductos.com or a custom domain)."""

    __tablename__ = 'tenant_domain'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False)
    domain = Column(String(255), nullable=False, unique=True)  # Stored normalized: lowercase, no port, no www.
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    tenant = relationship('Tenant', back_populates='domains')

    def __repr__(self):
        return f"<TenantDomain(domain='{self.domain}', tenant_id={self.tenant_id})>"
