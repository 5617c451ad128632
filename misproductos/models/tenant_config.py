"""TenantConfig model - free-form key/value settings per tenant."""
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from misproductos.database import Base, BigIntPK


class TenantConfig(Base):
    """
    One configuration entry (e.g. key='prices.currency', value='ARS').

    Values are untyped JSON; consumers type them at the boundary.
    """

    __tablename__ = 'tenant_config'
    __table_args__ = (
        UniqueConstraint('tenant_id', 'key', name='uq_tenant_config_key'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False)
    key = Column(String(120), nullable=False)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    tenant = relationship('Tenant', back_populates='configs')

    def __repr__(self):
        return f"<TenantConfig(tenant_id={self.tenant_id}, key='{self.key}')>"
