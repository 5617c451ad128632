"""Tenant model - represents each company running a storefront."""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from misproductos.database import Base, BigIntPK


class Tenant(Base):
    """Tenant model - each company/store."""

    __tablename__ = 'tenant'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    slug = Column(String(80), nullable=False, unique=True)  # URL-safe identifier
    name = Column(String(200), nullable=False)  # Display name
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    domains = relationship('TenantDomain', back_populates='tenant', cascade='all, delete-orphan')
    configs = relationship('TenantConfig', back_populates='tenant', cascade='all, delete-orphan')
    discounts = relationship('Discount', back_populates='tenant', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Tenant(id={self.id}, slug='{self.slug}', name='{self.name}')>"
