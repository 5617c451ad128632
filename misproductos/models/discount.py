"""Discount model - promotional rules scoped to one tenant."""
from sqlalchemy import Column, BigInteger, String, Boolean, Integer, Numeric, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from misproductos.database import Base, BigIntPK
from misproductos.value_objects import DiscountKind, DiscountScope


class Discount(Base):
    """Discount rule (descuento) edited from the back-office."""

    __tablename__ = 'discount'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    badge_text = Column(String(40), nullable=True)  # Overrides the generated badge
    kind = Column(Enum(DiscountKind, name='discount_kind'), nullable=False)
    value = Column(Numeric(10, 2), nullable=False, default=0, server_default='0')

    # BUY_X_GET_Y only: buy_quantity units, get_quantity of them free
    buy_quantity = Column(Integer, nullable=True)
    get_quantity = Column(Integer, nullable=True)

    # Higher priority wins over a larger amount
    priority = Column(Integer, nullable=False, default=0, server_default='0')

    # Exactly one scope; scope_id is NULL for catalog-wide rules
    scope = Column(Enum(DiscountScope, name='discount_scope'), nullable=False, default=DiscountScope.ALL)
    scope_id = Column(String(64), nullable=True)

    # Gates
    min_quantity = Column(Integer, nullable=False, default=1, server_default='1')
    min_cart_total = Column(Numeric(10, 2), nullable=True)

    active = Column(Boolean, nullable=False, default=True)
    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    tenant = relationship('Tenant', back_populates='discounts')

    def __repr__(self):
        return f"<Discount(id={self.id}, name='{self.name}', kind={self.kind})>"
