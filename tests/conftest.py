import pytest
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from config import TestConfig
from misproductos import create_app
from misproductos.database import create_all, get_session
from misproductos.models import Tenant, TenantDomain, Discount
from misproductos.value_objects import (
    DiscountKind, DiscountRule, DiscountScope, ProductRef, TenantPricingConfig
)


@pytest.fixture(scope='function')
def app():
    """Create application instance with a fresh in-memory database."""
    app = create_app(TestConfig)
    with app.app_context():
        create_all()
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Create database session for testing."""
    session = get_session()
    yield session
    session.rollback()
    session.close()


def _make_tenant(session, label):
    suffix = str(uuid.uuid4())[:8]
    tenant = Tenant(
        slug=f'{label}-{suffix}',
        name=f'{label.title()} {suffix}',
        active=True
    )
    session.add(tenant)
    session.commit()
    return tenant


@pytest.fixture(scope='function')
def tenant1(session):
    """Create first test tenant, served at tienda1.com."""
    tenant = _make_tenant(session, 'tienda-1')
    session.add(TenantDomain(tenant_id=tenant.id, domain='tienda1.com'))
    session.commit()
    return tenant


@pytest.fixture(scope='function')
def tenant2(session):
    """Create second test tenant for isolation tests."""
    tenant = _make_tenant(session, 'tienda-2')
    session.add(TenantDomain(tenant_id=tenant.id, domain='tienda2.com'))
    session.commit()
    return tenant


@pytest.fixture
def make_discount(session):
    """Factory persisting Discount rows for a tenant."""
    def _make(tenant, **kwargs):
        data = {
            'name': 'Promo',
            'kind': DiscountKind.PERCENTAGE,
            'value': Decimal('10'),
            'scope': DiscountScope.ALL,
            'active': True,
            'created_at': datetime(2025, 1, 1, tzinfo=timezone.utc),
        }
        data.update(kwargs)
        discount = Discount(tenant_id=tenant.id, **data)
        session.add(discount)
        session.commit()
        return discount
    return _make


@pytest.fixture
def make_rule():
    """Factory for in-memory DiscountRule values."""
    counter = {'n': 0}

    def _make(kind=DiscountKind.PERCENTAGE, value='10', scope=DiscountScope.ALL, **kwargs):
        counter['n'] += 1
        kwargs.setdefault('id', f"rule-{counter['n']}")
        kwargs.setdefault('name', f"Regla {counter['n']}")
        return DiscountRule(kind=kind, value=Decimal(str(value)), scope=scope, **kwargs)
    return _make


@pytest.fixture
def product():
    """Product priced at 100 in category 'cat-1' with tags 'tag-a' and 'tag-b'."""
    return ProductRef.build('prod-1', '100', category_id='cat-1', tag_ids=['tag-a', 'tag-b'])


@pytest.fixture
def ars_config():
    return TenantPricingConfig(currency='ARS', format='code-after')
