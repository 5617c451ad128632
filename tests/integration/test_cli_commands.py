"""
Integration tests for the bootstrap CLI commands.
"""

from misproductos.models import Tenant
from misproductos.services.domain_service import resolve_tenant_id


class TestCreateTenant:
    """Test flask create-tenant."""

    def test_creates_tenant_with_normalized_domains(self, app, session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=[
            'create-tenant', '--slug', 'Zapas', '--name', 'Zapas Store',
            '--domain', 'WWW.Zapas.com', '--domain', 'zapas.com.ar:443'
        ])

        tenant = session.query(Tenant).filter_by(slug='zapas').one()
        assert result.exit_code == 0
        assert 'Tienda creada' in result.output
        assert sorted(d.domain for d in tenant.domains) == ['zapas.com', 'zapas.com.ar']
        assert resolve_tenant_id(session, 'zapas.com') == tenant.id

    def test_rejects_duplicate_slug_and_taken_domain(self, app, session, tenant1):
        runner = app.test_cli_runner()

        dup_slug = runner.invoke(args=['create-tenant', '--slug', tenant1.slug, '--name', 'Otra'])
        dup_domain = runner.invoke(args=[
            'create-tenant', '--slug', 'nueva', '--name', 'Nueva', '--domain', 'tienda1.com'
        ])

        assert 'Ya existe una tienda' in dup_slug.output
        assert 'Dominios en uso: tienda1.com' in dup_domain.output
        assert session.query(Tenant).count() == 1

    def test_rejects_invalid_slug(self, app, session):
        result = app.test_cli_runner().invoke(args=['create-tenant', '--slug', 'mi tienda!', '--name', 'X'])

        assert 'Slug inválido' in result.output
        assert session.query(Tenant).count() == 0


class TestInitDb:
    """Test flask init-db."""

    def test_is_idempotent(self, app):
        result = app.test_cli_runner().invoke(args=['init-db'])

        assert result.exit_code == 0
        assert 'Tablas creadas' in result.output
