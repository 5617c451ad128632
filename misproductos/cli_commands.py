"""
Flask CLI commands for storefront bootstrap.

Commands:
- flask init-db: Create the pricing tables
- flask create-tenant: Register a store and the domain it is served on
"""

import re

import click
from sqlalchemy.exc import SQLAlchemyError

from misproductos.database import create_all, get_session
from misproductos.models import Tenant, TenantDomain
from misproductos.services.domain_service import normalize_hostname


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create every table that does not exist yet."""
        create_all()
        click.echo(click.style('✅ Tablas creadas', fg='green'))

    @app.cli.command('create-tenant')
    @click.option('--slug', required=True, help='URL-safe store identifier')
    @click.option('--name', required=True, help='Store display name')
    @click.option('--domain', 'domains', multiple=True, help='Domain served by the store (repeatable)')
    def create_tenant(slug, name, domains):
        """Create a store and attach its domains."""
        db_session = get_session()

        slug = slug.strip().lower()
        if not re.match(r'^[a-z0-9]+(?:-[a-z0-9]+)*$', slug):
            click.echo(click.style('❌ Slug inválido. Use minúsculas, números y guiones.', fg='red'))
            return

        if db_session.query(Tenant).filter_by(slug=slug).first():
            click.echo(click.style(f'❌ Ya existe una tienda con el slug: {slug}', fg='red'))
            return

        normalized = [normalize_hostname(d) for d in domains]
        normalized = [d for d in dict.fromkeys(normalized) if d]
        taken = db_session.query(TenantDomain.domain).filter(TenantDomain.domain.in_(normalized)).all()
        if taken:
            click.echo(click.style(f"❌ Dominios en uso: {', '.join(row.domain for row in taken)}", fg='red'))
            return

        try:
            tenant = Tenant(slug=slug, name=name.strip(), active=True)
            tenant.domains = [TenantDomain(domain=domain) for domain in normalized]
            db_session.add(tenant)
            db_session.commit()
        except SQLAlchemyError as e:
            db_session.rollback()
            click.echo(click.style(f'❌ Error al crear la tienda: {e}', fg='red'))
            return

        click.echo(click.style('✅ Tienda creada', fg='green', bold=True))
        click.echo(f'   ID: {tenant.id}')
        for domain in normalized:
            click.echo(f'   Dominio: {domain}')
