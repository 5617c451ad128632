"""Flask application factory."""
from flask import Flask, jsonify
from misproductos.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Error tracking in production
    if app.config.get('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get('ENV'),
        )

    # Redis cache for discount rules, price config and exchange rates
    from misproductos.services.cache_service import init_cache
    init_cache(app)

    # Initialize database
    init_db(app)

    # Multi-tenant: resolve the store from the request host
    from misproductos.middleware import load_tenant_from_host, get_price_config

    @app.before_request
    def before_request_handler():
        """Load tenant context for each request."""
        load_tenant_from_host()

    # Jinja: {{ product.price|price }} renders with the tenant config
    from misproductos.utils.formatters import price_filter

    @app.template_filter('price')
    def price_template_filter(value, config=None):
        return price_filter(value, config or get_price_config())

    @app.context_processor
    def inject_price_config():
        """Expose the tenant price config (show_prices, tax...) to templates."""
        return {'price_config': get_price_config()}

    # CLI commands
    from misproductos.cli_commands import init_cli_commands
    init_cli_commands(app)

    # Error Handlers
    from misproductos.exceptions import SaasError

    @app.errorhandler(SaasError)
    def handle_saas_error(error):
        """Handle custom application exceptions."""
        app.logger.error(f"SaasError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    return app
