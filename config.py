"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    TESTING = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    SENTRY_DSN = os.getenv('SENTRY_DSN')

    # Multi-tenant domains: in dev every request is served as DOMAIN
    ENV = os.getenv('ENV', 'dev')
    DOMAIN = os.getenv('DOMAIN', 'localhost')

    # Database - Support multiple environment variable naming conventions
    # Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        # Try DB_* variables (Docker style)
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'misproductos')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'misproductos')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'misproductos')

        DATABASE_URL = (
            f"postgresql+psycopg://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Pricing defaults (used when a tenant has no prices.* config)
    DEFAULT_CURRENCY = os.getenv('DEFAULT_CURRENCY', 'USD')

    # Exchange rates (USD conversion for payment gateways)
    EXCHANGE_RATES_URL = os.getenv('EXCHANGE_RATES_URL', 'https://api.coinbase.com/v2/exchange-rates')
    EXCHANGE_RATES_TIMEOUT = int(os.getenv('EXCHANGE_RATES_TIMEOUT', '10'))

    # Redis Cache Configuration
    # Shared cache layer for discount rules and price config per tenant
    REDIS_URL = os.getenv('REDIS_URL', 'redis://redis:6379/0')
    CACHE_ENABLED = os.getenv('CACHE_ENABLED', 'true').lower() == 'true'
    CACHE_DEFAULT_TTL = int(os.getenv('CACHE_DEFAULT_TTL', '60'))  # seconds
    CACHE_DISCOUNTS_TTL = int(os.getenv('CACHE_DISCOUNTS_TTL', '60'))
    CACHE_PRICE_CONFIG_TTL = int(os.getenv('CACHE_PRICE_CONFIG_TTL', '300'))
    CACHE_EXCHANGE_RATES_TTL = int(os.getenv('CACHE_EXCHANGE_RATES_TTL', '600'))
    CACHE_KEY_PREFIX = os.getenv('CACHE_KEY_PREFIX', 'misproductos')


class TestConfig(Config):
    """Configuration used by the test-suite (SQLite in memory, no Redis)."""

    TESTING = True
    DEBUG = False
    ENV = 'production'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    CACHE_ENABLED = False
    SENTRY_DSN = None
