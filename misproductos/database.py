"""Database configuration and initialization."""
from sqlalchemy import create_engine, BigInteger, Integer
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base

# Create SQLAlchemy base
Base = declarative_base()

# SQLite only autoincrements INTEGER primary keys
BigIntPK = BigInteger().with_variant(Integer, 'sqlite')

# Global session and engine
engine = None
db_session = None


def init_db(app):
    """Initialize database connection."""
    global engine, db_session

    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    engine_options = {
        'echo': app.config.get('SQLALCHEMY_ECHO', False),
    }
    if not database_uri.startswith('sqlite'):
        engine_options.update(
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=10,
            max_overflow=20
        )
    engine = create_engine(database_uri, **engine_options)

    db_session = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )

    Base.query = db_session.query_property()

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def create_all():
    """Create every table on the bound engine (used by tests and bootstrap)."""
    # Import models so they register on Base.metadata
    import misproductos.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_session():
    """Get database session."""
    return db_session
