from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings
from app.core.schema_catalog import SchemaCatalog

def enable_sqlite_foreign_keys(engine):
    """SQLite ignores REFERENCES clauses unless each connection opts in."""
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Support both PostgreSQL and SQLite via centralized settings
DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("postgresql"):
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)
else:
    # SQLite configuration for local development/testing
    engine = create_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}
    )
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Process-wide cache of the columns the deployed tables actually have
schema_catalog = SchemaCatalog(engine)

def get_db():
    """
    Session Provider: Provides a database session per request.
    Transaction management is handled explicitly in the Service Layer.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_catalog() -> SchemaCatalog:
    return schema_catalog

def init_db():
    """
    Registers all domain models and creates the tables that are missing.
    Existing tables are left exactly as deployed.
    """
    # Import all models to ensure they are registered with Base.metadata before create_all
    from app.models import company, user, post, comment, message, user_settings  # noqa: F401
    Base.metadata.create_all(bind=engine)
