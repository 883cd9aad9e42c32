import logging
import re

from sqlalchemy import Enum as SAEnum
from sqlalchemy import func, insert, select, text

from app.core.config import settings
from app.core.schema_catalog import SchemaCatalog
from app.database import SessionLocal, schema_catalog
from app.models.user import UserRole

logger = logging.getLogger(__name__)

_ENUM_TYPE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def ensure_company_role(catalog: SchemaCatalog) -> bool:
    """
    Add the ``company`` label to the PostgreSQL role enum when it is missing.

    Returns True when the type was altered. Other dialects store the role as
    text and need nothing.
    """
    if catalog.dialect_name != "postgresql" or not catalog.has_column("User", "role"):
        return False

    role_type = catalog.table("User").c["role"].type
    if not isinstance(role_type, SAEnum):
        return False
    if any(label.lower() == UserRole.COMPANY.value for label in role_type.enums):
        return False

    if not settings.allow_startup_migrations:
        logger.warning(
            "Role enum lacks 'company' and ALLOW_STARTUP_MIGRATIONS is off; "
            "company accounts cannot be created until it is migrated",
            extra={"enum_type": role_type.name},
        )
        return False

    if not role_type.name or not _ENUM_TYPE_NAME.match(role_type.name):
        logger.error("Refusing to alter role enum with unexpected type name", extra={"enum_type": role_type.name})
        return False

    # ALTER TYPE .. ADD VALUE cannot run inside a transaction block on older servers
    with catalog.engine.connect().execution_options(isolation_level="AUTOCOMMIT") as conn:
        conn.execute(
            text(f'ALTER TYPE "{role_type.name}" ADD VALUE IF NOT EXISTS \'{UserRole.COMPANY.value}\'')
        )
    logger.info("✓ Added 'company' to role enum", extra={"enum_type": role_type.name})
    return True


def ensure_admin_company(db, catalog: SchemaCatalog) -> bool:
    """Create the company named ``settings.admin_company_name`` unless one exists (any case)."""
    if not catalog.has_column("Company", "name"):
        return False

    company = catalog.table("Company")
    name = settings.admin_company_name
    existing = db.execute(
        select(company.c.id).where(func.lower(company.c.name) == name.lower()).limit(1)
    ).first()
    if existing is not None:
        return False

    values = {"name": name}
    updated = catalog.resolve("Company", "updatedAt")
    if updated:
        values[updated] = func.now()
    db.execute(insert(company).values(values))
    db.commit()
    logger.info(f"✓ Created {name} company")
    return True


def log_database_info(db) -> None:
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        row = db.execute(text("SELECT current_database() AS db, current_schema() AS schema")).mappings().first()
        database, schema = (row["db"], row["schema"]) if row else (None, None)
    else:
        database, schema = db.get_bind().url.database, "main"
    logger.info(
        f"Connected to database: {database or 'unknown'} (schema: {schema or 'unknown'})",
        extra={"dialect": dialect},
    )


def init_system_data(catalog: SchemaCatalog = schema_catalog, session_factory=SessionLocal):
    """
    Startup bootstrap, run once the tables exist: migrate the role enum,
    ensure the Admin company and report which database is in use.
    """
    catalog.refresh()
    if ensure_company_role(catalog):
        catalog.refresh()

    db = session_factory()
    try:
        ensure_admin_company(db, catalog)
        log_database_info(db)
    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization: {str(e)}", exc_info=True)
        raise
    finally:
        db.close()
