import argparse
import sys
import os
import logging

from sqlalchemy import func, insert, select

# Ensure we can import app modules
sys.path.append(os.getcwd())

from app.core.config import settings
from app.core.init_system import ensure_admin_company
from app.database import SessionLocal, schema_catalog
from app.models.user import UserRole
from app.services.auth import get_password_hash, resolve_role_value

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def create_admin_user(email: str, password: str) -> bool:
    """Create an admin account inside the Admin company. Returns False when the email is taken."""
    db = SessionLocal()
    catalog = schema_catalog
    try:
        ensure_admin_company(db, catalog)

        users = catalog.table("User")
        company = catalog.table("Company")
        existing = db.execute(
            select(users.c.id).where(func.lower(users.c.email) == email.lower()).limit(1)
        ).first()
        if existing:
            logger.warning(f"User '{email}' already exists.")
            return False

        admin_company_id = db.execute(
            select(company.c.id)
            .where(func.lower(company.c.name) == settings.admin_company_name.lower())
            .limit(1)
        ).scalar()

        values = {
            "email": email,
            catalog.resolve("User", "password"): get_password_hash(password),
            "role": resolve_role_value(catalog.role_labels(), UserRole.ADMIN.value),
        }
        company_column = catalog.resolve("User", "companyId")
        if company_column:
            values[company_column] = admin_company_id
        updated = catalog.resolve("User", "updatedAt")
        if updated:
            values[updated] = func.now()

        db.execute(insert(users).values(values))
        db.commit()

        logger.info("Admin user created successfully. You can now login.")
        logger.info(f"Email: {email}")
        return True

    except Exception as e:
        logger.error(f"Error creating admin user: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create an admin user in the Admin company.")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@example.com"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    args = parser.parse_args()
    if not args.password:
        parser.error("--password (or ADMIN_PASSWORD) is required")
    create_admin_user(args.email, args.password)
