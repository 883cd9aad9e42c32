from app.core.config import settings
from app.core.init_system import ensure_company_role, init_system_data
from app.models import Company


def test_admin_company_is_created_once(db_session, catalog, session_factory):
    init_system_data(catalog, session_factory)
    init_system_data(catalog, session_factory)

    admins = db_session.query(Company).filter(Company.name == settings.admin_company_name).all()
    assert len(admins) == 1


def test_existing_admin_company_is_matched_case_insensitively(db_session, catalog, session_factory, make_company):
    make_company(settings.admin_company_name.upper())
    init_system_data(catalog, session_factory)
    assert db_session.query(Company).count() == 1


def test_role_migration_is_postgres_only(catalog):
    assert ensure_company_role(catalog) is False


def test_sqlite_connections_enforce_foreign_keys(engine):
    with engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
