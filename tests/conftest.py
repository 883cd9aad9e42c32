import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app.core.schema_catalog import SchemaCatalog
from app.database import Base, enable_sqlite_foreign_keys, get_catalog, get_db
from app.main import app
from app.models import Company, User, UserRole
from app.services import auth as auth_service
from fastapi.testclient import TestClient

DEFAULT_PASSWORD = "Password123!"


def make_engine():
    """A private in-memory SQLite database shared by every connection of one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    return engine


@pytest.fixture(scope="function")
def metadata():
    """The schema a test runs against; override to use a variant layout."""
    return Base.metadata


@pytest.fixture(scope="function")
def engine(metadata):
    engine = make_engine()
    metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def catalog(engine):
    catalog = SchemaCatalog(engine)
    catalog.load()
    return catalog


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session, catalog):
    """Get a TestClient that uses the test database and catalog via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_company(db_session):
    """Factory: insert a company and return its id."""
    def _make_company(name, **fields):
        company = Company(name=name, **fields)
        db_session.add(company)
        db_session.commit()
        return company.id
    return _make_company


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory: insert a user and return its id."""
    def _make_user(email, company_id=None, role=UserRole.COMPANY, password=DEFAULT_PASSWORD, **fields):
        user = User(
            email=email,
            password=auth_service.get_password_hash(password),
            role=role,
            company_id=company_id,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user.id
    return _make_user


@pytest.fixture(scope="function")
def acme(make_company):
    return make_company("Acme", industry="Manufacturing", location="Lyon")


@pytest.fixture(scope="function")
def globex(make_company):
    return make_company("Globex", industry="Energy")


@pytest.fixture(scope="function")
def acme_user(make_user, acme):
    return make_user("contact@acme.test", company_id=acme, name="Alice")
