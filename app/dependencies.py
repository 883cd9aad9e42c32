"""
FastAPI dependencies that hand each request its service objects.

Every service shares the request's session and the process-wide schema
catalog; tests override ``get_db`` and ``get_catalog`` to swap both.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.schema_catalog import SchemaCatalog
from app.database import get_catalog, get_db
from app.services.admin_service import AdminService
from app.services.company_service import CompanyService
from app.services.forum_service import ForumService
from app.services.message_service import MessageService
from app.services.profile_service import ProfileService


def get_company_service(
    db: Session = Depends(get_db), catalog: SchemaCatalog = Depends(get_catalog)
) -> CompanyService:
    return CompanyService(db, catalog)


def get_forum_service(
    db: Session = Depends(get_db), catalog: SchemaCatalog = Depends(get_catalog)
) -> ForumService:
    return ForumService(db, catalog)


def get_message_service(
    db: Session = Depends(get_db), catalog: SchemaCatalog = Depends(get_catalog)
) -> MessageService:
    return MessageService(db, catalog)


def get_profile_service(
    db: Session = Depends(get_db), catalog: SchemaCatalog = Depends(get_catalog)
) -> ProfileService:
    return ProfileService(db, catalog)


def get_admin_service(
    db: Session = Depends(get_db), catalog: SchemaCatalog = Depends(get_catalog)
) -> AdminService:
    return AdminService(db, catalog)
