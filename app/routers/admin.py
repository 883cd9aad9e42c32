from typing import Dict, List

from fastapi import APIRouter, Depends, Response

from app.core.schema_catalog import SchemaCatalog
from app.database import get_catalog
from app.dependencies import get_admin_service, get_company_service
from app.schemas.company import CompanyCreate, CompanyUpdate
from app.services.admin_service import AdminService
from app.services.company_service import CompanyService

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


# --- Companies ---

@router.get("/companies")
def list_companies(response: Response, service: CompanyService = Depends(get_company_service)):
    response.headers["Cache-Control"] = "no-store"
    return service.list_companies(include_admin=True)


@router.get("/companies/{company_id}")
def get_company(company_id: int, service: CompanyService = Depends(get_company_service)):
    return service.get_company(company_id)


@router.post("/companies")
def create_company(payload: CompanyCreate, service: CompanyService = Depends(get_company_service)):
    """Create a company, plus its member account when email and password are given."""
    return service.create_company(payload.sent_fields())


@router.put("/companies/{company_id}")
def update_company(
    company_id: int,
    payload: CompanyUpdate,
    service: CompanyService = Depends(get_company_service),
):
    return service.update_company(company_id, payload.sent_fields())


@router.delete("/companies/{company_id}")
def delete_company(company_id: int, service: CompanyService = Depends(get_company_service)):
    """Delete a company together with its users, posts, comments and messages."""
    return service.delete_company(company_id)


# --- Dashboards ---

@router.get("/summary")
def get_summary(service: AdminService = Depends(get_admin_service)):
    return service.summary()


@router.get("/posts")
def list_posts(service: AdminService = Depends(get_admin_service)):
    return service.list_posts()


@router.get("/users")
def list_users(service: AdminService = Depends(get_admin_service)):
    return service.list_users()


@router.get("/messages")
def list_messages(service: AdminService = Depends(get_admin_service)):
    return service.list_messages()


# --- Schema ---

@router.post("/schema/refresh")
def refresh_schema(catalog: SchemaCatalog = Depends(get_catalog)) -> Dict[str, Dict[str, List[str]]]:
    """Drop the cached column map and reflect the database again."""
    return {"tables": catalog.refresh()}
