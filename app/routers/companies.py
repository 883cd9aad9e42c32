from fastapi import APIRouter, Depends, Response

from app.dependencies import get_company_service
from app.services.company_service import CompanyService

router = APIRouter(
    prefix="/companies",
    tags=["directory"]
)


@router.get("")
def list_directory(response: Response, service: CompanyService = Depends(get_company_service)):
    response.headers["Cache-Control"] = "no-store"
    return service.list_companies()
