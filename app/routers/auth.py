from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.schema_catalog import SchemaCatalog
from app.database import get_catalog, get_db
from app.schemas.auth import LoginRequest, LoginResponse
from app.services import auth as auth_service

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/login", response_model=LoginResponse, response_model_by_alias=True)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    catalog: SchemaCatalog = Depends(get_catalog),
):
    # Note: the returned token is a static placeholder, see issue_session_token
    return auth_service.authenticate(
        db,
        catalog,
        email=login_data.email,
        password=login_data.password,
        role=login_data.role,
    )
