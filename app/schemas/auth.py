from typing import Optional

from app.core.schemas import CamelModel


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class SessionUser(CamelModel):
    id: int
    email: str
    role: Optional[str] = None
    company_id: Optional[int] = None


class LoginResponse(CamelModel):
    token: str
    user: SessionUser
