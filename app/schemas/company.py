from typing import Optional

from app.core.schemas import CamelModel


class CompanyFields(CamelModel):
    name: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


class CompanyCreate(CompanyFields):
    # Credentials for the company's member account, created alongside
    password: Optional[str] = None


class CompanyUpdate(CompanyFields):
    pass
