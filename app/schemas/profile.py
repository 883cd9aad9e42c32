from typing import Any, Optional

from app.core.schemas import CamelModel
from app.schemas.company import CompanyUpdate


class ProfileUserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None


class ProfileUpdate(CamelModel):
    user_id: Optional[int] = None
    company_id: Optional[int] = None
    user: Optional[ProfileUserUpdate] = None
    company: Optional[CompanyUpdate] = None


class NotificationSettingsUpdate(CamelModel):
    user_id: Optional[int] = None
    # Stored as-is when it is a JSON object; anything else becomes {}
    notifications: Optional[Any] = None
