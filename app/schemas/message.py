from typing import Optional

from app.core.schemas import CamelModel


class MessageCreate(CamelModel):
    sender_company_id: Optional[int] = None
    receiver_company_id: Optional[int] = None
    content: Optional[str] = None
