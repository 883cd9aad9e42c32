from typing import Optional

from app.core.schemas import CamelModel


class PostCreate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    company_id: Optional[int] = None
    user_id: Optional[int] = None


class CommentCreate(CamelModel):
    content: Optional[str] = None
    company_id: Optional[int] = None
    user_id: Optional[int] = None
