from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_message_service
from app.schemas.message import MessageCreate
from app.services.message_service import MessageService

router = APIRouter(
    prefix="/messages",
    tags=["messages"]
)


@router.get("")
def list_messages(
    company_id: Optional[int] = Query(None, alias="companyId"),
    service: MessageService = Depends(get_message_service),
):
    return service.list_messages(company_id)


@router.get("/conversations")
def list_conversations(
    company_id: Optional[int] = Query(None, alias="companyId"),
    service: MessageService = Depends(get_message_service),
):
    """Messages grouped per counterpart company, most recent first."""
    return service.list_conversations(company_id)


@router.post("")
def send_message(payload: MessageCreate, service: MessageService = Depends(get_message_service)):
    return service.send_message(payload.sent_fields())
