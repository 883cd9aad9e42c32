from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_profile_service
from app.schemas.profile import NotificationSettingsUpdate, ProfileUpdate
from app.services.profile_service import ProfileService

router = APIRouter(tags=["profile"])


@router.get("/profile")
def get_profile(
    user_id: Optional[int] = Query(None, alias="userId"),
    company_id: Optional[int] = Query(None, alias="companyId"),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_profile(user_id, company_id)


@router.put("/profile")
def update_profile(payload: ProfileUpdate, service: ProfileService = Depends(get_profile_service)):
    return service.update_profile(payload.sent_fields())


@router.get("/settings/notifications")
def get_notifications(
    user_id: Optional[int] = Query(None, alias="userId"),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_notifications(user_id)


@router.put("/settings/notifications")
def save_notifications(
    payload: NotificationSettingsUpdate,
    service: ProfileService = Depends(get_profile_service),
):
    return service.save_notifications(payload.user_id, payload.notifications)
