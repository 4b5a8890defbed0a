"""In-app notification routes."""
from fastapi import APIRouter, Depends, Query

from api.auth import get_current_user
from api.dependencies import get_notification_app_service
from core.application.dtos import NotificationDTO, NotificationListDTO, UserContext
from core.application.services import NotificationApplicationService


router = APIRouter()


@router.get("", response_model=NotificationListDTO, summary="My notifications")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    user: UserContext = Depends(get_current_user),
    service: NotificationApplicationService = Depends(get_notification_app_service),
) -> NotificationListDTO:
    return await service.list_notifications(user, page=page, limit=limit, unread_only=unread_only)


@router.get("/unread-count", summary="Unread notification count")
async def unread_count(
    user: UserContext = Depends(get_current_user),
    service: NotificationApplicationService = Depends(get_notification_app_service),
):
    return {"unread_count": await service.unread_count(user)}


@router.post("/read-all", summary="Mark all notifications read")
async def mark_all_read(
    user: UserContext = Depends(get_current_user),
    service: NotificationApplicationService = Depends(get_notification_app_service),
):
    return {"updated": await service.mark_all_as_read(user)}


@router.post("/{notification_id}/read", response_model=NotificationDTO, summary="Mark notification read")
async def mark_read(
    notification_id: str,
    user: UserContext = Depends(get_current_user),
    service: NotificationApplicationService = Depends(get_notification_app_service),
) -> NotificationDTO:
    return await service.mark_as_read(notification_id, user)
