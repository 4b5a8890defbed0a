"""Application service for in-app notifications."""

import logging
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import NotificationDTO, NotificationListDTO, PaginationDTO, UserContext
from core.data.mappers import NotificationMapper
from core.data.models import NotificationModel
from core.data.uow import UnitOfWork, create_uow
from core.domain.enums import NotificationType
from core.domain.exceptions import NotFoundError

logger = logging.getLogger(__name__)


async def push_notification(
    uow: UnitOfWork,
    user_id: str,
    message: str,
    type: NotificationType = NotificationType.GENERAL,
) -> NotificationModel:
    """Write a notification inside the caller's transaction."""
    return await uow.notifications.add(
        NotificationModel(user_id=user_id, message=message, type=NotificationType(type).value)
    )


async def push_notifications(
    uow: UnitOfWork,
    user_ids: Iterable[str],
    message: str,
    type: NotificationType = NotificationType.GENERAL,
) -> int:
    count = 0
    for user_id in dict.fromkeys(user_ids):
        await push_notification(uow, user_id, message, type)
        count += 1
    return count


class NotificationApplicationService:
    """Read side and housekeeping for in-app notifications."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def list_notifications(
        self,
        user: UserContext,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> NotificationListDTO:
        async with create_uow(self._session_factory) as uow:
            rows, total = await uow.notifications.list_for_user(
                user.id, page=page, limit=limit, unread_only=unread_only
            )
            unread = await uow.notifications.count_unread(user.id)
            return NotificationListDTO(
                notifications=[NotificationMapper.to_dto(n) for n in rows],
                pagination=PaginationDTO.build(page, limit, total),
                unread_count=unread,
            )

    async def unread_count(self, user: UserContext) -> int:
        async with create_uow(self._session_factory) as uow:
            return await uow.notifications.count_unread(user.id)

    async def mark_as_read(self, notification_id: str, user: UserContext) -> NotificationDTO:
        async with create_uow(self._session_factory) as uow:
            notification = await uow.notifications.get(notification_id)
            # Other users' notifications are reported as missing
            if notification is None or notification.user_id != user.id:
                raise NotFoundError("Notification", notification_id)
            notification.is_read = True
            await uow.commit()
            return NotificationMapper.to_dto(notification)

    async def mark_all_as_read(self, user: UserContext) -> int:
        async with create_uow(self._session_factory) as uow:
            count = await uow.notifications.mark_all_read(user.id)
            await uow.commit()
            return count

    async def cleanup_old_notifications(self, days: int = 30) -> int:
        """Delete read notifications older than `days`."""
        cutoff = datetime.utcnow() - timedelta(days=days)
        async with create_uow(self._session_factory) as uow:
            deleted = await uow.notifications.delete_read_before(cutoff)
            await uow.commit()
        logger.info(f"🗑️ Removed {deleted} read notifications older than {days} days")
        return deleted
