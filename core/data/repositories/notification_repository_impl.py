"""SQLAlchemy repository for in-app notifications."""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select, update

from ..models.notification_model import NotificationModel
from .base import SqlAlchemyRepository


class SqlAlchemyNotificationRepository(SqlAlchemyRepository):
    """Per-user notifications."""

    async def add(self, notification: NotificationModel) -> NotificationModel:
        return await self._add(notification)

    async def get(self, notification_id: str) -> Optional[NotificationModel]:
        return await self._first(
            select(NotificationModel).where(NotificationModel.id == notification_id)
        )

    async def list_for_user(
        self, user_id: str, page: int = 1, limit: int = 20, unread_only: bool = False
    ) -> Tuple[List[NotificationModel], int]:
        stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationModel.is_read.is_(False))
        stmt = stmt.order_by(NotificationModel.created_at.desc(), NotificationModel.id)
        return await self._paginate(stmt, page, limit)

    async def count_unread(self, user_id: str) -> int:
        result = await self._session.execute(
            select(func.count(NotificationModel.id)).where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
        )
        return result.scalar_one()

    async def mark_all_read(self, user_id: str) -> int:
        result = await self._session.execute(
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications created before `cutoff`."""
        result = await self._session.execute(
            delete(NotificationModel)
            .where(NotificationModel.is_read.is_(True), NotificationModel.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
