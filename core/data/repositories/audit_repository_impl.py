"""SQLAlchemy repository for the audit trail."""

from typing import Any, Dict, List, Optional

from sqlalchemy import select

from ..models.audit_model import AuditLogModel
from .base import SqlAlchemyRepository


class SqlAlchemyAuditRepository(SqlAlchemyRepository):
    """Append-only audit log."""

    async def record(
        self,
        action: str,
        entity: str,
        entity_id: str,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
        execution_id: Optional[str] = None,
    ) -> AuditLogModel:
        return await self._add(
            AuditLogModel(
                action=action,
                entity=entity,
                entity_id=entity_id,
                old_values=old_values,
                new_values=new_values,
                user_id=user_id,
                execution_id=execution_id,
            )
        )

    async def list_for_entity(self, entity: str, entity_id: str) -> List[AuditLogModel]:
        return await self._all(
            select(AuditLogModel)
            .where(AuditLogModel.entity == entity, AuditLogModel.entity_id == entity_id)
            .order_by(AuditLogModel.created_at)
        )
