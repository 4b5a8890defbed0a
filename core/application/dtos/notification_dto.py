"""Application DTOs for in-app notifications."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common_dto import PaginationDTO


class NotificationDTO(BaseModel):
    id: str
    user_id: str
    message: str
    type: str
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}


class NotificationListDTO(BaseModel):
    notifications: List[NotificationDTO] = Field(default_factory=list)
    pagination: PaginationDTO
    unread_count: int = Field(..., ge=0)

    model_config = {"frozen": True}
