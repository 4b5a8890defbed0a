"""Declarative base and column helpers shared by all models."""

import uuid
from datetime import datetime

from sqlalchemy.orm import declarative_base


Base = declarative_base()


def new_id() -> str:
    """Primary key generator (uuid4 as string)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp used for every DateTime column."""
    return datetime.utcnow()
