# src/vidtube/app/models/base.py
"""
Declarative base and shared column helpers
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    """Generate a new primary key"""
    return str(uuid.uuid4())


def id_column() -> Column:
    return Column(String(36), primary_key=True, default=new_id, comment="UUID")


class TimestampMixin:
    """created_at / updated_at columns"""

    created_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, index=True, comment="Creation time"
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        comment="Last update time",
    )
