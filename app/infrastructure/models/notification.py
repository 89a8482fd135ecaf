"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, JSON, String, Text

from app.infrastructure.database import Base
from app.utils import storage_now


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(128), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    priority = Column(String(10), nullable=False, default="normal")
    link = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)
    read_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
