"""SQLAlchemy model for per-user notification email settings."""

from sqlalchemy import Boolean, Column, DateTime, String

from app.infrastructure.database import Base
from app.utils import storage_now


class NotificationSettingsModel(Base):
    """One row per user; a missing row means every email is enabled."""

    __tablename__ = "notification_settings"

    user_id = Column(String(128), primary_key=True)
    new_message = Column(Boolean, nullable=False, default=True)
    transaction_update = Column(Boolean, nullable=False, default=True)
    logistics_quote = Column(Boolean, nullable=False, default=True)
    question_answer = Column(Boolean, nullable=False, default=True)
    payment_status = Column(Boolean, nullable=False, default=True)
    product_interest = Column(Boolean, nullable=False, default=True)
    system_announcement = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=storage_now,
        onupdate=storage_now,
    )


__all__ = ["NotificationSettingsModel"]
