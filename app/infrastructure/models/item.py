"""SQLAlchemy model for marketplace items."""

from sqlalchemy import Column, DateTime, String

from app.infrastructure.database import Base
from app.utils import storage_now


class ItemModel(Base):
    """Listing row; owned by the listing service, read here for its status."""

    __tablename__ = "items"

    id = Column(String(128), primary_key=True)
    title = Column(String(200), nullable=False, default="")
    status = Column(String(30), nullable=False, default="active")
    seller_id = Column(String(128), nullable=True, index=True)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=storage_now,
        onupdate=storage_now,
    )


__all__ = ["ItemModel"]
