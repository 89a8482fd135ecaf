"""Read access to marketplace items."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Item
from app.infrastructure.models import ItemModel
from app.utils import ensure_app_timezone


class ItemRepository:
    """Look up listings owned by the listing service."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, item_id: str) -> Item | None:
        model = self.session.get(ItemModel, item_id)
        if model is None:
            return None
        return Item(
            id=model.id,
            title=model.title,
            status=model.status,
            seller_id=model.seller_id,
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["ItemRepository"]
