"""Domain entity for marketplace listings read by the notification service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Item:
    """Instrument listing; its ``status`` is the authoritative trade state."""

    id: str
    title: str
    status: str
    seller_id: str | None = None
    updated_at: datetime | None = None


__all__ = ["Item"]
