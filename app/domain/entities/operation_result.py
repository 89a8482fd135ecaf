"""Result values returned across the notification component boundaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

ERROR_STORE = "store_error"
ERROR_PERMISSION = "permission_denied"
ERROR_NOT_FOUND = "not_found"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """``{success, error}`` shaped outcome of a store operation."""

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, error_code: str, error: str) -> "OperationResult[T]":
        return cls(success=False, error=error, error_code=error_code)


@dataclass(frozen=True)
class BatchResult:
    """Counts of a fan-out where every element succeeds or fails on its own."""

    success: int
    failed: int
    results: list[dict[str, Any]] = field(default_factory=list)


__all__ = [
    "BatchResult",
    "ERROR_NOT_FOUND",
    "ERROR_PERMISSION",
    "ERROR_STORE",
    "OperationResult",
]
