"""
Result of a record store operation

Keeps "not found" and "database failed" apart. Callers that only care about
the value use or_none(), callers that want exceptions use unwrap().
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from recordstore.utils.errors import DatabaseError, RecordNotFoundError

T = TypeVar("T")


class StoreStatus(str, Enum):
    """Outcome of a store operation"""
    ok = "ok"
    not_found = "not_found"
    failed = "failed"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    status: StoreStatus
    value: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "StoreResult[T]":
        return cls(StoreStatus.ok, value=value)

    @classmethod
    def not_found(cls, reason: Optional[str] = None) -> "StoreResult[T]":
        return cls(StoreStatus.not_found, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "StoreResult[T]":
        return cls(StoreStatus.failed, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status is StoreStatus.ok

    @property
    def is_not_found(self) -> bool:
        return self.status is StoreStatus.not_found

    @property
    def is_failed(self) -> bool:
        return self.status is StoreStatus.failed

    def or_none(self) -> Optional[T]:
        """Collapse to the value, or None for both not found and failure"""
        return self.value if self.is_ok else None

    def unwrap(self) -> T:
        """
        Return the value or raise

        Raises:
            RecordNotFoundError: nothing matched the key
            DatabaseError: the database operation failed
        """
        if self.is_ok:
            return self.value  # type: ignore[return-value]
        if self.is_not_found:
            raise RecordNotFoundError(self.reason or "Record not found")
        raise DatabaseError(self.reason or "Database operation failed")
