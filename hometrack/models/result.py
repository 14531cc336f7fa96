"""
Typed storage results.

Every storage operation answers with one of three outcomes so callers can
tell "there is nothing there" apart from "the request failed":

    OK         - value holds the entity / list / bool
    NOT_FOUND  - the row does not exist (or is not visible to this user)
    FAILED     - transport, database or configuration problem; error says why
"""

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class ResultStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class StorageResult(BaseModel, Generic[T]):
    """Outcome of a single storage operation."""

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[str] = Field(
        default=None,
        description="Cause of a FAILED result"
    )

    @classmethod
    def ok(cls, value: T) -> "StorageResult[T]":
        return cls(status=ResultStatus.OK, value=value)

    @classmethod
    def not_found(cls, what: Optional[str] = None) -> "StorageResult[T]":
        return cls(status=ResultStatus.NOT_FOUND, error=what)

    @classmethod
    def failure(cls, error: str) -> "StorageResult[T]":
        return cls(status=ResultStatus.FAILED, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status == ResultStatus.OK

    @property
    def is_not_found(self) -> bool:
        return self.status == ResultStatus.NOT_FOUND

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILED

    def unwrap_or(self, default: T) -> T:
        """Value when OK, otherwise `default`."""
        if self.is_ok and self.value is not None:
            return self.value
        return default
