"""Result<T> pattern: domain functions return this instead of raising exceptions for normal flow."""
from __future__ import annotations
from typing import TypeVar, Generic, Optional

T = TypeVar("T")


class ErrorKind:
    """Stable machine-readable error codes carried by a failed Result."""

    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    PERSISTENCE = "PERSISTENCE_FAILURE"


class Result(Generic[T]):
    def __init__(
        self,
        is_success: bool,
        value: Optional[T] = None,
        error: Optional[str] = None,
        kind: Optional[str] = None,
    ):
        self.is_success = is_success
        self.value = value
        self.error = error
        self.kind = kind

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(is_success=True, value=value)

    @classmethod
    def fail(cls, error: str, kind: str = ErrorKind.VALIDATION) -> "Result[T]":
        return cls(is_success=False, error=error, kind=kind)

    @classmethod
    def not_found(cls, error: str) -> "Result[T]":
        return cls.fail(error, ErrorKind.NOT_FOUND)

    @classmethod
    def denied(cls, error: str) -> "Result[T]":
        return cls.fail(error, ErrorKind.PERMISSION_DENIED)

    @classmethod
    def persistence_failure(cls, error: str) -> "Result[T]":
        return cls.fail(error, ErrorKind.PERSISTENCE)

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self.value!r})"
        return f"Result.fail({self.error!r}, kind={self.kind!r})"
