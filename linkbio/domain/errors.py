"""
Typed error results shared by all components.

Business outcomes (missing resources, ownership mismatch, taken usernames,
bad input) are returned as values, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ErrorKind = Literal["not_found", "forbidden", "conflict", "invalid_input"]


@dataclass(frozen=True)
class DomainError:
    """A business error returned by a component."""

    kind: ErrorKind
    code: str
    message: str
    field: str | None = None


def not_found(code: str, message: str) -> DomainError:
    return DomainError(kind="not_found", code=code, message=message)


def forbidden(code: str, message: str) -> DomainError:
    return DomainError(kind="forbidden", code=code, message=message)


def conflict(code: str, message: str, field: str | None = None) -> DomainError:
    return DomainError(kind="conflict", code=code, message=message, field=field)


def invalid(code: str, message: str, field: str | None = None) -> DomainError:
    return DomainError(kind="invalid_input", code=code, message=message, field=field)


class UniqueViolationError(Exception):
    """Raised by repositories when a write hits a uniqueness constraint."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Unique constraint violated on {field}")
        self.field = field
