from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NoActiveYearError(DomainError):
    """Raised when a session must be created but no academic year is active."""


class FinalizedError(DomainError):
    """Raised when a write is attempted on a finalized session or submitted attempt."""


class RemoteError(DomainError):
    """Base class for failures talking to the school API."""


class NotFoundError(RemoteError):
    """The API answered 404 for the requested resource."""


class TransportError(RemoteError):
    """The request never got an HTTP answer (DNS, refused, timeout...)."""


class RemoteStoreError(RemoteError):
    """The API answered with a non-2xx status other than 404."""

    def __init__(self, message: str, *, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
