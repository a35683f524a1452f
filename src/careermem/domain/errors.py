"""Error taxonomy for memory reconciliation and its oracle boundary."""

from __future__ import annotations


class CareerMemError(RuntimeError):
    """Base class for domain-level failures that callers are expected to report."""


class MalformedOracleResponseError(CareerMemError):
    """Raised when oracle output is not JSON or lacks the expected shape."""

    def __init__(self, message: str, *, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class OracleUnavailableError(CareerMemError):
    """Raised when the oracle cannot be reached or rejects the request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MergeFailedError(CareerMemError):
    """Raised when a merge is aborted; the previous profile remains authoritative."""


class ConcurrentUpdateError(CareerMemError):
    """Raised when a profile changed in storage between load and save."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            f"Memory profile for user {user_id!r} was modified concurrently; retry the update."
        )
        self.user_id = user_id


class UnsupportedDocumentError(ValueError):
    """Raised when an uploaded file type cannot be converted to text."""
