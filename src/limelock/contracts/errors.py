# src/limelock/contracts/errors.py
"""Exception hierarchy for the Limelock client.

Transport failures are NOT wrapped: httpx.HTTPError subclasses propagate
to the caller unchanged, as do OSError from local file I/O. Everything
raised by Limelock itself derives from LimelockError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from limelock.contracts.records import IntegrityResult


class LimelockError(Exception):
    """Base class for Limelock-specific errors."""


class RemoteRejectionError(LimelockError):
    """The remote service answered with a non-success status.

    Attributes:
        operation: Human-readable operation name (e.g. "put data")
        status_code: HTTP status code returned by the service
        body: Parsed response body (JSON value or text)
    """

    def __init__(self, operation: str, status_code: int, body: Any) -> None:
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"Could not {operation}: {body}")


class IntegrityViolationError(LimelockError):
    """Fetched data is available but cannot be trusted.

    Raised when the remote integrity indicator is false or absent, or when
    the locally recomputed fingerprint does not match the expected one.
    Callers can distinguish this from RemoteRejectionError ("data
    unavailable") - we never silently return untrusted data.
    """

    def __init__(self, result: IntegrityResult) -> None:
        self.result = result
        super().__init__(f"Data integrity compromised: {result.reason}")


class MalformedResponseError(LimelockError):
    """A success response did not have the shape the operation requires."""


class MissingCredentialError(LimelockError):
    """An authenticated operation was attempted without an auth token."""


class UnsupportedOperationError(LimelockError):
    """The operation needs a capability this client was built without."""
