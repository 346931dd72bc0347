# src/limelock/contracts/records.py
"""Value types exchanged between the client, the transport and callers.

All records are frozen: a fetched record is a snapshot of what the remote
service said, and an integrity result is a verdict about that snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from limelock.contracts.errors import MalformedResponseError

# String spellings the service may use for a true integrity indicator.
# Anything else (including absence) is treated as "not verified".
_TRUE_STRINGS = frozenset({"true", "1", "yes"})


def _coerce_flag(value: Any) -> bool:
    """Interpret a boolean-like integrity indicator.

    Only explicit affirmative values count. A string "false" is NOT truthy
    here, unlike Python's bool().
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


@dataclass(frozen=True)
class TransportResponse:
    """Status code and parsed body of one request/response exchange.

    body is the decoded JSON value when the service answered with JSON,
    otherwise the raw response text.
    """

    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class FetchedRecord:
    """A record returned by the fetch endpoint.

    Attributes:
        data: Hex-encoded payload exactly as transmitted
        filename: Original name the payload was stored under (may be absent)
        integrity: Remote-asserted integrity indicator, coerced to bool
        content_hash: Fingerprint the service holds for the payload, if returned
        raw: The full response body, verbatim
    """

    data: str
    filename: str | None
    integrity: bool
    content_hash: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, body: Any) -> FetchedRecord:
        """Build a record from a fetch response body.

        Raises:
            MalformedResponseError: If body is not an object or lacks a
                string "data" field
        """
        if not isinstance(body, dict):
            raise MalformedResponseError(f"Fetch response is not a JSON object: {body!r:.200}")
        data = body.get("data")
        if not isinstance(data, str):
            raise MalformedResponseError(f"Fetch response has no string 'data' field (got {type(data).__name__})")

        filename = body.get("filename")
        content_hash = body.get("hash")
        return cls(
            data=data,
            filename=filename if isinstance(filename, str) and filename else None,
            integrity=_coerce_flag(body.get("integrity")),
            content_hash=content_hash.lower() if isinstance(content_hash, str) and content_hash else None,
            raw=body,
        )

    def payload(self) -> bytes:
        """Decode the hex payload into bytes.

        Raises:
            MalformedResponseError: If data is not valid hex
        """
        try:
            return bytes.fromhex(self.data)
        except ValueError as e:
            raise MalformedResponseError(f"Fetched data is not valid hex: {e}") from e


@dataclass(frozen=True)
class IntegrityResult:
    """Verdict of an integrity check on one fetched record.

    expected_hash and actual_hash are only populated when a local
    fingerprint comparison took place.
    """

    ok: bool
    reason: str
    remote_flag: bool
    expected_hash: str | None = None
    actual_hash: str | None = None

    def __bool__(self) -> bool:
        return self.ok
