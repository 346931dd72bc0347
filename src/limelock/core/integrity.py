# src/limelock/core/integrity.py
"""
Integrity gate for fetched records.

Two checks, applied in order:

1. Remote indicator: the service reports whether the stored payload still
   matches what was stored. A false or absent indicator is always a
   violation - this check cannot be disabled.
2. Local recomputation: when an expected fingerprint is known (supplied by
   the caller, or carried by the record itself), the fingerprint of the
   returned data is recomputed here and compared. This catches a service
   that asserts integrity while returning altered bytes.

The fingerprint covers the wire representation of the payload (the hex
string), matching what put() hashed before transmission.
"""

from __future__ import annotations

import hmac

from limelock.contracts.errors import IntegrityViolationError
from limelock.contracts.records import FetchedRecord, IntegrityResult
from limelock.core.fingerprint import fingerprint
from limelock.core.logging import get_logger

__all__ = ["check_integrity", "require_integrity"]

logger = get_logger(__name__)


def check_integrity(
    record: FetchedRecord,
    expected_hash: str | None = None,
    *,
    verify_local: bool = True,
) -> IntegrityResult:
    """Evaluate a fetched record without raising.

    Args:
        record: Record returned by the fetch endpoint
        expected_hash: Fingerprint the caller expects. Falls back to the
            record's own hash field when None.
        verify_local: Recompute and compare the fingerprint when an
            expected value is available

    Returns:
        IntegrityResult; falsy when the record must not be trusted
    """
    if not record.integrity:
        return IntegrityResult(
            ok=False,
            reason="remote integrity indicator is false or missing",
            remote_flag=False,
        )

    expected = expected_hash if expected_hash is not None else record.content_hash
    if not verify_local or expected is None:
        return IntegrityResult(ok=True, reason="remote integrity indicator is true", remote_flag=True)

    expected = expected.lower()
    actual = fingerprint(record.data)
    if not hmac.compare_digest(actual, expected):
        return IntegrityResult(
            ok=False,
            reason=f"fingerprint mismatch: expected {expected}, got {actual}",
            remote_flag=True,
            expected_hash=expected,
            actual_hash=actual,
        )

    return IntegrityResult(
        ok=True,
        reason="remote integrity indicator is true and fingerprint matches",
        remote_flag=True,
        expected_hash=expected,
        actual_hash=actual,
    )


def require_integrity(
    record: FetchedRecord,
    expected_hash: str | None = None,
    *,
    verify_local: bool = True,
) -> IntegrityResult:
    """Like check_integrity(), but raise on failure.

    Raises:
        IntegrityViolationError: If the record must not be trusted
    """
    result = check_integrity(record, expected_hash, verify_local=verify_local)
    if not result.ok:
        logger.warning(
            "integrity_violation",
            reason=result.reason,
            filename=record.filename,
            remote_flag=result.remote_flag,
            expected_hash=result.expected_hash,
            actual_hash=result.actual_hash,
        )
        raise IntegrityViolationError(result)
    return result
