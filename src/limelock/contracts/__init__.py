"""Shared contracts: records, protocols and errors.

Leaf module - imports nothing from limelock.core or limelock.clients.
"""

from limelock.contracts.errors import (
    IntegrityViolationError,
    LimelockError,
    MalformedResponseError,
    MissingCredentialError,
    RemoteRejectionError,
    UnsupportedOperationError,
)
from limelock.contracts.filesystem import FileSystem
from limelock.contracts.records import FetchedRecord, IntegrityResult, TransportResponse
from limelock.contracts.transport import Transport

__all__ = [
    "FetchedRecord",
    "FileSystem",
    "IntegrityResult",
    "IntegrityViolationError",
    "LimelockError",
    "MalformedResponseError",
    "MissingCredentialError",
    "RemoteRejectionError",
    "Transport",
    "TransportResponse",
    "UnsupportedOperationError",
]
