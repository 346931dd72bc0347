# src/limelock/core/__init__.py
"""Core infrastructure: Fingerprints, Integrity, Configuration, Logging, File system."""

from limelock.core.config import LimelockSettings, load_settings, resolve_config
from limelock.core.filesystem import LocalFileSystem
from limelock.core.fingerprint import (
    EMPTY_FINGERPRINT,
    fingerprint,
    fingerprint_file,
    fingerprint_stream,
    matches,
)
from limelock.core.integrity import check_integrity, require_integrity
from limelock.core.logging import configure_logging, get_logger

__all__ = [
    "EMPTY_FINGERPRINT",
    "LimelockSettings",
    "LocalFileSystem",
    "check_integrity",
    "configure_logging",
    "fingerprint",
    "fingerprint_file",
    "fingerprint_stream",
    "get_logger",
    "load_settings",
    "matches",
    "require_integrity",
    "resolve_config",
]
