# tests/strategies/__init__.py
"""Hypothesis strategies for property-based tests.

Re-exports commonly used strategies for convenience:
    from tests.strategies import payloads, chunked_payloads, STANDARD_SETTINGS
"""

from tests.strategies.payloads import chunked_payloads, nonempty_payloads, payloads, text_payloads
from tests.strategies.settings import DETERMINISM_SETTINGS, SLOW_SETTINGS, STANDARD_SETTINGS

__all__ = [
    "DETERMINISM_SETTINGS",
    "SLOW_SETTINGS",
    "STANDARD_SETTINGS",
    "chunked_payloads",
    "nonempty_payloads",
    "payloads",
    "text_payloads",
]
