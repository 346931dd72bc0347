# tests/conftest.py
"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

HTTP is never real in this suite: every test that reaches the transport
goes through respx, usually via the FakeLimelockService fixture.
"""

import logging
import os
from collections.abc import Iterator

import pytest
import respx
import structlog
from hypothesis import Phase, Verbosity, settings

from limelock.clients.storage import LimelockClient
from tests.helpers.fake_service import BASE_URL, FakeLimelockService

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Timing varies on shared runners
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _clean_limelock_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LIMELOCK_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("LIMELOCK_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers bound to streams that a test's capture has closed."""
    yield
    logging.getLogger().handlers = []
    structlog.reset_defaults()


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def service() -> Iterator[FakeLimelockService]:
    """A fresh fake service with all endpoints routed through respx."""
    with respx.mock(assert_all_called=False) as router:
        yield FakeLimelockService().install(router)


@pytest.fixture
def token(service: FakeLimelockService) -> str:
    """A valid session token on the fake service."""
    return service.add_session()


@pytest.fixture
def client(service: FakeLimelockService, token: str) -> Iterator[LimelockClient]:
    """A logged-in client talking to the fake service."""
    with LimelockClient(token, base_url=BASE_URL) as c:
        yield c
