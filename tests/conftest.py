"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set APP_ENV to testing before any app imports to disable rate limiting
os.environ.setdefault("APP_ENV", "testing")
# In-memory SQLite; the integration conftest shares one connection across sessions
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_SSL_MODE", "disable")
os.environ.setdefault("JWT_SECRET_KEY", "test-only-secret-key-with-at-least-32-characters")
# Cheap hashing keeps the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
import pytest
import structlog
from structlog.testing import CapturingLogger

from src.research_hub.core.config import get_settings
from src.research_hub.core.logging import clear_request_context
from src.research_hub.core.shutdown import request_tracker
from tests.helpers import InMemoryObjectStore, StubOAuthClient

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    """Object store kept in a dict. Flip `fail_puts`/`fail_deletes` to simulate outages."""
    return InMemoryObjectStore()


@pytest.fixture
def oauth_client() -> StubOAuthClient:
    """OAuth client that returns whatever identity the test configures."""
    return StubOAuthClient()


@pytest.fixture
def capturing_logger():
    """Route every structlog call into a CapturingLogger for assertions."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


@pytest.fixture(autouse=True)
def _reset_request_tracker():
    """The tracker is process-wide; a drained app must not leak into later tests."""
    request_tracker.reset()
    yield
    request_tracker.reset()
