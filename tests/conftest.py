import pytest
import structlog

from storefront.config import RetryConfig


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def fast_retry() -> RetryConfig:
    """Retry policy without backoff sleeps."""
    return RetryConfig(
        max_attempts=20,
        initial_wait_seconds=0.0,
        max_wait_seconds=0.001,
        jitter_seconds=0.001,
    )
