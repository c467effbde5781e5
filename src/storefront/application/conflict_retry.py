"""Retry loop shared by the cart and order compare-and-set writers.

Only ConcurrencyConflictError is retried.  Backoff is exponential from
``initial_wait_seconds`` up to ``max_wait_seconds`` plus uniform jitter.
"""

from __future__ import annotations

from typing import Any

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from storefront.config import RetryConfig
from storefront.domain.exceptions import ConcurrencyConflictError

logger = structlog.get_logger(__name__)


def retrying_on_conflict(config: RetryConfig, log_event: str, **context: Any) -> Retrying:
    """Build a tenacity ``Retrying`` that logs *log_event* before each sleep.

    Exhaustion raises ``tenacity.RetryError``; callers translate it.
    """

    def before_sleep(state: RetryCallState) -> None:
        logger.info(log_event, attempt=state.attempt_number, **context)

    return Retrying(
        retry=retry_if_exception_type(ConcurrencyConflictError),
        stop=stop_after_attempt(config.max_attempts),
        wait=(
            wait_exponential(multiplier=config.initial_wait_seconds, max=config.max_wait_seconds)
            + wait_random(0, config.jitter_seconds)
        ),
        before_sleep=before_sleep,
        reraise=False,
    )
