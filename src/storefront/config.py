"""Pydantic configuration models for the storefront.

This module provides:
- RetryConfig: bounded retry policy for optimistic-concurrency conflicts
- ClearFailureMode: what checkout does when the cart clear step fails
- StorefrontSettings: store location, timeouts, webhook secret, logging
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "STOREFRONT_"
ENV_NESTED_DELIMITER = "__"


class ClearFailureMode(str, Enum):
    """Failure bias of the order-then-clear-cart saga.

    Both modes keep the already-persisted order: an order that exists with a
    stale cart is preferred over a lost order.  ``WARN`` logs and reports
    ``cart_cleared=False``; ``RAISE`` surfaces StoreUnavailableError to the
    caller after the order is saved.
    """

    WARN = "warn"
    RAISE = "raise"


DEFAULT_CLEAR_FAILURE_MODE = ClearFailureMode.WARN


class RetryConfig(BaseModel):
    """Retry policy for compare-and-set conflicts on carts and orders.

    Implements exponential backoff with jitter.  Only
    ConcurrencyConflictError is retried; validation errors never are.

    Attributes:
        max_attempts: Maximum attempts including the first (1-20, default 5).
        initial_wait_seconds: Initial backoff wait (default 0.01s).
        max_wait_seconds: Maximum backoff cap (default 0.5s).
        jitter_seconds: Random jitter range (default 0.01s).

    Example:
        >>> config = RetryConfig(max_attempts=3)
        >>> config.max_attempts
        3
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of attempts for one cart or order mutation",
    )
    initial_wait_seconds: float = Field(
        default=0.01,
        ge=0.0,
        le=5.0,
        description="Initial backoff wait time in seconds",
    )
    max_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Maximum backoff wait time in seconds",
    )
    jitter_seconds: float = Field(
        default=0.01,
        ge=0.0,
        le=5.0,
        description="Random jitter range in seconds",
    )

    @field_validator("max_wait_seconds")
    @classmethod
    def max_wait_must_exceed_initial(cls, v: float, info: object) -> float:
        """Validate that max_wait_seconds >= initial_wait_seconds."""
        data = getattr(info, "data", {})
        initial = data.get("initial_wait_seconds", 0.0)
        if v < initial:
            msg = f"max_wait_seconds ({v}) must be >= initial_wait_seconds ({initial})"
            raise ValueError(msg)
        return v


class StorefrontSettings(BaseSettings):
    """Runtime settings for the storefront core.

    Every field can be set from a ``STOREFRONT_``-prefixed environment
    variable; nested retry fields use a double underscore.

    Example:
        STOREFRONT_DATA_DIR=/var/lib/storefront
        STOREFRONT_CART_RETRY__MAX_ATTEMPTS=8
        STOREFRONT_WEBHOOK_SECRET=whsec_...

    Attributes:
        data_dir: Directory holding the JSON document collections.
        store_timeout_seconds: Per-call store timeout; expiry surfaces
            StoreUnavailableError instead of hanging.
        cart_retry: Retry policy for cart and order compare-and-set writes.
        clear_failure_mode: Saga failure bias for checkout.
        webhook_secret: Payment provider signing secret.
        webhook_tolerance_seconds: Maximum age of a signed notification.
        payment_claim_lease_seconds: How long an unfinished payment event
            claim blocks redelivery before it can be taken over.
        log_level: Minimum log level.
        json_logs: Render logs as JSON instead of console output.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
        env_ignore_empty=True,
        frozen=True,
        extra="forbid",
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the JSON document collections",
    )
    store_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=120.0,
        description="Timeout for a single store call in seconds",
    )
    cart_retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry policy for cart read-modify-write conflicts",
    )
    clear_failure_mode: ClearFailureMode = Field(
        default=DEFAULT_CLEAR_FAILURE_MODE,
        description="What checkout does if clearing the cart fails",
    )
    webhook_secret: SecretStr | None = Field(
        default=None,
        description="Payment provider webhook signing secret",
    )
    webhook_tolerance_seconds: int = Field(
        default=300,
        ge=1,
        description="Maximum age of a signed webhook in seconds",
    )
    payment_claim_lease_seconds: int = Field(
        default=300,
        ge=1,
        description="Seconds before an unfinished payment event claim can be retaken",
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
