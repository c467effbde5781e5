"""Tests for settings loading."""

import os
from pathlib import Path

import pydantic
import pytest

from storefront.config import ClearFailureMode, RetryConfig, StorefrontSettings


@pytest.fixture
def env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("STOREFRONT_"):
            monkeypatch.delenv(name)

    def set_env(**values):
        for name, value in values.items():
            monkeypatch.setenv(f"STOREFRONT_{name}", value)

    return set_env


class TestStorefrontSettings:

    def test_defaults(self, env):
        settings = StorefrontSettings()
        assert settings.data_dir == Path("data")
        assert settings.store_timeout_seconds == 5.0
        assert settings.clear_failure_mode is ClearFailureMode.WARN
        assert settings.webhook_secret is None
        assert settings.payment_claim_lease_seconds == 300
        assert settings.cart_retry == RetryConfig()

    def test_reads_prefixed_environment(self, env, tmp_path):
        env(
            DATA_DIR=str(tmp_path),
            STORE_TIMEOUT_SECONDS="1.5",
            CLEAR_FAILURE_MODE="raise",
            WEBHOOK_SECRET="whsec_abc",
            PAYMENT_CLAIM_LEASE_SECONDS="60",
            LOG_LEVEL="debug",
            JSON_LOGS="true",
            CART_RETRY__MAX_ATTEMPTS="8",
        )
        settings = StorefrontSettings()
        assert settings.data_dir == tmp_path
        assert settings.store_timeout_seconds == 1.5
        assert settings.clear_failure_mode is ClearFailureMode.RAISE
        assert settings.webhook_secret.get_secret_value() == "whsec_abc"
        assert "whsec_abc" not in repr(settings)
        assert settings.payment_claim_lease_seconds == 60
        assert settings.log_level == "DEBUG"
        assert settings.json_logs is True
        assert settings.cart_retry.max_attempts == 8
        assert settings.cart_retry.max_wait_seconds == RetryConfig().max_wait_seconds

    def test_empty_values_fall_back_to_defaults(self, env):
        env(WEBHOOK_SECRET="", LOG_LEVEL="")
        settings = StorefrontSettings()
        assert settings.webhook_secret is None
        assert settings.log_level == "INFO"

    def test_unrelated_prefixed_variables_ignored(self, env):
        env(USER="u1")
        assert StorefrontSettings().log_level == "INFO"

    def test_explicit_values_override_environment(self, env):
        env(LOG_LEVEL="ERROR")
        assert StorefrontSettings(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "name,value",
        [("LOG_LEVEL", "chatty"), ("STORE_TIMEOUT_SECONDS", "0"), ("CART_RETRY__MAX_ATTEMPTS", "0")],
    )
    def test_invalid_values_rejected(self, env, name, value):
        env(**{name: value})
        with pytest.raises(pydantic.ValidationError):
            StorefrontSettings()

    def test_frozen(self, env):
        settings = StorefrontSettings()
        with pytest.raises(pydantic.ValidationError):
            settings.log_level = "DEBUG"


class TestRetryConfig:

    def test_max_wait_below_initial_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            RetryConfig(initial_wait_seconds=1.0, max_wait_seconds=0.5)

    def test_unknown_field_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            RetryConfig(retries=3)
