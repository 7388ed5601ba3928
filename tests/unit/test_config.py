"""Tests for settings validation and error mapping."""

import pytest

from logo_forge.common.config import LogoForgeSettings, get_settings
from logo_forge.common.exceptions import (
    AuthenticationRequiredError,
    GenerationUpstreamError,
    InvalidRequestError,
    LedgerPersistenceError,
    LogoForgeError,
    PaymentProviderError,
    PremiumRequiredError,
    QuotaExceededError,
    UpscaleProviderError,
    UserNotFoundError,
    status_for,
)
from logo_forge.common.security import sign_user_id, verify_user_signature


SECURE = {"secret_key": "s" * 48, "api_key": "k" * 48, "stripe_webhook_secret": "whsec_x"}


class TestValidateForProduction:
    def test_insecure_defaults_rejected_in_production(self):
        settings = LogoForgeSettings(environment="production")
        with pytest.raises(RuntimeError, match="LOGOFORGE_SECRET_KEY"):
            settings.validate_for_production()

    def test_insecure_defaults_warn_in_development(self):
        settings = LogoForgeSettings(environment="development")
        with pytest.warns(UserWarning):
            settings.validate_for_production()

    def test_secure_production(self):
        LogoForgeSettings(environment="production", **SECURE).validate_for_production()

    def test_webhook_secret_required_in_production(self):
        settings = LogoForgeSettings(
            environment="production", **{**SECURE, "stripe_webhook_secret": ""},
        )
        with pytest.raises(RuntimeError, match="LOGOFORGE_STRIPE_WEBHOOK_SECRET"):
            settings.validate_for_production()

    def test_forwarded_for_untrusted_by_default(self):
        assert LogoForgeSettings().trust_forwarded_for is False

    def test_unknown_ledger_backend(self):
        settings = LogoForgeSettings(account_ledger="redis", **SECURE)
        with pytest.raises(ValueError, match="ACCOUNT_LEDGER"):
            settings.validate_for_production()

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("LOGOFORGE_FREE_LIMIT", "10")
        monkeypatch.setenv("LOGOFORGE_FREE_PERIOD", "monthly")
        settings = LogoForgeSettings()
        assert settings.free_limit == 10
        assert settings.free_period == "monthly"

    def test_get_settings_cached(self, monkeypatch):
        monkeypatch.setenv("LOGOFORGE_SECRET_KEY", SECURE["secret_key"])
        monkeypatch.setenv("LOGOFORGE_API_KEY", SECURE["api_key"])
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestStatusFor:
    @pytest.mark.parametrize("error,status", [
        (InvalidRequestError(), 400),
        (AuthenticationRequiredError(), 401),
        (PremiumRequiredError(), 403),
        (UserNotFoundError(), 404),
        (QuotaExceededError(total=3, used=3), 429),
        (LedgerPersistenceError(), 503),
        (PaymentProviderError(configured=False), 503),
        (UpscaleProviderError(configured=False), 503),
        (UpscaleProviderError(status=429), 429),
        (UpscaleProviderError(status=422), 502),
        (LogoForgeError("boom"), 500),
    ])
    def test_mapping(self, error, status):
        assert status_for(error) == status

    def test_upstream_reason(self):
        assert GenerationUpstreamError(status=429).reason == "quota-exceeded"
        assert GenerationUpstreamError(status=503).reason == "api-error"
        assert GenerationUpstreamError().reason == "api-error"


class TestUserSignature:
    def test_valid_signature(self):
        signature = sign_user_id("user_alice", "secret")
        assert verify_user_signature("user_alice", signature, "secret")

    def test_other_secret_rejected(self):
        signature = sign_user_id("user_alice", "other-secret")
        assert not verify_user_signature("user_alice", signature, "secret")

    def test_other_user_rejected(self):
        signature = sign_user_id("user_bob", "secret")
        assert not verify_user_signature("user_alice", signature, "secret")

    @pytest.mark.parametrize("user_id,signature", [("user_alice", ""), ("", "abc")])
    def test_missing_parts_rejected(self, user_id, signature):
        assert not verify_user_signature(user_id, signature, "secret")
