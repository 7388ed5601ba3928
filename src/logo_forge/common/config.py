"""Logo Forge configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
    "api_key": "insecure-admin-key-change-me",
}

LEDGER_BACKENDS = ("memory", "database")


class LogoForgeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOGOFORGE_")

    environment: str = "development"
    # Signs user ids forwarded by the session layer (X-User-Signature)
    secret_key: str = "insecure-dev-key-change-me"
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/logo_forge.db"

    # API
    api_title: str = "Logo Forge"
    api_version: str = "0.1.0"
    api_key: str = "insecure-admin-key-change-me"
    host: str = "0.0.0.0"
    port: int = 3001
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    # Only enable behind a proxy that overwrites X-Forwarded-For
    trust_forwarded_for: bool = False

    # Quotas. Counts are generation rounds, not images
    anonymous_limit: int = 3
    anonymous_period: str = "daily"
    free_limit: int = 3
    free_period: str = "lifetime"
    max_prompts: int = 5

    # Ledger backends per identity class: "memory" or "database"
    anonymous_ledger: str = "memory"
    account_ledger: str = "database"

    # Image generation (Gemini over REST)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash-image-preview"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    generation_timeout: float = 60.0

    # Upscaling (Replicate Real-ESRGAN)
    replicate_api_token: str = ""
    upscale_model: str = (
        "nightmareai/real-esrgan:"
        "42fed1c4974146d4d2414e2be2c5277c7fcf05fcc3a73abf41610695738c1d7b"
    )
    upscale_timeout: float = 120.0

    # Generated image storage
    images_dir: str = "./generated-logos"
    public_base_url: str = "http://localhost:3001"
    inline_images: bool = False

    # Stripe one-time payment for unlimited access
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    unlimited_price_amount: int = 1000  # cents
    unlimited_price_currency: str = "eur"

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        for name in ("anonymous_ledger", "account_ledger"):
            if getattr(self, name) not in LEDGER_BACKENDS:
                raise ValueError(
                    f"LOGOFORGE_{name.upper()} must be one of {LEDGER_BACKENDS}, "
                    f"got: {getattr(self, name)!r}"
                )

        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"LOGOFORGE_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if self.environment != "development" and not self.stripe_webhook_secret:
            raise RuntimeError(
                f"LOGOFORGE_STRIPE_WEBHOOK_SECRET must be set in '{self.environment}' "
                "environment; unsigned payment webhooks are rejected"
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default keys; set LOGOFORGE_SECRET_KEY and "
                "LOGOFORGE_API_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> LogoForgeSettings:
    settings = LogoForgeSettings()
    settings.validate_for_production()
    return settings
