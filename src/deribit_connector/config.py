"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

MAINNET_API_URL = "https://www.deribit.com"
TESTNET_API_URL = "https://test.deribit.com"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_optional_positive_int(value: str | None, *, field_name: str) -> int | None:
    """Parse optional positive integer values from env strings."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    parsed = int(text)
    if parsed <= 0:
        raise ValueError(f"{field_name} must be positive")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Immutable connector settings."""

    api_key: str = ""
    secret: str = ""
    testnet: bool = False
    api_url: str = ""
    timeout_seconds: int = 20
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        timeout = parse_optional_positive_int(
            os.getenv("DERIBIT_TIMEOUT_SECONDS"),
            field_name="timeout_seconds",
        )
        raw = cls(
            api_key=str(os.getenv("DERIBIT_API_KEY", "")).strip(),
            secret=str(os.getenv("DERIBIT_SECRET", "")).strip(),
            testnet=parse_bool(os.getenv("DERIBIT_TESTNET"), False),
            api_url=str(os.getenv("DERIBIT_API_URL", "")).strip(),
            timeout_seconds=timeout or 20,
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        log_level = overrides.get("log_level")
        if isinstance(log_level, str):
            overrides["log_level"] = log_level.strip().upper()
        updated = replace(self, **overrides)
        return updated.validate()

    def base_url(self) -> str:
        """Resolve the API host, preferring an explicit URL over the testnet switch."""
        if self.api_url:
            return self.api_url.rstrip("/")
        return TESTNET_API_URL if self.testnet else MAINNET_API_URL

    def has_credentials(self) -> bool:
        return bool(self.api_key and self.secret)

    def validate(self) -> Self:
        """Validate settings fields."""
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.api_url and not self.api_url.startswith(("http://", "https://")):
            raise ValueError("api_url must start with http:// or https://")
        if self.log_level not in LOG_LEVELS:
            supported = ", ".join(sorted(LOG_LEVELS))
            raise ValueError(f"log_level must be one of {supported}")
        return self
