from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import List, Mapping, Optional


class FapshiEnvironment(str, Enum):
    sandbox = "sandbox"
    production = "production"


FAPSHI_BASE_URLS: Mapping[FapshiEnvironment, str] = MappingProxyType(
    {
        FapshiEnvironment.sandbox: "https://api.fapshi.com/sandbox",
        FapshiEnvironment.production: "https://api.fapshi.com",
    }
)

# Production is selected when any of these equals "production".
ENVIRONMENT_MARKERS = ("NODE_ENV", "APP_ENV")

API_KEY_VAR = "FAPSHI_API_KEY"
API_USER_VAR = "FAPSHI_API_USER"
WEBHOOK_URL_VAR = "FAPSHI_WEBHOOK_URL"


class PaymentConfigError(ValueError):
    """Required payment settings are missing."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing payment settings: " + ", ".join(self.missing)
        )


@dataclass(frozen=True)
class FapshiConfig:
    """Fapshi gateway settings.

    The API key is kept out of ``repr`` so the object can be logged safely.
    """

    api_key: str = field(default="", repr=False)
    api_user: str = ""
    environment: FapshiEnvironment = FapshiEnvironment.sandbox
    webhook_url: str = ""
    @property
    def base_url(self) -> str:
        return FAPSHI_BASE_URLS[self.environment]

    @property
    def is_production(self) -> bool:
        return self.environment is FapshiEnvironment.production

    def missing_settings(self) -> List[str]:
        """Return the names of required variables that resolved to blank values."""
        required = ((API_KEY_VAR, self.api_key), (API_USER_VAR, self.api_user))
        return [name for name, value in required if not value.strip()]

    def validate(self) -> "FapshiConfig":
        missing = self.missing_settings()
        if missing:
            raise PaymentConfigError(missing)
        return self


def _detect_environment(environ: Mapping[str, str]) -> FapshiEnvironment:
    production = FapshiEnvironment.production
    if any(environ.get(name) == production.value for name in ENVIRONMENT_MARKERS):
        return production
    return FapshiEnvironment.sandbox


def load_fapshi_config(
    environ: Optional[Mapping[str, str]] = None, *, validate: bool = False
) -> FapshiConfig:
    """Build a :class:`FapshiConfig` from environment variables.

    Unset credentials resolve to empty strings. The environment is
    ``production`` when ``NODE_ENV`` or ``APP_ENV`` equals ``"production"``
    exactly; anything else, including no marker at all, selects the sandbox.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.
        validate: Raise :class:`PaymentConfigError` when credentials are missing.
    """
    env = os.environ if environ is None else environ

    config = FapshiConfig(
        api_key=env.get(API_KEY_VAR) or "",
        api_user=env.get(API_USER_VAR) or "",
        environment=_detect_environment(env),
        webhook_url=env.get(WEBHOOK_URL_VAR) or "",
    )
    if validate:
        config.validate()
    return config


@lru_cache(maxsize=1)
def get_fapshi_config() -> FapshiConfig:
    return load_fapshi_config()
