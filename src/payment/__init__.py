"""Payment gateway settings.

Only configuration lives here: credentials, the base URL for the active
environment and the webhook target for the Fapshi gateway.
"""

from .config import (
    FAPSHI_BASE_URLS,
    FapshiConfig,
    FapshiEnvironment,
    PaymentConfigError,
    get_fapshi_config,
    load_fapshi_config,
)

__all__ = [
    "FAPSHI_BASE_URLS",
    "FapshiConfig",
    "FapshiEnvironment",
    "PaymentConfigError",
    "get_fapshi_config",
    "load_fapshi_config",
]
