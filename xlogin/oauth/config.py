"""
OAuth configuration for the X login flow.

Three layers make up the configuration a request runs with:
- caller config passed to the login handler
- process-wide defaults loaded from environment variables
- hardcoded fallbacks for the provider's documented endpoints

Earlier layers win; later layers only fill keys that are unset or None.
"""

import os
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Optional, Union

from xlogin.core.domain import ProviderConfig


logger = logging.getLogger(__name__)


X_AUTHORIZATION_URL = "https://www.x.com/v19.0/dialog/oauth"
X_TOKEN_URL = "https://graph.x.com/v19.0/oauth/access_token"
X_PROFILE_URL = "https://graph.facebook.com/v19.0/me"

FALLBACK_CONFIG = ProviderConfig(
    authorization_url=X_AUTHORIZATION_URL,
    token_url=X_TOKEN_URL,
    profile_url=X_PROFILE_URL,
    authorization_params={},
)

DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_CALLBACK_PATH = "/auth/x"
DEFAULT_FAILURE_REDIRECT = "/login/failed"

ConfigInput = Union[ProviderConfig, Mapping[str, Any], None]


def parse_scope(value: Optional[str]) -> list[str] | None:
    """Split a comma or whitespace separated scope string."""
    if value is None:
        return None
    return [part for part in re.split(r"[,\s]+", value) if part]


@dataclass
class XOAuthSettings:
    """
    Process-wide X OAuth settings.

    Loaded from environment variables. Client credentials are optional here;
    the login handler reports a configuration error when they are missing.
    """

    client_id: str | None = None
    client_secret: str | None = None
    scope: list[str] | None = None
    authorization_url: str | None = None
    token_url: str | None = None
    profile_url: str | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    callback_path: str = DEFAULT_CALLBACK_PATH
    failure_redirect: str = DEFAULT_FAILURE_REDIRECT

    @classmethod
    def from_env(cls) -> "XOAuthSettings":
        """Load settings from environment variables."""
        return cls(
            client_id=os.getenv("OAUTH_X_CLIENT_ID"),
            client_secret=os.getenv("OAUTH_X_CLIENT_SECRET"),
            scope=parse_scope(os.getenv("OAUTH_X_SCOPE")),
            authorization_url=os.getenv("OAUTH_X_AUTHORIZATION_URL"),
            token_url=os.getenv("OAUTH_X_TOKEN_URL"),
            profile_url=os.getenv("OAUTH_X_PROFILE_URL"),
            http_timeout=float(
                os.getenv("OAUTH_X_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))
            ),
            callback_path=os.getenv("OAUTH_X_CALLBACK_PATH", DEFAULT_CALLBACK_PATH),
            failure_redirect=os.getenv(
                "OAUTH_X_FAILURE_REDIRECT", DEFAULT_FAILURE_REDIRECT
            ),
        )

    @property
    def is_configured(self) -> bool:
        """Check if both client credentials are present."""
        return bool(self.client_id and self.client_secret)

    def provider_defaults(self) -> ProviderConfig:
        """Provider config layer built from these settings."""
        return ProviderConfig(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=self.scope,
            authorization_url=self.authorization_url,
            token_url=self.token_url,
            profile_url=self.profile_url,
        )


@lru_cache()
def get_oauth_settings() -> XOAuthSettings:
    """Get X OAuth settings singleton."""
    settings = XOAuthSettings.from_env()
    if not settings.is_configured:
        logger.warning("X OAuth not configured (missing client credentials)")
    return settings


def get_provider_defaults() -> ProviderConfig:
    """Process-wide provider defaults."""
    return get_oauth_settings().provider_defaults()


def reset_oauth_settings() -> None:
    """
    Reset the cached settings.

    Useful for testing with different environments.
    """
    get_oauth_settings.cache_clear()


def _as_layer(config: ConfigInput) -> dict[str, Any]:
    if config is None:
        return {}
    if isinstance(config, ProviderConfig):
        return config.model_dump(exclude_none=True)
    return ProviderConfig.model_validate(dict(config)).model_dump(exclude_none=True)


def resolve_config(
    config: ConfigInput = None,
    defaults: ConfigInput = None,
) -> ProviderConfig:
    """
    Merge caller config over defaults over hardcoded fallbacks.

    The merge is shallow: a caller's ``authorization_params`` replaces the
    defaults' map rather than being combined with it.

    Args:
        config: Caller supplied config (model or plain mapping)
        defaults: Process-wide defaults (model or plain mapping)

    Returns:
        Frozen, resolved provider config
    """
    merged = _as_layer(FALLBACK_CONFIG)
    merged.update(_as_layer(defaults))
    merged.update(_as_layer(config))
    return ProviderConfig(**merged)
