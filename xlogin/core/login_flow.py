"""
Core service for the X OAuth authorization code flow.

Decides, for a single request, whether to redirect to the provider, report
a login error, or complete the login. The decision is returned as an outcome
so the web layer can translate it into hook calls and responses.
"""

import logging
from typing import Mapping

from authlib.common.urls import add_params_to_uri

from xlogin.core.domain import (
    AuthResult,
    Failure,
    LoginOutcome,
    ProviderConfig,
    Redirect,
    Success,
)
from xlogin.core.exceptions import (
    ConfigurationError,
    ProfileFetchFailure,
    ProviderResponseError,
    ProviderDeniedError,
    TokenExchangeError,
)
from xlogin.core.ports import OAuthProviderClient


logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "Missing OAUTH_X_CLIENT_ID or OAUTH_X_CLIENT_SECRET env variables."
)


def login_failed_message(reason: object) -> str:
    """Message used for every provider-reported login failure."""
    return f"X login failed: {reason or 'Unknown error'}"


def build_authorization_url(config: ProviderConfig, redirect_uri: str) -> str:
    """
    Build the provider authorization URL for the first visit.

    ``authorization_params`` are added first so the three core parameters
    always carry the values computed here.
    """
    params = dict(config.authorization_params or {})
    params.update(
        {
            "client_id": config.client_id,
            "redirect_uri": redirect_uri,
            "scope": " ".join(config.scope or []),
        }
    )
    return add_params_to_uri(config.authorization_url, list(params.items()))


class LoginFlow:
    """
    The X login flow for one resolved configuration.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(self, config: ProviderConfig, client: OAuthProviderClient):
        self.config = config
        self.client = client

    async def run(self, request_url: str, query: Mapping[str, str]) -> LoginOutcome:
        """
        Handle one visit to the callback URL.

        Args:
            request_url: Exact URL of the current request, used as redirect_uri
            query: Query parameters of the current request

        Returns:
            Redirect, Success or Failure

        Raises:
            ProfileFetchFailure: If the profile endpoint returns no user
            TransientNetworkError: On timeouts or connection failures
            ProviderResponseError: On unreadable provider responses
        """
        if "error" in query:
            logger.warning(
                f"X login denied by provider: {query.get('error')}",
                extra={"extra_fields": {"provider": "x", "query": dict(query)}},
            )
            return Failure(
                ProviderDeniedError(
                    login_failed_message(query.get("error")), data=dict(query)
                )
            )

        if not self.config.client_id:
            logger.error("X OAuth client credentials are not configured")
            return Failure(ConfigurationError(MISSING_CREDENTIALS_MESSAGE))

        code = query.get("code")
        if not code:
            url = build_authorization_url(self.config, request_url)
            logger.info(
                "Redirecting to X authorization page",
                extra={"extra_fields": {"provider": "x", "redirect_uri": request_url}},
            )
            return Redirect(url)

        return await self._complete(code, request_url)

    async def _complete(self, code: str, redirect_uri: str) -> LoginOutcome:
        tokens = await self.client.exchange_code(self.config, code, redirect_uri)
        if tokens.error:
            logger.warning(
                f"X token exchange failed: {tokens.error}",
                extra={"extra_fields": {"provider": "x"}},
            )
            return Failure(
                TokenExchangeError(
                    login_failed_message(tokens.error),
                    data=tokens.model_dump(exclude_unset=True),
                )
            )

        if not tokens.access_token:
            logger.error("X token response has no access token")
            raise ProviderResponseError(
                "X login failed: no access token",
                data=tokens.model_dump(exclude_unset=True),
            )

        user = await self.client.fetch_profile(self.config, tokens.access_token)
        if not user:
            logger.error("X profile fetch returned no user")
            raise ProfileFetchFailure("X login failed: no user found")

        logger.info(
            "X login succeeded",
            extra={"extra_fields": {"provider": "x", "user_id": user.id}},
        )
        return Success(AuthResult(user=user, tokens=tokens))
