"""
Client for the X OAuth token and profile endpoints.
"""

import logging
from typing import Optional

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client, OAuthError
from pydantic import ValidationError

from xlogin.core.domain import ProviderConfig, TokenResponse, UserProfile
from xlogin.core.exceptions import ProviderResponseError, TransientNetworkError
from xlogin.oauth.config import DEFAULT_HTTP_TIMEOUT


logger = logging.getLogger(__name__)

PROFILE_FIELDS = "id,name"


def read_token_response(response: httpx.Response) -> TokenResponse:
    """
    Turn the raw token endpoint response into a TokenResponse.

    A body with a non-empty ``error`` is returned unchanged whatever the
    status, so the whole provider answer reaches the login flow. Any other
    non-2xx answer, or a body that is not a JSON object, is a provider
    failure.
    """
    try:
        body = response.json()
    except ValueError as e:
        raise ProviderResponseError(
            f"Unreadable token endpoint response: {response.status_code}",
            data={"status_code": response.status_code},
        ) from e

    if not isinstance(body, dict):
        raise ProviderResponseError(
            "Token endpoint response is not an object",
            data={"status_code": response.status_code},
        )

    if body.get("error"):
        return TokenResponse.model_validate(body)

    if response.is_error:
        logger.error(
            f"X token endpoint failed: {response.status_code}",
            extra={"extra_fields": {"provider": "x"}},
        )
        raise ProviderResponseError(
            f"Token endpoint failed: {response.status_code}",
            data={"status_code": response.status_code, "body": body},
        )

    return TokenResponse.model_validate(body)


class XOAuthClient:
    """
    Adapter implementing the OAuthProviderClient port for X.

    The token exchange goes through authlib with ``client_secret_post`` so
    the client credentials travel in the form body. The raw response is
    kept through authlib's ``access_token_response`` compliance hook and
    read by ``read_token_response``. The profile fetch is a plain httpx GET.
    """

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.timeout = timeout

    async def exchange_code(
        self, config: ProviderConfig, code: str, redirect_uri: str
    ) -> TokenResponse:
        """
        Exchange an authorization code for tokens.

        An ``error`` answer from the token endpoint is returned as a
        TokenResponse rather than raised, so the login flow can decide
        how to report it.

        Raises:
            TransientNetworkError: On timeout or connection failure
            ProviderResponseError: On a non-2xx answer without ``error``
                or an unreadable body
        """
        responses: list[httpx.Response] = []

        def keep_response(resp: httpx.Response) -> httpx.Response:
            responses.append(resp)
            return resp

        try:
            async with AsyncOAuth2Client(
                client_id=config.client_id,
                client_secret=config.client_secret,
                token_endpoint_auth_method="client_secret_post",
                timeout=self.timeout,
            ) as client:
                client.register_compliance_hook("access_token_response", keep_response)
                await client.fetch_token(
                    config.token_url,
                    code=code,
                    redirect_uri=redirect_uri,
                )
        except OAuthError:
            # authlib rejects any body carrying ``error``; the kept response decides
            pass
        except httpx.TimeoutException as e:
            logger.error(f"Timeout during X token exchange: {e}")
            raise TransientNetworkError(f"Timeout during token exchange: {e}") from e
        except httpx.HTTPStatusError as e:
            responses.append(e.response)
        except httpx.RequestError as e:
            logger.error(f"Network error during X token exchange: {e}")
            raise TransientNetworkError(f"Network error: {e}") from e
        except ValueError:
            pass

        if not responses:
            raise ProviderResponseError("Token endpoint returned no response")
        return read_token_response(responses[-1])

    async def fetch_profile(
        self, config: ProviderConfig, access_token: str
    ) -> Optional[UserProfile]:
        """
        Fetch the user's id and name with the access token.

        Returns:
            The profile, or None when the body is empty or holds no user
        """
        params = {"fields": PROFILE_FIELDS, "access_token": access_token}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(config.profile_url, params=params)
                if response.status_code >= 500:
                    response.raise_for_status()
                if not response.content:
                    return None
                data = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Timeout during X profile fetch: {e}")
            raise TransientNetworkError(f"Timeout during profile fetch: {e}") from e
        except httpx.HTTPStatusError as e:
            raise ProviderResponseError(
                f"Profile endpoint failed: {e.response.status_code}",
                data={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Network error during X profile fetch: {e}")
            raise TransientNetworkError(f"Network error: {e}") from e
        except ValueError as e:
            raise ProviderResponseError(
                f"Unreadable profile endpoint response: {e}"
            ) from e

        if not data or not isinstance(data, dict):
            return None
        try:
            return UserProfile.model_validate(data)
        except ValidationError:
            logger.warning("X profile response has no user id")
            return None
