"""
FastAPI request handler for the X OAuth login flow.

Translates the login flow's outcome into a response:
- Redirect: 302 to the provider's authorization page
- Success: result of the caller's success hook
- Failure: result of the caller's error hook, or the error is raised
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import Request, Response, status
from fastapi.responses import RedirectResponse

from xlogin.core.domain import AuthResult, Failure, ProviderConfig, Redirect
from xlogin.core.exceptions import OAuthLoginError
from xlogin.core.login_flow import LoginFlow
from xlogin.core.ports import OAuthProviderClient
from xlogin.infrastructure.x_client import XOAuthClient
from xlogin.oauth.config import (
    ConfigInput,
    get_oauth_settings,
    get_provider_defaults,
    resolve_config,
)


logger = logging.getLogger(__name__)

SuccessHook = Callable[[Request, AuthResult], Union[Any, Awaitable[Any]]]
ErrorHook = Callable[[Request, OAuthLoginError], Union[Any, Awaitable[Any]]]


async def _call_hook(hook: Callable[..., Any], *args: Any) -> Any:
    result = hook(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class LoginHandler:
    """
    Login endpoint for one X OAuth configuration.

    Config resolution happens per request, so changes to the defaults
    (e.g. after ``reset_oauth_settings``) are picked up without rebuilding
    the handler when no explicit defaults were injected.
    """

    def __init__(
        self,
        on_success: SuccessHook,
        config: ConfigInput = None,
        on_error: Optional[ErrorHook] = None,
        defaults: ConfigInput = None,
        client: Optional[OAuthProviderClient] = None,
    ):
        self.config = config
        self.on_success = on_success
        self.on_error = on_error
        self.defaults = defaults
        self._client = client

    @property
    def client(self) -> OAuthProviderClient:
        if self._client is None:
            self._client = XOAuthClient(timeout=get_oauth_settings().http_timeout)
        return self._client

    def resolve(self) -> ProviderConfig:
        """Resolve this handler's config against the defaults."""
        defaults = self.defaults
        if defaults is None:
            defaults = get_provider_defaults()
        return resolve_config(self.config, defaults)

    async def handle(self, request: Request) -> Any:
        """
        Handle a visit to the login/callback URL.

        Args:
            request: Starlette request (query carries error or code)

        Returns:
            Redirect response, or whatever the success/error hook returns

        Raises:
            OAuthLoginError: For login errors when no error hook is set
            ProfileFetchFailure: If the provider returned no user
        """
        flow = LoginFlow(self.resolve(), self.client)
        outcome = await flow.run(str(request.url), dict(request.query_params))

        if isinstance(outcome, Redirect):
            return RedirectResponse(url=outcome.url, status_code=status.HTTP_302_FOUND)

        if isinstance(outcome, Failure):
            return await self._fail(request, outcome.error)

        return await _call_hook(self.on_success, request, outcome.result)

    async def _fail(self, request: Request, error: OAuthLoginError) -> Any:
        if self.on_error is None:
            raise error

        result = await _call_hook(self.on_error, request, error)
        if result is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return result


def x_login_handler(
    on_success: SuccessHook,
    config: ConfigInput = None,
    on_error: Optional[ErrorHook] = None,
    defaults: ConfigInput = None,
    client: Optional[OAuthProviderClient] = None,
) -> Callable[[Request], Awaitable[Any]]:
    """
    Create a FastAPI endpoint running the X login flow.

    Args:
        on_success: Called with the request and AuthResult after login
        config: Caller config (client_id, client_secret, scope, URLs, ...)
        on_error: Optional hook for login errors; errors are raised without it
        defaults: Process-wide defaults (loaded from environment if omitted)
        client: Provider client (XOAuthClient if omitted)

    Returns:
        Async endpoint taking a Request
    """
    handler = LoginHandler(
        on_success=on_success,
        config=config,
        on_error=on_error,
        defaults=defaults,
        client=client,
    )
    return handler.handle
