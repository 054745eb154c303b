"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the login flow and the identity provider.
Infrastructure adapters implement these ports.
"""

from typing import Optional, Protocol

from xlogin.core.domain import ProviderConfig, TokenResponse, UserProfile


class OAuthProviderClient(Protocol):
    """
    Port (interface) for talking to the OAuth provider.

    This is implemented by infrastructure adapters (e.g., XOAuthClient).
    The login flow depends on this interface, not on concrete HTTP clients.
    """

    async def exchange_code(
        self, config: ProviderConfig, code: str, redirect_uri: str
    ) -> TokenResponse:
        """
        Exchange an authorization code for tokens.

        Args:
            config: Resolved provider configuration
            code: Authorization code from the callback query
            redirect_uri: The exact callback URL sent with the authorization request

        Returns:
            Token response, possibly carrying an ``error`` field

        Raises:
            TransientNetworkError: On timeout or connection failure
            ProviderResponseError: On a server error or unreadable body
        """
        ...

    async def fetch_profile(
        self, config: ProviderConfig, access_token: str
    ) -> Optional[UserProfile]:
        """
        Fetch the user's id and name.

        Returns:
            The profile, or None when the provider returned no user
        """
        ...
