"""
Core domain models for the X OAuth login flow.

These models represent the login flow's data and are independent of
any web framework or HTTP client.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from xlogin.core.exceptions import OAuthLoginError


class ProviderConfig(BaseModel):
    """
    OAuth provider configuration.

    Every field is optional on input. A resolved config (see
    ``xlogin.oauth.config.resolve_config``) is frozen for the rest of the
    request.
    """

    model_config = ConfigDict(frozen=True)

    client_id: Optional[str] = Field(default=None, description="OAuth client ID")
    client_secret: Optional[str] = Field(
        default=None, description="OAuth client secret"
    )
    scope: Optional[List[str]] = Field(
        default=None, description="Requested scopes, joined with spaces"
    )
    authorization_url: Optional[str] = Field(
        default=None, description="Provider authorization endpoint"
    )
    token_url: Optional[str] = Field(default=None, description="Token endpoint")
    profile_url: Optional[str] = Field(
        default=None, description="Endpoint returning the user's id and name"
    )
    authorization_params: Optional[Dict[str, str]] = Field(
        default=None, description="Extra query parameters for the authorization URL"
    )


class TokenResponse(BaseModel):
    """
    Token endpoint response.

    Only ``access_token`` and ``error`` are read by the login flow; any other
    provider field is kept as-is and forwarded to the success hook.
    """

    model_config = ConfigDict(extra="allow")

    access_token: Optional[str] = None
    # Graph-style endpoints report errors as objects
    error: Optional[Union[str, Dict[str, Any]]] = None


class UserProfile(BaseModel):
    """Minimal user profile returned by the provider."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    name: Optional[str] = None


class AuthResult(BaseModel):
    """Payload handed to the success hook."""

    user: UserProfile
    tokens: TokenResponse


# =============================================================================
# Login outcomes
# =============================================================================


@dataclass(frozen=True)
class Redirect:
    """Send the browser to the provider's authorization page."""

    url: str


@dataclass(frozen=True)
class Success:
    """Token exchange and profile fetch both succeeded."""

    result: AuthResult


@dataclass(frozen=True)
class Failure:
    """A login error that the error hook may handle."""

    error: OAuthLoginError


LoginOutcome = Union[Redirect, Success, Failure]
