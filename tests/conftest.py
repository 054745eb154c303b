"""
Shared test configuration and fixtures.
"""

import os
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from xlogin.core.domain import ProviderConfig, TokenResponse, UserProfile

AUTHORIZATION_URL = "https://auth.example.com/dialog/oauth"
TOKEN_URL = "https://graph.example.com/oauth/access_token"
PROFILE_URL = "https://graph.example.com/me"

TEST_ENV = {
    "OAUTH_X_CLIENT_ID": "test-client-id",
    "OAUTH_X_CLIENT_SECRET": "test-client-secret",
    "OAUTH_X_SCOPE": "email,public_profile",
    "OAUTH_X_AUTHORIZATION_URL": AUTHORIZATION_URL,
    "OAUTH_X_TOKEN_URL": TOKEN_URL,
    "OAUTH_X_PROFILE_URL": PROFILE_URL,
}

# Load settings from the test environment before importing the app
with patch.dict(os.environ, TEST_ENV):
    from xlogin.oauth.config import get_oauth_settings, reset_oauth_settings

    reset_oauth_settings()
    get_oauth_settings()
    from xlogin.main import app

client = TestClient(app)


@pytest.fixture
def provider_config():
    """Fully resolved provider config pointing at example.com endpoints."""
    return ProviderConfig(
        client_id="c1",
        client_secret="s1",
        scope=["email", "public_profile"],
        authorization_url=AUTHORIZATION_URL,
        token_url=TOKEN_URL,
        profile_url=PROFILE_URL,
        authorization_params={},
    )


@pytest.fixture
def fake_provider_client():
    """
    Provider client double.

    Defaults to a successful exchange returning tok1 and user 42/Ada.
    """
    fake = AsyncMock()
    fake.exchange_code.return_value = TokenResponse(access_token="tok1")
    fake.fetch_profile.return_value = UserProfile(id="42", name="Ada")
    return fake
