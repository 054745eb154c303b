"""
Tests for the demo application wiring.
"""

from datetime import datetime
from urllib.parse import parse_qs, urlparse

import httpx
import respx

from tests.conftest import AUTHORIZATION_URL, PROFILE_URL, TOKEN_URL, client


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_root_endpoint(self):
        """Test the root endpoint returns healthy status."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "xlogin"
        datetime.fromisoformat(data["timestamp"])

    def test_health_endpoint(self):
        """Test the /health endpoint returns healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestLoginRoute:
    """Tests for the mounted X login route."""

    def test_first_visit_redirects_to_x(self):
        """Test the login route uses the environment configuration."""
        response = client.get("/auth/x", follow_redirects=False)

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        assert location.geturl().startswith(AUTHORIZATION_URL + "?")
        params = parse_qs(location.query)
        assert params["client_id"] == ["test-client-id"]
        assert params["scope"] == ["email public_profile"]
        assert params["redirect_uri"] == ["http://testserver/auth/x"]

    def test_provider_error_redirects_to_failure_page(self):
        """Test the error hook sends the browser to /login/failed."""
        response = client.get("/auth/x?error=access_denied", follow_redirects=False)

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        assert location.path == "/login/failed"
        assert parse_qs(location.query)["error"] == ["X login failed: access_denied"]

    def test_failure_page(self):
        """Test the failure page echoes the error."""
        response = client.get("/login/failed?error=X+login+failed%3A+denied")

        assert response.status_code == 200
        assert response.json() == {
            "status": "error",
            "message": "X login failed: denied",
        }

    def test_successful_login_returns_user(self):
        """Test a callback with code returns the logged in user."""
        with respx.mock as router:
            router.post(TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "tok1"})
            )
            router.get(PROFILE_URL).mock(
                return_value=httpx.Response(200, json={"id": "42", "name": "Ada"})
            )

            response = client.get("/auth/x?code=xyz")

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "user": {"id": "42", "name": "Ada"},
        }
