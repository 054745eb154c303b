"""
FastAPI application exposing the X OAuth login flow.

This module wires dependencies and configures the application.
Login logic is in xlogin/core, the HTTP adapter in xlogin/infrastructure.
"""

import logging
import os
from datetime import UTC, datetime
from typing import Annotated

# Configure logging FIRST, before other local imports
from xlogin.logging_config import setup_global_logging

setup_global_logging()

from fastapi import FastAPI, Query, Request, status  # noqa: E402
from fastapi.responses import RedirectResponse  # noqa: E402
from starlette.datastructures import URL  # noqa: E402

from xlogin.core.domain import AuthResult  # noqa: E402
from xlogin.core.exceptions import OAuthLoginError  # noqa: E402
from xlogin.oauth.config import get_oauth_settings  # noqa: E402
from xlogin.oauth.errors import register_exception_handlers  # noqa: E402
from xlogin.oauth.handler import x_login_handler  # noqa: E402
from xlogin.oauth.router import create_login_router  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Login Hooks
# ============================================================================


async def on_login_success(request: Request, result: AuthResult) -> dict:
    """Report the logged in user."""
    logger.info(
        f"User logged in with X: {result.user.id}",
        extra={"extra_fields": {"user_id": result.user.id}},
    )
    return {
        "status": "success",
        "user": result.user.model_dump(),
    }


async def on_login_error(request: Request, error: OAuthLoginError) -> RedirectResponse:
    """Send the browser to the login failure page."""
    target = URL(get_oauth_settings().failure_redirect).include_query_params(
        error=error.message
    )
    return RedirectResponse(url=str(target), status_code=status.HTTP_302_FOUND)


# ============================================================================
# Application
# ============================================================================


def create_app() -> FastAPI:
    """
    Build the application.

    Settings are read from the environment when the app is created.
    """
    settings = get_oauth_settings()

    app = FastAPI(
        title="X OAuth Login",
        description="Sign in with X using the OAuth 2.0 authorization code flow",
        version="1.0.0",
    )
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "xlogin",
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @app.get("/health")
    async def health():
        """Health check endpoint for Cloud Run."""
        return {"status": "healthy"}

    @app.get("/login/failed")
    async def login_failed(
        error: Annotated[str | None, Query(description="Failure message")] = None,
    ):
        """Landing page for failed logins."""
        return {
            "status": "error",
            "message": error or "Login failed",
        }

    endpoint = x_login_handler(
        on_success=on_login_success,
        on_error=on_login_error,
        defaults=settings.provider_defaults(),
    )
    app.include_router(create_login_router(endpoint, settings.callback_path))

    return app


app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
