"""
OAuth API endpoints.

Provides the API surface for the X login flow:
- GET <callback path> - Start the flow, or handle the provider's callback

The same URL serves both visits: without ``code`` it redirects to X,
with ``code`` it completes the login.
"""

import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Request

from xlogin.oauth.config import DEFAULT_CALLBACK_PATH


logger = logging.getLogger(__name__)


def create_login_router(
    endpoint: Callable[[Request], Awaitable[Any]],
    path: str = DEFAULT_CALLBACK_PATH,
) -> APIRouter:
    """
    Mount a login endpoint as a GET route.

    Args:
        endpoint: Endpoint created by ``x_login_handler``
        path: Callback path registered with the provider

    Returns:
        Router to include in the application
    """
    router = APIRouter(tags=["oauth"])
    router.add_api_route(
        path,
        endpoint,
        methods=["GET"],
        name="x_login",
        response_model=None,
    )
    logger.info(f"Mounted X login route at {path}")
    return router
