"""
Centralized exception handlers for login errors.

Errors that were not handed to an error hook end up here and are rendered
with the status code they carry.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from xlogin.core.exceptions import OAuthLoginError


logger = logging.getLogger(__name__)


async def oauth_login_error_handler(
    request: Request, exc: OAuthLoginError
) -> JSONResponse:
    """
    Handle login errors raised out of the login handler.

    Server side failures are logged as errors, rejected logins as warnings.
    """
    if exc.status_code >= 500:
        logger.error(f"Login error: {exc.message}", exc_info=True)
    else:
        logger.warning(f"Login rejected: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.to_dict()),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the login error handlers on an application."""
    app.add_exception_handler(OAuthLoginError, oauth_login_error_handler)
