"""
FastAPI exception handlers.

Errors are returned as ``{"message": ...}`` bodies.  The message is a
string for not-found and store failures, and a ``{field: error}``
mapping for validation failures so clients can render per-field
errors next to the matching form inputs.
"""

import logging
from typing import Dict

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from .errors import ProfileError


logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the profile error handlers on ``app``."""

    @app.exception_handler(ProfileError)
    async def _profile_error_handler(request: Request, exc: ProfileError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_public_dict())

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors: Dict[str, str] = {}
        for error in exc.errors():
            # Drop the leading "body"/"path"/"query" segment
            loc = [str(part) for part in error.get("loc", ())][1:]
            errors.setdefault(".".join(loc) or "body", error.get("msg", "Invalid value"))
        logger.debug("Rejected request to %s: %s", request.url.path, errors)
        return JSONResponse(status_code=400, content={"message": errors})
