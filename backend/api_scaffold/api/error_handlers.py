"""Error Handlers — global exception handlers routed through RestRequest.

Invariants:
    - ApiError raised outside a controller (e.g. the auth guard) → classified by RestRequest
    - RequestValidationError → ValidationFailedError → 400 with field-level details
    - Exception (catch-all) → 500 "server error", never leaks internal details

Design Decisions:
    - Three-layer handler: domain (ApiError), validation (Pydantic), catch-all (Exception)
    - Same response shapes as controller operations: one classification point
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from api_scaffold.api.rest_request import RestRequest
from api_scaffold.core.errors import ApiError, ValidationFailedError, error_detail

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_api_error_handler(app: FastAPI) -> None:
    """Register classified API error handler."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return RestRequest(request).with_error(exc).respond()


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        error = ValidationFailedError(
            "Invalid request data", _build_validation_details(exc),
        )
        return RestRequest(request).with_error(error).respond()


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        return RestRequest(request).with_error(exc).respond()


def _build_validation_details(exc: RequestValidationError) -> list[dict]:
    """Field-level details; submitted values are not echoed back."""
    return [
        error_detail(
            e["msg"], e["type"], ".".join(str(loc) for loc in e["loc"]),
        )
        for e in exc.errors()
    ]
