"""RestRequest — accumulates one request's outcome and produces its single response.

Invariants:
    - status defaults to 200; error takes precedence over data
    - respond() is terminal and may be called exactly once
    - Classification: UniqueConstraintError → 409 + details,
      ValidationFailedError → 400 + details, ResourceNotFoundError → 404,
      NotAuthorizedError → 401, anything else → 500
    - Only unexpected failures are logged, once, and their message never
      reaches the response body
    - A failing response_data_filter is an unexpected failure

Design Decisions:
    - respond() returns the Starlette Response instead of writing to a
      transport: route handlers return it, FastAPI performs the write
    - Conflict/validation bodies are the raw error details (not sanitized)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from api_scaffold.core.errors import (
    ApiError,
    NotAuthorizedError,
    ResourceNotFoundError,
    UniqueConstraintError,
    ValidationFailedError,
)
from api_scaffold.core.redaction import canonicalize

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = {"message": "not found"}
NOT_AUTHORIZED_BODY = {"message": "not authorized"}
SERVER_ERROR_BODY = {"message": "server error"}


@dataclass(frozen=True)
class RestControllerOptions:
    """Configuration shared by a RestController and its RestRequests.

    response_data_filter, when set, receives every success payload and
    returns the data to send.
    """
    response_data_filter: Callable[[Any], Any] | None = None


class RestRequest:
    """Pending response for one request-handling flow."""

    def __init__(
        self,
        request: Request | None = None,
        options: RestControllerOptions | None = None,
    ):
        self.request = request
        self.options = options or RestControllerOptions()
        self.status = status.HTTP_200_OK
        self.data: Any = None
        self.error: BaseException | None = None
        self._responded = False

    def with_data(self, data: Any) -> "RestRequest":
        self.data = data
        return self

    def with_status(self, status_code: int) -> "RestRequest":
        self.status = status_code
        return self

    def with_error(self, error: BaseException) -> "RestRequest":
        self.error = error
        return self

    def respond(self) -> Response:
        """Build the one response for this request."""
        if self._responded:
            raise RuntimeError("respond() already called for this request")
        self._responded = True

        if self.error is not None:
            return self._handle_error()
        return self._handle_response()

    def _filter_response_data(self) -> Any:
        if self.options.response_data_filter is not None:
            return self.options.response_data_filter(self.data)
        return self.data

    def _handle_response(self) -> Response:
        if self.data is None:
            return Response(status_code=self.status)

        try:
            content = jsonable_encoder(canonicalize(self._filter_response_data()))
        except Exception as e:
            self.error = e
            return self._handle_server_error()
        return JSONResponse(content=content, status_code=self.status)

    def _handle_error(self) -> Response:
        error = self.error
        if isinstance(error, UniqueConstraintError):
            # TODO sanitize conflict details before returning them
            return JSONResponse(
                content=jsonable_encoder(error.to_response()),
                status_code=status.HTTP_409_CONFLICT,
            )
        if isinstance(error, ValidationFailedError):
            return JSONResponse(
                content=jsonable_encoder(error.to_response()),
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        if isinstance(error, ResourceNotFoundError):
            return JSONResponse(
                content=NOT_FOUND_BODY, status_code=status.HTTP_404_NOT_FOUND,
            )
        if isinstance(error, NotAuthorizedError):
            return JSONResponse(
                content=NOT_AUTHORIZED_BODY,
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return self._handle_server_error()

    def _handle_server_error(self) -> Response:
        error = self.error
        extra: dict[str, Any] = {}
        if self.request is not None:
            extra["path"] = self.request.url.path
        if isinstance(error, ApiError):
            extra["error_code"] = error.code
        logger.error(str(error) or repr(error), extra=extra)
        return JSONResponse(
            content=SERVER_ERROR_BODY,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
