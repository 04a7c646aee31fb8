"""Authentication Gate — issues signed credentials at login and verifies bearer tokens.

Invariants:
    - Unknown email and wrong password produce the same 401 (no account enumeration)
    - Missing, malformed, invalid, or expired tokens → 401
    - A valid token whose principal no longer exists → 401
    - Infrastructure failure during verification → 500, never 401
    - On success the resolved principal is attached to request.state.principal

Design Decisions:
    - HTTPBearer(auto_error=False): extraction failures are classified here,
      not by FastAPI's default 403
    - authenticate() is independent of FastAPI so it can be tested directly
"""

import logging
from typing import Any

import jwt
from fastapi import Depends, Request
from fastapi.responses import Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api_scaffold.api.dependencies import get_jwt_options, repository_for
from api_scaffold.api.rest_request import RestRequest
from api_scaffold.core.errors import NotAuthorizedError, UnexpectedFailureError
from api_scaffold.core.repository_protocols import Record, Repository
from api_scaffold.infrastructure.security import (
    JwtOptions, create_access_token, decode_access_token, verify_password,
)
from api_scaffold.schemas.user import LoginRequest, TokenResponse
from api_scaffold.services.resources import USER_RESOURCE

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)
user_repository = repository_for(USER_RESOURCE)


def _require_secret(options: JwtOptions) -> None:
    if not options.secret:
        raise UnexpectedFailureError("No JWT secret is configured")


async def authenticate(
    token: str | None, repository: Repository, options: JwtOptions,
) -> Record:
    """Resolve a bearer token to a live principal."""
    if not token:
        logger.info("Rejected request: no bearer credential")
        raise NotAuthorizedError("no bearer credential")

    _require_secret(options)
    try:
        payload = decode_access_token(token, options)
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected request: {e}")
        raise NotAuthorizedError("invalid credential") from e

    principal_id = payload.get("id")
    if principal_id is None:
        logger.info("Rejected request: token carries no principal id")
        raise NotAuthorizedError("invalid credential")

    try:
        principal = await repository.find_by_id(principal_id)
    except Exception as e:
        raise UnexpectedFailureError(f"Principal lookup failed: {e}") from e

    if principal is None:
        logger.info(
            "Rejected request: principal no longer exists",
            extra={"principal_id": principal_id},
        )
        raise NotAuthorizedError("unknown principal")
    return principal


async def require_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    repository: Repository = Depends(user_repository),
    options: JwtOptions = Depends(get_jwt_options),
) -> Record:
    """FastAPI dependency guarding protected route mounts."""
    token = credentials.credentials if credentials is not None else None
    principal = await authenticate(token, repository, options)
    request.state.principal = principal
    return principal


async def login(
    body: LoginRequest,
    repository: Repository,
    options: JwtOptions,
    request: Request | None = None,
) -> Response:
    """Respond 200 with {"token": ...} for valid credentials, 401 otherwise."""
    rest = RestRequest(request)
    try:
        _require_secret(options)
        user: Any = await repository.find_one(email=body.email)
        if user is None:
            raise NotAuthorizedError()
        if not await verify_password(body.password, user.password):
            raise NotAuthorizedError()
        rest.with_data(TokenResponse(token=create_access_token(user.id, options)))
    except Exception as e:
        rest.with_error(e)
    return rest.respond()
