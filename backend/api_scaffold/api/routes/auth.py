"""Auth Routes — public registration and login.

Invariants:
    - /register is the users create operation (password redacted from the response)
    - /login never reveals whether an email is registered
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from api_scaffold.api import auth
from api_scaffold.api.dependencies import get_jwt_options
from api_scaffold.api.routes import users
from api_scaffold.core.repository_protocols import Repository
from api_scaffold.infrastructure.security import JwtOptions
from api_scaffold.schemas.user import LoginRequest

router = APIRouter(tags=["auth"])


@router.post("/register")
async def register(
    request: Request,
    attributes: dict[str, Any] = Body(...),
    repository: Repository = Depends(auth.user_repository),
):
    return await users.controller.create(repository, attributes, request)


@router.post("/login")
async def login(
    body: LoginRequest,
    request: Request,
    repository: Repository = Depends(auth.user_repository),
    options: JwtOptions = Depends(get_jwt_options),
):
    return await auth.login(body, repository, options, request)
