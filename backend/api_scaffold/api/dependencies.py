"""Request Dependencies — process-scoped handles read from app.state.

Invariants:
    - Settings, JwtOptions and the session manager are created once in
      create_app/lifespan and only read here
    - All repositories of one request share the request's AsyncSession
      (get_db is cached per request by FastAPI)
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from api_scaffold.config import Settings
from api_scaffold.infrastructure.database import get_db
from api_scaffold.infrastructure.repository import (
    ResourceDefinition, SqlAlchemyRepository,
)
from api_scaffold.infrastructure.security import JwtOptions


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_jwt_options(request: Request) -> JwtOptions:
    return request.app.state.jwt_options


def repository_for(resource: ResourceDefinition):
    """Build a dependency yielding a repository for ``resource``."""

    async def _repository(
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(get_app_settings),
    ) -> SqlAlchemyRepository:
        return SqlAlchemyRepository(db, resource, settings)

    _repository.__name__ = f"{resource.name}_repository"
    return _repository
