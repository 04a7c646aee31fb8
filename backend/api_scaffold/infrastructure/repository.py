"""SQLAlchemy Repository — the persistence capability behind every RestController.

Invariants:
    - Attributes are validated against the resource's pydantic schema before
      every create and update (ValidationFailedError on failure)
    - before_save returns a new mapping; submitted attributes are never mutated
    - IntegrityError is rolled back and classified: unique violations become
      UniqueConstraintError, every other constraint violation ValidationFailedError
    - Only columns whose value changed are written on update
    - Any other SQLAlchemy failure is rolled back and raised as DatabaseError
    - Calls within one repository are awaited sequentially on one AsyncSession

Design Decisions:
    - ResourceDefinition bundles model + schema + hook: one value describes a
      resource to both the repository and the router builder
    - Offending field names are parsed from the driver message (SQLite and
      PostgreSQL formats): the ORM does not report them structurally
"""

import logging
import re
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api_scaffold.config import Settings
from api_scaffold.core.errors import (
    DatabaseError, UniqueConstraintError, ValidationFailedError, error_detail,
)
from api_scaffold.db.base import Base

logger = logging.getLogger(__name__)

BeforeSave = Callable[[dict[str, Any], dict[str, Any] | None, Settings], Awaitable[dict[str, Any]]]

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")
_SQLITE_NOT_NULL = re.compile(r"NOT NULL constraint failed: (?P<column>[\w.]+)")
_PG_KEY = re.compile(r"Key \((?P<columns>[^)]+)\)=\((?P<values>[^)]*)\)")
_PG_NOT_NULL = re.compile(r'null value in column "(?P<column>\w+)"')


@dataclass(frozen=True)
class ResourceDefinition:
    """Describes one persisted resource."""
    name: str
    model: type[Base]
    schema: type[BaseModel]
    before_save: BeforeSave | None = None
    secret_fields: frozenset[str] = field(default_factory=frozenset)


def _strip_table(column: str) -> str:
    return column.strip().rsplit(".", 1)[-1]


def classify_integrity_error(
    exc: IntegrityError, values: dict[str, Any],
) -> UniqueConstraintError | ValidationFailedError:
    """Translate a driver integrity error into a classified API error."""
    message = str(exc.orig)

    columns: list[str] = []
    match = _SQLITE_UNIQUE.search(message)
    if match:
        columns = [_strip_table(c) for c in match.group("columns").split(",")]
    elif "duplicate key" in message or "unique constraint" in message.lower():
        pg = _PG_KEY.search(message)
        if pg:
            columns = [c.strip() for c in pg.group("columns").split(",")]
    if columns or "unique" in message.lower():
        return UniqueConstraintError(details=[
            error_detail(f"{column} must be unique", "unique violation",
                         column, values.get(column))
            for column in columns
        ])

    match = _SQLITE_NOT_NULL.search(message) or _PG_NOT_NULL.search(message)
    if match:
        column = _strip_table(match.group("column"))
        return ValidationFailedError(details=[
            error_detail(f"{column} cannot be null", "notNull violation", column),
        ])
    return ValidationFailedError(details=[
        error_detail("constraint violated", "constraint violation"),
    ])


def _validation_details(
    exc: ValidationError, secret_fields: frozenset[str],
) -> list[dict[str, Any]]:
    details = []
    for e in exc.errors():
        path = ".".join(str(loc) for loc in e["loc"])
        value = e.get("input")
        if e["type"] == "missing" or path in secret_fields:
            value = None
        details.append(error_detail(e["msg"], e["type"], path, value))
    return details


class SqlAlchemyRepository:
    """Repository over one ORM model, bound to one request's AsyncSession."""

    def __init__(
        self, db: AsyncSession, resource: ResourceDefinition, settings: Settings,
    ):
        self.db = db
        self.resource = resource
        self.settings = settings

    @property
    def model(self) -> type[Base]:
        return self.resource.model

    @asynccontextmanager
    async def _database_errors(self, operation: str) -> AsyncIterator[None]:
        """Roll back and raise DatabaseError for driver/ORM failures."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                f"{self.resource.name}: {getattr(e, 'orig', None) or e}", operation,
            ) from e

    async def find_all(self) -> list[Base]:
        async with self._database_errors("find_all"):
            result = await self.db.execute(
                select(self.model).order_by(self.model.id),
            )
            return list(result.scalars().all())

    async def find_by_id(self, resource_id: Any) -> Base | None:
        async with self._database_errors("find_by_id"):
            return await self.db.get(self.model, resource_id)

    async def find_one(self, **criteria: Any) -> Base | None:
        async with self._database_errors("find_one"):
            result = await self.db.execute(
                select(self.model).filter_by(**criteria).limit(1),
            )
            return result.scalars().first()

    async def create(self, attributes: dict[str, Any]) -> Base:
        values = await self._prepare(attributes, previous=None)
        async with self._database_errors("create"):
            record = self.model(**values)
            self.db.add(record)
            await self._commit(values)
            await self.db.refresh(record)
            return record

    async def update(self, existing: Base, attributes: dict[str, Any]) -> Base:
        previous = existing.to_dict()
        values = await self._prepare(attributes, previous=previous)
        async with self._database_errors("update"):
            for key, value in values.items():
                if previous.get(key) != value:
                    setattr(existing, key, value)
            await self._commit(values)
            await self.db.refresh(existing)
            return existing

    async def destroy(self, existing: Base) -> None:
        async with self._database_errors("destroy"):
            await self.db.delete(existing)
            await self._commit({})

    async def _prepare(
        self, attributes: dict[str, Any], previous: dict[str, Any] | None,
    ) -> dict[str, Any]:
        try:
            validated = self.resource.schema.model_validate(attributes)
        except ValidationError as e:
            raise ValidationFailedError(
                details=_validation_details(e, self.resource.secret_fields),
            ) from e
        values = validated.model_dump()
        if self.resource.before_save is not None:
            values = await self.resource.before_save(values, previous, self.settings)
        return values

    async def _commit(self, values: dict[str, Any]) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(
                f"Integrity error on {self.resource.name}: {e.orig}",
                extra={"resource": self.resource.name},
            )
            raise classify_integrity_error(e, values) from e
