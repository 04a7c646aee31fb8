"""Boundary Protocols — contracts between the generic controller and persistence.

Invariants:
    - Controllers depend on Repository, never on a concrete ORM
    - Repository failures are raised as core/errors.py types (or anything
      else, which is classified as unexpected)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO
"""

from typing import Any, Protocol


class Record(Protocol):
    """Structural contract for persisted records handed back by a Repository."""
    id: Any

    def to_dict(self) -> dict[str, Any]: ...


class Repository(Protocol):
    """Contract for resource persistence — implemented by infrastructure."""
    async def find_all(self) -> list[Record]: ...
    async def find_by_id(self, resource_id: Any) -> Record | None: ...
    async def find_one(self, **criteria: Any) -> Record | None: ...
    async def create(self, attributes: dict[str, Any]) -> Record: ...
    async def update(
        self, existing: Record, attributes: dict[str, Any],
    ) -> Record: ...
    async def destroy(self, existing: Record) -> None: ...
