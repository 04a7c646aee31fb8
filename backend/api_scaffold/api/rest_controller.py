"""RestController — standard REST endpoints for any resource behind a Repository.

Invariants:
    - Every operation builds its own RestRequest and calls respond() exactly once
    - No failure escapes an operation: all are classified by RestRequest
    - Operations carry no state between calls
    - Persistence calls within one operation are awaited sequentially

Design Decisions:
    - The repository is passed per call: one controller per model, one
      repository per request (bound to that request's session)
    - build_crud_router is the only place that knows about FastAPI routing
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Request, status
from fastapi.responses import Response

from api_scaffold.api.dependencies import repository_for
from api_scaffold.api.rest_request import RestControllerOptions, RestRequest
from api_scaffold.core.errors import ResourceNotFoundError
from api_scaffold.core.merge import merge_attributes
from api_scaffold.core.repository_protocols import Record, Repository
from api_scaffold.infrastructure.repository import ResourceDefinition

# Integer primary keys are signed 64-bit on every supported backend
MAX_RESOURCE_ID = 2**63 - 1


class RestController:
    """The five CRUD operations over one resource."""

    def __init__(
        self,
        options: RestControllerOptions | None = None,
        resource_name: str = "Resource",
    ):
        self.options = options or RestControllerOptions()
        self.resource_name = resource_name

    def _rest_request(self, request: Request | None) -> RestRequest:
        return RestRequest(request, self.options)

    async def _find_or_404(self, repository: Repository, resource_id: Any) -> Record:
        resource = await repository.find_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundError(self.resource_name, resource_id)
        return resource

    async def get_all(
        self, repository: Repository, request: Request | None = None,
    ) -> Response:
        """Respond 200 with every resource."""
        rest = self._rest_request(request)
        try:
            rest.with_data(await repository.find_all())
        except Exception as e:
            rest.with_error(e)
        return rest.respond()

    async def get_one(
        self, repository: Repository, resource_id: Any,
        request: Request | None = None,
    ) -> Response:
        """Respond 200 with the resource, or 404 if it does not exist."""
        rest = self._rest_request(request)
        try:
            rest.with_data(await self._find_or_404(repository, resource_id))
        except Exception as e:
            rest.with_error(e)
        return rest.respond()

    async def create(
        self, repository: Repository, attributes: dict[str, Any],
        request: Request | None = None,
    ) -> Response:
        """Respond 201 with the newly-created resource."""
        rest = self._rest_request(request)
        try:
            resource = await repository.create(attributes)
            rest.with_status(status.HTTP_201_CREATED).with_data(resource)
        except Exception as e:
            rest.with_error(e)
        return rest.respond()

    async def update(
        self, repository: Repository, resource_id: Any,
        attributes: dict[str, Any], request: Request | None = None,
    ) -> Response:
        """Merge the supplied attributes into the resource and respond 200.

        Supplied attributes win over existing ones; server-managed fields
        cannot be changed.
        """
        rest = self._rest_request(request)
        try:
            resource = await self._find_or_404(repository, resource_id)
            merged = merge_attributes(resource.to_dict(), attributes)
            rest.with_data(await repository.update(resource, merged))
        except Exception as e:
            rest.with_error(e)
        return rest.respond()

    async def destroy(
        self, repository: Repository, resource_id: Any,
        request: Request | None = None,
    ) -> Response:
        """Delete the resource and respond 204 with an empty body."""
        rest = self._rest_request(request)
        try:
            resource = await self._find_or_404(repository, resource_id)
            await repository.destroy(resource)
            rest.with_status(status.HTTP_204_NO_CONTENT)
        except Exception as e:
            rest.with_error(e)
        return rest.respond()


def build_crud_router(
    resource: ResourceDefinition, controller: RestController,
) -> APIRouter:
    """Mount the controller's five operations on a new router."""
    router = APIRouter(tags=[resource.name])
    get_repository = repository_for(resource)

    @router.get("")
    async def get_all(
        request: Request, repository: Repository = Depends(get_repository),
    ) -> Response:
        return await controller.get_all(repository, request)

    @router.get("/{resource_id}")
    async def get_one(
        request: Request,
        resource_id: int = Path(ge=1, le=MAX_RESOURCE_ID),
        repository: Repository = Depends(get_repository),
    ) -> Response:
        return await controller.get_one(repository, resource_id, request)

    @router.post("")
    async def create(
        request: Request,
        attributes: dict[str, Any] = Body(...),
        repository: Repository = Depends(get_repository),
    ) -> Response:
        return await controller.create(repository, attributes, request)

    @router.put("/{resource_id}")
    async def update(
        request: Request,
        resource_id: int = Path(ge=1, le=MAX_RESOURCE_ID),
        attributes: dict[str, Any] = Body(...),
        repository: Repository = Depends(get_repository),
    ) -> Response:
        return await controller.update(repository, resource_id, attributes, request)

    @router.delete("/{resource_id}")
    async def destroy(
        request: Request,
        resource_id: int = Path(ge=1, le=MAX_RESOURCE_ID),
        repository: Repository = Depends(get_repository),
    ) -> Response:
        return await controller.destroy(repository, resource_id, request)

    return router
