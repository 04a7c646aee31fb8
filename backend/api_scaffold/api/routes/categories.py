"""Category Routes — CRUD over categories."""

from api_scaffold.api.rest_controller import RestController, build_crud_router
from api_scaffold.services.resources import CATEGORY_RESOURCE

controller = RestController(resource_name="Category")

router = build_crud_router(CATEGORY_RESOURCE, controller)
