"""User Routes — CRUD over users; password hashes are never returned."""

from api_scaffold.api.rest_controller import RestController, build_crud_router
from api_scaffold.api.rest_request import RestControllerOptions
from api_scaffold.core.redaction import remove_fields
from api_scaffold.services.resources import USER_RESOURCE

controller = RestController(
    # Remove password fields from responses.
    RestControllerOptions(
        response_data_filter=lambda data: remove_fields(data, ["password"]),
    ),
    resource_name="User",
)

router = build_crud_router(USER_RESOURCE, controller)
