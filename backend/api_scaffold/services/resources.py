"""Resource Definitions — the models exposed over REST and their save hooks.

Invariants:
    - A user's password is hashed before every create and before every
      update that changes it; an unchanged hash is never re-hashed
"""

from typing import Any

from api_scaffold.config import Settings
from api_scaffold.infrastructure.repository import ResourceDefinition
from api_scaffold.infrastructure.security import hash_password
from api_scaffold.models.category import Category
from api_scaffold.models.user import User
from api_scaffold.schemas.category import CategoryAttributes
from api_scaffold.schemas.user import UserAttributes


async def hash_password_before_save(
    values: dict[str, Any], previous: dict[str, Any] | None, settings: Settings,
) -> dict[str, Any]:
    """Replace a new or changed plaintext password with its bcrypt hash."""
    if previous is not None and values.get("password") == previous.get("password"):
        return dict(values)
    hashed = await hash_password(values["password"], settings.bcrypt_rounds)
    return {**values, "password": hashed}


USER_RESOURCE = ResourceDefinition(
    name="user",
    model=User,
    schema=UserAttributes,
    before_save=hash_password_before_save,
    secret_fields=frozenset({"password"}),
)

CATEGORY_RESOURCE = ResourceDefinition(
    name="category",
    model=Category,
    schema=CategoryAttributes,
)
