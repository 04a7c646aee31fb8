"""Attribute Merge — field-level merge for partial updates.

Invariants:
    - Incoming values win over existing ones
    - Server-managed fields (id, timestamps) cannot be changed by a caller;
      echoing the current value back is allowed
    - Neither input mapping is mutated
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from api_scaffold.core.errors import ValidationFailedError, error_detail

SERVER_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def _comparable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def merge_attributes(
    existing: Mapping[str, Any],
    incoming: Mapping[str, Any],
    protected: frozenset[str] = SERVER_MANAGED_FIELDS,
) -> dict[str, Any]:
    """Return ``existing`` overlaid with ``incoming``.

    Raises ValidationFailedError if ``incoming`` tries to change a protected field.
    """
    violations = [
        error_detail(
            f"{name} is managed by the server and cannot be changed",
            "read only violation", name, incoming[name],
        )
        for name in sorted(protected & incoming.keys())
        if _comparable(incoming[name]) != _comparable(existing.get(name))
    ]
    if violations:
        raise ValidationFailedError(details=violations)
    return {**existing, **incoming}
