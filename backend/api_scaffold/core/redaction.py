"""Field Redaction — strips named fields (secrets) from response payloads.

Invariants:
    - Input records are never mutated; a new mapping is always returned
    - Missing fields are ignored silently
    - Key order of each record and element order of sequences are preserved

Design Decisions:
    - canonicalize() runs before redaction: ORM records (to_dict) and pydantic
      models (model_dump) are reduced to plain dicts first
"""

from collections.abc import Iterable, Mapping
from typing import Any


def canonicalize(data: Any) -> Any:
    """Reduce a record, or a sequence of records, to plain data."""
    if isinstance(data, (list, tuple)):
        return [canonicalize(item) for item in data]
    if isinstance(data, Mapping):
        return dict(data)
    to_dict = getattr(data, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    model_dump = getattr(data, "model_dump", None)
    if callable(model_dump):
        return model_dump()
    return data


def _remove_from_record(record: Any, fields: frozenset[str]) -> Any:
    if not isinstance(record, Mapping):
        return record
    return {key: value for key, value in record.items() if key not in fields}


def remove_fields(data: Any, fields: Iterable[str]) -> Any:
    """Remove ``fields`` from a record or from every record in a sequence."""
    to_remove = frozenset(fields)
    if isinstance(data, (list, tuple)):
        return [
            _remove_from_record(canonicalize(item), to_remove) for item in data
        ]
    return _remove_from_record(canonicalize(data), to_remove)
