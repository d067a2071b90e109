# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""BSON → JSON helpers and ObjectId parsing."""
from datetime import date, datetime, timezone
from typing import Any, Iterable

from bson import ObjectId

from skillmatrix.core.errors import InvalidIdError


def to_serializable(value: Any) -> Any:
    """Recursively convert ObjectId / datetime values into JSON-safe strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_serializable(v) for v in value]
    return value


def serialize_document(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    if doc is None:
        return None
    return to_serializable(doc)


def serialize_many(docs: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    return [to_serializable(d) for d in docs]


def is_object_id(value: Any) -> bool:
    return isinstance(value, ObjectId) or (isinstance(value, str) and ObjectId.is_valid(value))


def parse_object_id(value: Any, label: str = "document") -> ObjectId:
    """Return ``value`` as an ObjectId or raise InvalidIdError before any lookup."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value.strip()):
        return ObjectId(value.strip())
    raise InvalidIdError(f"Invalid {label} ID")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
