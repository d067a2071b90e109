# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Shared schema base, list normalisers and payload validation."""
import re
from typing import Any, ClassVar, Iterable, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from skillmatrix.core.errors import ValidationFailed
from skillmatrix.core.serialization import is_object_id

_SEPARATORS = re.compile(r"[,;]")


class DocumentModel(BaseModel):
    """Request body for a stored document: camelCase on the wire, unknown keys dropped.

    An update may set a field to null only when its wire name is listed in
    ``nullable_fields``.
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
        extra="ignore",
    )


def split_labels(value: Any) -> list[str]:
    """Accept a list or a comma / semicolon separated string; trim and drop empties."""
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = _SEPARATORS.split(value)
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        return []
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def normalise_choice(value: Optional[str], choices: tuple[str, ...], field: str,
                     lower: bool = True) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if lower:
        value = value.lower()
    if value not in choices:
        raise ValueError(f"{field} must be one of {choices}")
    return value


def format_errors(exc: ValidationError) -> list[str]:
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        message = err.get("msg", "invalid value")
        errors.append(f"{location}: {message}" if location else message)
    return errors


def validate_payload(schema: type[DocumentModel], payload: Any,
                     partial: bool = False) -> dict[str, Any]:
    """Validate ``payload`` against ``schema`` and return the storable document.

    ``partial`` keeps only the fields present in the payload (updates); an
    explicit null is kept for nullable fields and rejected for the others.
    Raises ValidationFailed before anything reaches the database.
    """
    if not isinstance(payload, dict):
        raise ValidationFailed("Request body must be a JSON object")
    try:
        model = schema.model_validate(payload)
    except ValidationError as exc:
        errors = format_errors(exc)
        raise ValidationFailed(f"Validation failed: {errors[0]}", errors) from exc
    document = model.model_dump(by_alias=True, exclude_unset=partial)
    if partial:
        errors = [f"{name}: may not be null" for name, value in document.items()
                  if value is None and name not in schema.nullable_fields]
        if errors:
            raise ValidationFailed(f"Validation failed: {errors[0]}", errors)
        if not document:
            raise ValidationFailed("No updatable fields in request body")
    return document


def check_object_ids(values: Optional[list[str]], field: str) -> Optional[list[str]]:
    """Reject malformed references; keep the first occurrence of each ID."""
    if values is None:
        return None
    seen: list[str] = []
    for value in values:
        if not is_object_id(value):
            raise ValueError(f"{field} contains an invalid ID: {value!r}")
        if value not in seen:
            seen.append(value)
    return seen
