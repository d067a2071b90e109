# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Uniform response envelope: ``{success, data?, message?, error?, total?, pagination?}``."""
from typing import Any, Optional

from skillmatrix.core.errors import SkillMatrixError
from skillmatrix.core.serialization import to_serializable
from skillmatrix.metrics.prometheus import ENVELOPE_FAILURES


def success(data: Any = None, message: Optional[str] = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = to_serializable(data)
    if message:
        body["message"] = message
    body.update({k: to_serializable(v) for k, v in extra.items() if v is not None})
    return body


def failure(message: str, error: Optional[str] = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if error:
        body["error"] = error
    body.update({k: to_serializable(v) for k, v in extra.items() if v is not None})
    return body


def pagination(page: int, limit: int, total: int) -> dict[str, Any]:
    pages = (total + limit - 1) // limit if limit else 1
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": pages,
        "hasNext": page < pages,
        "hasPrev": page > 1,
    }


def error_envelope(exc: SkillMatrixError) -> dict[str, Any]:
    """``success: false`` body for an expected failure; counted by error kind."""
    ENVELOPE_FAILURES.labels(kind=type(exc).__name__).inc()
    return failure(exc.message, errors=getattr(exc, "errors", None) or None)


def paginated(result: tuple[int, int, int, list[Any]], **extra: Any) -> dict[str, Any]:
    """Envelope for a ``(total, page, limit, items)`` listing."""
    total, page, limit, items = result
    return success(items, total=total, pagination=pagination(page, limit, total), **extra)
