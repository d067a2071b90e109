# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Function entry points: ``generic-crud`` and ``analyses-crud``.

A function receives ``{method, path, body}`` and always answers with an
envelope. ``path`` is ``/<collection>[/<id>]`` (a leading ``/api/v1`` is
ignored); ``body`` is a JSON string or a mapping.

    handler("generic-crud", {"method": "GET", "path": "/members/<id>"})

``handler`` owns a ``Database`` for the duration of one call and always
closes it. The HTTP routes call ``run`` with the application's database.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from skillmatrix.core.database import Database
from skillmatrix.core.errors import (
    SkillMatrixError,
    UnsupportedOperationError,
    ValidationFailed,
)
from skillmatrix.core.logging import get_logger
from skillmatrix.metrics.prometheus import FUNCTION_INVOCATIONS
from skillmatrix.models.entities import GENERIC_CRUD_ENTITIES, Entity
from skillmatrix.schemas.envelope import error_envelope, failure, paginated, success
from skillmatrix.services.entity_service import EntityService
from skillmatrix.services.registry import build_service

logger = get_logger(__name__)

GENERIC_CRUD = "generic-crud"
ANALYSES_CRUD = "analyses-crud"
ROUTING_PREFIXES = ("api", "v1", "functions")


@dataclass
class FunctionRequest:
    method: str
    path: str = "/"
    body: Any = None
    query: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, req: Mapping[str, Any]) -> "FunctionRequest":
        return cls(
            method=str(req.get("method") or "GET"),
            path=str(req.get("path") or "/"),
            body=req.get("body"),
            query=dict(req.get("query") or {}),
        )

    @property
    def segments(self) -> list[str]:
        parts = [s for s in self.path.split("/") if s]
        while parts and parts[0] in ROUTING_PREFIXES:
            parts.pop(0)
        return parts

    def payload(self) -> Any:
        if self.body is None or self.body == "" or self.body == b"":
            return {}
        body = self.body
        if isinstance(body, (bytes, bytearray, str)):
            try:
                if not isinstance(body, str):
                    body = body.decode("utf-8")
                return json.loads(body)
            except (UnicodeDecodeError, ValueError) as exc:
                raise ValidationFailed("Request body is not valid JSON") from exc
        return body

    def page_args(self) -> tuple[int, Optional[int]]:
        try:
            page = int(self.query.get("page") or 1)
            limit = int(self.query["limit"]) if self.query.get("limit") else None
        except (TypeError, ValueError) as exc:
            raise ValidationFailed("page and limit must be integers") from exc
        return page, limit


def dispatch(service: EntityService, request: FunctionRequest,
             document_id: Optional[str]) -> dict[str, Any]:
    """Map method + identifier presence onto one service operation."""
    method = request.method.upper()
    label = service.label
    if method == "GET" and document_id:
        return success(service.get(document_id))
    if method == "GET":
        page, limit = request.page_args()
        return paginated(service.list_all(page=page, limit=limit))
    if method == "POST" and not document_id:
        return success(service.create(request.payload()), message=f"{label} created")
    if method == "PUT" and document_id:
        updated = service.update(document_id, request.payload())
        return success(updated, message=f"{label} updated", modifiedCount=1)
    if method == "DELETE" and document_id:
        result = service.delete(document_id)
        return success(message=f"{label} deleted", **result)
    raise UnsupportedOperationError(
        f"Method {method} not supported or identifier missing"
    )


def generic_crud(database: Database, request: FunctionRequest) -> dict[str, Any]:
    segments = request.segments
    if segments and segments[0] == GENERIC_CRUD:
        segments = segments[1:]
    entity = Entity.parse(segments[0]) if segments else None
    if entity not in GENERIC_CRUD_ENTITIES:
        raise UnsupportedOperationError("Target collection is missing or not allowed")
    document_id = segments[1] if len(segments) > 1 else None
    logger.info("generic-crud %s on %s id=%s", request.method.upper(), entity.value,
                document_id or "N/A")
    return dispatch(build_service(entity, database), request, document_id)


def analyses_crud(database: Database, request: FunctionRequest) -> dict[str, Any]:
    segments = [s for s in request.segments if s not in (ANALYSES_CRUD, Entity.ANALYSES.value)]
    document_id = segments[0] if segments else None
    logger.info("analyses-crud %s id=%s", request.method.upper(), document_id or "N/A")
    return dispatch(build_service(Entity.ANALYSES, database), request, document_id)


FUNCTIONS: dict[str, Callable[[Database, FunctionRequest], dict[str, Any]]] = {
    GENERIC_CRUD: generic_crud,
    ANALYSES_CRUD: analyses_crud,
}


def run(name: str, database: Database, request: FunctionRequest) -> dict[str, Any]:
    """Invoke a function against an open database; never raises."""
    method = request.method.upper()
    try:
        body = FUNCTIONS[name](database, request)
        outcome = "success"
    except SkillMatrixError as exc:
        logger.info("%s rejected: %s", name, exc)
        body = error_envelope(exc)
        outcome = "rejected"
    except Exception as exc:
        logger.exception("%s failed: %s", name, exc)
        body = failure(f"Internal error in {name}", error=str(exc))
        outcome = "error"
    FUNCTION_INVOCATIONS.labels(function=name, method=method, outcome=outcome).inc()
    return body


def handler(name: str, req: Mapping[str, Any] | FunctionRequest,
            database_factory: Callable[[], Database] = Database.from_settings) -> dict[str, Any]:
    """Serverless-style entry point: opens a database, runs ``name``, closes it."""
    request = req if isinstance(req, FunctionRequest) else FunctionRequest.from_mapping(req)
    if name not in FUNCTIONS:
        return error_envelope(UnsupportedOperationError(f"Unknown function '{name}'"))
    database = None
    try:
        database = database_factory()
        return run(name, database, request)
    except SkillMatrixError as exc:
        logger.error("%s aborted: %s", name, exc)
        FUNCTION_INVOCATIONS.labels(function=name, method=request.method.upper(),
                                    outcome="rejected").inc()
        return error_envelope(exc)
    except Exception as exc:
        logger.exception("%s could not open the database: %s", name, exc)
        FUNCTION_INVOCATIONS.labels(function=name, method=request.method.upper(),
                                    outcome="error").inc()
        return failure(f"Internal error in {name}", error=str(exc))
    finally:
        if database is not None:
            database.close()
