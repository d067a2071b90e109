# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared CRUD behaviour for every entity service.

Subclasses set ``entity`` and the create / update schemas, and override the
``prepare_*`` / ``present`` hooks for entity-specific rules. Every public
operation validates identifiers and payloads before touching storage.
"""
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING

from skillmatrix.core.config import settings
from skillmatrix.core.errors import DuplicateError, NotFoundError, ValidationFailed
from skillmatrix.core.logging import get_logger
from skillmatrix.core.serialization import parse_object_id, serialize_document
from skillmatrix.metrics.prometheus import (
    DOCUMENTS_CREATED,
    DOCUMENTS_DELETED,
    DOCUMENTS_UPDATED,
)
from skillmatrix.models.entities import Entity
from skillmatrix.repositories.document_repository import DocumentRepository, Sort
from skillmatrix.schemas.common import DocumentModel, normalise_choice, validate_payload

logger = get_logger(__name__)

IMMUTABLE_FIELDS = ("_id", "createdAt", "updatedAt")


def page_window(page: int, limit: int, max_limit: int) -> tuple[int, int, int]:
    """Clamp ``page`` / ``limit`` and return ``(page, limit, skip)``."""
    page = max(1, int(page or 1))
    limit = max(1, min(int(limit or max_limit), max_limit))
    return page, limit, (page - 1) * limit


def parse_sort(sort: Optional[str], allowed: tuple[str, ...]) -> Sort:
    """``"-memberCount"`` → ``[("memberCount", -1)]``; unknown fields are rejected."""
    if not sort:
        return []
    field = sort.lstrip("-")
    if field not in allowed:
        raise ValidationFailed(f"sort must be one of {allowed} (prefix with '-' for descending)")
    return [(field, DESCENDING if sort.startswith("-") else ASCENDING)]


def filter_choice(value: Optional[str], choices: tuple[str, ...], field: str) -> Optional[str]:
    """Normalise an optional enum query filter; blank means no filter."""
    if not value or not value.strip():
        return None
    try:
        return normalise_choice(value, choices, field)
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from exc


class EntityService:
    entity: Entity = Entity.MEMBERS
    create_schema: type[DocumentModel] = DocumentModel
    update_schema: type[DocumentModel] = DocumentModel
    default_sort: Sort = [("createdAt", DESCENDING)]
    default_query: dict[str, Any] = {}

    def __init__(self, repo: DocumentRepository):
        self._repo = repo

    @property
    def label(self) -> str:
        return self.entity.label

    @property
    def repository(self) -> DocumentRepository:
        return self._repo

    # ── hooks ──

    def prepare_create(self, document: dict[str, Any]) -> dict[str, Any]:
        return document

    def prepare_update(self, object_id, changes: dict[str, Any]) -> dict[str, Any]:
        return changes

    def present(self, doc: dict[str, Any]) -> dict[str, Any]:
        return serialize_document(doc)

    # ── CRUD ──

    def object_id(self, document_id: Any):
        return parse_object_id(document_id, self.label.lower())

    def require(self, object_id) -> dict[str, Any]:
        doc = self._repo.get(object_id)
        if doc is None:
            raise NotFoundError(f"{self.label} not found")
        return doc

    def search(self, query: Optional[dict] = None, *, page: int = 1,
               limit: Optional[int] = None, sort: Optional[Sort] = None,
               max_limit: Optional[int] = None) -> tuple[int, int, int, list[dict[str, Any]]]:
        """Paginated listing: returns ``(total, page, limit, items)``."""
        max_limit = max_limit or settings.MAX_PAGE_LIMIT
        page, limit, skip = page_window(page, limit or settings.DEFAULT_PAGE_LIMIT, max_limit)
        total = self._repo.count(query)
        docs = self._repo.find(query, sort=sort or self.default_sort, skip=skip, limit=limit)
        return total, page, limit, [self.present(d) for d in docs]

    def list_all(self, page: int = 1, limit: Optional[int] = None):
        return self.search(dict(self.default_query), page=page, limit=limit)

    def get(self, document_id: Any) -> dict[str, Any]:
        return self.present(self.require(self.object_id(document_id)))

    def create(self, payload: Any) -> dict[str, Any]:
        document = validate_payload(self.create_schema, payload)
        document = self.prepare_create(document)
        created = self._repo.insert(document)
        DOCUMENTS_CREATED.labels(entity=self.entity.value).inc()
        logger.info("%s created id=%s", self.label, created["_id"])
        return self.present(created)

    def update(self, document_id: Any, payload: Any) -> dict[str, Any]:
        object_id = self.object_id(document_id)
        if isinstance(payload, dict):
            payload = {k: v for k, v in payload.items() if k not in IMMUTABLE_FIELDS}
        changes = validate_payload(self.update_schema, payload, partial=True)
        changes = self.prepare_update(object_id, changes)
        updated = self._repo.update(object_id, changes)
        if updated is None:
            raise NotFoundError(f"{self.label} not found")
        DOCUMENTS_UPDATED.labels(entity=self.entity.value).inc()
        logger.info("%s updated id=%s fields=%s", self.label, object_id, sorted(changes))
        return self.present(updated)

    def delete(self, document_id: Any) -> dict[str, Any]:
        """Hard delete. Returns ``{"deletedCount": 1}``."""
        object_id = self.object_id(document_id)
        if not self._repo.delete(object_id):
            raise NotFoundError(f"{self.label} not found")
        DOCUMENTS_DELETED.labels(entity=self.entity.value).inc()
        logger.info("%s deleted id=%s", self.label, object_id)
        return {"deletedCount": 1}


class MemberListMixin:
    """Add / remove a member ID on a document's ``members`` list."""

    _members: DocumentRepository

    def add_member(self, document_id: Any, member_id: str) -> dict[str, Any]:
        object_id = self.object_id(document_id)
        member_oid = parse_object_id(member_id, "member")
        doc = self.require(object_id)
        if self._members.get(member_oid, {"_id": 1}) is None:
            raise NotFoundError("Member not found")
        if str(member_oid) in [str(m) for m in doc.get("members") or []]:
            raise DuplicateError(f"Member already belongs to this {self.label.lower()}")
        updated = self._repo.modify(object_id, {"$push": {"members": str(member_oid)}})
        if updated is None:
            raise NotFoundError(f"{self.label} not found")
        logger.info("Member %s added to %s %s", member_oid, self.label.lower(), object_id)
        return self.present(updated)

    def remove_member(self, document_id: Any, member_id: str) -> dict[str, Any]:
        object_id = self.object_id(document_id)
        member_oid = parse_object_id(member_id, "member")
        doc = self.require(object_id)
        if str(member_oid) not in [str(m) for m in doc.get("members") or []]:
            raise NotFoundError(f"Member is not part of this {self.label.lower()}")
        update_spec: dict[str, Any] = {"$pull": {"members": str(member_oid)}}
        if str(doc.get("leader") or "") == str(member_oid):
            update_spec["$set"] = {"leader": None}
        updated = self._repo.modify(object_id, update_spec)
        if updated is None:
            raise NotFoundError(f"{self.label} not found")
        logger.info("Member %s removed from %s %s", member_oid, self.label.lower(), object_id)
        return self.present(updated)
