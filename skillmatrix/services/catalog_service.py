# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic shared by the skill and specialty catalogs."""
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING

from skillmatrix.core.config import settings
from skillmatrix.core.errors import DuplicateError, ValidationFailed
from skillmatrix.core.logging import get_logger
from skillmatrix.core.serialization import serialize_many
from skillmatrix.models.entities import (
    CATALOG_CATEGORIES,
    CATALOG_ENTITIES,
    CATALOG_MEMBER_FIELD,
    Entity,
)
from skillmatrix.repositories.document_repository import (
    DocumentRepository,
    contains_pattern,
    exact_name_pattern,
)
from skillmatrix.schemas.catalog import CatalogEntryCreate, CatalogEntryUpdate
from skillmatrix.services.classification import classify, describe, is_valid_category
from skillmatrix.services.entity_service import EntityService, filter_choice, parse_sort
from skillmatrix.services.sync_service import CatalogSynchronizer, SyncReport

logger = get_logger(__name__)

SORT_FIELDS = ("name", "memberCount", "popularity", "createdAt")
DEFAULT_SORT = "-memberCount"
TOP_SIZE = 5
REFERENCING_MEMBERS = 10


class CatalogService(EntityService):
    """One instance per catalog: ``CatalogService(Entity.SKILLS, ...)``."""

    create_schema = CatalogEntryCreate
    update_schema = CatalogEntryUpdate

    def __init__(self, kind: Entity, repo: DocumentRepository, member_repo: DocumentRepository):
        if kind not in CATALOG_ENTITIES:
            raise ValueError(f"{kind} is not a catalog")
        super().__init__(repo)
        self.entity = kind
        self.member_field = CATALOG_MEMBER_FIELD[kind]
        self.categories = CATALOG_CATEGORIES[kind]
        self._members = member_repo

    def list_entries(self, category: Optional[str] = None, search: Optional[str] = None,
                     sort: Optional[str] = DEFAULT_SORT, limit: Optional[int] = None):
        query: dict[str, Any] = {}
        category = filter_choice(category, self.categories, "category")
        if category:
            query["category"] = category
        if search and search.strip():
            pattern = contains_pattern(search)
            query["$or"] = [{"name": pattern}, {"description": pattern}]
        order = parse_sort(sort or DEFAULT_SORT, SORT_FIELDS)
        if order[0][0] != "name":
            order.append(("name", ASCENDING))
        return self.search(
            query, limit=limit or settings.DEFAULT_CATALOG_LIMIT, sort=order,
            max_limit=settings.MAX_CATALOG_LIMIT,
        )

    def get_detail(self, document_id: Any) -> dict[str, Any]:
        """Entry plus up to ten active members listing it."""
        doc = self.require(self.object_id(document_id))
        data = self.present(doc)
        members = self._members.find(
            {self.member_field: exact_name_pattern(doc.get("name", "")),
             "isActive": {"$ne": False}},
            projection={"name": 1, "title": 1, "organization": 1, "photo": 1},
            sort=[("name", ASCENDING)],
            limit=REFERENCING_MEMBERS,
        )
        data["members"] = serialize_many(members)
        return data

    # ── hooks ──

    def _check_category(self, category: Optional[str]) -> None:
        if category is not None and not is_valid_category(category, self.entity):
            raise ValidationFailed(f"category must be one of {self.categories}")

    def _check_unique_name(self, name: str, exclude_id=None) -> None:
        query: dict[str, Any] = {"name": exact_name_pattern(name)}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        if self._repo.find_one(query, {"_id": 1}) is not None:
            raise DuplicateError(f"{self.label} '{name}' already exists")

    def prepare_create(self, document: dict[str, Any]) -> dict[str, Any]:
        self._check_category(document.get("category"))
        self._check_unique_name(document["name"])
        category = document.get("category") or classify(document["name"], self.entity)
        return {
            **document,
            "category": category,
            "description": document.get("description") or describe(
                document["name"], category, self.entity),
            "memberCount": 0,
            "popularity": 0.0,
        }

    def prepare_update(self, object_id, changes: dict[str, Any]) -> dict[str, Any]:
        self._check_category(changes.get("category"))
        if "name" in changes:
            self._check_unique_name(changes["name"], exclude_id=object_id)
        return changes

    # ── statistics / sync ──

    def stats(self) -> dict[str, Any]:
        top = self._repo.find(
            {}, sort=[("memberCount", DESCENDING), ("name", ASCENDING)], limit=TOP_SIZE,
            projection={"name": 1, "category": 1, "memberCount": 1, "popularity": 1},
        )
        by_category = {c: self._repo.count({"category": c}) for c in self.categories}
        popularity = [float(t.get("popularity") or 0) for t in top]
        return {
            "total": self._repo.count(),
            "active": self._repo.count({"isActive": {"$ne": False}}),
            "top": serialize_many(top),
            "byCategory": {c: n for c, n in by_category.items() if n},
            "averageTopPopularity": round(sum(popularity) / len(popularity), 2) if popularity else 0.0,
        }

    def synchronizer(self) -> CatalogSynchronizer:
        return CatalogSynchronizer(self.entity, self._repo, self._members)

    def sync(self) -> SyncReport:
        return self.synchronizer().sync()

    def sync_defaults(self) -> SyncReport:
        return self.synchronizer().sync_defaults()
