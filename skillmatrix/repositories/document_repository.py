# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: generic document access on one MongoDB collection.
NO business rules here: pure CRUD. Every public method issues a single
storage operation.
"""
import re
from typing import Any, Iterable, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from skillmatrix.core.errors import DuplicateError
from skillmatrix.core.serialization import utcnow

Sort = list[tuple[str, int]]


def exact_name_pattern(name: str) -> dict[str, Any]:
    """Case-insensitive equality filter for a free-text name."""
    return {"$regex": f"^{re.escape(name.strip())}$", "$options": "i"}


def contains_pattern(text: str) -> dict[str, Any]:
    return {"$regex": re.escape(text.strip()), "$options": "i"}


class DocumentRepository:
    """Thin wrapper around a pymongo collection."""

    def __init__(self, collection: Collection, label: str = "Document"):
        self._collection = collection
        self.label = label

    @property
    def collection(self) -> Collection:
        return self._collection

    # ── Read ──

    def find(self, query: Optional[dict] = None, *, sort: Optional[Sort] = None,
             skip: int = 0, limit: int = 0,
             projection: Optional[dict] = None) -> list[dict[str, Any]]:
        cursor = self._collection.find(query or {}, projection)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def count(self, query: Optional[dict] = None) -> int:
        return self._collection.count_documents(query or {})

    def get(self, object_id: ObjectId,
            projection: Optional[dict] = None) -> Optional[dict[str, Any]]:
        return self._collection.find_one({"_id": object_id}, projection)

    def find_one(self, query: dict,
                 projection: Optional[dict] = None) -> Optional[dict[str, Any]]:
        return self._collection.find_one(query, projection)

    def find_by_ids(self, object_ids: Iterable[ObjectId],
                    projection: Optional[dict] = None) -> list[dict[str, Any]]:
        return list(self._collection.find({"_id": {"$in": list(object_ids)}}, projection))

    def aggregate(self, pipeline: list[dict]) -> list[dict[str, Any]]:
        return list(self._collection.aggregate(pipeline))

    # ── Write ──

    def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        now = utcnow()
        doc = {**document, "createdAt": now, "updatedAt": now}
        try:
            result = self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateError(f"{self.label} already exists") from exc
        doc["_id"] = result.inserted_id
        return doc

    def update(self, object_id: ObjectId,
               changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Apply ``$set`` and return the updated document, or None when nothing matched."""
        return self.modify(object_id, {"$set": changes})

    def modify(self, object_id: ObjectId,
               update_spec: dict[str, Any]) -> Optional[dict[str, Any]]:
        spec = {k: dict(v) for k, v in update_spec.items()}
        spec.setdefault("$set", {})["updatedAt"] = utcnow()
        try:
            return self._collection.find_one_and_update(
                {"_id": object_id}, spec, return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise DuplicateError(f"{self.label} already exists") from exc

    def delete(self, object_id: ObjectId) -> bool:
        return self._collection.delete_one({"_id": object_id}).deleted_count > 0

    def delete_many(self, query: dict) -> int:
        return self._collection.delete_many(query).deleted_count
