# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for members. Deleting a member only deactivates it."""
from typing import Any, Optional

from pymongo import ASCENDING

from skillmatrix.core.errors import NotFoundError
from skillmatrix.core.logging import get_logger
from skillmatrix.metrics.prometheus import DOCUMENTS_DELETED
from skillmatrix.models.entities import Entity
from skillmatrix.repositories.document_repository import contains_pattern, exact_name_pattern
from skillmatrix.schemas.common import split_labels
from skillmatrix.schemas.member import MemberCreate, MemberUpdate
from skillmatrix.services.entity_service import EntityService

logger = get_logger(__name__)

ACTIVE = {"isActive": {"$ne": False}}


class MemberService(EntityService):
    entity = Entity.MEMBERS
    create_schema = MemberCreate
    update_schema = MemberUpdate
    default_sort = [("name", ASCENDING)]
    default_query = ACTIVE

    def present(self, doc: dict[str, Any]) -> dict[str, Any]:
        data = super().present(doc)
        # Legacy documents may hold comma separated strings.
        for field in ("skills", "specialties"):
            if field in data:
                data[field] = split_labels(data[field])
        return data

    def list_members(self, search: Optional[str] = None,
                     organization: Optional[str] = None,
                     location: Optional[str] = None,
                     skill: Optional[str] = None,
                     specialty: Optional[str] = None,
                     page: int = 1, limit: Optional[int] = None):
        query: dict[str, Any] = dict(ACTIVE)
        if search and search.strip():
            pattern = contains_pattern(search)
            query["$or"] = [{"name": pattern}, {"email": pattern}, {"title": pattern}]
        if organization and organization.strip():
            query["organization"] = contains_pattern(organization)
        if location and location.strip():
            query["location"] = contains_pattern(location)
        if skill and skill.strip():
            query["skills"] = exact_name_pattern(skill)
        if specialty and specialty.strip():
            query["specialties"] = exact_name_pattern(specialty)
        return self.search(query, page=page, limit=limit)

    def delete(self, document_id: Any) -> dict[str, Any]:
        object_id = self.object_id(document_id)
        updated = self._repo.update(object_id, {"isActive": False})
        if updated is None:
            raise NotFoundError("Member not found")
        DOCUMENTS_DELETED.labels(entity=self.entity.value).inc()
        logger.info("Member deactivated id=%s", object_id)
        return {"deletedCount": 1, "deactivated": True}
