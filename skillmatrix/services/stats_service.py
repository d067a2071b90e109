# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Cross-collection reads: global statistics and the full matrix snapshot."""
from typing import Any, Optional

from skillmatrix.core.config import settings
from skillmatrix.core.database import Database
from skillmatrix.core.serialization import utcnow
from skillmatrix.models.entities import Entity
from skillmatrix.services.entity_service import page_window
from skillmatrix.services.registry import build_service

SNAPSHOT_ENTITIES = (
    Entity.MEMBERS,
    Entity.PROJECTS,
    Entity.GROUPS,
    Entity.SKILLS,
    Entity.SPECIALTIES,
    Entity.INTERACTIONS,
    Entity.ANALYSES,
)


class StatsService:
    def __init__(self, database: Database):
        self._database = database

    def global_stats(self) -> dict[str, Any]:
        members = build_service(Entity.MEMBERS, self._database).repository
        totals = {
            entity.value: build_service(entity, self._database).repository.count()
            for entity in SNAPSHOT_ENTITIES
        }
        totals["activeMembers"] = members.count({"isActive": {"$ne": False}})
        return {
            "totals": totals,
            "projects": build_service(Entity.PROJECTS, self._database).stats(),
            "skills": build_service(Entity.SKILLS, self._database).stats(),
            "specialties": build_service(Entity.SPECIALTIES, self._database).stats(),
            "interactions": build_service(Entity.INTERACTIONS, self._database).stats(),
            "generatedAt": utcnow(),
        }

    def all_data(self, page: Optional[int] = None,
                 limit: Optional[int] = None) -> dict[str, Any]:
        """Every collection at once; ``limit`` paginates each collection alike."""
        paginate = bool(limit)
        if paginate:
            page, limit, skip = page_window(page or 1, limit, settings.MAX_PAGE_LIMIT)
        else:
            skip = 0
        data: dict[str, Any] = {}
        totals: dict[str, int] = {}
        for entity in SNAPSHOT_ENTITIES:
            service = build_service(entity, self._database)
            docs = service.repository.find({}, sort=service.default_sort,
                                           skip=skip, limit=limit or 0)
            data[entity.value] = [service.present(d) for d in docs]
            totals[entity.value] = service.repository.count() if paginate else len(docs)
        result: dict[str, Any] = {"data": data, "totals": totals, "timestamp": utcnow()}
        if paginate:
            result["pagination"] = {"page": page, "limit": limit}
        return result
