# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for projects and groups."""
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Optional

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from skillmatrix.core.config import settings
from skillmatrix.core.errors import InvalidIdError, SkillMatrixError, ValidationFailed
from skillmatrix.core.logging import get_logger
from skillmatrix.core.serialization import parse_object_id, serialize_document
from skillmatrix.metrics.prometheus import AUTO_GROUPS, DOCUMENTS_CREATED
from skillmatrix.models.entities import (
    AUTO_GROUP_CRITERIA,
    GROUP_PRIVACIES,
    GROUP_TYPES,
    PROJECT_STATUSES,
    Entity,
)
from skillmatrix.repositories.document_repository import DocumentRepository, contains_pattern
from skillmatrix.schemas.common import validate_payload
from skillmatrix.schemas.project import GroupCreate, GroupUpdate, ProjectCreate, ProjectUpdate
from skillmatrix.services.entity_service import EntityService, MemberListMixin, filter_choice
from skillmatrix.services.sync_service import CREATED, FAILED, SKIPPED

logger = get_logger(__name__)

MEMBER_SUMMARY = {
    "name": 1, "title": 1, "email": 1, "organization": 1, "photo": 1,
    "skills": 1, "specialties": 1,
}

NO_TITLE = "Sans titre"
NO_ORGANIZATION = "Sans organisation"


def organize_members(members: list[dict[str, Any]]) -> dict[str, dict[str, list]]:
    by_title: dict[str, list] = {}
    by_organization: dict[str, list] = {}
    for member in members:
        by_title.setdefault(member.get("title") or NO_TITLE, []).append(member)
        by_organization.setdefault(member.get("organization") or NO_ORGANIZATION,
                                   []).append(member)
    return {"byTitle": by_title, "byOrganization": by_organization}


@dataclass
class AutoGroupOutcome:
    name: str
    action: str
    member_count: int = 0
    group_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {"name": self.name, "action": self.action, "memberCount": self.member_count}
        if self.group_id:
            data["groupId"] = self.group_id
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class AutoGroupReport:
    """One outcome per distinct title or organization found among members."""
    criteria: str
    outcomes: list[AutoGroupOutcome] = field(default_factory=list)

    def count(self, action: str) -> int:
        return sum(1 for o in self.outcomes if o.action == action)

    @property
    def message(self) -> str:
        return (
            f"{self.count(CREATED)} groups created automatically, "
            f"{self.count(SKIPPED)} skipped, {self.count(FAILED)} failed"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "criteria": self.criteria,
            "groupsCreated": self.count(CREATED),
            "skipped": self.count(SKIPPED),
            "failed": self.count(FAILED),
            "errors": [f"{o.name}: {o.error}" for o in self.outcomes if o.action == FAILED],
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


class ProjectService(MemberListMixin, EntityService):
    entity = Entity.PROJECTS
    create_schema = ProjectCreate
    update_schema = ProjectUpdate

    def __init__(self, repo: DocumentRepository, member_repo: DocumentRepository,
                 workers: int = settings.PROJECT_LOOKUP_WORKERS):
        super().__init__(repo)
        self._members = member_repo
        self._workers = max(1, workers)

    def list_projects(self, status: Optional[str] = None, search: Optional[str] = None,
                      page: int = 1, limit: Optional[int] = None):
        query: dict[str, Any] = {}
        status = filter_choice(status, PROJECT_STATUSES, "status")
        if status:
            query["status"] = status
        if search and search.strip():
            pattern = contains_pattern(search)
            query["$or"] = [{"title": pattern}, {"description": pattern}, {"tags": pattern}]
        return self.search(query, page=page, limit=limit)

    def get_detail(self, document_id: Any) -> dict[str, Any]:
        """Project with its ``members`` IDs resolved to member summaries.

        Lookups run concurrently; an invalid, missing or failing lookup is
        dropped from the result instead of failing the request.
        """
        doc = self.require(self.object_id(document_id))
        data = self.present(doc)
        member_ids = [str(m) for m in doc.get("members") or []]
        data["memberIds"] = member_ids
        data["members"] = self._resolve_members(member_ids)
        return data

    def _lookup_member(self, member_id: str) -> Optional[dict[str, Any]]:
        try:
            return self._members.get(parse_object_id(member_id, "member"), MEMBER_SUMMARY)
        except (InvalidIdError, PyMongoError) as exc:
            logger.warning("Project member lookup failed id=%s: %s", member_id, exc)
            return None

    def _resolve_members(self, member_ids: list[str]) -> list[dict[str, Any]]:
        if not member_ids:
            return []
        workers = min(self._workers, len(member_ids))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(self._lookup_member, member_ids))
        return [serialize_document(r) for r in results if r is not None]

    def stats(self) -> dict[str, Any]:
        by_status = {status: self._repo.count({"status": status}) for status in PROJECT_STATUSES}
        return {"total": self._repo.count(), "byStatus": by_status}


class GroupService(MemberListMixin, EntityService):
    entity = Entity.GROUPS
    create_schema = GroupCreate
    update_schema = GroupUpdate

    def __init__(self, repo: DocumentRepository, member_repo: DocumentRepository):
        super().__init__(repo)
        self._members = member_repo

    def present(self, doc: dict[str, Any]) -> dict[str, Any]:
        data = super().present(doc)
        data["memberCount"] = len(data.get("members") or [])
        return data

    def list_groups(self, type: Optional[str] = None, privacy: Optional[str] = None,
                    search: Optional[str] = None, page: int = 1,
                    limit: Optional[int] = None):
        query: dict[str, Any] = {}
        group_type = filter_choice(type, GROUP_TYPES, "type")
        if group_type:
            query["type"] = group_type
        privacy = filter_choice(privacy, GROUP_PRIVACIES, "privacy")
        if privacy:
            query["privacy"] = privacy
        if search and search.strip():
            pattern = contains_pattern(search)
            query["$or"] = [{"name": pattern}, {"description": pattern}, {"tags": pattern}]
        return self.search(query, page=page, limit=limit)

    def prepare_update(self, object_id, changes: dict[str, Any]) -> dict[str, Any]:
        if "leader" not in changes and "members" not in changes:
            return changes
        current = self.require(object_id)
        members = changes.get("members", [str(m) for m in current.get("members") or []])
        leader = changes.get("leader", current.get("leader"))
        if leader and str(leader) not in members:
            if "leader" in changes:
                raise ValidationFailed("leader must be one of the group members")
            # The leader was dropped from the member list.
            changes["leader"] = None
        return changes

    def members_overview(self, document_id: Any) -> dict[str, Any]:
        """Group members resolved to summaries, organised by title and organization."""
        group = self.require(self.object_id(document_id))
        object_ids = []
        for member_id in group.get("members") or []:
            try:
                object_ids.append(parse_object_id(member_id, "member"))
            except InvalidIdError:
                logger.warning("Group %s references an invalid member id=%s",
                               group["_id"], member_id)
        found = self._members.find_by_ids(object_ids, MEMBER_SUMMARY) if object_ids else []
        members = [serialize_document(m) for m in found]
        return {
            "members": members,
            "organizedMembers": organize_members(members),
            "totalMembers": len(members),
            "groupInfo": {
                "name": group.get("name"),
                "type": group.get("type"),
                "privacy": group.get("privacy"),
            },
        }

    def auto_create(self, criteria: Optional[str], type: str = "technique",
                    privacy: str = "public") -> AutoGroupReport:
        """Create one group per distinct non-blank member title or organization.

        Each insert is attempted on its own; a failure is recorded in the
        report and the run continues. A group already created by an earlier
        run with the same criteria and name is skipped.
        """
        if criteria not in AUTO_GROUP_CRITERIA:
            raise ValidationFailed(f"criteria must be one of {tuple(AUTO_GROUP_CRITERIA)}")
        type = filter_choice(type, GROUP_TYPES, "type") or "technique"
        privacy = filter_choice(privacy, GROUP_PRIVACIES, "privacy") or "public"
        member_field = AUTO_GROUP_CRITERIA[criteria]
        members = self._members.find(
            {"isActive": {"$ne": False}}, projection={"name": 1, member_field: 1},
            sort=[("name", ASCENDING)],
        )
        if not members:
            raise ValidationFailed("No members available for automatic group creation")

        buckets: dict[str, list[str]] = {}
        for member in members:
            value = member.get(member_field)
            if isinstance(value, str) and value.strip():
                buckets.setdefault(value.strip(), []).append(str(member["_id"]))

        report = AutoGroupReport(criteria=criteria)
        for value in sorted(buckets):
            report.outcomes.append(
                self._create_auto_group(criteria, value, buckets[value], type, privacy)
            )
        for outcome in report.outcomes:
            AUTO_GROUPS.labels(criteria=criteria, action=outcome.action).inc()
        logger.info("Auto-create %s finished: %s", criteria, report.message)
        return report

    def _create_auto_group(self, criteria: str, value: str, member_ids: list[str],
                           type: str, privacy: str) -> AutoGroupOutcome:
        name = f"Groupe {value}"
        try:
            if self._repo.find_one({"name": name, "creationType": criteria}, {"_id": 1}):
                return AutoGroupOutcome(name, SKIPPED, len(member_ids))
            by_title = criteria == "byTitle"
            document = validate_payload(GroupCreate, {
                "name": name,
                "description": (f"Membres avec le titre: {value}" if by_title
                                else f"Membres de l'organisation: {value}"),
                "type": type if by_title else "sectoriel",
                "privacy": privacy,
                "tags": [re.sub(r"\s+", "_", value.lower()), "auto-créé",
                         "par-titre" if by_title else "par-organisation"],
                "members": member_ids,
                "autoCreated": True,
                "creationType": criteria,
            })
            created = self._repo.insert(document)
        except (SkillMatrixError, PyMongoError) as exc:
            logger.error("Auto group '%s' failed: %s", name, exc)
            return AutoGroupOutcome(name, FAILED, len(member_ids), error=str(exc))
        DOCUMENTS_CREATED.labels(entity=self.entity.value).inc()
        return AutoGroupOutcome(name, CREATED, len(member_ids), group_id=str(created["_id"]))
