# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Catalog synchronisation: recompute skill / specialty member counts and
popularity from the member collection.

Best-effort by construction: each catalog write is attempted on its own and a
failure is recorded as an outcome of the report instead of aborting the run.
Two syncs of the same catalog must not run concurrently.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from pymongo.errors import PyMongoError

from skillmatrix.core.errors import DuplicateError
from skillmatrix.core.logging import get_logger
from skillmatrix.metrics.prometheus import SYNC_DURATION, SYNC_ITEMS, SYNC_RUNS
from skillmatrix.models.entities import CATALOG_MEMBER_FIELD, Entity
from skillmatrix.repositories.document_repository import (
    DocumentRepository,
    exact_name_pattern,
)
from skillmatrix.schemas.common import split_labels
from skillmatrix.services.classification import (
    classify,
    describe,
    format_name,
    is_valid_category,
    normalize_key,
)

logger = get_logger(__name__)

MIN_NAME_LENGTH = 2

CREATED = "created"
UPDATED = "updated"
DEACTIVATED = "deactivated"
SKIPPED = "skipped"
FAILED = "failed"

DEFAULT_ENTRIES: dict[Entity, list[dict[str, str]]] = {
    Entity.SKILLS: [
        {"name": "JavaScript", "category": "langage", "description": "Langage de programmation web"},
        {"name": "React", "category": "technique", "description": "Bibliothèque frontend JavaScript"},
        {"name": "Node.js", "category": "technique", "description": "Runtime JavaScript serveur"},
        {"name": "Python", "category": "langage", "description": "Langage de programmation polyvalent"},
        {"name": "MongoDB", "category": "technique", "description": "Base de données NoSQL"},
        {"name": "UI/UX Design", "category": "design", "description": "Conception d'interfaces et d'expériences utilisateur"},
        {"name": "Gestion de projet", "category": "management", "description": "Planification et gestion de projets"},
        {"name": "Communication", "category": "soft", "description": "Compétences en communication interpersonnelle"},
        {"name": "Leadership", "category": "soft", "description": "Compétences en leadership et management d'équipe"},
        {"name": "Résolution de problèmes", "category": "soft", "description": "Analyse et résolution de problèmes complexes"},
    ],
    Entity.SPECIALTIES: [
        {"name": "Génie logiciel", "category": "technique", "description": "Conception et développement de logiciels"},
        {"name": "Cybersécurité", "category": "technique", "description": "Protection des systèmes d'information"},
        {"name": "Gestion de projet", "category": "management", "description": "Pilotage de projets et d'équipes"},
        {"name": "Maintenance industrielle", "category": "industrie", "description": "Maintenance des équipements de production"},
        {"name": "Recherche et développement", "category": "recherche", "description": "Innovation et travaux de recherche appliquée"},
        {"name": "Développement durable", "category": "environnement", "description": "Démarches RSE et transition écologique"},
        {"name": "Énergies renouvelables", "category": "energie", "description": "Solaire, éolien et stockage d'énergie"},
    ],
}


def compute_popularity(member_count: int, total_members: int) -> float:
    """Percentage of active members referencing an entry, clamped to [0, 100]."""
    if total_members <= 0 or member_count <= 0:
        return 0.0
    return round(min(100.0, max(0.0, member_count / total_members * 100)), 2)


@dataclass
class Tally:
    name: str
    member_count: int = 0


def count_references(members: Iterable[dict[str, Any]], member_field: str) -> dict[str, Tally]:
    """Count, per normalized name, how many members list it at least once."""
    tallies: dict[str, Tally] = {}
    for member in members:
        keys = {normalize_key(label) for label in split_labels(member.get(member_field))}
        for key in sorted(k for k in keys if k):
            tally = tallies.setdefault(key, Tally(name=format_name(key)))
            tally.member_count += 1
    return tallies


@dataclass
class SyncOutcome:
    name: str
    action: str
    member_count: int = 0
    popularity: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "name": self.name,
            "action": self.action,
            "memberCount": self.member_count,
            "popularity": self.popularity,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class SyncReport:
    """Partial result of a sync: one outcome per catalog entry touched."""
    catalog: str
    total_members: int = 0
    outcomes: list[SyncOutcome] = field(default_factory=list)

    def count(self, action: str) -> int:
        return sum(1 for o in self.outcomes if o.action == action)

    @property
    def errors(self) -> list[str]:
        return [f"{o.name}: {o.error}" for o in self.outcomes if o.action == FAILED]

    @property
    def message(self) -> str:
        return (
            f"Synchronisation complete: {self.count(CREATED)} created, "
            f"{self.count(UPDATED)} updated, {self.count(DEACTIVATED)} deactivated, "
            f"{self.count(SKIPPED)} skipped, {self.count(FAILED)} failed"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "catalog": self.catalog,
            "totalMembers": self.total_members,
            "created": self.count(CREATED),
            "updated": self.count(UPDATED),
            "deactivated": self.count(DEACTIVATED),
            "skipped": self.count(SKIPPED),
            "failed": self.count(FAILED),
            "errors": self.errors,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


class CatalogSynchronizer:
    """Rebuilds the derived state of one catalog (skills or specialties)."""

    def __init__(self, kind: Entity, catalog_repo: DocumentRepository,
                 member_repo: DocumentRepository):
        self.kind = kind
        self.member_field = CATALOG_MEMBER_FIELD[kind]
        self._catalog = catalog_repo
        self._members = member_repo

    def sync(self) -> SyncReport:
        start = time.monotonic()
        members = self._members.find(
            {"isActive": {"$ne": False}}, projection={self.member_field: 1},
        )
        tallies = count_references(members, self.member_field)
        report = SyncReport(catalog=self.kind.value, total_members=len(members))
        logger.info("Sync %s: %d active members, %d distinct names",
                    self.kind.value, len(members), len(tallies))

        existing: dict[str, dict[str, Any]] = {}
        for doc in self._catalog.find({}):
            existing.setdefault(normalize_key(doc.get("name")), doc)
        touched: set = set()

        for key, tally in tallies.items():
            if len(tally.name) < MIN_NAME_LENGTH:
                report.outcomes.append(SyncOutcome(tally.name, SKIPPED, tally.member_count))
                continue
            current = existing.get(key)
            if current is not None:
                touched.add(current["_id"])
            outcome = self._upsert(tally, current, report.total_members)
            report.outcomes.append(outcome)

        for doc in self._catalog_leftovers(existing, touched):
            report.outcomes.append(self._deactivate(doc))

        for outcome in report.outcomes:
            SYNC_ITEMS.labels(catalog=self.kind.value, action=outcome.action).inc()
        SYNC_RUNS.labels(catalog=self.kind.value).inc()
        SYNC_DURATION.labels(catalog=self.kind.value).observe(time.monotonic() - start)
        logger.info("Sync %s finished: %s", self.kind.value, report.message)
        return report

    def sync_defaults(self) -> SyncReport:
        """Seed the built-in default entries (create or refresh category / description)."""
        report = SyncReport(catalog=self.kind.value)
        for entry in DEFAULT_ENTRIES[self.kind]:
            try:
                current = self._catalog.find_one({"name": exact_name_pattern(entry["name"])})
                if current is not None:
                    self._catalog.update(current["_id"], {
                        "category": entry["category"],
                        "description": entry["description"],
                    })
                    report.outcomes.append(SyncOutcome(
                        entry["name"], UPDATED,
                        current.get("memberCount", 0), current.get("popularity", 0.0),
                    ))
                else:
                    self._catalog.insert({
                        **entry, "level": "intermédiaire", "memberCount": 0,
                        "popularity": 0.0, "isActive": True,
                    })
                    report.outcomes.append(SyncOutcome(entry["name"], CREATED))
            except (PyMongoError, DuplicateError) as exc:
                logger.error("Default %s '%s' failed: %s", self.kind.value, entry["name"], exc)
                report.outcomes.append(SyncOutcome(entry["name"], FAILED, error=str(exc)))
        for outcome in report.outcomes:
            SYNC_ITEMS.labels(catalog=self.kind.value, action=outcome.action).inc()
        return report

    # ── internals ──

    def _upsert(self, tally: Tally, current: Optional[dict[str, Any]],
                total_members: int) -> SyncOutcome:
        popularity = compute_popularity(tally.member_count, total_members)
        try:
            if current is None:
                category = classify(tally.name, self.kind)
                self._catalog.insert({
                    "name": tally.name,
                    "category": category,
                    "level": "intermédiaire",
                    "description": describe(tally.name, category, self.kind),
                    "memberCount": tally.member_count,
                    "popularity": popularity,
                    "isActive": True,
                })
                return SyncOutcome(tally.name, CREATED, tally.member_count, popularity)

            category = current.get("category")
            if not is_valid_category(category, self.kind):
                category = classify(current.get("name") or tally.name, self.kind)
            updated = self._catalog.update(current["_id"], {
                "category": category,
                "memberCount": tally.member_count,
                "popularity": popularity,
                "isActive": True,
            })
            if updated is None:
                return SyncOutcome(tally.name, FAILED, tally.member_count, popularity,
                                   error="entry disappeared during sync")
            return SyncOutcome(current.get("name") or tally.name, UPDATED,
                               tally.member_count, popularity)
        except (PyMongoError, DuplicateError) as exc:
            logger.error("Sync %s '%s' failed: %s", self.kind.value, tally.name, exc)
            return SyncOutcome(tally.name, FAILED, tally.member_count, popularity, error=str(exc))

    def _catalog_leftovers(self, existing: dict[str, dict[str, Any]],
                           touched: set) -> list[dict[str, Any]]:
        leftovers = []
        for doc in existing.values():
            if doc["_id"] in touched:
                continue
            if doc.get("memberCount", 0) or doc.get("popularity", 0) or doc.get("isActive", True):
                leftovers.append(doc)
        return leftovers

    def _deactivate(self, doc: dict[str, Any]) -> SyncOutcome:
        name = doc.get("name") or str(doc["_id"])
        try:
            self._catalog.update(doc["_id"], {
                "memberCount": 0, "popularity": 0.0, "isActive": False,
            })
            return SyncOutcome(name, DEACTIVATED)
        except PyMongoError as exc:
            logger.error("Deactivating %s '%s' failed: %s", self.kind.value, name, exc)
            return SyncOutcome(name, FAILED, error=str(exc))
