# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for interactions and stored analyses."""
from datetime import timedelta
from typing import Any, Optional

from pymongo import DESCENDING

from skillmatrix.core.config import settings
from skillmatrix.core.errors import NotFoundError, ValidationFailed
from skillmatrix.core.logging import get_logger
from skillmatrix.core.serialization import parse_object_id, utcnow
from skillmatrix.metrics.prometheus import DOCUMENTS_CREATED
from skillmatrix.models.entities import (
    ANALYSIS_STATUSES,
    ANALYSIS_TYPES,
    INTERACTION_STATUSES,
    INTERACTION_TYPES,
    Entity,
)
from skillmatrix.repositories.document_repository import DocumentRepository
from skillmatrix.schemas.common import validate_payload
from skillmatrix.schemas.interaction import (
    AIAnalysis,
    AnalysisCreate,
    AnalysisUpdate,
    InteractionCreate,
    InteractionUpdate,
    SynergyAnalysisCreate,
)
from skillmatrix.services.entity_service import EntityService, filter_choice
from skillmatrix.services.synergy_client import SynergyClient, simulate_analysis

logger = get_logger(__name__)

PROFILE = {"name": 1, "title": 1, "organization": 1, "skills": 1, "specialties": 1}

SYNERGY_ANALYSIS = "professional_synergy_analysis"
SYNERGY_SORT = [("analysisTimestamp", DESCENDING)]
HIGH_POTENTIAL = ("Élevé", "Exceptionnel")
RECENT_FIELDS = {
    "title": 1, "description": 1, "insights": 1, "statistics": 1,
    "analysisTimestamp": 1, "aiEnhanced": 1,
}


def _average(values: list[Any]) -> float:
    numbers = [float(v) for v in values if isinstance(v, (int, float))]
    return round(sum(numbers) / len(numbers), 2) if numbers else 0.0


def _count(value: Any) -> int:
    return int(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else 0


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _member_name(member: Any) -> Optional[str]:
    return member.get("name") if isinstance(member, dict) else None


def derive_synergy_fields(analysis_data: dict[str, Any],
                          statistics: dict[str, Any]) -> dict[str, Any]:
    """Insights, suggestions and summaries computed from ``analysisData.synergies``."""
    synergies = [s for s in _as_list(analysis_data.get("synergies")) if isinstance(s, dict)]
    opportunities = _as_list(analysis_data.get("projectOpportunities"))
    high_potential = sum(1 for s in synergies if s.get("potential") in HIGH_POTENTIAL)
    totals = {
        "totalMembers": _count(statistics.get("totalMembers")),
        "totalProjects": _count(statistics.get("totalProjects")),
        "totalSkills": _count(statistics.get("totalSkills")),
        "totalSpecialties": _count(statistics.get("totalSpecialties")),
    }
    return {
        "insights": {
            "totalSynergies": len(synergies),
            "highPotential": high_potential,
            "projectOpportunities": len(opportunities),
            "analyzedMembers": totals["totalMembers"],
        },
        "suggestions": [
            {
                "members": [_member_name(s.get("member1")), _member_name(s.get("member2"))],
                "score": s.get("score"),
                "potential": s.get("potential"),
                "reason": s.get("reason"),
                "recommendedActions": _as_list(s.get("recommendedActions")),
                "type": s.get("type"),
            }
            for s in synergies
        ],
        "dataSummary": {
            "membersAnalyzed": totals["totalMembers"],
            "projectsAnalyzed": totals["totalProjects"],
            "skillsAnalyzed": totals["totalSkills"],
            "specialtiesAnalyzed": totals["totalSpecialties"],
        },
        "statistics": {
            **statistics,
            **totals,
            "totalSynergies": len(synergies),
            "totalOpportunities": len(opportunities),
            "aiEnhanced": bool(statistics.get("aiEnhanced")),
            "aiEnhancedCount": _count(statistics.get("aiEnhancedCount")),
            "aiModel": statistics.get("aiModel") or None,
        },
    }


class InteractionService(EntityService):
    entity = Entity.INTERACTIONS
    create_schema = InteractionCreate
    update_schema = InteractionUpdate

    def __init__(self, repo: DocumentRepository, member_repo: DocumentRepository,
                 synergy_client: Optional[SynergyClient] = None):
        super().__init__(repo)
        self._members = member_repo
        self._synergy = synergy_client or SynergyClient()

    def present(self, doc: dict[str, Any]) -> dict[str, Any]:
        data = super().present(doc)
        data["participantCount"] = 1 + len(data.get("to") or [])
        return data

    def list_interactions(self, type: Optional[str] = None, status: Optional[str] = None,
                          page: int = 1, limit: Optional[int] = None):
        query: dict[str, Any] = {}
        interaction_type = filter_choice(type, INTERACTION_TYPES, "type")
        if interaction_type:
            query["type"] = interaction_type
        status = filter_choice(status, INTERACTION_STATUSES, "status")
        if status:
            query["status"] = status
        return self.search(query, page=page, limit=limit)

    def list_for_member(self, member_id: Any, page: int = 1, limit: Optional[int] = None):
        """Interactions the member started or was invited to."""
        member = str(parse_object_id(member_id, "member"))
        return self.search({"$or": [{"from": member}, {"to": member}]}, page=page, limit=limit)

    def stats(self) -> dict[str, Any]:
        metrics = self._repo.find({}, projection={"intensity": 1, "score": 1})
        return {
            "total": len(metrics),
            "byType": {t: self._repo.count({"type": t}) for t in INTERACTION_TYPES},
            "byStatus": {s: self._repo.count({"status": s}) for s in INTERACTION_STATUSES},
            "averageIntensity": _average([m.get("intensity") for m in metrics]),
            "averageScore": _average([m.get("score") for m in metrics]),
        }

    def analyze(self, document_id: Any) -> dict[str, Any]:
        """Attach an ``aiAnalysis`` record produced by the synergy client."""
        object_id = self.object_id(document_id)
        interaction = self.require(object_id)
        initiator = self._load_member(interaction.get("from"))
        if initiator is None:
            raise NotFoundError("Interaction initiator not found")
        partners = [m for m in (self._load_member(i) for i in interaction.get("to") or []) if m]

        raw = self._synergy.analyze(initiator, partners, interaction)
        try:
            analysis = validate_payload(AIAnalysis, raw)
        except ValidationFailed as exc:
            logger.warning("Synergy analysis rejected (%s), using simulation", exc)
            analysis = validate_payload(AIAnalysis, simulate_analysis(initiator, partners, interaction))
        analysis["analyzedAt"] = utcnow()

        updated = self._repo.update(object_id, {"aiAnalysis": analysis})
        if updated is None:
            raise NotFoundError("Interaction not found")
        logger.info("Interaction analysed id=%s strategicValue=%s risk=%s simulated=%s",
                    object_id, analysis["strategicValue"], analysis["riskLevel"],
                    analysis["simulated"])
        return self.present(updated)

    def _load_member(self, member_id: Any) -> Optional[dict[str, Any]]:
        if not member_id:
            return None
        return self._members.get(parse_object_id(member_id, "member"), PROFILE)


class AnalysisService(EntityService):
    entity = Entity.ANALYSES
    create_schema = AnalysisCreate
    update_schema = AnalysisUpdate

    def list_analyses(self, type: Optional[str] = None, status: Optional[str] = None,
                      page: int = 1, limit: Optional[int] = None):
        query: dict[str, Any] = {}
        analysis_type = filter_choice(type, ANALYSIS_TYPES, "type")
        if analysis_type:
            query["type"] = analysis_type
        status = filter_choice(status, ANALYSIS_STATUSES, "status")
        if status:
            query["status"] = status
        return self.search(query, page=page, limit=limit)

    def cleanup(self, days: int) -> dict[str, Any]:
        """Delete analyses created more than ``days`` days ago."""
        if days < 1:
            raise ValidationFailed("days must be at least 1")
        cutoff = utcnow() - timedelta(days=days)
        deleted = self._repo.delete_many({"createdAt": {"$lt": cutoff}})
        logger.info("Analyses cleanup: %d deleted older than %s", deleted, cutoff.isoformat())
        return {"deletedCount": deleted, "cutoff": cutoff}

    # ── Professional synergy analyses ──

    def save_synergy(self, payload: Any) -> dict[str, Any]:
        data = validate_payload(SynergyAnalysisCreate, payload)
        statistics = data.get("statistics") or {}
        timestamp = data.get("timestamp") or utcnow()
        description = data["description"] or (
            f"Analyse des synergies professionnelles - {timestamp:%d/%m/%Y}"
        )
        derived = derive_synergy_fields(data["analysisData"], statistics)
        document = {
            "type": SYNERGY_ANALYSIS,
            "title": data["title"],
            "description": description,
            "analysisData": {**data["analysisData"], "timestamp": timestamp},
            **derived,
            "aiEnhanced": derived["statistics"]["aiEnhanced"],
            "aiEnhancedCount": derived["statistics"]["aiEnhancedCount"],
            "aiModel": derived["statistics"]["aiModel"],
            "analysisTimestamp": timestamp,
            "status": "completed",
        }
        created = self._repo.insert(document)
        DOCUMENTS_CREATED.labels(entity=self.entity.value).inc()
        logger.info("Synergy analysis saved id=%s synergies=%d highPotential=%d",
                    created["_id"], derived["insights"]["totalSynergies"],
                    derived["insights"]["highPotential"])
        return self.present(created)

    def list_synergies(self, page: int = 1, limit: Optional[int] = None):
        return self.search({"type": SYNERGY_ANALYSIS}, page=page, limit=limit,
                           sort=SYNERGY_SORT)

    def recent_synergies(self, limit: int = 10) -> list[dict[str, Any]]:
        limit = max(1, min(limit, settings.MAX_PAGE_LIMIT))
        docs = self._repo.find({"type": SYNERGY_ANALYSIS}, sort=SYNERGY_SORT,
                               limit=limit, projection=RECENT_FIELDS)
        return [self.present(d) for d in docs]

    def synergy_stats(self) -> dict[str, Any]:
        """Totals over every saved synergy analysis plus a per-model AI breakdown."""
        overview = self._repo.aggregate([
            {"$match": {"type": SYNERGY_ANALYSIS}},
            {"$group": {
                "_id": None,
                "totalAnalyses": {"$sum": 1},
                "totalAiAnalyses": {"$sum": {"$cond": [{"$eq": ["$aiEnhanced", True]}, 1, 0]}},
                "totalSynergies": {"$sum": "$insights.totalSynergies"},
                "totalHighPotential": {"$sum": "$insights.highPotential"},
                "avgSynergiesPerAnalysis": {"$avg": "$insights.totalSynergies"},
                "latestAnalysis": {"$max": "$analysisTimestamp"},
            }},
        ])
        breakdown = self._repo.aggregate([
            {"$match": {"type": SYNERGY_ANALYSIS, "aiEnhanced": True}},
            {"$group": {
                "_id": "$aiModel",
                "count": {"$sum": 1},
                "totalEnhanced": {"$sum": "$aiEnhancedCount"},
            }},
            {"$sort": {"count": -1, "_id": 1}},
        ])
        summary = {k: v for k, v in overview[0].items() if k != "_id"} if overview else {}
        if summary.get("avgSynergiesPerAnalysis") is not None:
            summary["avgSynergiesPerAnalysis"] = round(summary["avgSynergiesPerAnalysis"], 2)
        return {
            "overview": summary,
            "aiBreakdown": [
                {"aiModel": row["_id"], "count": row["count"],
                 "totalEnhanced": row["totalEnhanced"]}
                for row in breakdown
            ],
        }
