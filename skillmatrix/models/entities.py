# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain constants: entity names and closed value sets, NO FastAPI dependency.
"""

from enum import Enum


class Entity(str, Enum):
    """Every collection the service knows about. The value is the collection name."""

    MEMBERS = "members"
    PROJECTS = "projects"
    GROUPS = "groups"
    SKILLS = "skills"
    SPECIALTIES = "specialties"
    INTERACTIONS = "interactions"
    ANALYSES = "analyses"

    @property
    def label(self) -> str:
        return ENTITY_LABELS[self]

    @classmethod
    def parse(cls, name: str | None) -> "Entity | None":
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            return None


ENTITY_LABELS: dict[Entity, str] = {
    Entity.MEMBERS: "Member",
    Entity.PROJECTS: "Project",
    Entity.GROUPS: "Group",
    Entity.SKILLS: "Skill",
    Entity.SPECIALTIES: "Specialty",
    Entity.INTERACTIONS: "Interaction",
    Entity.ANALYSES: "Analysis",
}

# Collections reachable through the generic CRUD function.
GENERIC_CRUD_ENTITIES: frozenset[Entity] = frozenset({
    Entity.MEMBERS,
    Entity.PROJECTS,
    Entity.GROUPS,
    Entity.SKILLS,
    Entity.SPECIALTIES,
    Entity.INTERACTIONS,
})

CATALOG_ENTITIES: frozenset[Entity] = frozenset({Entity.SKILLS, Entity.SPECIALTIES})

# Member field holding the names counted for each catalog.
CATALOG_MEMBER_FIELD: dict[Entity, str] = {
    Entity.SKILLS: "skills",
    Entity.SPECIALTIES: "specialties",
}

# ── Closed value sets ──

MEMBER_STATUSES = ("Actif", "Inactif", "En attente")
PROJECT_STATUSES = ("idea", "active", "completed", "archived")
GROUP_TYPES = ("technique", "sectoriel", "recherche", "management", "autre")
GROUP_PRIVACIES = ("public", "private")
GROUP_CREATION_TYPES = ("manual", "byTitle", "byOrganization")
# Member field each automatic grouping criteria groups on.
AUTO_GROUP_CRITERIA: dict[str, str] = {"byTitle": "title", "byOrganization": "organization"}

SKILL_CATEGORIES = (
    "langage", "technique", "design", "outil", "management", "soft", "domaine", "autre",
)
SPECIALTY_CATEGORIES = (
    "technique", "management", "industrie", "recherche", "environnement", "energie", "autre",
)
CATALOG_CATEGORIES: dict[Entity, tuple[str, ...]] = {
    Entity.SKILLS: SKILL_CATEGORIES,
    Entity.SPECIALTIES: SPECIALTY_CATEGORIES,
}
FALLBACK_CATEGORY = "autre"
CATALOG_LEVELS = ("débutant", "intermédiaire", "avancé", "expert")

INTERACTION_TYPES = (
    "collaboration", "mentorship", "project_invite", "expertise_share", "knowledge_transfer",
)
INTERACTION_STATUSES = ("pending", "accepted", "completed", "canceled")
RISK_LEVELS = ("low", "medium", "high")

ANALYSIS_TYPES = (
    "interaction_analysis",
    "skills_analysis",
    "specialties_analysis",
    "professional_synergy_analysis",
    "collaboration_analysis",
)
ANALYSIS_STATUSES = ("pending", "running", "completed", "failed")
