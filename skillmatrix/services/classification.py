# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Keyword classification of free-text skill and specialty labels.

A label is lower-cased and tested against each category's keyword list in
table order; the first category with a keyword contained in the label wins.
Labels matching nothing fall back to ``autre``.
"""
import re
from typing import Optional

from skillmatrix.models.entities import (
    CATALOG_CATEGORIES,
    FALLBACK_CATEGORY,
    Entity,
)

SKILL_KEYWORDS: dict[str, tuple[str, ...]] = {
    "langage": (
        "javascript", "python", "java", "typescript", "php", "ruby", "go",
        "c#", "c++", "swift", "html", "css", "sql",
    ),
    "technique": (
        "react", "angular", "vue", "node", "express", "django", "spring",
        "docker", "kubernetes", "mongodb", "mysql", "postgresql",
    ),
    "design": ("ui", "ux", "design", "figma", "photoshop", "illustrator", "sketch"),
    "outil": ("git", "jenkins", "vscode", "postman", "jira", "trello", "slack"),
    "management": (
        "gestion", "management", "leadership", "projet", "équipe", "agile",
        "scrum", "kanban",
    ),
    "soft": (
        "communication", "créativité", "adaptabilité", "résolution", "empathie",
        "collaboration", "travail d'équipe",
    ),
    "domaine": (
        "finance", "marketing", "rh", "juridique", "commercial", "santé", "éducation",
    ),
}

# Order matters: "développement durable" must resolve to environnement.
SPECIALTY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "energie": (
        "énergie", "energie", "energy", "solaire", "éolien", "eolien",
        "nucléaire", "nucleaire", "hydrogène", "hydrogene", "électricité",
        "electricite", "renouvelable", "pétrole", "petrole", "gaz",
    ),
    "environnement": (
        "environnement", "environment", "écologie", "ecologie", "climat",
        "biodiversité", "biodiversite", "déchet", "dechet", "recyclage",
        "développement durable", "traitement de l'eau", "pollution",
    ),
    "recherche": (
        "recherche", "research", "r&d", "laboratoire", "scientifique",
        "innovation", "doctorat",
    ),
    "industrie": (
        "industri", "production", "manufactur", "mécanique", "mecanique",
        "maintenance", "logistique", "qualité", "qualite", "usinage",
        "métallurgie", "metallurgie", "btp", "construction",
    ),
    "management": (
        "management", "gestion", "leadership", "direction", "stratégie",
        "strategie", "ressources humaines", "finance", "pilotage", "projet",
    ),
    "technique": (
        "informatique", "logiciel", "software", "développement", "developpement",
        "web", "réseau", "reseau", "cloud", "cybersécurité", "cybersecurite",
        "data", "intelligence artificielle", "électronique", "electronique",
        "automatisme", "télécom", "telecom", "devops", "ingénierie", "ingenierie",
    ),
}

KEYWORDS: dict[Entity, dict[str, tuple[str, ...]]] = {
    Entity.SKILLS: SKILL_KEYWORDS,
    Entity.SPECIALTIES: SPECIALTY_KEYWORDS,
}

DESCRIPTIONS: dict[Entity, dict[str, str]] = {
    Entity.SKILLS: {
        "langage": "Langage de programmation {name}",
        "technique": "Compétence technique en {name}",
        "design": "Compétence en design {name}",
        "outil": "Outil {name} pour le développement",
        "management": "Compétence en management {name}",
        "soft": "Compétence comportementale en {name}",
        "domaine": "Compétence métier en {name}",
    },
    Entity.SPECIALTIES: {
        "technique": "Spécialité technique en {name}",
        "management": "Spécialité en management : {name}",
        "industrie": "Spécialité industrielle en {name}",
        "recherche": "Spécialité de recherche en {name}",
        "environnement": "Spécialité environnementale en {name}",
        "energie": "Spécialité énergétique en {name}",
    },
}

_WHITESPACE = re.compile(r"\s+")


def normalize_key(label: Optional[str]) -> str:
    """Fold case and whitespace: ``"  Machine   LEARNING "`` → ``"machine learning"``."""
    if not label or not isinstance(label, str):
        return ""
    return _WHITESPACE.sub(" ", label).strip().lower()


def format_name(label: Optional[str]) -> str:
    """Title-case each word of a normalized label: ``"REACT"`` → ``"React"``."""
    return " ".join(word[:1].upper() + word[1:] for word in normalize_key(label).split(" "))


def classify(label: Optional[str], kind: Entity = Entity.SKILLS) -> str:
    """Return the category of ``label`` for the skill or specialty catalog."""
    name = normalize_key(label)
    if name:
        for category, keywords in KEYWORDS[kind].items():
            if any(keyword in name for keyword in keywords):
                return category
    return FALLBACK_CATEGORY


def is_valid_category(category: Optional[str], kind: Entity) -> bool:
    return category in CATALOG_CATEGORIES[kind]


def describe(name: str, category: str, kind: Entity = Entity.SKILLS) -> str:
    """Default description generated for a new catalog entry."""
    template = DESCRIPTIONS[kind].get(category)
    if template is None:
        noun = "Compétence" if kind is Entity.SKILLS else "Spécialité"
        return f"{noun} en {name}"
    return template.format(name=name)
