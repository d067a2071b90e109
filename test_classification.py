"""
Keyword classification of skill / specialty labels.
Run:  pytest test_classification.py -v
"""
import pytest

from skillmatrix.models.entities import SKILL_CATEGORIES, SPECIALTY_CATEGORIES, Entity
from skillmatrix.services.classification import (
    classify,
    describe,
    format_name,
    is_valid_category,
    normalize_key,
)


class TestNormalisation:
    def test_normalize_key_folds_case_and_spaces(self):
        assert normalize_key("  Machine   LEARNING ") == "machine learning"

    def test_normalize_key_of_nothing(self):
        assert normalize_key(None) == ""
        assert normalize_key("   ") == ""
        assert normalize_key(42) == ""

    def test_format_name(self):
        assert format_name("REACT") == "React"
        assert format_name("python ") == "Python"
        assert format_name("gestion   de projet") == "Gestion De Projet"

    def test_format_name_keeps_symbols(self):
        assert format_name("c++") == "C++"
        assert format_name("node.js") == "Node.js"


class TestSkillClassification:
    @pytest.mark.parametrize("label, category", [
        ("Python", "langage"),
        ("TypeScript", "langage"),
        ("REACT", "technique"),
        ("Docker", "technique"),
        ("Figma", "design"),
        ("Git", "outil"),
        ("Leadership", "management"),
        ("Scrum", "management"),
        ("Communication", "soft"),
        ("Marketing", "domaine"),
        ("Natation", "autre"),
    ])
    def test_keyword_categories(self, label, category):
        assert classify(label, Entity.SKILLS) == category

    def test_first_matching_category_wins(self):
        # "javascript" (langage) is tested before "react" (technique).
        assert classify("React JavaScript", Entity.SKILLS) == "langage"

    def test_empty_label_falls_back(self):
        assert classify("", Entity.SKILLS) == "autre"
        assert classify(None, Entity.SKILLS) == "autre"

    def test_default_kind_is_skills(self):
        assert classify("Python") == "langage"

    def test_result_always_in_catalog(self):
        for label in ("Python", "Natation", "UX", "Jira", "Empathie", "", "Finance"):
            assert classify(label, Entity.SKILLS) in SKILL_CATEGORIES


class TestSpecialtyClassification:
    @pytest.mark.parametrize("label, category", [
        ("Énergie solaire", "energie"),
        ("Hydrogène", "energie"),
        ("Développement durable", "environnement"),
        ("Traitement de l'eau", "environnement"),
        ("Recherche et développement", "recherche"),
        ("Maintenance industrielle", "industrie"),
        ("Ressources humaines", "management"),
        ("Génie logiciel", "technique"),
        ("Cybersécurité", "technique"),
        ("Philosophie", "autre"),
    ])
    def test_keyword_categories(self, label, category):
        assert classify(label, Entity.SPECIALTIES) == category

    def test_network_is_not_water(self):
        assert classify("Administration réseau", Entity.SPECIALTIES) == "technique"

    def test_result_always_in_catalog(self):
        for label in ("Cloud", "Climat", "BTP", "Doctorat", "Poésie"):
            assert classify(label, Entity.SPECIALTIES) in SPECIALTY_CATEGORIES


class TestCategoriesAndDescriptions:
    def test_is_valid_category_per_catalog(self):
        assert is_valid_category("langage", Entity.SKILLS)
        assert not is_valid_category("langage", Entity.SPECIALTIES)
        assert is_valid_category("energie", Entity.SPECIALTIES)
        assert not is_valid_category(None, Entity.SKILLS)

    def test_describe_uses_category_template(self):
        assert describe("Python", "langage") == "Langage de programmation Python"
        assert describe("Génie logiciel", "technique", Entity.SPECIALTIES) == (
            "Spécialité technique en Génie logiciel"
        )

    def test_describe_fallback(self):
        assert describe("Natation", "autre") == "Compétence en Natation"
        assert describe("Philosophie", "autre", Entity.SPECIALTIES) == "Spécialité en Philosophie"
