"""
Catalog synchronisation: reference counting, popularity, upserts, deactivation.
Run:  pytest test_sync_service.py -v
"""
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from skillmatrix.models.entities import Entity
from skillmatrix.repositories.document_repository import DocumentRepository
from skillmatrix.services.sync_service import (
    DEFAULT_ENTRIES,
    CatalogSynchronizer,
    SyncOutcome,
    SyncReport,
    compute_popularity,
    count_references,
)


@pytest.fixture
def members(database):
    return DocumentRepository(database.collection(Entity.MEMBERS), "Member")


@pytest.fixture
def skills(database):
    return DocumentRepository(database.collection(Entity.SKILLS), "Skill")


@pytest.fixture
def specialties(database):
    return DocumentRepository(database.collection(Entity.SPECIALTIES), "Specialty")


def _member(repo, name, skills=None, specialties=None, active=True):
    return repo.insert({
        "name": name,
        "email": f"{name.lower()}@example.com",
        "skills": skills if skills is not None else [],
        "specialties": specialties if specialties is not None else [],
        "isActive": active,
    })


def _by_name(repo):
    return {doc["name"]: doc for doc in repo.find({})}


# ═══════════════════════════════════════════════════════════════════════════
# PURE HELPERS
# ═══════════════════════════════════════════════════════════════════════════
class TestPopularity:
    @pytest.mark.parametrize("count, total, expected", [
        (0, 0, 0.0),
        (5, 0, 0.0),
        (0, 10, 0.0),
        (1, 3, 33.33),
        (3, 3, 100.0),
        (1, 8, 12.5),
    ])
    def test_values(self, count, total, expected):
        assert compute_popularity(count, total) == expected

    def test_clamped_to_hundred(self):
        assert compute_popularity(10, 3) == 100.0

    def test_negative_inputs(self):
        assert compute_popularity(-1, 10) == 0.0
        assert compute_popularity(1, -10) == 0.0


class TestCountReferences:
    def test_member_counted_once_per_name(self):
        tallies = count_references([{"skills": ["Python", "python ", "REACT"]}], "skills")
        assert {k: t.member_count for k, t in tallies.items()} == {"python": 1, "react": 1}
        assert tallies["react"].name == "React"

    def test_counts_across_members(self):
        tallies = count_references([
            {"skills": ["Python"]},
            {"skills": ["PYTHON", "SQL"]},
            {"skills": []},
            {},
        ], "skills")
        assert tallies["python"].member_count == 2
        assert tallies["sql"].member_count == 1

    def test_comma_separated_strings(self):
        tallies = count_references([{"specialties": "Génie logiciel; Cloud"}], "specialties")
        assert set(tallies) == {"génie logiciel", "cloud"}

    def test_non_string_entries_ignored(self):
        tallies = count_references([{"skills": ["Go", None, 3, "  "]}], "skills")
        assert set(tallies) == {"go"}


class TestSyncReport:
    def test_counts_and_message(self):
        report = SyncReport(catalog="skills", total_members=4, outcomes=[
            SyncOutcome("Python", "created", 2, 50.0),
            SyncOutcome("Sql", "updated", 1, 25.0),
            SyncOutcome("Cobol", "deactivated"),
            SyncOutcome("Go", "failed", 1, 25.0, error="boom"),
        ])
        data = report.to_dict()
        assert data["created"] == 1
        assert data["updated"] == 1
        assert data["deactivated"] == 1
        assert data["failed"] == 1
        assert data["errors"] == ["Go: boom"]
        assert data["outcomes"][0] == {
            "name": "Python", "action": "created", "memberCount": 2, "popularity": 50.0,
        }
        assert "1 created" in report.message
        assert "1 failed" in report.message


# ═══════════════════════════════════════════════════════════════════════════
# SYNC AGAINST STORAGE
# ═══════════════════════════════════════════════════════════════════════════
class TestSkillSync:
    def test_sync_creates_entries_from_member_skills(self, members, skills):
        _member(members, "Alice", skills=["Python", "python ", "REACT"])
        report = CatalogSynchronizer(Entity.SKILLS, skills, members).sync()

        entries = _by_name(skills)
        assert set(entries) == {"Python", "React"}
        assert entries["Python"]["memberCount"] == 1
        assert entries["Python"]["category"] == "langage"
        assert entries["React"]["category"] == "technique"
        assert entries["React"]["popularity"] == 100.0
        assert entries["React"]["isActive"] is True
        assert report.count("created") == 2
        assert report.total_members == 1

    def test_popularity_relative_to_active_members(self, members, skills):
        _member(members, "Alice", skills=["Python", "SQL"])
        _member(members, "Bob", skills=["Python"])
        _member(members, "Carol", skills=[])
        _member(members, "Dan", skills=["Python", "SQL"], active=False)
        CatalogSynchronizer(Entity.SKILLS, skills, members).sync()

        entries = _by_name(skills)
        assert entries["Python"]["memberCount"] == 2
        assert entries["Python"]["popularity"] == 66.67
        assert entries["Sql"]["memberCount"] == 1
        assert entries["Sql"]["popularity"] == 33.33
        for entry in entries.values():
            assert 0 <= entry["popularity"] <= 100

    def test_existing_entry_updated_and_category_kept(self, members, skills):
        skills.insert({"name": "Python", "category": "outil", "memberCount": 7,
                       "popularity": 70.0, "isActive": True})
        _member(members, "Alice", skills=["PYTHON"])
        report = CatalogSynchronizer(Entity.SKILLS, skills, members).sync()

        entries = _by_name(skills)
        assert list(entries) == ["Python"]
        assert entries["Python"]["category"] == "outil"
        assert entries["Python"]["memberCount"] == 1
        assert report.count("updated") == 1
        assert report.count("created") == 0

    def test_invalid_category_reclassified(self, members, skills):
        skills.insert({"name": "Docker", "category": "unknown", "isActive": True})
        _member(members, "Alice", skills=["docker"])
        CatalogSynchronizer(Entity.SKILLS, skills, members).sync()
        assert _by_name(skills)["Docker"]["category"] == "technique"

    def test_unreferenced_entries_deactivated(self, members, skills):
        skills.insert({"name": "Cobol", "category": "langage", "memberCount": 4,
                       "popularity": 40.0, "isActive": True})
        _member(members, "Alice", skills=["Python"])
        report = CatalogSynchronizer(Entity.SKILLS, skills, members).sync()

        cobol = _by_name(skills)["Cobol"]
        assert cobol["memberCount"] == 0
        assert cobol["popularity"] == 0.0
        assert cobol["isActive"] is False
        assert report.count("deactivated") == 1

    def test_already_inactive_entries_left_alone(self, members, skills):
        skills.insert({"name": "Cobol", "category": "langage", "memberCount": 0,
                       "popularity": 0.0, "isActive": False})
        report = CatalogSynchronizer(Entity.SKILLS, skills, members).sync()
        assert report.count("deactivated") == 0

    def test_short_names_skipped(self, members, skills):
        _member(members, "Alice", skills=["C", "Go"])
        report = CatalogSynchronizer(Entity.SKILLS, skills, members).sync()
        assert set(_by_name(skills)) == {"Go"}
        assert report.count("skipped") == 1

    def test_sync_is_repeatable(self, members, skills):
        _member(members, "Alice", skills=["Python"])
        sync = CatalogSynchronizer(Entity.SKILLS, skills, members)
        sync.sync()
        second = sync.sync()
        assert skills.count() == 1
        assert second.count("updated") == 1
        assert second.count("created") == 0

    def test_no_members(self, members, skills):
        report = CatalogSynchronizer(Entity.SKILLS, skills, members).sync()
        assert report.total_members == 0
        assert report.outcomes == []


class TestSyncFailures:
    def test_failure_recorded_and_run_continues(self, members):
        _member(members, "Alice", skills=["Python", "SQL"])
        catalog = MagicMock()
        catalog.find.return_value = []

        def insert(document):
            if document["name"] == "Python":
                raise PyMongoError("write refused")
            return {**document, "_id": ObjectId()}

        catalog.insert.side_effect = insert
        report = CatalogSynchronizer(Entity.SKILLS, catalog, members).sync()

        assert report.count("failed") == 1
        assert report.count("created") == 1
        assert report.errors == ["Python: write refused"]

    def test_deactivation_failure_recorded(self, members):
        catalog = MagicMock()
        catalog.find.return_value = [
            {"_id": ObjectId(), "name": "Cobol", "memberCount": 2, "isActive": True},
        ]
        catalog.update.side_effect = PyMongoError("down")
        report = CatalogSynchronizer(Entity.SKILLS, catalog, members).sync()
        assert report.count("failed") == 1
        assert report.errors == ["Cobol: down"]

    def test_entry_vanishing_during_sync(self, members):
        _member(members, "Alice", skills=["Python"])
        catalog = MagicMock()
        catalog.find.return_value = [{"_id": ObjectId(), "name": "Python", "category": "langage"}]
        catalog.update.return_value = None
        report = CatalogSynchronizer(Entity.SKILLS, catalog, members).sync()
        assert report.count("failed") == 1


class TestSpecialtySync:
    def test_specialties_counted_and_classified(self, members, specialties):
        _member(members, "Alice", specialties=["Énergie solaire", "Génie logiciel"])
        _member(members, "Bob", specialties="génie logiciel")
        CatalogSynchronizer(Entity.SPECIALTIES, specialties, members).sync()

        entries = _by_name(specialties)
        assert entries["Génie Logiciel"]["memberCount"] == 2
        assert entries["Génie Logiciel"]["category"] == "technique"
        assert entries["Énergie Solaire"]["category"] == "energie"
        assert entries["Énergie Solaire"]["popularity"] == 50.0


class TestSyncDefaults:
    def test_defaults_created_then_refreshed(self, members, skills):
        sync = CatalogSynchronizer(Entity.SKILLS, skills, members)
        first = sync.sync_defaults()
        assert first.count("created") == len(DEFAULT_ENTRIES[Entity.SKILLS])

        skills.update(_by_name(skills)["Python"]["_id"], {"category": "outil"})
        second = sync.sync_defaults()
        assert second.count("updated") == len(DEFAULT_ENTRIES[Entity.SKILLS])
        assert skills.count() == len(DEFAULT_ENTRIES[Entity.SKILLS])
        assert _by_name(skills)["Python"]["category"] == "langage"

    def test_specialty_defaults(self, members, specialties):
        report = CatalogSynchronizer(Entity.SPECIALTIES, specialties, members).sync_defaults()
        assert report.count("created") == len(DEFAULT_ENTRIES[Entity.SPECIALTIES])
        assert _by_name(specialties)["Développement durable"]["category"] == "environnement"
