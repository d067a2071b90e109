"""
Storage layer: Database ownership, DocumentRepository, serialization helpers.
Run:  pytest test_repository.py -v
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from conftest import offline_settings
from skillmatrix.core.database import Database
from skillmatrix.core.errors import ConfigurationError, DuplicateError, InvalidIdError
from skillmatrix.core.serialization import (
    is_object_id,
    parse_object_id,
    serialize_document,
    to_serializable,
)
from skillmatrix.models.entities import Entity
from skillmatrix.repositories.document_repository import (
    DocumentRepository,
    contains_pattern,
    exact_name_pattern,
)


@pytest.fixture
def members(database):
    return DocumentRepository(database.collection(Entity.MEMBERS), "Member")


@pytest.fixture
def skills(database):
    return DocumentRepository(database.collection(Entity.SKILLS), "Skill")


# ═══════════════════════════════════════════════════════════════════════════
# DATABASE
# ═══════════════════════════════════════════════════════════════════════════
class TestDatabase:
    def test_missing_uri(self):
        with pytest.raises(ConfigurationError, match="MONGODB_URI"):
            Database(uri="", name="skillmatrix")

    def test_missing_name(self):
        with pytest.raises(ConfigurationError, match="MONGODB_DB_NAME"):
            Database(uri="mongodb://localhost:27017", name="")

    def test_from_settings_reports_missing_uri(self):
        config = offline_settings(MONGODB_URI="", MONGODB_DB_NAME="skillmatrix")
        with pytest.raises(ConfigurationError, match="MONGODB_URI"):
            Database.from_settings(config)

    def test_collection_by_entity(self, database):
        assert database.collection(Entity.SKILLS).name == "skills"

    def test_close_is_idempotent(self):
        client = MagicMock()
        db = Database(uri="", name="skillmatrix", client=client)
        db.close()
        db.close()
        client.close.assert_called_once()

    def test_context_manager_closes(self):
        client = MagicMock()
        with Database(uri="", name="skillmatrix", client=client):
            pass
        client.close.assert_called_once()

    def test_ping_uses_admin_command(self):
        client = MagicMock()
        Database(uri="", name="skillmatrix", client=client).ping()
        client.admin.command.assert_called_once_with("ping")


# ═══════════════════════════════════════════════════════════════════════════
# REPOSITORY
# ═══════════════════════════════════════════════════════════════════════════
class TestRepositoryWrites:
    def test_insert_sets_id_and_timestamps(self, members):
        doc = members.insert({"name": "Alice", "email": "alice@example.com"})
        assert isinstance(doc["_id"], ObjectId)
        assert doc["createdAt"] == doc["updatedAt"]
        assert members.get(doc["_id"])["name"] == "Alice"

    def test_insert_duplicate_email(self, members):
        members.insert({"name": "Alice", "email": "alice@example.com"})
        with pytest.raises(DuplicateError, match="Member already exists"):
            members.insert({"name": "Alice 2", "email": "alice@example.com"})

    def test_update_returns_new_document(self, members):
        doc = members.insert({"name": "Alice", "email": "alice@example.com"})
        updated = members.update(doc["_id"], {"title": "Engineer"})
        assert updated["title"] == "Engineer"
        assert updated["name"] == "Alice"

    def test_update_missing_returns_none(self, members):
        assert members.update(ObjectId(), {"title": "x"}) is None

    def test_modify_push_and_pull(self, database):
        projects = DocumentRepository(database.collection(Entity.PROJECTS), "Project")
        doc = projects.insert({"title": "P", "members": []})
        member_id = str(ObjectId())
        assert projects.modify(doc["_id"], {"$push": {"members": member_id}})["members"] == [member_id]
        assert projects.modify(doc["_id"], {"$pull": {"members": member_id}})["members"] == []

    def test_delete(self, members):
        doc = members.insert({"name": "Alice", "email": "alice@example.com"})
        assert members.delete(doc["_id"]) is True
        assert members.delete(doc["_id"]) is False
        assert members.count() == 0

    def test_delete_many(self, skills):
        skills.insert({"name": "A1", "category": "autre"})
        skills.insert({"name": "B1", "category": "autre"})
        skills.insert({"name": "C1", "category": "langage"})
        assert skills.delete_many({"category": "autre"}) == 2
        assert skills.count() == 1


class TestRepositoryReads:
    def test_find_sort_skip_limit(self, skills):
        for name, count in (("A1", 1), ("B1", 3), ("C1", 2)):
            skills.insert({"name": name, "memberCount": count})
        docs = skills.find({}, sort=[("memberCount", -1)], skip=1, limit=1)
        assert [d["name"] for d in docs] == ["C1"]

    def test_find_with_projection(self, members):
        members.insert({"name": "Alice", "email": "alice@example.com", "skills": ["Python"]})
        doc = members.find({}, projection={"skills": 1})[0]
        assert "skills" in doc
        assert "name" not in doc

    def test_find_by_ids(self, members):
        a = members.insert({"name": "Alice", "email": "a@example.com"})
        members.insert({"name": "Bob", "email": "b@example.com"})
        found = members.find_by_ids([a["_id"], ObjectId()])
        assert [d["name"] for d in found] == ["Alice"]

    def test_exact_name_pattern_is_case_insensitive(self, skills):
        skills.insert({"name": "Python"})
        assert skills.find_one({"name": exact_name_pattern("  PYTHON ")}) is not None
        assert skills.find_one({"name": exact_name_pattern("Pyth")}) is None

    def test_exact_name_pattern_escapes_regex(self, skills):
        skills.insert({"name": "C++"})
        skills.insert({"name": "Cxx"})
        found = skills.find({"name": exact_name_pattern("c++")})
        assert [d["name"] for d in found] == ["C++"]

    def test_contains_pattern_matches_array_items(self, members):
        members.insert({"name": "Alice", "email": "a@example.com", "skills": ["Python", "SQL"]})
        assert members.count({"skills": contains_pattern("pyt")}) == 1
        assert members.count({"skills": contains_pattern("rust")}) == 0


# ═══════════════════════════════════════════════════════════════════════════
# SERIALIZATION
# ═══════════════════════════════════════════════════════════════════════════
class TestSerialization:
    def test_object_ids_and_datetimes(self):
        oid = ObjectId()
        when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        out = to_serializable({"_id": oid, "at": when, "nested": [{"id": oid}]})
        assert out == {
            "_id": str(oid),
            "at": "2024-01-02T03:04:05+00:00",
            "nested": [{"id": str(oid)}],
        }

    def test_naive_datetime_is_utc(self):
        assert to_serializable(datetime(2024, 1, 1)) == "2024-01-01T00:00:00+00:00"

    def test_serialize_none(self):
        assert serialize_document(None) is None

    def test_parse_object_id(self):
        oid = ObjectId()
        assert parse_object_id(str(oid)) == oid
        assert parse_object_id(f"  {oid} ") == oid
        assert parse_object_id(oid) is oid

    @pytest.mark.parametrize("value", ["not-an-id", "", None, 123, "zz" * 12])
    def test_parse_object_id_rejects(self, value):
        with pytest.raises(InvalidIdError, match="Invalid member ID"):
            parse_object_id(value, "member")

    def test_is_object_id(self):
        assert is_object_id(str(ObjectId()))
        assert not is_object_id("abc")
