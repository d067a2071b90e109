"""
Function entry points: generic-crud and analyses-crud.
Run:  pytest test_functions.py -v
"""
import json
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from conftest import offline_settings
from skillmatrix.core.database import Database
from skillmatrix.core.errors import ValidationFailed
from skillmatrix.services.functions import FunctionRequest, handler, run

MEMBER = {"name": "Alice Martin", "email": "Alice@Example.com", "skills": ["Python"]}
ANALYSIS = {"type": "skills_analysis", "title": "Skills overview"}


class _Owned:
    """Factory handing out the test database and recording close() calls."""

    def __init__(self, database):
        self.database = database
        self.closed = 0
        database.close = self._close

    def _close(self):
        self.closed += 1

    def __call__(self):
        return self.database


@pytest.fixture
def factory(database):
    return _Owned(database)


def _call(factory, name, method, path, body=None, query=None):
    return handler(name, {"method": method, "path": path, "body": body, "query": query},
                   database_factory=factory)


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST PARSING
# ═══════════════════════════════════════════════════════════════════════════
class TestFunctionRequest:
    def test_routing_prefixes_stripped(self):
        req = FunctionRequest(method="GET", path="/api/v1/functions/generic-crud/members/abc")
        assert req.segments == ["generic-crud", "members", "abc"]

    def test_json_string_body(self):
        assert FunctionRequest("POST", body='{"a": 1}').payload() == {"a": 1}
        assert FunctionRequest("POST", body=b'{"a": 1}').payload() == {"a": 1}

    def test_mapping_body(self):
        assert FunctionRequest("POST", body={"a": 1}).payload() == {"a": 1}

    def test_empty_body(self):
        assert FunctionRequest("POST", body=None).payload() == {}
        assert FunctionRequest("POST", body="").payload() == {}

    def test_undecodable_bytes_body(self):
        with pytest.raises(ValidationFailed, match="not valid JSON"):
            FunctionRequest("POST", body=b"\xff\xfe{").payload()

    def test_defaults_from_mapping(self):
        req = FunctionRequest.from_mapping({})
        assert req.method == "GET"
        assert req.path == "/"


# ═══════════════════════════════════════════════════════════════════════════
# GENERIC CRUD
# ═══════════════════════════════════════════════════════════════════════════
class TestGenericCrud:
    def test_full_lifecycle(self, factory):
        created = _call(factory, "generic-crud", "POST", "/members", json.dumps(MEMBER))
        assert created["success"] is True
        assert created["message"] == "Member created"
        member_id = created["data"]["_id"]
        assert created["data"]["email"] == "alice@example.com"

        fetched = _call(factory, "generic-crud", "GET", f"/members/{member_id}")
        assert fetched["data"]["name"] == "Alice Martin"

        updated = _call(factory, "generic-crud", "PUT", f"/members/{member_id}",
                        {"title": "Engineer"})
        assert updated["success"] is True
        assert updated["modifiedCount"] == 1
        assert updated["data"]["title"] == "Engineer"

        listed = _call(factory, "generic-crud", "GET", "/members")
        assert listed["total"] == 1
        assert listed["pagination"]["page"] == 1

        deleted = _call(factory, "generic-crud", "DELETE", f"/members/{member_id}")
        assert deleted["success"] is True
        assert deleted["deletedCount"] == 1

    def test_function_name_and_api_prefix_in_path(self, factory):
        created = _call(factory, "generic-crud", "POST", "/api/v1/generic-crud/projects",
                        {"title": "Solar farm"})
        assert created["success"] is True
        assert created["data"]["status"] == "idea"

    def test_list_pagination_from_query(self, factory):
        for i in range(3):
            _call(factory, "generic-crud", "POST", "/projects", {"title": f"P{i}"})
        listed = _call(factory, "generic-crud", "GET", "/projects", query={"page": "2", "limit": "2"})
        assert listed["total"] == 3
        assert len(listed["data"]) == 1
        assert listed["pagination"]["hasPrev"] is True

    def test_bad_pagination_rejected(self, factory):
        result = _call(factory, "generic-crud", "GET", "/projects", query={"page": "x"})
        assert result["success"] is False

    @pytest.mark.parametrize("path", ["/", "/users", "/analyses", "/admin/123"])
    def test_collection_not_allowed(self, factory, path):
        result = _call(factory, "generic-crud", "GET", path)
        assert result["success"] is False
        assert result["message"] == "Target collection is missing or not allowed"

    @pytest.mark.parametrize("method, with_id", [
        ("PATCH", True), ("POST", True), ("PUT", False), ("DELETE", False), ("OPTIONS", False),
    ])
    def test_unsupported_operation(self, factory, method, with_id):
        path = f"/members/{ObjectId()}" if with_id else "/members"
        result = _call(factory, "generic-crud", method, path, {"name": "X"})
        assert result["success"] is False
        assert "not supported" in result["message"]

    def test_invalid_id(self, factory):
        result = _call(factory, "generic-crud", "GET", "/members/not-an-id")
        assert result == {"success": False, "message": "Invalid member ID"}

    def test_not_found(self, factory):
        result = _call(factory, "generic-crud", "DELETE", f"/projects/{ObjectId()}")
        assert result["success"] is False
        assert result["message"] == "Project not found"

    def test_invalid_json_body(self, factory):
        result = _call(factory, "generic-crud", "POST", "/members", "{not json")
        assert result["success"] is False
        assert result["message"] == "Request body is not valid JSON"

    def test_non_utf8_body_is_a_validation_failure(self, database):
        result = run("generic-crud", database,
                     FunctionRequest("POST", "/members", body=b"\xff\xfe{"))
        assert result == {"success": False, "message": "Request body is not valid JSON"}

    def test_update_clears_nullable_field(self, factory):
        created = _call(factory, "analyses-crud", "POST", "/", {**ANALYSIS, "insights": ["x"]})
        analysis_id = created["data"]["_id"]
        updated = _call(factory, "analyses-crud", "PUT", f"/{analysis_id}", {"insights": None})
        assert updated["success"] is True
        assert updated["data"]["insights"] is None

    def test_validation_failure_writes_nothing(self, factory):
        result = _call(factory, "generic-crud", "POST", "/members", {"name": "A"})
        assert result["success"] is False
        assert result["errors"]
        assert _call(factory, "generic-crud", "GET", "/members")["total"] == 0

    def test_catalog_create_classifies(self, factory):
        result = _call(factory, "generic-crud", "POST", "/skills", {"name": "Kubernetes"})
        assert result["data"]["category"] == "technique"
        assert result["data"]["memberCount"] == 0


# ═══════════════════════════════════════════════════════════════════════════
# ANALYSES CRUD
# ═══════════════════════════════════════════════════════════════════════════
class TestAnalysesCrud:
    def test_create_and_get(self, factory):
        created = _call(factory, "analyses-crud", "POST", "/analyses-crud", ANALYSIS)
        assert created["success"] is True
        assert created["message"] == "Analysis created"
        analysis_id = created["data"]["_id"]

        fetched = _call(factory, "analyses-crud", "GET", f"/analyses-crud/{analysis_id}")
        assert fetched["data"]["title"] == "Skills overview"
        assert fetched["data"]["status"] == "completed"

        by_collection = _call(factory, "analyses-crud", "GET", f"/analyses/{analysis_id}")
        assert by_collection["data"]["_id"] == analysis_id

    @pytest.mark.parametrize("body", [
        {"title": "No type"},
        {"type": "skills_analysis"},
        {"type": "unknown", "title": "Bad type"},
    ])
    def test_type_and_title_required(self, factory, body):
        result = _call(factory, "analyses-crud", "POST", "/", body)
        assert result["success"] is False
        assert _call(factory, "analyses-crud", "GET", "/")["total"] == 0

    def test_update_and_delete(self, factory):
        analysis_id = _call(factory, "analyses-crud", "POST", "/", ANALYSIS)["data"]["_id"]
        updated = _call(factory, "analyses-crud", "PUT", f"/{analysis_id}", {"status": "failed"})
        assert updated["data"]["status"] == "failed"
        deleted = _call(factory, "analyses-crud", "DELETE", f"/{analysis_id}")
        assert deleted["deletedCount"] == 1

    def test_put_without_id_unsupported(self, factory):
        result = _call(factory, "analyses-crud", "PUT", "/", ANALYSIS)
        assert result["success"] is False


# ═══════════════════════════════════════════════════════════════════════════
# HANDLER OWNERSHIP / FAILURES
# ═══════════════════════════════════════════════════════════════════════════
class TestHandler:
    def test_database_closed_after_each_call(self, factory):
        _call(factory, "generic-crud", "GET", "/members")
        _call(factory, "generic-crud", "GET", "/members/bad-id")
        assert factory.closed == 2

    def test_database_closed_after_unexpected_error(self):
        database = MagicMock()
        database.collection.side_effect = RuntimeError("boom")
        result = handler("generic-crud", {"method": "GET", "path": "/members"},
                         database_factory=lambda: database)
        assert result["success"] is False
        assert result["error"] == "boom"
        database.close.assert_called_once()

    def test_missing_configuration(self):
        config = offline_settings(MONGODB_URI="", MONGODB_DB_NAME="skillmatrix")
        result = handler("generic-crud", {"method": "GET", "path": "/members"},
                         database_factory=lambda: Database.from_settings(config))
        assert result == {"success": False,
                          "message": "MONGODB_URI environment variable is missing"}

    def test_missing_database_name(self):
        config = offline_settings(MONGODB_URI="mongodb://localhost:27017", MONGODB_DB_NAME="")
        result = handler("analyses-crud", {"method": "GET", "path": "/"},
                         database_factory=lambda: Database.from_settings(config))
        assert result["message"] == "MONGODB_DB_NAME environment variable is missing"

    def test_unknown_function(self, factory):
        result = _call(factory, "drop-everything", "GET", "/members")
        assert result["success"] is False
        assert factory.closed == 0

    def test_run_with_function_request(self, database):
        result = run("generic-crud", database, FunctionRequest("GET", "/groups"))
        assert result["success"] is True
        assert result["data"] == []
