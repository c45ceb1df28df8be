# FILE: tests/test_api.py
"""
Tests for the /actions, /audit and /health endpoints.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from fixit.audit.service import AuditLog
from fixit.capabilities.generator import LLMCapabilityGenerator
from fixit.capabilities.handlers import HandlerSpec
from fixit.capabilities.registry import CapabilityRegistry
from fixit.capabilities.schemas import CapabilitySpec
from fixit.dispatch.dispatcher import Dispatcher
from fixit.intent import IntentResolver
from fixit.safety.gate import FALLBACK_POLICY, SafetyGate, SafetyPolicy

WP_BODY = {
    "store_type": "wordpress",
    "store_url": "https://blog.example.com",
    "username": "admin",
    "app_password": "abcd efgh",
}


async def _clear_cache(client, params):
    return {"success": True, "message": "Cache cleared via wp-rocket", "plugin": "wp-rocket"}


@pytest.fixture
def registry(database):
    catalog = {"clear_cache": HandlerSpec("clear_cache", "Clear cache", _clear_cache, platforms=("wordpress",))}
    return CapabilityRegistry(database, catalog=catalog)


@pytest.fixture
def client(database, registry, scripted_generation):
    from main import app

    intent = json.dumps({"type": "cache_management", "action": "clear", "target": "unknown"})
    audit_log = AuditLog(database)
    app.state.database = database
    app.state.audit_log = audit_log
    app.state.dispatcher = Dispatcher(
        safety_gate=SafetyGate(SafetyPolicy.from_dict(FALLBACK_POLICY)),
        resolver=IntentResolver(scripted_generation(intent)),
        registry=registry,
        generator=LLMCapabilityGenerator(scripted_generation("no capability for that")),
        audit_log=audit_log,
        client_factory=lambda connection, timeout_s=None: MagicMock(),
        invoke_timeout_s=2.0,
    )
    return TestClient(app)


@pytest.fixture
def connection_id(client):
    return client.post("/connections", json=WP_BODY).json()["id"]


class TestExecute:

    def test_success(self, client, registry, connection_id):
        registry.register(CapabilitySpec(name="purge_cache", description="Clear the cache", operation="clear_cache"))

        resp = client.post("/actions/execute", json={"request": "clear the cache", "connection_id": connection_id})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["status"] == "success"
        assert body["capability_name"] == "purge_cache"
        assert body["output"]["plugin"] == "wp-rocket"
        assert body["record_id"] is not None

    def test_denied_is_not_an_http_error(self, client, connection_id):
        resp = client.post(
            "/actions/execute", json={"request": "uninstall woocommerce", "connection_id": connection_id}
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "denied"
        assert resp.json()["error_kind"] == "policy_denied"

    def test_generation_failure_reported(self, client, connection_id):
        resp = client.post("/actions/execute", json={"request": "paint it red", "connection_id": connection_id})
        body = resp.json()
        assert body["success"] is False
        assert body["error_kind"] == "generation_failed"

    def test_unknown_connection(self, client):
        resp = client.post("/actions/execute", json={"request": "clear the cache", "connection_id": "nope"})
        assert resp.status_code == 404

    def test_inactive_connection(self, client, connection_id):
        client.delete(f"/connections/{connection_id}")
        resp = client.post("/actions/execute", json={"request": "clear the cache", "connection_id": connection_id})
        assert resp.status_code == 404

    def test_empty_request_rejected(self, client, connection_id):
        resp = client.post("/actions/execute", json={"request": "", "connection_id": connection_id})
        assert resp.status_code == 422


class TestCapabilityEndpoints:

    def test_list_get_deactivate(self, client, registry):
        registry.register(CapabilitySpec(name="purge_cache", description="Clear the cache", operation="clear_cache"))

        assert [c["name"] for c in client.get("/actions/capabilities").json()] == ["purge_cache"]
        assert client.get("/actions/capabilities/purge_cache").json()["operation"] == "clear_cache"

        resp = client.post("/actions/capabilities/purge_cache/deactivate")
        assert resp.status_code == 200
        assert resp.json()["is_active"] is False
        assert client.get("/actions/capabilities").json() == []
        assert len(client.get("/actions/capabilities", params={"include_inactive": True}).json()) == 1

    def test_missing_capability(self, client):
        assert client.get("/actions/capabilities/nope").status_code == 404
        assert client.post("/actions/capabilities/nope/deactivate").status_code == 404

    def test_operations(self, client):
        operations = {op["operation"]: op for op in client.get("/actions/operations").json()}
        assert "clear_cache" in operations
        assert operations["create_discount"]["platforms"] == ["shopify"]


class TestAuditEndpoints:

    def test_records_and_summary(self, client, registry, connection_id):
        registry.register(CapabilitySpec(name="purge_cache", description="Clear the cache", operation="clear_cache"))
        record_id = client.post(
            "/actions/execute", json={"request": "clear the cache", "connection_id": connection_id}
        ).json()["record_id"]
        client.post("/actions/execute", json={"request": "delete elementor", "connection_id": connection_id})

        records = client.get("/audit/records").json()
        assert len(records) == 2

        denied = client.get("/audit/records", params={"status": "denied"}).json()
        assert [r["capability_name"] for r in denied] == ["none"]

        assert client.get(f"/audit/records/{record_id}").json()["capability_name"] == "purge_cache"
        assert client.get("/audit/records/9999").status_code == 404

        summary = client.get("/audit/summary").json()
        assert summary == {"total": 2, "by_status": {"success": 1, "denied": 1}}

    def test_limit_bounds(self, client):
        assert client.get("/audit/records", params={"limit": 0}).status_code == 422
        assert client.get("/audit/records", params={"limit": 1}).status_code == 200


class TestHealth:

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["database"] is True
