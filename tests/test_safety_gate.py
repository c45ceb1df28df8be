# FILE: tests/test_safety_gate.py
"""
Tests for fixit/safety/gate.py
Lexical deny filter in front of every request.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import json

import pytest

from fixit.safety.gate import (
    FALLBACK_POLICY,
    SafetyGate,
    SafetyPolicy,
    load_policy,
)


@pytest.fixture
def gate():
    return SafetyGate(SafetyPolicy.from_dict(FALLBACK_POLICY))


class TestDenial:
    """Requests combining a dangerous verb with a protected target."""

    def test_delete_woocommerce_denied(self, gate):
        decision = gate.check("delete woocommerce")
        assert decision.allowed is False
        assert decision.reason == "Critical plugin operation (woocommerce) requires manual confirmation"

    def test_case_insensitive(self, gate):
        decision = gate.check("Please UNINSTALL Elementor now")
        assert decision.allowed is False
        assert decision.target == "elementor"
        assert decision.verb == "uninstall"

    def test_first_target_in_policy_order_wins(self, gate):
        decision = gate.check("delete yoast-seo and woocommerce")
        assert decision.target == "woocommerce"

    def test_over_broad_denial_is_known_behaviour(self, gate):
        """The verb and the target need not belong together."""
        decision = gate.check("delete old posts and deactivate woocommerce")
        assert decision.allowed is False
        assert decision.target == "woocommerce"


class TestAllowed:
    """Requests the gate lets through."""

    def test_dangerous_verb_alone(self, gate):
        assert gate.check("delete the draft post 12").allowed is True

    def test_protected_target_alone(self, gate):
        assert gate.check("update woocommerce settings").allowed is True

    def test_empty_request(self, gate):
        decision = gate.check("")
        assert decision.allowed is True
        assert decision.reason is None

    def test_paraphrase_is_a_known_false_negative(self, gate):
        assert gate.check("remove woo commerce").allowed is True


class TestPolicyLoading:
    """Policy file loading and fallback."""

    def test_loads_custom_policy(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text(json.dumps({"dangerous_verbs": ["Wipe"], "protected_targets": ["Shop"]}))
        load_policy.cache_clear()
        try:
            policy = load_policy(str(path))
        finally:
            load_policy.cache_clear()
        assert policy.dangerous_verbs == ("wipe",)
        assert SafetyGate(policy).check("wipe the shop").allowed is False

    def test_missing_file_falls_back(self, tmp_path):
        load_policy.cache_clear()
        try:
            policy = load_policy(str(tmp_path / "missing.json"))
        finally:
            load_policy.cache_clear()
        assert policy == SafetyPolicy.from_dict(FALLBACK_POLICY)

    def test_invalid_file_falls_back(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text('{"dangerous_verbs": "delete"}')
        load_policy.cache_clear()
        try:
            policy = load_policy(str(path))
        finally:
            load_policy.cache_clear()
        assert "woocommerce" in policy.protected_targets

    def test_shipped_policy_matches_defaults(self):
        path = _project_root / "config" / "safety_policy.json"
        data = json.loads(path.read_text())
        assert SafetyPolicy.from_dict(data) == SafetyPolicy.from_dict(FALLBACK_POLICY)
