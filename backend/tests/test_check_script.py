"""
Tests for the source health check script.
Run from backend: python -m pytest tests/test_check_script.py -v
"""
from unittest.mock import patch


def test_api_health_check_script(monkeypatch):
    """At least one source ok -> exit 0; all fail -> exit 1."""
    from scripts.check_external_apis import main
    monkeypatch.setenv("OPEN_FOOD_FACTS_ENABLED", "true")
    monkeypatch.setenv("MATVARETABELLEN_ENABLED", "true")
    with patch("scripts.check_external_apis.check_open_food_facts", return_value=(True, "ok")), \
            patch("scripts.check_external_apis.check_kassalapp", return_value=(False, "no key")), \
            patch("scripts.check_external_apis.check_matvaretabellen", return_value=(False, "timeout")):
        assert main() == 0
    with patch("scripts.check_external_apis.check_open_food_facts", return_value=(False, "timeout")), \
            patch("scripts.check_external_apis.check_kassalapp", return_value=(False, "no key")), \
            patch("scripts.check_external_apis.check_matvaretabellen", return_value=(True, "ok (3 foods)")):
        assert main() == 0
    with patch("scripts.check_external_apis.check_open_food_facts", return_value=(False, "timeout")), \
            patch("scripts.check_external_apis.check_kassalapp", return_value=(False, "no key")), \
            patch("scripts.check_external_apis.check_matvaretabellen", return_value=(False, "timeout")):
        assert main() == 1


def test_disabled_sources_are_not_probed(monkeypatch):
    from scripts.check_external_apis import main
    monkeypatch.setenv("OPEN_FOOD_FACTS_ENABLED", "false")
    monkeypatch.setenv("MATVARETABELLEN_ENABLED", "false")
    with patch("scripts.check_external_apis.check_open_food_facts") as off, \
            patch("scripts.check_external_apis.check_kassalapp", return_value=(False, "no key")), \
            patch("scripts.check_external_apis.check_matvaretabellen") as mvt:
        assert main() == 1
        off.assert_not_called()
        mvt.assert_not_called()


def test_kassalapp_check_without_key():
    from scripts.check_external_apis import check_kassalapp
    ok, msg = check_kassalapp("")
    assert not ok
    assert "KASSALAPP_API_KEY" in msg
