import json

import pytest

from ai_orch.config import ConfigManager, deep_merge
from ai_orch.config.default_config import CONFIG


def test_deep_merge_recurses_into_dicts():
    base = {"a": {"x": 1, "y": 2}, "b": [1, 2], "c": 1}
    merged = deep_merge(base, {"a": {"y": 3}, "b": [9]})

    assert merged == {"a": {"x": 1, "y": 3}, "b": [9], "c": 1}
    # base is untouched
    assert base["a"]["y"] == 2


def test_defaults(monkeypatch):
    monkeypatch.delenv("AI_ORCH_CONFIG", raising=False)
    config = ConfigManager().get_active_config()

    assert config["model_list"] == CONFIG["model_list"]
    assert config["session_settings"]["max_context_messages"] == 15
    # defaults are copied, not shared
    assert config is not CONFIG


def test_overrides_file_from_env(monkeypatch, tmp_path):
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps({
        "session_settings": {"max_context_messages": 5},
        "model_list": [{"id": "only", "provider": "groq", "label": "Only", "priority": 1}],
    }), encoding="utf-8")
    monkeypatch.setenv("AI_ORCH_CONFIG", str(path))

    config = ConfigManager().get_active_config()

    assert config["session_settings"]["max_context_messages"] == 5
    assert config["session_settings"]["system_prompt"] == CONFIG["session_settings"]["system_prompt"]
    assert [m["id"] for m in config["model_list"]] == ["only"]


def test_overrides_file_must_be_object(tmp_path):
    path = tmp_path / "overrides.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigManager(overrides_path=str(path))


def test_explicit_overrides_win(monkeypatch):
    monkeypatch.delenv("AI_ORCH_CONFIG", raising=False)
    manager = ConfigManager(overrides={"http_client_settings": {"timeout": 5}})
    assert manager.get_active_config()["http_client_settings"]["timeout"] == 5


def test_update_global_config(monkeypatch):
    monkeypatch.delenv("AI_ORCH_CONFIG", raising=False)
    manager = ConfigManager()
    manager.update_global_config({"model_list": []})
    assert manager.get_active_config() == {"model_list": []}
