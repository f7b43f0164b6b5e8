import pytest

from webform.config import config_as_dict, get_user_value, load_config, set_user_value


def test_env_override(monkeypatch, tmp_path):
    cfg_file = tmp_path / "cfg.yaml"
    cfg_file.write_text("fetch:\n  retries: 1\n", encoding="utf-8")
    monkeypatch.setenv("WEBFORM_FETCH__RETRIES", "5")
    config = load_config(cfg_file, user_file=tmp_path / "missing.yaml")
    assert config.fetch.retries == 5


def test_user_file_overrides_project_file(tmp_path):
    cfg_file = tmp_path / "cfg.yaml"
    cfg_file.write_text("llm:\n  model: base-model\n  backend: ollama\n", encoding="utf-8")
    user_file = tmp_path / "user.yaml"
    set_user_value("llm.model", "gpt-4o-mini", user_file=user_file)
    set_user_value("output.include_metadata", "false", user_file=user_file)
    set_user_value("llm.api_key", "12345", user_file=user_file)
    config = load_config(cfg_file, user_file=user_file)
    assert config.llm.model == "gpt-4o-mini"
    assert config.llm.backend == "ollama"
    assert config.output.include_metadata is False
    assert get_user_value("llm.api_key", config) == "12345"
    assert config_as_dict(config)["llm"]["api_key"] == "***"


def test_unknown_keys_are_rejected(tmp_path):
    with pytest.raises(KeyError):
        set_user_value("llm.colour", "blue", user_file=tmp_path / "user.yaml")
    with pytest.raises(KeyError):
        set_user_value("nonsense", "1", user_file=tmp_path / "user.yaml")


def test_env_override_keeps_string_settings_as_text(monkeypatch, tmp_path):
    monkeypatch.setenv("WEBFORM_LLM__API_KEY", "12345")
    monkeypatch.setenv("WEBFORM_FETCH__RETRIES", "3")
    config = load_config(tmp_path / "missing.yaml", user_file=tmp_path / "missing-user.yaml")
    assert config.llm.api_key == "12345"
    assert config.fetch.retries == 3
