"""Configuration loader for webform.

Reads the project YAML file, merges the per-user rc file written by
``webform config set``, applies environment variable overrides, and returns
typed dataclasses consumed across the CLI and boundary collaborators.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_USER_FILE = Path.home() / ".webform.yaml"


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    return value


def _merge_dicts(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: Dict[str, Any], prefix: str = "WEBFORM") -> Dict[str, Any]:
    """Override config using env vars like WEBFORM_FETCH__RETRIES=3."""
    overrides: Dict[str, Any] = {}
    for env_key, env_val in os.environ.items():
        if not env_key.startswith(prefix + "_"):
            continue
        trimmed = env_key[len(prefix) + 1 :]
        keys = trimmed.lower().split("__")
        if len(keys) < 2:
            continue
        cursor = overrides
        for key in keys[:-1]:
            cursor = cursor.setdefault(key, {})
        section = keys[0] if len(keys) == 2 else ""
        cursor[keys[-1]] = _coerce_for_field(section, keys[-1], env_val)
    return _merge_dicts(config, overrides)


def _coerce_env_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in {"true", "yes"}:
        return True
    if lowered in {"false", "no"}:
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _coerce_for_field(section: str, name: str, value: str) -> Any:
    """Keep string-typed settings (api keys, model names) as text."""
    cls = _SECTIONS.get(section)
    if cls is not None and name in {f.name for f in fields(cls)}:
        default = getattr(cls(), name)
        if isinstance(default, str) or default is None:
            return value
    return _coerce_env_value(value)


@dataclass
class FetchSettings:
    retries: int = 0
    backoff_base: float = 1.0
    timeout: float = 20.0
    user_agent: str = "webform/0.1"


@dataclass
class LLMSettings:
    backend: str = "ollama"  # ollama | openai
    model: str = "mixtral:8x7b"
    ollama_host: str = "http://localhost:11434"
    api_key: Optional[str] = None
    temperature: float = 0.0
    timeout: float = 120.0


@dataclass
class OutputSettings:
    format: str = "json"  # json | text
    include_metadata: bool = True
    indentation: int = 2


@dataclass
class SchemaSettings:
    schemas_dir: str = "schemas"


@dataclass
class Config:
    fetch: FetchSettings = field(default_factory=FetchSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    schemas: SchemaSettings = field(default_factory=SchemaSettings)


_SECTIONS = {
    "fetch": FetchSettings,
    "llm": LLMSettings,
    "output": OutputSettings,
    "schemas": SchemaSettings,
}


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return _expand_env(yaml.safe_load(f) or {})


def load_config(
    path: Optional[Path | str] = None,
    env_prefix: str = "WEBFORM",
    user_file: Optional[Path | str] = None,
) -> Config:
    """Load YAML config, merge the user rc file, then env overrides."""
    data = _read_yaml(Path(path) if path else Path("webform.yaml"))
    data = _merge_dicts(data, _read_yaml(Path(user_file) if user_file else DEFAULT_USER_FILE))
    merged_dict = _apply_env_overrides(data, prefix=env_prefix)
    return map_dict_to_config(merged_dict)


def map_dict_to_config(data: Dict[str, Any]) -> Config:
    return Config(**{name: cls(**(data.get(name) or {})) for name, cls in _SECTIONS.items()})


def _split_key(key: str) -> tuple[str, str]:
    section, _, name = key.partition(".")
    cls = _SECTIONS.get(section)
    if cls is None or name not in {f.name for f in fields(cls)}:
        raise KeyError(f"Unknown configuration key: {key}")
    return section, name


def set_user_value(key: str, value: Any, user_file: Optional[Path | str] = None) -> Path:
    """Persist a dotted key such as ``llm.api_key`` to the user rc file."""
    section, name = _split_key(key)
    path = Path(user_file) if user_file else DEFAULT_USER_FILE
    data = _read_yaml(path)
    if isinstance(value, str):
        value = _coerce_for_field(section, name, value)
    data.setdefault(section, {})[name] = value
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=True)
    return path


def get_user_value(key: str, config: Config) -> Any:
    section, name = _split_key(key)
    return getattr(getattr(config, section), name)


def config_as_dict(config: Config, redact: bool = True) -> Dict[str, Any]:
    data = asdict(config)
    if redact and data["llm"].get("api_key"):
        data["llm"]["api_key"] = "***"
    return data


__all__ = [
    "Config",
    "FetchSettings",
    "LLMSettings",
    "OutputSettings",
    "SchemaSettings",
    "config_as_dict",
    "get_user_value",
    "load_config",
    "map_dict_to_config",
    "set_user_value",
]
