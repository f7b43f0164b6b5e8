"""Output assembly and rendering for structured and free-text results."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

METADATA_KEY = "_metadata"
SCHEMA_VERSION = "1.0"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def assemble(fields: Mapping[str, Any], source: Optional[str] = None) -> Dict[str, Any]:
    """Merge coerced fields with a fresh ``_metadata`` entry."""
    metadata: Dict[str, Any] = {"schemaVersion": SCHEMA_VERSION, "extractedAt": _now_iso()}
    if source:
        metadata["source"] = source
    return {**fields, METADATA_KEY: metadata}


def exclude_metadata(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key != METADATA_KEY}


def format_as_text(data: Any, indent: int = 0) -> str:
    """Render nested data as ``key: value`` lines with ``- item`` lists."""
    if data is None:
        return "null"
    if isinstance(data, bool):
        return "true" if data else "false"
    if isinstance(data, (str, int, float)):
        return str(data)
    pad = " " * indent
    if isinstance(data, list):
        if not data:
            return "[]"
        return "\n".join(f"{pad}- {format_as_text(item, indent + 2).strip()}" for item in data)
    if isinstance(data, Mapping):
        if not data:
            return "{}"
        lines = []
        for key, value in data.items():
            value_text = format_as_text(value, indent + 2)
            if key == METADATA_KEY and indent == 0:
                lines.append(f"\n// Metadata:\n{pad}{key}: {value_text}")
            else:
                lines.append(f"{pad}{key}: {value_text}")
        return "\n".join(lines)
    return str(data)


def render_structured(
    data: Mapping[str, Any],
    fmt: str = "json",
    include_metadata: bool = True,
    indentation: int = 2,
) -> str:
    output_data = dict(data) if include_metadata else exclude_metadata(data)
    if fmt == "json":
        return json.dumps(output_data, indent=indentation, ensure_ascii=False)
    return format_as_text(output_data)


def render_formatted(text: str, fmt: str = "json", indentation: int = 2) -> str:
    """Pretty-print an LLM reply as JSON when possible, otherwise return it as-is."""
    if fmt != "json":
        return text
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Response is not valid JSON, outputting as text instead.")
        return text
    return json.dumps(parsed, indent=indentation, ensure_ascii=False)


def write_output(text: str, save_path: Optional[Path | str] = None) -> None:
    if save_path:
        path = Path(save_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.info("Output saved to %s", path)
    else:
        print(text)


__all__ = [
    "METADATA_KEY",
    "SCHEMA_VERSION",
    "assemble",
    "exclude_metadata",
    "format_as_text",
    "render_formatted",
    "render_structured",
    "write_output",
]
