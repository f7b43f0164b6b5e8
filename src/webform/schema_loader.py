"""Locate, read, and parse named schema files from the schemas directory."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from .models import CanonicalSchema
from .normalizer import normalize

logger = logging.getLogger(__name__)

PACKAGE_SCHEMAS_PARENT = Path(__file__).parent


class SchemaError(Exception):
    def __init__(self, message: str, schema_name: str) -> None:
        super().__init__(message)
        self.schema_name = schema_name


class SchemaNotFoundError(SchemaError):
    pass


class InvalidSchemaError(SchemaError):
    pass


def resolve_schemas_dir(schemas_dir: Path | str) -> Path:
    """Fall back to the bundled schemas when a relative directory is not found."""
    directory = Path(schemas_dir)
    if directory.is_absolute() or directory.is_dir():
        return directory
    bundled = PACKAGE_SCHEMAS_PARENT / directory
    if bundled.is_dir():
        return bundled
    return directory


def schema_path(name: str, schemas_dir: Path | str) -> Path:
    return resolve_schemas_dir(schemas_dir) / f"{name}.json"


def view_schema(name: str, schemas_dir: Path | str) -> str:
    path = schema_path(name, schemas_dir)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SchemaNotFoundError(f"Schema file not found: {name}", name) from exc
    except OSError as exc:
        raise SchemaError(f"Error reading schema file: {name} - {exc}", name) from exc


def load_raw_schema(name: str, schemas_dir: Path | str) -> Any:
    text = view_schema(name, schemas_dir)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidSchemaError(f"Invalid schema file: {name} - {exc}", name) from exc


def load_schema(name: str, schemas_dir: Path | str) -> CanonicalSchema:
    schema = normalize(load_raw_schema(name, schemas_dir))
    logger.debug("Loaded schema %s with fields %s", name, schema.field_names())
    return schema


def list_schemas(schemas_dir: Path | str) -> List[str]:
    directory = resolve_schemas_dir(schemas_dir)
    if not directory.is_dir():
        logger.warning("Schemas directory not found: %s", directory)
        return []
    return sorted(path.stem for path in directory.glob("*.json"))


__all__ = [
    "InvalidSchemaError",
    "SchemaError",
    "SchemaNotFoundError",
    "list_schemas",
    "load_raw_schema",
    "load_schema",
    "resolve_schemas_dir",
    "schema_path",
    "view_schema",
]
