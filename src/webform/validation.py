"""Advisory structural validation of canonical schemas.

The contract is expressed as pydantic models and compiled once into a
``TypeAdapter`` on first use. Validation never raises; callers decide whether
a failed report is fatal.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, TypeAdapter, ValidationError

from .models import CanonicalSchema
from .normalizer import normalize
from .schema_loader import SchemaError, load_raw_schema


class DescriptorContract(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["string", "number", "boolean", "object", "array", "null"]
    description: Optional[StrictStr] = None
    nullable: Optional[StrictBool] = None
    format: Optional[StrictStr] = None
    items: Optional["DescriptorContract"] = None
    properties: Optional[Dict[str, "DescriptorContract"]] = None


class SchemaContract(BaseModel):
    model_config = ConfigDict(extra="allow")

    selectors: Dict[str, StrictStr]
    structure: Dict[str, DescriptorContract]


DescriptorContract.model_rebuild()


@dataclass(frozen=True)
class SchemaDiagnostic:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: Optional[List[SchemaDiagnostic]] = None


@lru_cache(maxsize=1)
def schema_validator() -> TypeAdapter:
    return TypeAdapter(SchemaContract)


def _diagnostics(exc: ValidationError) -> List[SchemaDiagnostic]:
    return [
        SchemaDiagnostic(path="/" + "/".join(str(part) for part in err["loc"]), message=err["msg"])
        for err in exc.errors()
    ]


def validate(schema: CanonicalSchema | Mapping[str, Any]) -> ValidationReport:
    """Check a canonical schema (or its JSON form) against the structural contract."""
    try:
        data = schema.to_dict() if isinstance(schema, CanonicalSchema) else schema
        schema_validator().validate_python(data)
    except ValidationError as exc:
        return ValidationReport(valid=False, errors=_diagnostics(exc))
    except Exception as exc:  # noqa: BLE001
        return ValidationReport(valid=False, errors=[SchemaDiagnostic(path="", message=str(exc))])
    return ValidationReport(valid=True, errors=None)


def validate_schema_file(name: str, schemas_dir: Path | str) -> ValidationReport:
    """Load a named schema, normalize it, and validate the result."""
    try:
        raw = load_raw_schema(name, schemas_dir)
    except SchemaError as exc:
        return ValidationReport(valid=False, errors=[SchemaDiagnostic(path="", message=str(exc))])
    return validate(normalize(raw))


__all__ = [
    "SchemaDiagnostic",
    "ValidationReport",
    "schema_validator",
    "validate",
    "validate_schema_file",
]
