"""Best-effort type coercion of raw extraction values against TypeDescriptors.

Coercion never raises. Values that cannot be converted are replaced with the
type's default (``0``, ``{}``, ``[]``); pass an ``issues`` list to be told
when that happens.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List, Mapping, Optional

from .models import CanonicalSchema, FieldType, TypeDescriptor

TRUE_STRINGS = {"true", "yes", "1"}

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")

_MISSING = object()


def _note(issues: Optional[List[str]], message: str) -> None:
    if issues is not None:
        issues.append(message)


def _normalize_number(value: float) -> float | int:
    if value.is_integer():
        return int(value)
    return value


def _parse_number(value: Any) -> Optional[float | int]:
    """Return the numeric value of ``value`` or None when it is not a number."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return _normalize_number(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if _HEX_RE.match(text):
            return int(text, 16)
        if _DECIMAL_RE.match(text):
            parsed = float(text)
            if not math.isfinite(parsed):
                return None
            return _normalize_number(parsed)
        return None
    if isinstance(value, list):
        if not value:
            return 0
        if len(value) == 1:
            return _parse_number(value[0])
    return None


def is_truthy(value: Any) -> bool:
    """Truthiness where empty lists and mappings still count as values."""
    if value is None:
        return False
    if isinstance(value, (list, dict)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join("" if item is None else stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def coerce(value: Any, descriptor: TypeDescriptor, issues: Optional[List[str]] = None, path: str = "$") -> Any:
    """Recursively convert ``value`` to the type ``descriptor`` declares."""
    kind = descriptor.type

    if kind is FieldType.STRING:
        return None if value is None else stringify(value)

    if kind is FieldType.NUMBER:
        number = _parse_number(value)
        if number is None:
            _note(issues, f"{path}: could not parse {value!r} as a number, using 0")
            return 0
        return number

    if kind is FieldType.BOOLEAN:
        if isinstance(value, str):
            return value.lower() in TRUE_STRINGS
        return is_truthy(value)

    if kind is FieldType.ARRAY:
        if not isinstance(value, list):
            value = [value] if is_truthy(value) else []
        if descriptor.max_items and len(value) > descriptor.max_items:
            value = value[: descriptor.max_items]
        if descriptor.items is not None:
            return [coerce(item, descriptor.items, issues, f"{path}[{idx}]") for idx, item in enumerate(value)]
        return list(value)

    if kind is FieldType.OBJECT:
        if not isinstance(value, Mapping):
            if value is not None:
                _note(issues, f"{path}: expected an object, got {type(value).__name__}; using {{}}")
            value = {}
        if descriptor.properties is None:
            return value
        result: Dict[str, Any] = {}
        for name, prop in descriptor.properties.items():
            if name in value or name in descriptor.required:
                result[name] = coerce(value.get(name), prop, issues, f"{path}.{name}")
        return result

    # "null" and unrecognized type tags pass through untouched.
    return value


def coerce_fields(
    raw: Mapping[str, Any],
    schema: CanonicalSchema,
    issues: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Coerce every schema field found in ``raw``, applying the inclusion policy.

    Missing fields are dropped unless listed in their descriptor's ``required``;
    null fields survive only when the descriptor is nullable.
    """
    result: Dict[str, Any] = {}
    for name in schema.field_names():
        descriptor = schema.descriptor_for(name)
        value = raw.get(name, _MISSING)
        if value is _MISSING:
            if name not in descriptor.required:
                continue
            value = None
        elif value is None:
            if descriptor.nullable:
                result[name] = None
            continue
        result[name] = coerce(value, descriptor, issues, name)
    return result


__all__ = ["coerce", "coerce_fields", "is_truthy", "stringify", "TRUE_STRINGS"]
