"""Schema normalization: every accepted schema shape converges on CanonicalSchema.

Accepted shapes, tried in order:

1. canonical ``{"selectors": {...}, "structure": {...}}``
2. JSON-Schema flavoured ``{"type": ..., "properties": {...}}`` with optional
   inline ``selector`` keys on each property
3. legacy ``{"fields": {...}}``
4. a flat ``{field: selector}`` map, the fallback for anything else

Each parser returns a schema or ``None``; the first success wins.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import SCALAR_TYPE_NAMES, CanonicalSchema, TypeDescriptor

logger = logging.getLogger(__name__)

SELECTOR_MARKERS = (".", "#", "[")


def _string_descriptor(selector: str) -> TypeDescriptor:
    return TypeDescriptor.of("string", description=f"Extracted from {selector}", nullable=True)


def looks_like_selector(value: str) -> bool:
    return any(marker in value for marker in SELECTOR_MARKERS)


def _parse_canonical(raw: Mapping[str, Any]) -> Optional[CanonicalSchema]:
    if "selectors" not in raw or "structure" not in raw:
        return None
    selectors = raw.get("selectors")
    structure = raw.get("structure")
    selectors = selectors if isinstance(selectors, Mapping) else {}
    structure = structure if isinstance(structure, Mapping) else {}
    return CanonicalSchema(
        selectors={str(k): v for k, v in selectors.items() if isinstance(v, str)},
        structure={str(k): TypeDescriptor.from_dict(v) for k, v in structure.items() if isinstance(v, Mapping)},
    )


def _parse_property_style(raw: Mapping[str, Any]) -> Optional[CanonicalSchema]:
    if "type" not in raw and "properties" not in raw:
        return None
    properties = raw.get("properties")
    if properties is None:
        return CanonicalSchema(selectors={}, structure={"root": TypeDescriptor.from_dict(raw)})
    selectors: Dict[str, str] = {}
    structure: Dict[str, TypeDescriptor] = {}
    if not isinstance(properties, Mapping):
        return CanonicalSchema(selectors=selectors, structure=structure)
    for name, prop in properties.items():
        if not isinstance(prop, Mapping):
            logger.debug("Skipping property %r: not an object", name)
            continue
        selector = prop.get("selector")
        if isinstance(selector, str):
            selectors[name] = selector
            structure[name] = TypeDescriptor.from_dict({k: v for k, v in prop.items() if k != "selector"})
        else:
            structure[name] = TypeDescriptor.from_dict(prop)
    return CanonicalSchema(selectors=selectors, structure=structure)


def _parse_fields_style(raw: Mapping[str, Any]) -> Optional[CanonicalSchema]:
    fields = raw.get("fields")
    if not isinstance(fields, Mapping):
        return None
    selectors: Dict[str, str] = {}
    structure: Dict[str, TypeDescriptor] = {}
    for name, value in fields.items():
        if isinstance(value, str):
            selectors[name] = value
            structure[name] = _string_descriptor(value)
        elif isinstance(value, Mapping) and isinstance(value.get("selector"), str):
            selector = value["selector"]
            nullable = value.get("nullable")
            selectors[name] = selector
            structure[name] = TypeDescriptor.of(
                value.get("type") or "string",
                description=value.get("description") or f"Extracted from {selector}",
                nullable=nullable if nullable is not None else True,
            )
    return CanonicalSchema(selectors=selectors, structure=structure)


def _parse_flat(raw: Mapping[str, Any]) -> CanonicalSchema:
    selectors: Dict[str, str] = {}
    structure: Dict[str, TypeDescriptor] = {}
    for name, value in raw.items():
        if not isinstance(value, str):
            continue
        if looks_like_selector(value):
            selectors[name] = value
            structure[name] = _string_descriptor(value)
        elif value in SCALAR_TYPE_NAMES:
            structure[name] = TypeDescriptor.of(value, nullable=True)
    return CanonicalSchema(selectors=selectors, structure=structure)


_PARSERS: List[Callable[[Mapping[str, Any]], Optional[CanonicalSchema]]] = [
    _parse_canonical,
    _parse_property_style,
    _parse_fields_style,
    _parse_flat,
]


def normalize(raw: Any) -> CanonicalSchema:
    """Convert a loaded schema definition of any accepted shape into a CanonicalSchema."""
    if isinstance(raw, CanonicalSchema):
        return raw
    if not isinstance(raw, Mapping):
        logger.warning("Schema is not a JSON object (%s); using an empty schema", type(raw).__name__)
        return CanonicalSchema()
    for parser in _PARSERS:
        schema = parser(raw)
        if schema is not None:
            logger.debug("Schema normalized by %s: %d selectors", parser.__name__, len(schema.selectors))
            return schema
    return CanonicalSchema()


__all__ = ["normalize", "looks_like_selector"]
