"""Typed schema model shared by the normalizer, extractor, and coercer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"

    @classmethod
    def parse(cls, value: Any) -> Optional["FieldType"]:
        try:
            return cls(value)
        except ValueError:
            return None


# Type names accepted as bare values in a flat selector map ("null" is not one of them).
SCALAR_TYPE_NAMES = ("string", "number", "boolean", "object", "array")


class ExtractionStrategy(str, Enum):
    """How the extractor reads a field, decided from the field name."""

    TEXT = "text"
    HREF = "href"
    COMMENT_COUNT = "comment_count"


def resolve_strategy(field_name: str) -> ExtractionStrategy:
    lowered = field_name.lower()
    if "url" in lowered:
        return ExtractionStrategy.HREF
    if "comment" in lowered:
        return ExtractionStrategy.COMMENT_COUNT
    return ExtractionStrategy.TEXT


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@dataclass(frozen=True)
class TypeDescriptor:
    """Recursive description of how a raw value is coerced.

    ``source`` keeps the mapping the descriptor was parsed from so the
    canonical schema renders back to the same JSON it was read from.
    """

    type: Optional[FieldType] = None
    nullable: bool = True
    description: Optional[str] = None
    format: Optional[str] = None
    enum: Optional[List[str]] = None
    required: List[str] = field(default_factory=list)
    max_items: Optional[int] = None
    min_items: Optional[int] = None
    items: Optional["TypeDescriptor"] = None
    properties: Optional[Dict[str, "TypeDescriptor"]] = None
    selector: Optional[str] = None
    source: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TypeDescriptor":
        items = data.get("items")
        properties = data.get("properties")
        required = data.get("required")
        nullable = data.get("nullable")
        return cls(
            type=FieldType.parse(data.get("type")),
            nullable=nullable if isinstance(nullable, bool) else True,
            description=data.get("description") if isinstance(data.get("description"), str) else None,
            format=data.get("format") if isinstance(data.get("format"), str) else None,
            enum=[str(v) for v in data["enum"]] if isinstance(data.get("enum"), list) else None,
            required=[str(r) for r in required] if isinstance(required, list) else [],
            max_items=_int_or_none(data.get("maxItems")),
            min_items=_int_or_none(data.get("minItems")),
            items=cls.from_dict(items) if isinstance(items, Mapping) else None,
            properties=(
                {str(k): cls.from_dict(v) for k, v in properties.items() if isinstance(v, Mapping)}
                if isinstance(properties, Mapping)
                else None
            ),
            selector=data.get("selector") if isinstance(data.get("selector"), str) else None,
            source=dict(data),
        )

    @classmethod
    def of(cls, type_name: str, **extra: Any) -> "TypeDescriptor":
        """Build a descriptor from keyword fields, recording them as its source."""
        return cls.from_dict({"type": type_name, **extra})

    def to_dict(self) -> Dict[str, Any]:
        if self.source:
            return dict(self.source)
        data: Dict[str, Any] = {"type": self.type.value if self.type else None, "nullable": self.nullable}
        if self.description is not None:
            data["description"] = self.description
        return data


DEFAULT_DESCRIPTOR = TypeDescriptor.of("string", nullable=True)


@dataclass(frozen=True)
class CanonicalSchema:
    """Selector map plus typed structure map; the only shape extraction sees."""

    selectors: Dict[str, str] = field(default_factory=dict)
    structure: Dict[str, TypeDescriptor] = field(default_factory=dict)
    strategies: Dict[str, ExtractionStrategy] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategies", {name: resolve_strategy(name) for name in self.selectors})

    def descriptor_for(self, field_name: str) -> TypeDescriptor:
        return self.structure.get(field_name, DEFAULT_DESCRIPTOR)

    def field_names(self) -> List[str]:
        names = list(self.structure)
        names.extend(name for name in self.selectors if name not in self.structure)
        return names

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selectors": dict(self.selectors),
            "structure": {name: desc.to_dict() for name, desc in self.structure.items()},
        }


__all__ = [
    "CanonicalSchema",
    "DEFAULT_DESCRIPTOR",
    "ExtractionStrategy",
    "FieldType",
    "SCALAR_TYPE_NAMES",
    "TypeDescriptor",
    "resolve_strategy",
]
