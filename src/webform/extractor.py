"""Field extraction: walk a parsed document with a CanonicalSchema's selectors."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from .coercion import coerce_fields
from .document import Document, parse_html
from .models import CanonicalSchema, ExtractionStrategy
from .output import assemble

logger = logging.getLogger(__name__)

COMMENT_COUNT_RE = re.compile(r"(\d+)\s+comments?")


def _extract_href(document: Document, selector: str) -> Any:
    nodes = document.select(selector)
    if len(nodes) > 1:
        hrefs = (document.attr(node, "href") for node in nodes)
        return [href for href in hrefs if href is not None]
    if not nodes:
        return None
    return document.attr(nodes[0], "href") or None


def _extract_comment_count(document: Document, selector: str) -> str:
    text = document.joined_text(document.select(selector))
    match = COMMENT_COUNT_RE.search(text)
    if match:
        return match.group(1)
    return text


def _extract_text(document: Document, selector: str) -> Any:
    nodes = document.select(selector)
    if len(nodes) > 1:
        return [document.text(node) for node in nodes]
    if not nodes:
        return None
    return document.text(nodes[0])


_STRATEGIES = {
    ExtractionStrategy.HREF: _extract_href,
    ExtractionStrategy.COMMENT_COUNT: _extract_comment_count,
    ExtractionStrategy.TEXT: _extract_text,
}


def extract(document: Document, schema: CanonicalSchema) -> Dict[str, Any]:
    """Return the raw value of every selector field; failures resolve to None."""
    raw: Dict[str, Any] = {}
    for name, selector in schema.selectors.items():
        strategy = schema.strategies.get(name, ExtractionStrategy.TEXT)
        try:
            raw[name] = _STRATEGIES[strategy](document, selector)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to extract data for '%s' with selector '%s': %s", name, selector, exc)
            raw[name] = None
            continue
        logger.debug("Field %s (%s) via %r -> %r", name, strategy.value, selector, raw[name])
    return raw


def extract_html(html: str, schema: CanonicalSchema) -> Dict[str, Any]:
    return extract(parse_html(html), schema)


def extract_structured(
    document: Document,
    schema: CanonicalSchema,
    source: Optional[str] = None,
    issues: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Extract, coerce, and wrap the result with ``_metadata``."""
    raw = extract(document, schema)
    return assemble(coerce_fields(raw, schema, issues), source=source)


__all__ = ["extract", "extract_html", "extract_structured", "COMMENT_COUNT_RE"]
