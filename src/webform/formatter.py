"""LLM reformatting of extracted data, with a local coercion fallback."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from . import prompts
from .coercion import coerce_fields, stringify
from .llm import LLMClient, LLMError
from .models import CanonicalSchema
from .output import assemble, exclude_metadata

logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json") :]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_json_reply(text: str) -> Any:
    """Decode an LLM reply that may be wrapped in a Markdown code block."""
    return json.loads(strip_code_fences(text))


def format_with_llm(data: Mapping[str, Any], selectors: Optional[Mapping[str, str]], client: LLMClient) -> str:
    """Ask the model to lay out plain extracted data according to the selector map."""
    flat = {key: "" if value is None else stringify(value) for key, value in exclude_metadata(data).items()}
    return client.complete(prompts.build_format_prompt(flat, selectors))


def summarize_with_llm(data: Mapping[str, Any], client: LLMClient) -> str:
    return client.complete(prompts.build_summary_prompt(data))


def format_structured_output(
    data: Mapping[str, Any],
    schema: CanonicalSchema,
    client: LLMClient,
    source: Optional[str] = None,
    issues: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Have the model conform ``data`` to the schema structure.

    Falls back to local coercion when the call fails or the reply is not a
    JSON object.
    """
    fields = exclude_metadata(data)
    structure = schema.to_dict()["structure"]
    try:
        reply = client.complete(prompts.build_structured_prompt(fields, structure))
    except LLMError as exc:
        logger.error("Error generating structured output: %s", exc)
        return assemble(coerce_fields(fields, schema, issues), source=source)
    try:
        formatted = parse_json_reply(reply)
    except json.JSONDecodeError as exc:
        logger.error("Error parsing LLM response as JSON: %s", exc)
        return assemble(coerce_fields(fields, schema, issues), source=source)
    if not isinstance(formatted, dict):
        logger.error("LLM response is JSON but not an object; using local coercion")
        return assemble(coerce_fields(fields, schema, issues), source=source)
    return assemble(exclude_metadata(formatted), source=source)


__all__ = [
    "format_structured_output",
    "format_with_llm",
    "parse_json_reply",
    "strip_code_fences",
    "summarize_with_llm",
]
