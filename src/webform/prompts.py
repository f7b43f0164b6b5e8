import json
from typing import Any, Mapping, Optional

STRUCTURED_REQUIREMENTS = [
    "Ensure all values are of the correct type specified in the schema",
    "Format values according to any format specifications",
    "Ensure arrays have the right structure and don't exceed maxItems",
    "For objects, include all required properties",
    "Ensure the output is valid JSON that strictly follows the schema structure",
    "Don't include properties that aren't in the schema",
]

STRUCTURED_REQUIREMENTS_TEXT = "\n".join(f"{idx}. {req}" for idx, req in enumerate(STRUCTURED_REQUIREMENTS, start=1))


def build_format_prompt(data: Mapping[str, Any], selectors: Optional[Mapping[str, str]]) -> str:
    schema_text = json.dumps(selectors) if selectors else "No schema provided"
    return f"Format the following data according to the schema: {schema_text}. Data: {json.dumps(data)}"


def build_summary_prompt(data: Mapping[str, Any]) -> str:
    return (
        "Process and analyze the following data extracted from a web page. "
        "Provide a coherent summary and highlight key information:\n\n"
        f"{json.dumps(data, indent=2, ensure_ascii=False)}"
    )


def build_structured_prompt(data: Mapping[str, Any], structure: Mapping[str, Any]) -> str:
    return (
        "I need to convert this extracted web data into a structured format that strictly conforms "
        "to the provided schema.\n\n"
        f"EXTRACTED DATA:\n{json.dumps(data, indent=2, ensure_ascii=False)}\n\n"
        f"TARGET SCHEMA:\n{json.dumps(structure, indent=2, ensure_ascii=False)}\n\n"
        f"Requirements:\n{STRUCTURED_REQUIREMENTS_TEXT}\n\n"
        "Return ONLY the formatted JSON response without explanations."
    )
