"""JSON Schemas for structured tool reports.

Reports are checked against a Draft 7 schema before their fields are read,
so a report of the wrong shape is rejected as a whole instead of half-parsed.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft7Validator


def schema_from_fields(
    required: dict[str, str] | None = None,
    optional: dict[str, str] | None = None,
    title: str | None = None,
) -> dict[str, Any]:
    """Build an object JSON Schema from field definitions.

    Types: "string", "integer", "number", "boolean", "null", "object",
    "array" (of anything) and "array:object" (of objects).
    Use "integer|null" for nullable fields.

    Args:
        required: Dict of required field names to JSON types.
        optional: Dict of optional field names to JSON types.
        title: Optional schema title.

    Returns:
        JSON Schema dict.
    """
    properties: dict[str, Any] = {}

    def parse_type(type_str: str) -> dict[str, Any]:
        """Parse a type string to a JSON Schema type definition."""
        if "|" in type_str:
            return {"anyOf": [parse_type(t.strip()) for t in type_str.split("|")]}
        if type_str.startswith("array:"):
            return {"type": "array", "items": {"type": type_str[6:]}}
        return {"type": type_str}

    for name, type_str in (required or {}).items():
        properties[name] = parse_type(type_str)
    for name, type_str in (optional or {}).items():
        properties[name] = parse_type(type_str)

    schema: dict[str, Any] = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": properties,
        "required": list(required or {}),
    }
    if title:
        schema["title"] = title
    return schema


# Top level of `biome check --reporter=json` and `biome format --reporter=json`
BIOME_REPORT_SCHEMA = schema_from_fields(
    optional={
        "diagnostics": "array:object|null",
        "summary": "object|null",
    },
    title="BiomeReport",
)

# Counters inside the report summary
BIOME_SUMMARY_SCHEMA = schema_from_fields(
    optional={
        "errors": "integer|null",
        "warnings": "integer|null",
        "changed": "integer|null",
    },
    title="BiomeSummary",
)

_BIOME_REPORT_VALIDATOR = Draft7Validator(BIOME_REPORT_SCHEMA)
_BIOME_SUMMARY_VALIDATOR = Draft7Validator(BIOME_SUMMARY_SCHEMA)


def biome_report_errors(data: Any) -> list[str]:
    """Return schema violations of a decoded Biome report (empty means valid)."""
    errors = [e.message for e in _BIOME_REPORT_VALIDATOR.iter_errors(data)]
    if not errors and isinstance(data, dict) and data.get("summary"):
        errors = [e.message for e in _BIOME_SUMMARY_VALIDATOR.iter_errors(data["summary"])]
    return errors
