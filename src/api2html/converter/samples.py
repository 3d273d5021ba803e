"""Example values and property tables derived from JSON schemas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .refs import RefResolver, ref_name

MAX_DEPTH = 8

FORMAT_SAMPLES: dict[str, Any] = {
    "date-time": "2019-08-24T14:15:22Z",
    "date": "2019-08-24",
    "time": "14:15:22Z",
    "email": "user@example.com",
    "uuid": "095be615-a8ad-4c33-8e9c-c7612fbf6c9f",
    "uri": "http://example.com",
    "url": "http://example.com",
    "hostname": "example.com",
    "ipv4": "192.168.0.1",
    "ipv6": "2001:db8::1",
    "password": "pa$$word",
    "byte": "string",
    "binary": "string",
}

TYPE_SAMPLES: dict[str, Any] = {
    "string": "string",
    "integer": 0,
    "number": 0,
    "boolean": True,
    "null": None,
}


def _schema_type(schema: dict[str, Any]) -> str | None:
    value = schema.get("type")
    if isinstance(value, list):
        concrete = [item for item in value if item != "null"]
        return concrete[0] if concrete else "null"
    if isinstance(value, str):
        return value
    if "properties" in schema or "additionalProperties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return None


def merge_all_of(schema: dict[str, Any], resolver: RefResolver) -> dict[str, Any]:
    """Flatten ``allOf`` members into a single object schema."""

    parts = schema.get("allOf")
    if not isinstance(parts, list):
        return schema
    merged: dict[str, Any] = {key: value for key, value in schema.items() if key != "allOf"}
    properties: dict[str, Any] = dict(merged.get("properties", {}))
    required: list[str] = list(merged.get("required", []))
    for part in parts:
        part = merge_all_of(resolver.deref(part), resolver)
        if not isinstance(part, dict):
            continue
        properties.update(part.get("properties", {}))
        for name in part.get("required", []):
            if name not in required:
                required.append(name)
        for key, value in part.items():
            if key not in {"properties", "required"}:
                merged.setdefault(key, value)
    if properties:
        merged["properties"] = properties
        merged.setdefault("type", "object")
    if required:
        merged["required"] = required
    return merged


def sample_value(
    schema: Any,
    resolver: RefResolver,
    *,
    depth: int = 0,
    seen: frozenset[str] = frozenset(),
) -> Any:
    """Build a deterministic example value for *schema*."""

    if not isinstance(schema, dict) or depth > MAX_DEPTH:
        return None
    ref = schema.get("$ref")
    if isinstance(ref, str):
        if ref in seen:
            return {}
        seen = seen | {ref}
    schema = merge_all_of(resolver.deref(schema), resolver)
    if not isinstance(schema, dict):
        return None

    if "example" in schema:
        return schema["example"]
    examples = schema.get("examples")
    if isinstance(examples, list) and examples:
        return examples[0]
    if "default" in schema:
        return schema["default"]
    if isinstance(schema.get("enum"), list) and schema["enum"]:
        return schema["enum"][0]
    if "const" in schema:
        return schema["const"]
    for keyword in ("oneOf", "anyOf"):
        options = schema.get(keyword)
        if isinstance(options, list) and options:
            return sample_value(options[0], resolver, depth=depth + 1, seen=seen)

    schema_type = _schema_type(schema)
    if schema_type == "object":
        result: dict[str, Any] = {}
        for name, prop in (schema.get("properties") or {}).items():
            result[name] = sample_value(prop, resolver, depth=depth + 1, seen=seen)
        extra = schema.get("additionalProperties")
        if isinstance(extra, dict) and not result:
            result["property1"] = sample_value(extra, resolver, depth=depth + 1, seen=seen)
            result["property2"] = sample_value(extra, resolver, depth=depth + 1, seen=seen)
        return result
    if schema_type == "array":
        item = sample_value(schema.get("items", {}), resolver, depth=depth + 1, seen=seen)
        return [item]
    if schema_type == "string":
        return FORMAT_SAMPLES.get(str(schema.get("format", "")), "string")
    if schema_type in {"integer", "number"}:
        minimum = schema.get("minimum")
        return minimum if isinstance(minimum, (int, float)) else 0
    if schema_type in TYPE_SAMPLES:
        return TYPE_SAMPLES[schema_type]
    return None


def expand_schema(
    schema: Any,
    resolver: RefResolver,
    *,
    depth: int = 0,
    seen: frozenset[str] = frozenset(),
) -> Any:
    """Return *schema* with internal references inlined, cycles cut."""

    if isinstance(schema, list):
        return [expand_schema(item, resolver, depth=depth, seen=seen) for item in schema]
    if not isinstance(schema, dict) or depth > MAX_DEPTH:
        return schema
    ref = schema.get("$ref")
    if isinstance(ref, str):
        if ref in seen:
            return {"$ref": ref}
        return expand_schema(resolver.deref(schema), resolver, depth=depth + 1, seen=seen | {ref})
    return {key: expand_schema(value, resolver, depth=depth + 1, seen=seen) for key, value in schema.items()}


def schema_link(ref: str) -> str:
    name = ref_name(ref)
    return f"[{name}](#schema{name.lower()})"


def describe_type(schema: Any, resolver: RefResolver) -> str:
    """Short type label used in parameter and property tables."""

    if not isinstance(schema, dict):
        return "any"
    ref = schema.get("$ref")
    if isinstance(ref, str):
        return schema_link(ref)
    schema = merge_all_of(schema, resolver)
    schema_type = _schema_type(schema)
    if schema_type == "array":
        return f"[{describe_type(schema.get('items', {}), resolver)}]"
    if schema_type is None:
        for keyword in ("oneOf", "anyOf"):
            if isinstance(schema.get(keyword), list):
                return keyword
        return "any"
    fmt = schema.get("format")
    return f"{schema_type}({fmt})" if fmt else schema_type


def restrictions(schema: dict[str, Any]) -> str:
    parts: list[str] = []
    if schema.get("readOnly"):
        parts.append("read-only")
    if schema.get("writeOnly"):
        parts.append("write-only")
    if schema.get("nullable"):
        parts.append("nullable")
    if schema.get("deprecated"):
        parts.append("deprecated")
    return " ".join(parts) or "none"


@dataclass(slots=True)
class PropertyRow:
    name: str
    type: str
    required: bool
    restrictions: str
    description: str


def property_rows(
    schema: Any,
    resolver: RefResolver,
    *,
    prefix: str = "",
    depth: int = 0,
    max_depth: int = 3,
    seen: frozenset[str] = frozenset(),
) -> list[PropertyRow]:
    """Flatten the properties of an object schema into table rows.

    Nested objects are listed beneath their parent with a ``»`` marker per
    level, down to *max_depth* levels.
    """

    if not isinstance(schema, dict):
        return []
    ref = schema.get("$ref")
    if isinstance(ref, str):
        if ref in seen:
            return []
        seen = seen | {ref}
    schema = merge_all_of(resolver.deref(schema), resolver)
    if not isinstance(schema, dict):
        return []
    if _schema_type(schema) == "array":
        return property_rows(
            schema.get("items", {}), resolver, prefix=prefix, depth=depth, max_depth=max_depth, seen=seen
        )

    required = set(schema.get("required", []))
    rows: list[PropertyRow] = []
    for name, prop in (schema.get("properties") or {}).items():
        concrete = resolver.deref(prop) if isinstance(prop, dict) else {}
        rows.append(
            PropertyRow(
                name=f"{prefix}{name}",
                type=describe_type(prop, resolver),
                required=name in required,
                restrictions=restrictions(concrete) if isinstance(concrete, dict) else "none",
                description=one_line(concrete.get("description", "none") if isinstance(concrete, dict) else "none"),
            )
        )
        if depth + 1 < max_depth:
            rows.extend(
                property_rows(
                    prop,
                    resolver,
                    prefix=f"{prefix}» ",
                    depth=depth + 1,
                    max_depth=max_depth,
                    seen=seen,
                )
            )
    return rows


def one_line(text: Any) -> str:
    return " ".join(str(text).split()).replace("|", "\\|")


__all__ = [
    "PropertyRow",
    "describe_type",
    "expand_schema",
    "merge_all_of",
    "one_line",
    "property_rows",
    "restrictions",
    "sample_value",
    "schema_link",
]
