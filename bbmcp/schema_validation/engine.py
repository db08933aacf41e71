"""Schema Validation Engine.

Validates raw tool payloads against a JsonSchema before anything touches
session state. Pure logic: no I/O, no state, never raises for well-formed
schemas. Rules run in a fixed order and the first failing rule wins.
"""
from __future__ import annotations

import math
from typing import Any, Callable, List, Mapping, Optional, Union

from bbmcp.schema_validation import messages
from bbmcp.schema_validation.schemas import JsonSchema, ValidationResult

Rule = Callable[[JsonSchema, Any, str], Optional[ValidationResult]]


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def runtime_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_object(value):
        return "object"
    if is_array(value):
        return "array"
    return type(value).__name__


def type_matches(schema_type: Optional[str], value: Any) -> bool:
    if not schema_type:
        return True
    if schema_type == "object":
        return is_object(value)
    if schema_type == "array":
        return is_array(value)
    if schema_type == "string":
        return isinstance(value, str)
    if schema_type == "number":
        # bool is an int subclass; JSON booleans are never numbers
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return math.isfinite(value)
    if schema_type == "boolean":
        return isinstance(value, bool)
    if schema_type == "null":
        return value is None
    return True


def literal_equals(candidate: Any, value: Any) -> bool:
    if isinstance(candidate, bool) or isinstance(value, bool):
        return isinstance(candidate, bool) and isinstance(value, bool) and candidate == value
    return candidate == value


# --- Rules ---

def _type_rule(schema: JsonSchema, value: Any, path: str) -> Optional[ValidationResult]:
    if type_matches(schema.type, value):
        return None
    expected = schema.type or "unknown"
    return ValidationResult.failure(
        message=messages.type_message(path, expected),
        path=path,
        reason="type",
        details={"expected": expected, "actual": runtime_type(value)},
    )


def _enum_rule(schema: JsonSchema, value: Any, path: str) -> Optional[ValidationResult]:
    if schema.enum is None:
        return None
    if any(literal_equals(item, value) for item in schema.enum):
        return None
    return ValidationResult.failure(
        message=messages.enum_message(path, schema.enum),
        path=path,
        reason="enum",
        details={"expected": list(schema.enum), "actual": value},
    )


def _candidate_keys(alternatives: List[JsonSchema]) -> List[str]:
    keys = []
    for candidate in alternatives:
        if not candidate.required:
            continue
        keys.append("+".join(candidate.required))
    return keys


def _any_of_rule(schema: JsonSchema, value: Any, path: str) -> Optional[ValidationResult]:
    if not schema.any_of:
        return None
    last_error: Optional[ValidationResult] = None
    for candidate in schema.any_of:
        result = validate_schema(candidate, value, path)
        if result.ok:
            return None
        last_error = result
    candidate_keys = _candidate_keys(schema.any_of)
    details = {"candidates": candidate_keys}
    if last_error is not None:
        details["last_error"] = {
            "path": last_error.path,
            "reason": last_error.reason,
            "message": last_error.message,
        }
    return ValidationResult.failure(
        message=messages.any_of_message(path, candidate_keys or None),
        path=path,
        reason="anyOf",
        details=details,
    )


def _array_rule(schema: JsonSchema, value: Any, path: str) -> Optional[ValidationResult]:
    if not schema.is_array_node or not is_array(value):
        return None
    if schema.min_items is not None and len(value) < schema.min_items:
        return ValidationResult.failure(
            message=messages.min_items_message(path, schema.min_items),
            path=path,
            reason="minItems",
            details={"expected": schema.min_items, "actual": len(value)},
        )
    if schema.max_items is not None and len(value) > schema.max_items:
        return ValidationResult.failure(
            message=messages.max_items_message(path, schema.max_items),
            path=path,
            reason="maxItems",
            details={"expected": schema.max_items, "actual": len(value)},
        )
    if schema.items is not None:
        for index, item in enumerate(value):
            result = validate_schema(schema.items, item, f"{path}[{index}]")
            if not result.ok:
                return result
    return None


def _object_rule(schema: JsonSchema, value: Any, path: str) -> Optional[ValidationResult]:
    if not schema.is_object_node or not is_object(value):
        return None
    for key in schema.required or []:
        if key not in value:
            return ValidationResult.failure(
                message=messages.required_message(path, key),
                path=f"{path}.{key}",
                reason="required",
                details={"key": key},
            )
    properties = schema.properties or {}
    for key, prop_schema in properties.items():
        if key not in value:
            continue
        result = validate_schema(prop_schema, value[key], f"{path}.{key}")
        if not result.ok:
            return result
    if schema.additional_properties is False:
        for key in value:
            if key not in properties:
                return ValidationResult.failure(
                    message=messages.not_allowed_message(path, str(key)),
                    path=f"{path}.{key}",
                    reason="additionalProperties",
                    details={"key": key},
                )
    return None


RULES: List[Rule] = [_type_rule, _enum_rule, _any_of_rule, _array_rule, _object_rule]


def validate_schema(
    schema: Union[JsonSchema, Mapping[str, Any]],
    value: Any,
    path: str = "$",
) -> ValidationResult:
    """Validate `value` against `schema`, reporting the first failing rule."""
    if not isinstance(schema, JsonSchema):
        schema = JsonSchema.compile(schema)
    for rule in RULES:
        failure = rule(schema, value, path)
        if failure is not None:
            return failure
    return ValidationResult.success()
