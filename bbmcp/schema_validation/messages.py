"""Human-readable messages for schema validation failures."""
from __future__ import annotations

from typing import Any, List, Optional


def type_message(path: str, expected: str) -> str:
    return f"{path} must be {expected}."


def enum_message(path: str, candidates: List[Any]) -> str:
    options = ", ".join(str(item) for item in candidates)
    return f"{path} must be one of: {options}."


def any_of_message(path: str, candidate_keys: Optional[List[str]] = None) -> str:
    if candidate_keys:
        return f"{path} must include one of: {', '.join(candidate_keys)}."
    return f"{path} does not match any allowed shape."


def min_items_message(path: str, minimum: int) -> str:
    return f"{path} must contain at least {minimum} item(s)."


def max_items_message(path: str, maximum: int) -> str:
    return f"{path} must contain at most {maximum} item(s)."


def required_message(path: str, key: str) -> str:
    return f"{path}.{key} is required."


def not_allowed_message(path: str, key: str) -> str:
    return f"{path}.{key} is not allowed."
