"""Shared domain checks for tool handlers.

Each check returns a failed ToolResponse or None, so handlers read as a
short list of guards followed by the editor call and the session mutation.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

from bbmcp.common.contracts import ToolResponse
from bbmcp.session.store import SessionStateStore

# Wire keys that differ from model field names.
WIRE_ALIASES = {
    "newName": "new_name",
    "from": "from_",
    "boxUv": "box_uv",
    "formatId": "format_id",
    "lineWidth": "line_width",
}


def pick(args: Mapping[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Present wire keys only, renamed to model field names."""
    return {WIRE_ALIASES.get(key, key): args[key] for key in keys if key in args}


def require_active(store: SessionStateStore) -> Optional[ToolResponse]:
    error = store.ensure_active()
    return ToolResponse.from_error(error) if error else None


def require_name(value: Any, field: str = "name") -> Optional[ToolResponse]:
    if not isinstance(value, str) or not value.strip():
        return ToolResponse.failure(
            "invalid_payload",
            f"{field} must be a non-empty string.",
            path=f"$.{field}",
            reason="blank_name",
        )
    return None


def not_found(kind: str, name: str, path: str = "$.name") -> ToolResponse:
    return ToolResponse.failure(
        "not_found",
        f"{kind} not found: {name}.",
        path=path,
        details={kind.lower(): name},
    )


def already_exists(kind: str, name: str, path: str = "$.name") -> ToolResponse:
    return ToolResponse.failure(
        "invalid_payload",
        f"{kind} already exists: {name}.",
        path=path,
        reason="duplicate_name",
        fix=f"Pick a different name or update the existing {kind.lower()}.",
    )
