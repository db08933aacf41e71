"""Tool call contracts shared by the session store and the gateway."""
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

ToolErrorCode = Literal[
    "invalid_payload",
    "invalid_state",
    "not_found",
    "editor_error",
    "limit_exceeded",
]


class ToolError(BaseModel):
    """Typed failure returned (never raised) by tool handlers."""
    code: ToolErrorCode
    message: str
    path: Optional[str] = None
    reason: Optional[str] = None
    fix: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ToolResponse(BaseModel):
    ok: bool
    data: Optional[Any] = None
    error: Optional[ToolError] = None

    @staticmethod
    def success(data: Any = None) -> "ToolResponse":
        return ToolResponse(ok=True, data=data)

    @staticmethod
    def failure(
        code: ToolErrorCode,
        message: str,
        *,
        path: Optional[str] = None,
        reason: Optional[str] = None,
        fix: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ToolResponse":
        error = ToolError(
            code=code,
            message=message,
            path=path,
            reason=reason,
            fix=fix,
            details=details or {},
        )
        return ToolResponse(ok=False, error=error)

    @staticmethod
    def from_error(error: ToolError) -> "ToolResponse":
        return ToolResponse(ok=False, error=error)
