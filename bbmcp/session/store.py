"""Session state store: owns the live shadow session."""
from __future__ import annotations

import hashlib
import logging
import uuid
from typing import Optional

from pydantic import BaseModel

from bbmcp.common.contracts import ToolError, ToolResponse
from bbmcp.session.models import SessionState

logger = logging.getLogger(__name__)

PROJECT_NO_ACTIVE = "No active project. Create or attach a project first."
REVISION_FIX = "Call project.state and retry with ifRevision set to the returned revision."


class ProjectInfo(BaseModel):
    id: str
    format: str
    name: Optional[str] = None


class SessionStateStore:
    """
    Holds the one mutable SessionState of this process.

    `get_state` is the accessor handed to SessionMutators; `create`, `attach`
    and `reset` replace the live object, and the facade picks the new one up
    on its next call.
    """

    def __init__(self):
        self._state = SessionState()

    def create(self, format: str, name: str, format_id: Optional[str] = None) -> ProjectInfo:
        project_id = uuid.uuid4().hex
        self._state = SessionState(id=project_id, format=format, format_id=format_id, name=name)
        logger.info(f"Session created: {name} ({format})")
        return ProjectInfo(id=project_id, format=format, name=name)

    def attach(self, snapshot: SessionState) -> ToolResponse:
        """Adopt a snapshot read from the host application."""
        if not snapshot.format:
            return ToolResponse.failure("invalid_state", PROJECT_NO_ACTIVE)
        state = snapshot.model_copy(deep=True)
        if not state.id:
            state.id = uuid.uuid4().hex
        self._state = state
        logger.info(
            f"Session attached: {len(state.bones)} bone(s), {len(state.cubes)} cube(s), "
            f"{len(state.textures)} texture(s), {len(state.animations)} animation(s)"
        )
        return ToolResponse.success(ProjectInfo(id=state.id, format=state.format, name=state.name))

    def reset(self) -> None:
        self._state = SessionState()

    def snapshot(self) -> SessionState:
        return self._state.model_copy(deep=True)

    def ensure_active(self) -> Optional[ToolError]:
        if not self._state.id or not self._state.format:
            return ToolError(
                code="invalid_state",
                message=PROJECT_NO_ACTIVE,
                details={"reason": "no_active_project"},
            )
        return None

    def get_state(self) -> SessionState:
        return self._state

    def revision(self) -> str:
        """Content hash of the live state; any mutation changes it."""
        raw = self._state.model_dump_json(by_alias=True)
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]

    def check_revision(self, expected: Optional[str], required: bool = False) -> Optional[ToolError]:
        current = self.revision()
        if not expected:
            if not required:
                return None
            return ToolError(
                code="invalid_state",
                message="ifRevision is required. Read project.state before mutating.",
                fix=REVISION_FIX,
                details={"reason": "missing_revision", "current_revision": current},
            )
        if expected != current:
            logger.info(f"Stale revision {expected}; current is {current}")
            return ToolError(
                code="invalid_state",
                message="Project revision mismatch. Refresh project state before retrying.",
                fix=REVISION_FIX,
                details={"reason": "revision_mismatch", "expected": expected, "current_revision": current},
            )
        return None
