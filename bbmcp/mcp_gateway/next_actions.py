"""Next-action hints derived from the shadow session."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel

from bbmcp.session.models import SessionState


class NextAction(BaseModel):
    tool: str
    reason: str


def suggest_next_actions(state: SessionState) -> List[NextAction]:
    """Ordered suggestions; validation is always offered last."""
    if not state.id or not state.format:
        return [NextAction(tool="project.create", reason="No active project.")]

    actions: List[NextAction] = []
    if not state.bones:
        actions.append(NextAction(tool="model.add_bone", reason="Add a root bone to hang cubes from."))
    if not state.cubes:
        actions.append(NextAction(tool="model.add_cube", reason="The model has no geometry yet."))
    if not state.textures:
        actions.append(NextAction(tool="texture.create", reason="No textures exist."))
    else:
        unassigned = [tex.name for tex in state.textures if not tex.assigned]
        if unassigned:
            actions.append(NextAction(
                tool="texture.assign",
                reason=f"Unassigned texture(s): {', '.join(unassigned)}.",
            ))
    actions.append(NextAction(tool="project.validate", reason="Check the model before export."))
    return actions
