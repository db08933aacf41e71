"""Shadow session: entity model, mutation reducer, mutator facade and store."""
from bbmcp.session.commands import RemoveBonesResult, SessionMutation
from bbmcp.session.models import (
    AnimationUpdate,
    BoneUpdate,
    CubeUpdate,
    SessionState,
    TextureResolution,
    TextureUpdate,
    TrackedAnimation,
    TrackedAnimationChannel,
    TrackedAnimationKey,
    TrackedAnimationTrigger,
    TrackedBone,
    TrackedCube,
    TrackedTexture,
    TrackedTriggerKey,
)
from bbmcp.session.mutators import SessionMutators
from bbmcp.session.reducer import SessionReducer, apply_session_mutation
from bbmcp.session.store import SessionStateStore

__all__ = [
    "AnimationUpdate",
    "BoneUpdate",
    "CubeUpdate",
    "RemoveBonesResult",
    "SessionMutation",
    "SessionMutators",
    "SessionReducer",
    "SessionState",
    "SessionStateStore",
    "TextureResolution",
    "TextureUpdate",
    "TrackedAnimation",
    "TrackedAnimationChannel",
    "TrackedAnimationKey",
    "TrackedAnimationTrigger",
    "TrackedBone",
    "TrackedCube",
    "TrackedTexture",
    "TrackedTriggerKey",
    "apply_session_mutation",
]
