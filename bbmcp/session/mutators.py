"""Session mutator facade.

One method per entity operation. Each builds the matching command and hands it
to the reducer against whatever state the accessor returns right now, so a
store can swap its live state (reset, attach) without callers holding a stale
reference. Payloads are expected to be schema-validated before they get here.
"""
from __future__ import annotations

from typing import Callable, Iterable

from bbmcp.session.commands import (
    AddAnimationCommand,
    AddBoneCommand,
    AddCubeCommand,
    AddTextureCommand,
    RemoveAnimationsCommand,
    RemoveBonesCommand,
    RemoveBonesResult,
    RemoveCubesCommand,
    RemoveTexturesCommand,
    UpdateAnimationCommand,
    UpdateBoneCommand,
    UpdateCubeCommand,
    UpdateTextureCommand,
    UpsertAnimationChannelCommand,
    UpsertAnimationTriggerCommand,
)
from bbmcp.session.models import (
    AnimationUpdate,
    BoneUpdate,
    CubeUpdate,
    SessionState,
    TextureUpdate,
    TrackedAnimation,
    TrackedAnimationChannel,
    TrackedAnimationTrigger,
    TrackedBone,
    TrackedCube,
    TrackedTexture,
)
from bbmcp.session.reducer import apply_session_mutation


def _name_set(names: Iterable[str]) -> frozenset:
    if isinstance(names, str):
        return frozenset([names])
    return frozenset(names)


class SessionMutators:
    def __init__(self, get_state: Callable[[], SessionState]):
        self._get_state = get_state

    def add_bone(self, bone: TrackedBone) -> None:
        apply_session_mutation(self._get_state(), AddBoneCommand(bone=bone))

    def update_bone(self, name: str, updates: BoneUpdate) -> bool:
        return apply_session_mutation(self._get_state(), UpdateBoneCommand(name=name, updates=updates))

    def remove_bones(self, names: Iterable[str]) -> RemoveBonesResult:
        return apply_session_mutation(self._get_state(), RemoveBonesCommand(names=_name_set(names)))

    def add_cube(self, cube: TrackedCube) -> None:
        apply_session_mutation(self._get_state(), AddCubeCommand(cube=cube))

    def update_cube(self, name: str, updates: CubeUpdate) -> bool:
        return apply_session_mutation(self._get_state(), UpdateCubeCommand(name=name, updates=updates))

    def remove_cubes(self, names: Iterable[str]) -> int:
        return apply_session_mutation(self._get_state(), RemoveCubesCommand(names=_name_set(names)))

    def add_texture(self, texture: TrackedTexture) -> None:
        apply_session_mutation(self._get_state(), AddTextureCommand(texture=texture))

    def update_texture(self, name: str, updates: TextureUpdate) -> bool:
        return apply_session_mutation(self._get_state(), UpdateTextureCommand(name=name, updates=updates))

    def remove_textures(self, names: Iterable[str]) -> int:
        return apply_session_mutation(self._get_state(), RemoveTexturesCommand(names=_name_set(names)))

    def add_animation(self, animation: TrackedAnimation) -> None:
        apply_session_mutation(self._get_state(), AddAnimationCommand(animation=animation))

    def update_animation(self, name: str, updates: AnimationUpdate) -> bool:
        return apply_session_mutation(self._get_state(), UpdateAnimationCommand(name=name, updates=updates))

    def remove_animations(self, names: Iterable[str]) -> int:
        return apply_session_mutation(self._get_state(), RemoveAnimationsCommand(names=_name_set(names)))

    def upsert_animation_channel(self, clip: str, channel: TrackedAnimationChannel) -> None:
        apply_session_mutation(
            self._get_state(), UpsertAnimationChannelCommand(clip=clip, channel=channel)
        )

    def upsert_animation_trigger(self, clip: str, trigger: TrackedAnimationTrigger) -> None:
        apply_session_mutation(
            self._get_state(), UpsertAnimationTriggerCommand(clip=clip, trigger=trigger)
        )
