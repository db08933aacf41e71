"""Session Reducer - in-place application of mutation commands.

The reducer owns no state: it mutates the SessionState it is handed.
Missing targets are not errors; updates report False and removals count zero
so callers decide what is user-visible.
"""
from __future__ import annotations

import copy
import logging
from typing import AbstractSet, List, Optional, TypeVar, Union

from pydantic import BaseModel

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
    SessionMutation,
    UpdateAnimationCommand,
    UpdateBoneCommand,
    UpdateCubeCommand,
    UpdateTextureCommand,
    UpsertAnimationChannelCommand,
    UpsertAnimationTriggerCommand,
)
from bbmcp.session.models import SessionState, TrackedAnimation

logger = logging.getLogger(__name__)

Named = TypeVar("Named", bound=BaseModel)

MutationResult = Union[None, bool, int, RemoveBonesResult]


def _index_of(items: List[Named], name: str) -> int:
    for index, item in enumerate(items):
        if item.name == name:
            return index
    return -1


def _insert_named(items: List[Named], entity: Named) -> None:
    entity = entity.model_copy(deep=True)
    index = _index_of(items, entity.name)
    if index >= 0:
        items[index] = entity
    else:
        items.append(entity)


def _remove_named(items: List[Named], names: AbstractSet[str]) -> List[str]:
    removed = [item.name for item in items if item.name in names]
    if removed:
        items[:] = [item for item in items if item.name not in names]
    return removed


def _merge(entity: BaseModel, updates: BaseModel) -> None:
    """Overwrite only the fields the caller actually provided."""
    non_nullable = getattr(entity, "NON_NULLABLE", frozenset())
    for field in updates.model_fields_set:
        if field == "new_name":
            continue
        value = getattr(updates, field)
        if value is None and field in non_nullable:
            continue
        setattr(entity, field, copy.deepcopy(value))
    new_name = getattr(updates, "new_name", None)
    if new_name:
        entity.name = new_name


def _find_animation(state: SessionState, clip: str) -> Optional[TrackedAnimation]:
    index = _index_of(state.animations, clip)
    return state.animations[index] if index >= 0 else None


class SessionReducer:
    """Applies mutation commands to SessionState."""

    @staticmethod
    def apply(state: SessionState, command: SessionMutation) -> MutationResult:
        handler = getattr(SessionReducer, f"_apply_{command.type}", None)
        if handler is None:
            logger.warning(f"Unknown session mutation: {command.type}")
            return None
        return handler(state, command)

    # --- Bones ---

    @staticmethod
    def _apply_add_bone(state: SessionState, command: AddBoneCommand) -> None:
        _insert_named(state.bones, command.bone)

    @staticmethod
    def _apply_update_bone(state: SessionState, command: UpdateBoneCommand) -> bool:
        index = _index_of(state.bones, command.name)
        if index < 0:
            logger.debug(f"update_bone: no bone named '{command.name}'")
            return False
        bone = state.bones[index]
        old_name = bone.name
        _merge(bone, command.updates)
        if bone.name != old_name:
            # Keep weak references pointing at the renamed bone.
            for other in state.bones:
                if other is not bone and other.parent == old_name:
                    other.parent = bone.name
            for cube in state.cubes:
                if cube.bone == old_name:
                    cube.bone = bone.name
        return True

    @staticmethod
    def _apply_remove_bones(state: SessionState, command: RemoveBonesCommand) -> RemoveBonesResult:
        removed = set(_remove_named(state.bones, command.names))
        before = len(state.cubes)
        if removed:
            state.cubes[:] = [cube for cube in state.cubes if cube.bone not in removed]
        result = RemoveBonesResult(removed_bones=len(removed), removed_cubes=before - len(state.cubes))
        if removed:
            logger.info(
                f"Removed {result.removed_bones} bone(s) and {result.removed_cubes} owned cube(s)"
            )
        return result

    # --- Cubes ---

    @staticmethod
    def _apply_add_cube(state: SessionState, command: AddCubeCommand) -> None:
        _insert_named(state.cubes, command.cube)

    @staticmethod
    def _apply_update_cube(state: SessionState, command: UpdateCubeCommand) -> bool:
        index = _index_of(state.cubes, command.name)
        if index < 0:
            logger.debug(f"update_cube: no cube named '{command.name}'")
            return False
        _merge(state.cubes[index], command.updates)
        return True

    @staticmethod
    def _apply_remove_cubes(state: SessionState, command: RemoveCubesCommand) -> int:
        return len(_remove_named(state.cubes, command.names))

    # --- Textures ---

    @staticmethod
    def _apply_add_texture(state: SessionState, command: AddTextureCommand) -> None:
        _insert_named(state.textures, command.texture)

    @staticmethod
    def _apply_update_texture(state: SessionState, command: UpdateTextureCommand) -> bool:
        index = _index_of(state.textures, command.name)
        if index < 0:
            logger.debug(f"update_texture: no texture named '{command.name}'")
            return False
        _merge(state.textures[index], command.updates)
        return True

    @staticmethod
    def _apply_remove_textures(state: SessionState, command: RemoveTexturesCommand) -> int:
        return len(_remove_named(state.textures, command.names))

    # --- Animations ---

    @staticmethod
    def _apply_add_animation(state: SessionState, command: AddAnimationCommand) -> None:
        _insert_named(state.animations, command.animation)

    @staticmethod
    def _apply_update_animation(state: SessionState, command: UpdateAnimationCommand) -> bool:
        index = _index_of(state.animations, command.name)
        if index < 0:
            logger.debug(f"update_animation: no animation named '{command.name}'")
            return False
        _merge(state.animations[index], command.updates)
        return True

    @staticmethod
    def _apply_remove_animations(state: SessionState, command: RemoveAnimationsCommand) -> int:
        return len(_remove_named(state.animations, command.names))

    @staticmethod
    def _apply_upsert_animation_channel(state: SessionState, command: UpsertAnimationChannelCommand) -> None:
        anim = _find_animation(state, command.clip)
        if anim is None:
            logger.debug(f"upsert_animation_channel: no animation named '{command.clip}'")
            return None
        channel = command.channel.model_copy(deep=True)
        channels = anim.channels if anim.channels is not None else []
        for index, existing in enumerate(channels):
            if existing.identity == channel.identity:
                channels[index] = channel
                break
        else:
            channels.append(channel)
        anim.channels = channels
        return None

    @staticmethod
    def _apply_upsert_animation_trigger(state: SessionState, command: UpsertAnimationTriggerCommand) -> None:
        anim = _find_animation(state, command.clip)
        if anim is None:
            logger.debug(f"upsert_animation_trigger: no animation named '{command.clip}'")
            return None
        trigger = command.trigger.model_copy(deep=True)
        triggers = anim.triggers if anim.triggers is not None else []
        for index, existing in enumerate(triggers):
            if existing.identity == trigger.identity:
                triggers[index] = trigger
                break
        else:
            triggers.append(trigger)
        anim.triggers = triggers
        return None


def apply_session_mutation(state: SessionState, command: SessionMutation) -> MutationResult:
    """Apply one command to `state` in place and return its primitive result."""
    return SessionReducer.apply(state, command)
