"""Session mutation commands.

Every change to the shadow session is one of these tagged commands; the
reducer is the only code that applies them.
"""
from __future__ import annotations

from typing import Annotated, FrozenSet, Literal, Union

from pydantic import BaseModel, Field

from bbmcp.session.models import (
    AnimationUpdate,
    BoneUpdate,
    CubeUpdate,
    TextureUpdate,
    TrackedAnimation,
    TrackedAnimationChannel,
    TrackedAnimationTrigger,
    TrackedBone,
    TrackedCube,
    TrackedTexture,
)

# Accepts list, tuple, set or frozenset; order is irrelevant.
NameSet = FrozenSet[str]


class AddBoneCommand(BaseModel):
    type: Literal["add_bone"] = "add_bone"
    bone: TrackedBone


class UpdateBoneCommand(BaseModel):
    type: Literal["update_bone"] = "update_bone"
    name: str
    updates: BoneUpdate


class RemoveBonesCommand(BaseModel):
    type: Literal["remove_bones"] = "remove_bones"
    names: NameSet


class AddCubeCommand(BaseModel):
    type: Literal["add_cube"] = "add_cube"
    cube: TrackedCube


class UpdateCubeCommand(BaseModel):
    type: Literal["update_cube"] = "update_cube"
    name: str
    updates: CubeUpdate


class RemoveCubesCommand(BaseModel):
    type: Literal["remove_cubes"] = "remove_cubes"
    names: NameSet


class AddTextureCommand(BaseModel):
    type: Literal["add_texture"] = "add_texture"
    texture: TrackedTexture


class UpdateTextureCommand(BaseModel):
    type: Literal["update_texture"] = "update_texture"
    name: str
    updates: TextureUpdate


class RemoveTexturesCommand(BaseModel):
    type: Literal["remove_textures"] = "remove_textures"
    names: NameSet


class AddAnimationCommand(BaseModel):
    type: Literal["add_animation"] = "add_animation"
    animation: TrackedAnimation


class UpdateAnimationCommand(BaseModel):
    type: Literal["update_animation"] = "update_animation"
    name: str
    updates: AnimationUpdate


class RemoveAnimationsCommand(BaseModel):
    type: Literal["remove_animations"] = "remove_animations"
    names: NameSet


class UpsertAnimationChannelCommand(BaseModel):
    type: Literal["upsert_animation_channel"] = "upsert_animation_channel"
    clip: str
    channel: TrackedAnimationChannel


class UpsertAnimationTriggerCommand(BaseModel):
    type: Literal["upsert_animation_trigger"] = "upsert_animation_trigger"
    clip: str
    trigger: TrackedAnimationTrigger


SessionMutation = Annotated[
    Union[
        AddBoneCommand,
        UpdateBoneCommand,
        RemoveBonesCommand,
        AddCubeCommand,
        UpdateCubeCommand,
        RemoveCubesCommand,
        AddTextureCommand,
        UpdateTextureCommand,
        RemoveTexturesCommand,
        AddAnimationCommand,
        UpdateAnimationCommand,
        RemoveAnimationsCommand,
        UpsertAnimationChannelCommand,
        UpsertAnimationTriggerCommand,
    ],
    Field(discriminator="type"),
]


class RemoveBonesResult(BaseModel):
    removed_bones: int = 0
    removed_cubes: int = 0
