"""Read-only lookups over the shadow session (weak references resolved by scan)."""
from __future__ import annotations

from typing import List, Optional

from bbmcp.session.models import (
    SessionState,
    TrackedAnimation,
    TrackedBone,
    TrackedCube,
    TrackedTexture,
)


def find_bone(state: SessionState, name: str) -> Optional[TrackedBone]:
    return next((bone for bone in state.bones if bone.name == name), None)


def find_cube(state: SessionState, name: str) -> Optional[TrackedCube]:
    return next((cube for cube in state.cubes if cube.name == name), None)


def find_texture(state: SessionState, name: str) -> Optional[TrackedTexture]:
    return next((tex for tex in state.textures if tex.name == name), None)


def find_animation(state: SessionState, name: str) -> Optional[TrackedAnimation]:
    return next((anim for anim in state.animations if anim.name == name), None)


def cubes_for_bone(state: SessionState, bone_name: str) -> List[TrackedCube]:
    return [cube for cube in state.cubes if cube.bone == bone_name]


def collect_descendant_bones(bones: List[TrackedBone], name: str) -> List[str]:
    """Names of every bone below `name`, breadth first. Cycles are tolerated."""
    descendants: List[str] = []
    seen = {name}
    frontier = [name]
    while frontier:
        current = frontier.pop(0)
        for bone in bones:
            if bone.parent == current and bone.name not in seen:
                seen.add(bone.name)
                descendants.append(bone.name)
                frontier.append(bone.name)
    return descendants


def is_descendant_bone(bones: List[TrackedBone], ancestor: str, candidate: str) -> bool:
    return candidate in collect_descendant_bones(bones, ancestor)
