"""Snapshot validation: structural and limit checks over the shadow session."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from bbmcp.model_validation.schemas import Limits, ValidationFinding
from bbmcp.session.models import SessionState, TrackedCube

logger = logging.getLogger(__name__)

EPSILON = 1e-6

Bounds = Tuple[List[float], List[float]]


def _finding(code: str, message: str, severity: str) -> ValidationFinding:
    return ValidationFinding(code=code, message=message, severity=severity)


def _duplicates(values: Iterable[str]) -> List[str]:
    seen = set()
    dupes: List[str] = []
    for value in values:
        if value in seen and value not in dupes:
            dupes.append(value)
        seen.add(value)
    return dupes


def _is_unrotated(rotation: Optional[List[float]]) -> bool:
    return not rotation or all(r == 0 for r in rotation)


def _bounds(cube: TrackedCube) -> Bounds:
    inflate = cube.inflate or 0.0
    low = [min(a, b) - inflate for a, b in zip(cube.from_, cube.to)]
    high = [max(a, b) + inflate for a, b in zip(cube.from_, cube.to)]
    # Negative inflate can invert an axis.
    for axis in range(3):
        if low[axis] > high[axis]:
            low[axis], high[axis] = high[axis], low[axis]
    return low, high


def _contains(outer: Bounds, inner: Bounds) -> bool:
    return all(outer[0][i] <= inner[0][i] + EPSILON for i in range(3)) and all(
        outer[1][i] >= inner[1][i] - EPSILON for i in range(3)
    )


def find_cube_containments(cubes: List[TrackedCube]) -> List[Tuple[str, str]]:
    """(inner, outer) pairs of unrotated cubes on the same bone where one box encloses the other."""
    by_bone: Dict[str, List[Tuple[str, Bounds]]] = {}
    for cube in cubes:
        if not _is_unrotated(cube.rotation):
            continue
        by_bone.setdefault(cube.bone, []).append((cube.name, _bounds(cube)))

    pairs: List[Tuple[str, str]] = []
    for entries in by_bone.values():
        for i, (name_a, box_a) in enumerate(entries):
            for name_b, box_b in entries[i + 1:]:
                a_holds_b = _contains(box_a, box_b)
                b_holds_a = _contains(box_b, box_a)
                if a_holds_b and b_holds_a:
                    pair = tuple(sorted((name_a, name_b)))
                elif a_holds_b:
                    pair = (name_b, name_a)
                elif b_holds_a:
                    pair = (name_a, name_b)
                else:
                    continue
                if pair not in pairs:
                    pairs.append(pair)
    return pairs


def validate_snapshot(state: SessionState, limits: Optional[Limits] = None) -> List[ValidationFinding]:
    limits = limits or Limits.from_config()
    findings: List[ValidationFinding] = []

    bone_names = {bone.name for bone in state.bones}
    if not state.bones:
        findings.append(_finding("no_bones", "No bones found. Add a root bone before adding cubes.", "warning"))

    for cube in state.cubes:
        if cube.bone not in bone_names:
            findings.append(_finding(
                "orphan_cube", f"Cube '{cube.name}' references missing bone '{cube.bone}'.", "error"
            ))

    for name in _duplicates(bone.name for bone in state.bones):
        findings.append(_finding("duplicate_bone", f"Duplicate bone name: {name}.", "error"))
    for name in _duplicates(cube.name for cube in state.cubes):
        findings.append(_finding("duplicate_cube", f"Duplicate cube name: {name}.", "error"))

    for inner, outer in find_cube_containments(state.cubes):
        findings.append(_finding(
            "cube_containment", f"Cube '{inner}' is fully contained by '{outer}'.", "warning"
        ))

    if len(state.cubes) > limits.max_cubes:
        findings.append(_finding(
            "max_cubes_exceeded",
            f"Cube count ({len(state.cubes)}) exceeds limit ({limits.max_cubes}).",
            "error",
        ))

    for anim in state.animations:
        if anim.length > limits.max_animation_seconds:
            findings.append(_finding(
                "animation_too_long",
                f"Animation '{anim.name}' exceeds max length ({limits.max_animation_seconds}s).",
                "error",
            ))
        for channel in anim.channels or []:
            if channel.bone not in bone_names:
                findings.append(_finding(
                    "orphan_channel",
                    f"Animation '{anim.name}' has a {channel.channel} channel for missing bone '{channel.bone}'.",
                    "warning",
                ))

    for tex in state.textures:
        if tex.width > limits.max_texture_size or tex.height > limits.max_texture_size:
            findings.append(_finding(
                "texture_too_large",
                f"Texture '{tex.name}' exceeds max size ({limits.max_texture_size}).",
                "error",
            ))

    resolution = state.texture_resolution
    if resolution is not None:
        width, height = resolution.width, resolution.height
        for tex in state.textures:
            if tex.width != width or tex.height != height:
                findings.append(_finding(
                    "texture_size_mismatch",
                    f"Texture '{tex.name}' is {tex.width}x{tex.height} but the project resolution is {width}x{height}.",
                    "warning",
                ))
        for cube in state.cubes:
            if not cube.uv:
                continue
            u, v = cube.uv[0], cube.uv[1]
            if u < 0 or v < 0 or u >= width or v >= height:
                findings.append(_finding(
                    "uv_out_of_bounds",
                    f"Cube '{cube.name}' UV offset [{u}, {v}] is outside {width}x{height}.",
                    "warning",
                ))

    if findings:
        logger.debug(f"Snapshot validation produced {len(findings)} finding(s)")
    return findings
