"""Model Validation Schemas."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from bbmcp.config import runtime_config

FindingSeverity = Literal["error", "warning", "info"]

FindingCode = Literal[
    "no_bones",
    "orphan_cube",
    "duplicate_bone",
    "duplicate_cube",
    "cube_containment",
    "max_cubes_exceeded",
    "animation_too_long",
    "texture_too_large",
    "texture_size_mismatch",
    "uv_out_of_bounds",
    "orphan_channel",
]


class ValidationFinding(BaseModel):
    code: FindingCode
    message: str
    severity: FindingSeverity


class Limits(BaseModel):
    max_cubes: int = runtime_config.DEFAULT_MAX_CUBES
    max_texture_size: int = runtime_config.DEFAULT_MAX_TEXTURE_SIZE
    max_animation_seconds: float = runtime_config.DEFAULT_MAX_ANIMATION_SECONDS

    @classmethod
    def from_config(cls) -> "Limits":
        return cls(
            max_cubes=runtime_config.get_max_cubes(),
            max_texture_size=runtime_config.get_max_texture_size(),
            max_animation_seconds=runtime_config.get_max_animation_seconds(),
        )
