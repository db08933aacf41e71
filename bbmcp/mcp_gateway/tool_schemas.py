"""Declared input schemas for every tool scope.

Published verbatim by /tools/list and compiled once per scope for payload
validation. Keys outside the supported rule set (minimum, pattern, ...) are
informational only.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

Schema = Dict[str, Any]

STRING: Schema = {"type": "string"}
NUMBER: Schema = {"type": "number"}
BOOLEAN: Schema = {"type": "boolean"}
NULLABLE_STRING: Schema = {"anyOf": [{"type": "string"}, {"type": "null"}]}


def vector(size: int, description: Optional[str] = None) -> Schema:
    schema: Schema = {"type": "array", "items": NUMBER, "minItems": size, "maxItems": size}
    if description:
        schema["description"] = description
    return schema


VEC2 = vector(2)
VEC3 = vector(3)


def obj(properties: Dict[str, Schema], required: Optional[List[str]] = None) -> Schema:
    """Closed object schema: unknown keys are rejected."""
    schema: Schema = {"type": "object", "properties": properties, "additionalProperties": False}
    if required:
        schema["required"] = list(required)
    return schema


IF_REVISION: Schema = {"type": "string", "description": "Revision from project.state; stale values are rejected"}


def mutation(properties: Dict[str, Schema], required: Optional[List[str]] = None) -> Schema:
    """Closed object schema for a mutating scope, with the optional revision guard."""
    return obj({**properties, "ifRevision": IF_REVISION}, required)


EMPTY = obj({})

DELETE_BY_NAME = mutation({"name": STRING}, ["name"])

# --- project ---

PROJECT_RESET = mutation({})

PROJECT_CREATE = obj(
    {
        "name": STRING,
        "format": {"type": "string", "description": "Target format, e.g. geckolib or java_block"},
        "formatId": STRING,
    },
    ["name", "format"],
)

# --- model ---

_BONE_FIELDS: Dict[str, Schema] = {
    "parent": dict(NULLABLE_STRING, description="Parent bone name; null places the bone at the root"),
    "pivot": VEC3,
    "rotation": VEC3,
    "scale": VEC3,
    "visibility": BOOLEAN,
}

MODEL_ADD_BONE = mutation({"name": STRING, **_BONE_FIELDS}, ["name"])
MODEL_UPDATE_BONE = mutation({"name": STRING, "newName": STRING, **_BONE_FIELDS}, ["name"])

_CUBE_FIELDS: Dict[str, Schema] = {
    "bone": STRING,
    "from": VEC3,
    "to": VEC3,
    "origin": VEC3,
    "rotation": VEC3,
    "uv": vector(2, "UV offset [u, v]"),
    "inflate": NUMBER,
    "mirror": BOOLEAN,
    "visibility": BOOLEAN,
    "boxUv": BOOLEAN,
}

MODEL_ADD_CUBE = mutation({"name": STRING, **_CUBE_FIELDS}, ["name", "from", "to"])
MODEL_UPDATE_CUBE = mutation({"name": STRING, "newName": STRING, **_CUBE_FIELDS}, ["name"])

# --- texture ---

TEXTURE_CREATE = mutation(
    {
        "name": STRING,
        "width": {"type": "number", "minimum": 1},
        "height": {"type": "number", "minimum": 1},
        "path": STRING,
        "background": {"type": "string", "pattern": "^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$"},
    },
    ["name", "width", "height"],
)

TEXTURE_UPDATE = mutation(
    {
        "name": STRING,
        "newName": STRING,
        "width": {"type": "number", "minimum": 1},
        "height": {"type": "number", "minimum": 1},
        "path": STRING,
    },
    ["name"],
)

TEXTURE_OP = obj(
    {
        "op": {"enum": ["set_pixel", "fill_rect", "draw_rect", "draw_line"]},
        "x": NUMBER,
        "y": NUMBER,
        "width": NUMBER,
        "height": NUMBER,
        "x1": NUMBER,
        "y1": NUMBER,
        "x2": NUMBER,
        "y2": NUMBER,
        "color": STRING,
        "lineWidth": NUMBER,
    },
    ["op", "color"],
)

TEXTURE_PAINT = mutation(
    {
        "name": STRING,
        "ops": {"type": "array", "items": TEXTURE_OP, "minItems": 1},
        "background": STRING,
    },
    ["name", "ops"],
)

TEXTURE_ASSIGN = mutation(
    {
        "texture": STRING,
        "cubes": {"type": "array", "items": STRING, "minItems": 1},
    },
    ["texture", "cubes"],
)

# --- animation ---

_ANIMATION_FIELDS: Dict[str, Schema] = {
    "length": {"type": "number", "description": "Clip length in seconds"},
    "loop": BOOLEAN,
    "fps": NUMBER,
}

ANIMATION_CREATE = mutation({"name": STRING, **_ANIMATION_FIELDS}, ["name", "length"])
ANIMATION_UPDATE = mutation({"name": STRING, "newName": STRING, **_ANIMATION_FIELDS}, ["name"])

KEYFRAME = obj(
    {
        "time": NUMBER,
        "value": VEC3,
        "interp": {"enum": ["linear", "step", "catmullrom"]},
    },
    ["time", "value"],
)

ANIMATION_SET_KEYFRAMES = mutation(
    {
        "clip": STRING,
        "bone": STRING,
        "channel": {"enum": ["rot", "pos", "scale"]},
        "keys": {"type": "array", "items": KEYFRAME},
    },
    ["clip", "bone", "channel", "keys"],
)

TRIGGER_KEY = obj({"time": NUMBER, "value": {}}, ["time", "value"])

ANIMATION_SET_TRIGGERS = mutation(
    {
        "clip": STRING,
        "type": {"enum": ["sound", "particle", "timeline"]},
        "keys": {"type": "array", "items": TRIGGER_KEY},
    },
    ["clip", "type", "keys"],
)
