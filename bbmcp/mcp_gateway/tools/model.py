from __future__ import annotations

import logging

from bbmcp.common.contracts import ToolResponse
from bbmcp.mcp_gateway import tool_schemas
from bbmcp.mcp_gateway.inventory import Scope, Tool
from bbmcp.mcp_gateway.tools.policy import (
    already_exists,
    not_found,
    pick,
    require_active,
    require_name,
)
from bbmcp.session.lookup import collect_descendant_bones, find_bone, find_cube, is_descendant_bone
from bbmcp.session.models import BoneUpdate, CubeUpdate, TextureUpdate, TrackedBone, TrackedCube

logger = logging.getLogger(__name__)

BONE_KEYS = ("parent", "pivot", "rotation", "scale", "visibility")
CUBE_KEYS = ("bone", "from", "to", "origin", "rotation", "uv", "inflate", "mirror", "visibility", "boxUv")


def _prune_assignments(ctx, removed, renamed=None):
    """Drop or rename cube references held by texture assignments."""
    renamed = renamed or {}
    for texture in list(ctx.store.get_state().textures):
        kept = [renamed.get(c, c) for c in texture.assigned_cubes if c not in removed]
        if kept != texture.assigned_cubes:
            ctx.mutators.update_texture(texture.name, TextureUpdate(assigned_cubes=kept))


# --- Bones ---

def add_bone_handler(ctx, args):
    failure = require_active(ctx.store) or require_name(args["name"])
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    if find_bone(state, name):
        return already_exists("Bone", name)
    parent = args.get("parent")
    if parent is not None and not find_bone(state, parent):
        return not_found("Bone", parent, path="$.parent")

    bone = TrackedBone(name=name, **pick(args, BONE_KEYS))
    error = ctx.editor.add_bone(args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.add_bone(bone)
    return ToolResponse.success({"name": name, "parent": bone.parent})


def update_bone_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    if not find_bone(state, name):
        return not_found("Bone", name)

    new_name = args.get("newName")
    if new_name is not None:
        failure = require_name(new_name, "newName")
        if failure:
            return failure
        if new_name != name and find_bone(state, new_name):
            return already_exists("Bone", new_name, path="$.newName")

    parent = args.get("parent")
    if parent is not None:
        if parent == name:
            return ToolResponse.failure(
                "invalid_payload", "A bone cannot be its own parent.", path="$.parent", reason="parent_cycle"
            )
        if not find_bone(state, parent):
            return not_found("Bone", parent, path="$.parent")
        if is_descendant_bone(state.bones, name, parent):
            return ToolResponse.failure(
                "invalid_payload",
                f"Bone '{parent}' is a descendant of '{name}'.",
                path="$.parent",
                reason="parent_cycle",
            )

    updates = BoneUpdate(**pick(args, ("newName",) + BONE_KEYS))
    error = ctx.editor.update_bone(name, args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.update_bone(name, updates)
    return ToolResponse.success({"name": new_name or name})


def delete_bone_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    if not find_bone(state, name):
        return not_found("Bone", name)

    descendants = collect_descendant_bones(state.bones, name)
    doomed = set([name] + descendants)
    owned_cubes = {cube.name for cube in state.cubes if cube.bone in doomed}
    error = ctx.editor.delete_bone(name)
    if error:
        return ToolResponse.from_error(error)
    removed = ctx.mutators.remove_bones(doomed)
    _prune_assignments(ctx, owned_cubes)
    if descendants:
        logger.info(f"Deleted bone '{name}' with {len(descendants)} descendant(s)")
    return ToolResponse.success({
        "removed_bones": [name] + descendants,
        "removed_cubes": removed.removed_cubes,
    })


def list_bones_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    bones = []
    for bone in state.bones:
        bones.append({
            "name": bone.name,
            "parent": bone.parent,
            "pivot": bone.pivot,
            "cubes": sum(1 for cube in state.cubes if cube.bone == bone.name),
        })
    return ToolResponse.success({"bones": bones})


# --- Cubes ---

def add_cube_handler(ctx, args):
    failure = require_active(ctx.store) or require_name(args["name"])
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    if find_cube(state, name):
        return already_exists("Cube", name)
    if len(state.cubes) >= ctx.limits.max_cubes:
        return ToolResponse.failure(
            "limit_exceeded",
            f"Cube limit reached ({ctx.limits.max_cubes}).",
            details={"limit": ctx.limits.max_cubes},
        )
    bone_name = args.get("bone", "root")
    if not find_bone(state, bone_name):
        return not_found("Bone", bone_name, path="$.bone")

    cube = TrackedCube(name=name, **pick(args, CUBE_KEYS))
    error = ctx.editor.add_cube(args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.add_cube(cube)
    return ToolResponse.success({"name": name, "bone": cube.bone})


def update_cube_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    if not find_cube(state, name):
        return not_found("Cube", name)

    new_name = args.get("newName")
    if new_name is not None:
        failure = require_name(new_name, "newName")
        if failure:
            return failure
        if new_name != name and find_cube(state, new_name):
            return already_exists("Cube", new_name, path="$.newName")
    if "bone" in args and not find_bone(state, args["bone"]):
        return not_found("Bone", args["bone"], path="$.bone")

    updates = CubeUpdate(**pick(args, ("newName",) + CUBE_KEYS))
    error = ctx.editor.update_cube(name, args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.update_cube(name, updates)
    if new_name and new_name != name:
        _prune_assignments(ctx, set(), renamed={name: new_name})
    return ToolResponse.success({"name": new_name or name})


def delete_cube_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    if not find_cube(state, name):
        return not_found("Cube", name)
    error = ctx.editor.delete_cube(name)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.remove_cubes([name])
    _prune_assignments(ctx, {name})
    return ToolResponse.success({"removed_cubes": [name]})


def register(inventory):
    tool = Tool(
        id="model",
        name="Model",
        summary="Bone hierarchy and cube geometry.",
    )

    tool.register_scope(Scope(
        name="model.add_bone",
        description="Add a bone under an existing parent or at the root",
        input_schema=tool_schemas.MODEL_ADD_BONE,
        handler=add_bone_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="model.update_bone",
        description="Rename, re-parent or transform a bone",
        input_schema=tool_schemas.MODEL_UPDATE_BONE,
        handler=update_bone_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="model.delete_bone",
        description="Delete a bone, its descendants and every cube they own",
        input_schema=tool_schemas.DELETE_BY_NAME,
        handler=delete_bone_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="model.list_bones",
        description="List bones with parent and cube count",
        input_schema=tool_schemas.EMPTY,
        handler=list_bones_handler,
    ))

    tool.register_scope(Scope(
        name="model.add_cube",
        description="Add a cube to a bone",
        input_schema=tool_schemas.MODEL_ADD_CUBE,
        handler=add_cube_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="model.update_cube",
        description="Rename, move or restyle a cube",
        input_schema=tool_schemas.MODEL_UPDATE_CUBE,
        handler=update_cube_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="model.delete_cube",
        description="Delete a cube",
        input_schema=tool_schemas.DELETE_BY_NAME,
        handler=delete_cube_handler,
        mutating=True,
    ))

    inventory.register_tool(tool)
