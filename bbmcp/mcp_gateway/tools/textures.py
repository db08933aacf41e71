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
from bbmcp.session.lookup import find_cube, find_texture
from bbmcp.session.models import TextureUpdate, TrackedTexture
from bbmcp.texture_draw.service import TextureDrawError

logger = logging.getLogger(__name__)


def _check_size(ctx, width, height):
    if width != int(width) or height != int(height) or width < 1 or height < 1:
        return ToolResponse.failure(
            "invalid_payload",
            f"Texture size must be positive whole pixels, got {width}x{height}.",
            reason="texture_size",
        )
    limit = ctx.limits.max_texture_size
    if width > limit or height > limit:
        return ToolResponse.failure(
            "limit_exceeded",
            f"Texture size {int(width)}x{int(height)} exceeds max {limit}.",
            details={"limit": limit},
        )
    return None


def create_handler(ctx, args):
    failure = require_active(ctx.store) or require_name(args["name"])
    if failure:
        return failure
    name = args["name"]
    if find_texture(ctx.store.get_state(), name):
        return already_exists("Texture", name)
    failure = _check_size(ctx, args["width"], args["height"])
    if failure:
        return failure

    texture = TrackedTexture(
        name=name,
        width=int(args["width"]),
        height=int(args["height"]),
        path=args.get("path"),
    )
    try:
        ctx.drawer.ensure_canvas(name, texture.width, texture.height, args.get("background"))
    except ValueError as e:
        return ToolResponse.failure("invalid_payload", str(e), path="$.background")
    error = ctx.editor.add_texture(args)
    if error:
        ctx.drawer.drop(name)
        return ToolResponse.from_error(error)
    ctx.mutators.add_texture(texture)
    return ToolResponse.success({"name": name, "width": texture.width, "height": texture.height})


def update_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    texture = find_texture(state, name)
    if not texture:
        return not_found("Texture", name)
    new_name = args.get("newName")
    if new_name is not None:
        failure = require_name(new_name, "newName")
        if failure:
            return failure
        if new_name != name and find_texture(state, new_name):
            return already_exists("Texture", new_name, path="$.newName")
    width = args.get("width", texture.width)
    height = args.get("height", texture.height)
    if "width" in args or "height" in args:
        failure = _check_size(ctx, width, height)
        if failure:
            return failure

    fields = pick(args, ("newName", "path"))
    if "width" in args:
        fields["width"] = int(width)
    if "height" in args:
        fields["height"] = int(height)
    error = ctx.editor.update_texture(name, args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.update_texture(name, TextureUpdate(**fields))

    current = new_name or name
    if new_name and new_name != name:
        ctx.drawer.rename(name, new_name)
    if ctx.drawer.has_canvas(current) and ("width" in args or "height" in args):
        ctx.drawer.ensure_canvas(current, int(width), int(height))
    return ToolResponse.success({"name": current})


def delete_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    name = args["name"]
    if not find_texture(ctx.store.get_state(), name):
        return not_found("Texture", name)
    error = ctx.editor.delete_texture(name)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.remove_textures([name])
    ctx.drawer.drop(name)
    return ToolResponse.success({"removed_textures": [name]})


def paint_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    name = args["name"]
    texture = find_texture(ctx.store.get_state(), name)
    if not texture:
        return not_found("Texture", name)
    saved = ctx.drawer.checkpoint(name)
    try:
        ctx.drawer.ensure_canvas(name, texture.width, texture.height, args.get("background"))
    except TextureDrawError as e:
        return ToolResponse.failure(
            "invalid_state",
            str(e),
            details={"reason": "texture_size", "width": texture.width, "height": texture.height},
        )
    except ValueError as e:
        return ToolResponse.failure("invalid_payload", str(e), path="$.background", reason="background")

    try:
        applied = ctx.drawer.apply_ops(name, args["ops"])
    except TextureDrawError as e:
        logger.warning(f"Paint rejected for texture '{name}': {e}")
        ctx.drawer.restore(name, saved)
        return ToolResponse.failure("invalid_payload", str(e), path="$.ops", reason="texture_op")

    error = ctx.editor.update_texture(name, {"image": ctx.drawer.export_png(name)})
    if error:
        # The host kept the old image.
        ctx.drawer.restore(name, saved)
        return ToolResponse.from_error(error)
    return ToolResponse.success({"name": name, "ops_applied": applied})


def assign_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["texture"]
    texture = find_texture(state, name)
    if not texture:
        return not_found("Texture", name, path="$.texture")
    for index, cube_name in enumerate(args["cubes"]):
        if not find_cube(state, cube_name):
            return not_found("Cube", cube_name, path=f"$.cubes[{index}]")

    assigned = list(texture.assigned_cubes)
    for cube_name in args["cubes"]:
        if cube_name not in assigned:
            assigned.append(cube_name)
    error = ctx.editor.update_texture(name, {"cubes": list(args["cubes"])})
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.update_texture(name, TextureUpdate(assigned_cubes=assigned))
    return ToolResponse.success({"texture": name, "cubes": assigned})


def register(inventory):
    tool = Tool(
        id="texture",
        name="Texture",
        summary="Texture creation, pixel painting and cube assignment.",
    )

    tool.register_scope(Scope(
        name="texture.create",
        description="Create a blank texture",
        input_schema=tool_schemas.TEXTURE_CREATE,
        handler=create_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="texture.update",
        description="Rename, resize or relink a texture",
        input_schema=tool_schemas.TEXTURE_UPDATE,
        handler=update_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="texture.delete",
        description="Delete a texture",
        input_schema=tool_schemas.DELETE_BY_NAME,
        handler=delete_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="texture.paint",
        description="Draw pixels, rectangles and lines onto a texture",
        input_schema=tool_schemas.TEXTURE_PAINT,
        handler=paint_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="texture.assign",
        description="Assign a texture to cubes",
        input_schema=tool_schemas.TEXTURE_ASSIGN,
        handler=assign_handler,
        mutating=True,
    ))

    inventory.register_tool(tool)
