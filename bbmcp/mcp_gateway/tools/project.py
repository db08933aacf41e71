from __future__ import annotations

from bbmcp.common.contracts import ToolResponse
from bbmcp.mcp_gateway import tool_schemas
from bbmcp.mcp_gateway.inventory import Scope, Tool
from bbmcp.mcp_gateway.next_actions import suggest_next_actions
from bbmcp.mcp_gateway.tools.policy import require_active, require_name
from bbmcp.model_validation.service import validate_snapshot


def create_handler(ctx, args):
    failure = require_name(args["name"])
    if failure:
        return failure
    info = ctx.store.create(args["format"], args["name"].strip(), args.get("formatId"))
    # Canvases belong to the previous project.
    ctx.drawer.clear()
    return ToolResponse.success(dict(info.model_dump(), revision=ctx.store.revision()))


def reset_handler(ctx, args):
    ctx.store.reset()
    ctx.drawer.clear()
    return ToolResponse.success({"reset": True})


def state_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    data = ctx.store.snapshot().model_dump(mode="json", by_alias=True)
    data["revision"] = ctx.store.revision()
    return ToolResponse.success(data)


def validate_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    findings = validate_snapshot(ctx.store.get_state(), ctx.limits)
    return ToolResponse.success({
        "ok": not any(f.severity == "error" for f in findings),
        "findings": [f.model_dump() for f in findings],
    })


def next_actions_handler(ctx, args):
    actions = suggest_next_actions(ctx.store.get_state())
    return ToolResponse.success({"actions": [a.model_dump() for a in actions]})


def register(inventory):
    tool = Tool(
        id="project",
        name="Project",
        summary="Create, inspect and validate the active modeling project.",
    )

    tool.register_scope(Scope(
        name="project.create",
        description="Start a new empty project",
        input_schema=tool_schemas.PROJECT_CREATE,
        handler=create_handler,
    ))

    tool.register_scope(Scope(
        name="project.reset",
        description="Drop the active project",
        input_schema=tool_schemas.PROJECT_RESET,
        handler=reset_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="project.state",
        description="Full snapshot of bones, cubes, textures and animations",
        input_schema=tool_schemas.EMPTY,
        handler=state_handler,
    ))

    tool.register_scope(Scope(
        name="project.validate",
        description="Structural and limit checks over the model",
        input_schema=tool_schemas.EMPTY,
        handler=validate_handler,
    ))

    tool.register_scope(Scope(
        name="project.next_actions",
        description="Suggest what to do next",
        input_schema=tool_schemas.EMPTY,
        handler=next_actions_handler,
    ))

    inventory.register_tool(tool)
