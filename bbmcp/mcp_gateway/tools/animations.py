from __future__ import annotations

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
from bbmcp.session.lookup import find_animation, find_bone
from bbmcp.session.models import (
    AnimationUpdate,
    TrackedAnimation,
    TrackedAnimationChannel,
    TrackedAnimationKey,
    TrackedAnimationTrigger,
    TrackedTriggerKey,
)

ANIMATION_KEYS = ("length", "loop", "fps")


def _check_length(ctx, length):
    if length <= 0:
        return ToolResponse.failure(
            "invalid_payload", "length must be greater than 0.", path="$.length", reason="animation_length"
        )
    limit = ctx.limits.max_animation_seconds
    if length > limit:
        return ToolResponse.failure(
            "limit_exceeded",
            f"Animation length {length}s exceeds max {limit}s.",
            path="$.length",
            details={"limit": limit},
        )
    return None


def _check_key_times(keys, length):
    for index, key in enumerate(keys):
        if key["time"] < 0 or key["time"] > length:
            return ToolResponse.failure(
                "invalid_payload",
                f"Key time {key['time']} is outside the clip (0..{length}).",
                path=f"$.keys[{index}].time",
                reason="key_time",
            )
    return None


def _latest_key_time(animation):
    times = [key.time for channel in animation.channels or [] for key in channel.keys]
    times += [key.time for trigger in animation.triggers or [] for key in trigger.keys]
    return max(times, default=0.0)


def create_handler(ctx, args):
    failure = require_active(ctx.store) or require_name(args["name"])
    if failure:
        return failure
    name = args["name"]
    if find_animation(ctx.store.get_state(), name):
        return already_exists("Animation", name)
    failure = _check_length(ctx, args["length"])
    if failure:
        return failure

    animation = TrackedAnimation(name=name, **pick(args, ANIMATION_KEYS))
    error = ctx.editor.add_animation(args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.add_animation(animation)
    return ToolResponse.success({"name": name, "length": animation.length, "loop": animation.loop})


def update_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    name = args["name"]
    animation = find_animation(state, name)
    if not animation:
        return not_found("Animation", name)
    new_name = args.get("newName")
    if new_name is not None:
        failure = require_name(new_name, "newName")
        if failure:
            return failure
        if new_name != name and find_animation(state, new_name):
            return already_exists("Animation", new_name, path="$.newName")
    if "length" in args:
        failure = _check_length(ctx, args["length"])
        if failure:
            return failure
        latest = _latest_key_time(animation)
        if latest > args["length"]:
            return ToolResponse.failure(
                "invalid_payload",
                f"length {args['length']} would cut off keys up to {latest}s.",
                path="$.length",
                reason="key_time",
                details={"latest_key_time": latest},
            )

    error = ctx.editor.update_animation(name, args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.update_animation(name, AnimationUpdate(**pick(args, ("newName",) + ANIMATION_KEYS)))
    return ToolResponse.success({"name": new_name or name})


def delete_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    name = args["name"]
    if not find_animation(ctx.store.get_state(), name):
        return not_found("Animation", name)
    error = ctx.editor.delete_animation(name)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.remove_animations([name])
    return ToolResponse.success({"removed_animations": [name]})


def set_keyframes_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    state = ctx.store.get_state()
    clip = find_animation(state, args["clip"])
    if not clip:
        return not_found("Animation", args["clip"], path="$.clip")
    if not find_bone(state, args["bone"]):
        return not_found("Bone", args["bone"], path="$.bone")
    failure = _check_key_times(args["keys"], clip.length)
    if failure:
        return failure

    keys = sorted(
        (TrackedAnimationKey(**key) for key in args["keys"]),
        key=lambda k: k.time,
    )
    channel = TrackedAnimationChannel(bone=args["bone"], channel=args["channel"], keys=keys)
    error = ctx.editor.set_keyframes(clip.name, args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.upsert_animation_channel(clip.name, channel)
    return ToolResponse.success({
        "clip": clip.name,
        "bone": channel.bone,
        "channel": channel.channel,
        "keys": len(keys),
    })


def set_triggers_handler(ctx, args):
    failure = require_active(ctx.store)
    if failure:
        return failure
    clip = find_animation(ctx.store.get_state(), args["clip"])
    if not clip:
        return not_found("Animation", args["clip"], path="$.clip")
    failure = _check_key_times(args["keys"], clip.length)
    if failure:
        return failure

    keys = sorted(
        (TrackedTriggerKey(time=key["time"], value=key["value"]) for key in args["keys"]),
        key=lambda k: k.time,
    )
    trigger = TrackedAnimationTrigger(type=args["type"], keys=keys)
    error = ctx.editor.set_trigger_keyframes(clip.name, args)
    if error:
        return ToolResponse.from_error(error)
    ctx.mutators.upsert_animation_trigger(clip.name, trigger)
    return ToolResponse.success({"clip": clip.name, "type": trigger.type, "keys": len(keys)})


def register(inventory):
    tool = Tool(
        id="animation",
        name="Animation",
        summary="Animation clips, keyframe channels and trigger tracks.",
    )

    tool.register_scope(Scope(
        name="animation.create",
        description="Create an animation clip",
        input_schema=tool_schemas.ANIMATION_CREATE,
        handler=create_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="animation.update",
        description="Rename a clip or change its length, loop or fps",
        input_schema=tool_schemas.ANIMATION_UPDATE,
        handler=update_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="animation.delete",
        description="Delete an animation clip",
        input_schema=tool_schemas.DELETE_BY_NAME,
        handler=delete_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="animation.set_keyframes",
        description="Replace the keys of one bone channel (rot, pos or scale)",
        input_schema=tool_schemas.ANIMATION_SET_KEYFRAMES,
        handler=set_keyframes_handler,
        mutating=True,
    ))

    tool.register_scope(Scope(
        name="animation.set_triggers",
        description="Replace the sound, particle or timeline trigger track",
        input_schema=tool_schemas.ANIMATION_SET_TRIGGERS,
        handler=set_triggers_handler,
        mutating=True,
    ))

    inventory.register_tool(tool)
