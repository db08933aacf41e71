"""Session Reducer Tests."""
import pytest

from bbmcp.session.commands import (
    AddAnimationCommand,
    AddBoneCommand,
    AddCubeCommand,
    AddTextureCommand,
    RemoveAnimationsCommand,
    RemoveBonesCommand,
    RemoveCubesCommand,
    RemoveTexturesCommand,
    UpdateAnimationCommand,
    UpdateBoneCommand,
    UpdateCubeCommand,
    UpdateTextureCommand,
    UpsertAnimationChannelCommand,
    UpsertAnimationTriggerCommand,
)
from bbmcp.session.models import (
    AnimationUpdate,
    BoneUpdate,
    CubeUpdate,
    SessionState,
    TextureUpdate,
    TrackedAnimation,
    TrackedAnimationChannel,
    TrackedAnimationKey,
    TrackedAnimationTrigger,
    TrackedBone,
    TrackedCube,
    TrackedTexture,
    TrackedTriggerKey,
)
from bbmcp.session.reducer import apply_session_mutation


@pytest.fixture
def state():
    s = SessionState(id="p1", format="geckolib", name="robot")
    s.bones = [
        TrackedBone(name="root", pivot=[0, 0, 0]),
        TrackedBone(name="arm", parent="root", pivot=[4, 12, 0]),
        TrackedBone(name="leg", parent="root", pivot=[2, 6, 0]),
    ]
    s.cubes = [
        TrackedCube(name="body", bone="root", from_=[-4, 0, -2], to=[4, 12, 2]),
        TrackedCube(name="hand", bone="arm", from_=[4, 0, 0], to=[6, 2, 2]),
        TrackedCube(name="forearm", bone="arm", from_=[4, 2, 0], to=[6, 10, 2]),
        TrackedCube(name="shin", bone="leg", from_=[0, 0, 0], to=[2, 6, 2]),
    ]
    s.animations = [TrackedAnimation(name="walk", length=1.0, loop=True)]
    return s


def _names(items):
    return [item.name for item in items]


class TestAdd:

    def test_add_bone_twice_keeps_one_entry(self, state):
        bone = TrackedBone(name="head", parent="root", pivot=[0, 24, 0])
        apply_session_mutation(state, AddBoneCommand(bone=bone))
        apply_session_mutation(state, AddBoneCommand(bone=bone))
        assert _names(state.bones).count("head") == 1

    def test_add_existing_name_replaces_in_place(self, state):
        replacement = TrackedBone(name="arm", parent="root", pivot=[9, 9, 9])
        result = apply_session_mutation(state, AddBoneCommand(bone=replacement))
        assert result is None
        assert _names(state.bones) == ["root", "arm", "leg"]
        assert state.bones[1].pivot == [9, 9, 9]

    def test_add_stores_a_copy(self, state):
        cube = TrackedCube(name="eye", bone="root", from_=[0, 0, 0], to=[1, 1, 1])
        apply_session_mutation(state, AddCubeCommand(cube=cube))
        cube.to[0] = 50
        assert state.cubes[-1].to == [1, 1, 1]

    def test_add_texture_and_animation(self, state):
        apply_session_mutation(state, AddTextureCommand(texture=TrackedTexture(name="skin", width=16, height=16)))
        apply_session_mutation(state, AddAnimationCommand(animation=TrackedAnimation(name="idle", length=2.0)))
        assert _names(state.textures) == ["skin"]
        assert _names(state.animations) == ["walk", "idle"]

    def test_dangling_parent_is_accepted(self, state):
        apply_session_mutation(state, AddBoneCommand(bone=TrackedBone(name="tail", parent="ghost")))
        assert state.bones[-1].parent == "ghost"


class TestUpdate:

    def test_update_cube_changes_only_provided_fields(self, state):
        before = state.cubes[0].model_copy(deep=True)
        ok = apply_session_mutation(
            state, UpdateCubeCommand(name="body", updates=CubeUpdate(to=[5, 12, 2]))
        )
        assert ok is True
        after = state.cubes[0]
        assert after.to == [5, 12, 2]
        assert after.from_ == before.from_
        assert after.bone == before.bone
        assert after.origin == before.origin

    def test_update_missing_cube_returns_false(self, state):
        before = state.model_copy(deep=True)
        ok = apply_session_mutation(
            state, UpdateCubeCommand(name="c2", updates=CubeUpdate(to=[5, 5, 5]))
        )
        assert ok is False
        assert state == before

    def test_explicit_none_clears_optional_field(self, state):
        state.bones[1].rotation = [0, 0, 45]
        apply_session_mutation(state, UpdateBoneCommand(name="arm", updates=BoneUpdate(rotation=None)))
        assert state.bones[1].rotation is None

    def test_explicit_none_on_parent_moves_to_root(self, state):
        apply_session_mutation(state, UpdateBoneCommand(name="arm", updates=BoneUpdate(parent=None)))
        assert state.bones[1].parent is None

    def test_explicit_none_ignored_for_required_field(self, state):
        apply_session_mutation(state, UpdateBoneCommand(name="arm", updates=BoneUpdate(pivot=None)))
        assert state.bones[1].pivot == [4, 12, 0]

    def test_omitted_field_is_preserved(self, state):
        state.bones[1].rotation = [0, 0, 45]
        apply_session_mutation(state, UpdateBoneCommand(name="arm", updates=BoneUpdate(pivot=[1, 1, 1])))
        assert state.bones[1].rotation == [0, 0, 45]

    def test_rename_bone_rewrites_references(self, state):
        state.bones.append(TrackedBone(name="claw", parent="arm"))
        ok = apply_session_mutation(state, UpdateBoneCommand(name="arm", updates=BoneUpdate(new_name="limb")))
        assert ok is True
        assert "limb" in _names(state.bones)
        assert "arm" not in _names(state.bones)
        assert [c.bone for c in state.cubes if c.name in ("hand", "forearm")] == ["limb", "limb"]
        assert state.bones[-1].parent == "limb"

    def test_rename_cube_texture_animation(self, state):
        state.textures.append(TrackedTexture(name="skin", width=16, height=16))
        assert apply_session_mutation(state, UpdateCubeCommand(name="body", updates=CubeUpdate(new_name="torso")))
        assert apply_session_mutation(state, UpdateTextureCommand(name="skin", updates=TextureUpdate(new_name="hide", width=32)))
        assert apply_session_mutation(state, UpdateAnimationCommand(name="walk", updates=AnimationUpdate(new_name="run", loop=False)))
        assert state.cubes[0].name == "torso"
        assert state.textures[0].name == "hide"
        assert state.textures[0].width == 32
        assert state.textures[0].height == 16
        assert state.animations[0].name == "run"
        assert state.animations[0].loop is False
        assert state.animations[0].length == 1.0

    def test_update_missing_bone_texture_animation(self, state):
        assert apply_session_mutation(state, UpdateBoneCommand(name="nope", updates=BoneUpdate())) is False
        assert apply_session_mutation(state, UpdateTextureCommand(name="nope", updates=TextureUpdate())) is False
        assert apply_session_mutation(state, UpdateAnimationCommand(name="nope", updates=AnimationUpdate())) is False


class TestRemove:

    def test_remove_bone_cascades_to_cubes(self, state):
        result = apply_session_mutation(state, RemoveBonesCommand(names=["arm"]))
        assert result.removed_bones == 1
        assert result.removed_cubes == 2
        assert "hand" not in _names(state.cubes)
        assert "forearm" not in _names(state.cubes)
        assert _names(state.cubes) == ["body", "shin"]

    def test_remove_bones_leaves_children_dangling(self, state):
        state.bones.append(TrackedBone(name="claw", parent="arm"))
        apply_session_mutation(state, RemoveBonesCommand(names={"arm"}))
        assert state.bones[-1].parent == "arm"

    def test_remove_unknown_bone_removes_nothing(self, state):
        state.cubes.append(TrackedCube(name="floating", bone="ghost"))
        result = apply_session_mutation(state, RemoveBonesCommand(names=["ghost"]))
        assert result.removed_bones == 0
        assert result.removed_cubes == 0
        assert "floating" in _names(state.cubes)

    def test_list_and_set_give_same_state(self, state):
        other = state.model_copy(deep=True)
        apply_session_mutation(state, RemoveBonesCommand(names=["leg", "arm", "arm"]))
        apply_session_mutation(other, RemoveBonesCommand(names={"arm", "leg"}))
        assert state == other

    def test_remove_cubes_counts(self, state):
        count = apply_session_mutation(state, RemoveCubesCommand(names=("hand", "missing")))
        assert count == 1
        assert _names(state.bones) == ["root", "arm", "leg"]

    def test_remove_textures_and_animations(self, state):
        state.textures = [TrackedTexture(name="a"), TrackedTexture(name="b")]
        assert apply_session_mutation(state, RemoveTexturesCommand(names=frozenset({"a", "b", "c"}))) == 2
        assert apply_session_mutation(state, RemoveAnimationsCommand(names=["walk"])) == 1
        assert state.textures == []
        assert state.animations == []


class TestAnimationUpserts:

    def _channel(self, value):
        return TrackedAnimationChannel(
            bone="arm",
            channel="rot",
            keys=[TrackedAnimationKey(time=0.0, value=[value, 0, 0])],
        )

    def test_upsert_channel_twice_keeps_one(self, state):
        apply_session_mutation(state, UpsertAnimationChannelCommand(clip="walk", channel=self._channel(10)))
        apply_session_mutation(state, UpsertAnimationChannelCommand(clip="walk", channel=self._channel(20)))
        channels = state.animations[0].channels
        assert len(channels) == 1
        assert channels[0].keys[0].value == [20, 0, 0]

    def test_upsert_channel_distinct_identity_appends(self, state):
        apply_session_mutation(state, UpsertAnimationChannelCommand(clip="walk", channel=self._channel(10)))
        pos = TrackedAnimationChannel(bone="arm", channel="pos", keys=[])
        apply_session_mutation(state, UpsertAnimationChannelCommand(clip="walk", channel=pos))
        assert [c.channel for c in state.animations[0].channels] == ["rot", "pos"]

    def test_upsert_channel_missing_animation_is_noop(self, state):
        result = apply_session_mutation(
            state, UpsertAnimationChannelCommand(clip="missing", channel=self._channel(10))
        )
        assert result is None
        assert _names(state.animations) == ["walk"]

    def test_upsert_trigger(self, state):
        first = TrackedAnimationTrigger(type="sound", keys=[TrackedTriggerKey(time=0.5, value="step")])
        second = TrackedAnimationTrigger(type="sound", keys=[TrackedTriggerKey(time=0.25, value="stomp")])
        particle = TrackedAnimationTrigger(type="particle", keys=[TrackedTriggerKey(time=0.1, value={"effect": "dust"})])
        for trig in (first, second, particle):
            apply_session_mutation(state, UpsertAnimationTriggerCommand(clip="walk", trigger=trig))
        triggers = state.animations[0].triggers
        assert [t.type for t in triggers] == ["sound", "particle"]
        assert triggers[0].keys[0].value == "stomp"

    def test_upsert_trigger_missing_animation_is_noop(self, state):
        trig = TrackedAnimationTrigger(type="timeline", keys=[])
        apply_session_mutation(state, UpsertAnimationTriggerCommand(clip="missing", trigger=trig))
        assert state.animations[0].triggers is None
        assert len(state.animations) == 1


def test_names_are_the_only_entity_identity():
    for model in (TrackedBone, TrackedCube, TrackedTexture, TrackedAnimation,
                  BoneUpdate, CubeUpdate, TextureUpdate, AnimationUpdate):
        assert "id" not in model.model_fields
