import pytest

from bbmcp.model_validation.schemas import Limits
from bbmcp.model_validation.service import find_cube_containments, validate_snapshot
from bbmcp.session.models import (
    SessionState,
    TextureResolution,
    TrackedAnimation,
    TrackedAnimationChannel,
    TrackedBone,
    TrackedCube,
    TrackedTexture,
)


def _codes(findings):
    return [f.code for f in findings]


@pytest.fixture
def clean_state():
    return SessionState(
        id="p1",
        format="geckolib",
        bones=[TrackedBone(name="root"), TrackedBone(name="arm", parent="root")],
        cubes=[
            TrackedCube(name="body", bone="root", from_=[0, 0, 0], to=[4, 4, 4]),
            TrackedCube(name="hand", bone="arm", from_=[4, 0, 0], to=[6, 2, 2]),
        ],
    )


def test_clean_state_has_no_findings(clean_state):
    assert validate_snapshot(clean_state, Limits()) == []


def test_empty_state_warns_about_bones():
    findings = validate_snapshot(SessionState(), Limits())
    assert _codes(findings) == ["no_bones"]
    assert findings[0].severity == "warning"


def test_orphan_cube_and_duplicates(clean_state):
    clean_state.cubes.append(TrackedCube(name="loose", bone="ghost", from_=[9, 9, 9], to=[10, 10, 10]))
    clean_state.bones.append(TrackedBone(name="arm"))
    clean_state.cubes.append(TrackedCube(name="body", bone="ghost", from_=[20, 0, 0], to=[21, 1, 1]))
    codes = _codes(validate_snapshot(clean_state, Limits()))
    assert codes.count("orphan_cube") == 2
    assert "duplicate_bone" in codes
    assert "duplicate_cube" in codes


def test_cube_containment_same_bone_only(clean_state):
    clean_state.cubes.append(TrackedCube(name="core", bone="root", from_=[1, 1, 1], to=[2, 2, 2]))
    clean_state.cubes.append(TrackedCube(name="other", bone="arm", from_=[1, 1, 1], to=[2, 2, 2]))
    assert find_cube_containments(clean_state.cubes) == [("core", "body")]
    finding = validate_snapshot(clean_state, Limits())[0]
    assert finding.code == "cube_containment"
    assert "core" in finding.message


def test_rotated_cube_is_not_checked_for_containment(clean_state):
    clean_state.cubes.append(
        TrackedCube(name="core", bone="root", from_=[1, 1, 1], to=[2, 2, 2], rotation=[0, 45, 0])
    )
    assert find_cube_containments(clean_state.cubes) == []


def test_identical_cubes_are_reported_once_in_name_order():
    cubes = [
        TrackedCube(name="b", bone="root", from_=[0, 0, 0], to=[1, 1, 1]),
        TrackedCube(name="a", bone="root", from_=[0, 0, 0], to=[1, 1, 1]),
    ]
    assert find_cube_containments(cubes) == [("a", "b")]


def test_limits(clean_state):
    clean_state.animations.append(TrackedAnimation(name="long", length=500))
    clean_state.textures.append(TrackedTexture(name="huge", width=4096, height=16))
    limits = Limits(max_cubes=1, max_texture_size=2048, max_animation_seconds=120)
    codes = _codes(validate_snapshot(clean_state, limits))
    assert "max_cubes_exceeded" in codes
    assert "animation_too_long" in codes
    assert "texture_too_large" in codes


def test_resolution_checks(clean_state):
    clean_state.texture_resolution = TextureResolution(width=64, height=64)
    clean_state.textures.append(TrackedTexture(name="skin", width=32, height=32))
    clean_state.cubes[0].uv = [64, 0]
    findings = validate_snapshot(clean_state, Limits())
    assert _codes(findings) == ["texture_size_mismatch", "uv_out_of_bounds"]
    assert all(f.severity == "warning" for f in findings)


def test_orphan_channel(clean_state):
    anim = TrackedAnimation(
        name="walk",
        length=1.0,
        channels=[TrackedAnimationChannel(bone="tail", channel="rot")],
    )
    clean_state.animations.append(anim)
    assert _codes(validate_snapshot(clean_state, Limits())) == ["orphan_channel"]


def test_limits_from_config(monkeypatch):
    monkeypatch.setenv("BBMCP_MAX_CUBES", "10")
    monkeypatch.setenv("BBMCP_MAX_ANIMATION_SECONDS", "bogus")
    limits = Limits.from_config()
    assert limits.max_cubes == 10
    assert limits.max_animation_seconds == 120.0
