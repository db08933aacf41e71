from bbmcp.session import (
    CubeUpdate,
    SessionMutators,
    SessionStateStore,
    TrackedAnimation,
    TrackedAnimationChannel,
    TrackedBone,
    TrackedCube,
    TrackedTexture,
)


def _store_with_facade():
    store = SessionStateStore()
    store.create("geckolib", "robot")
    return store, SessionMutators(store.get_state)


def test_facade_round_trip():
    store, mutators = _store_with_facade()
    mutators.add_bone(TrackedBone(name="arm", pivot=[0, 0, 0]))
    mutators.add_cube(TrackedCube(name="hand", bone="arm"))
    mutators.add_cube(TrackedCube(name="forearm", bone="arm"))

    assert mutators.update_cube("hand", CubeUpdate(inflate=0.5)) is True
    assert mutators.update_cube("c2", CubeUpdate(inflate=0.5)) is False

    removed = mutators.remove_bones(["arm"])
    assert (removed.removed_bones, removed.removed_cubes) == (1, 2)
    assert store.get_state().cubes == []


def test_facade_follows_swapped_state():
    store, mutators = _store_with_facade()
    mutators.add_texture(TrackedTexture(name="skin", width=16, height=16))
    store.reset()
    mutators.add_texture(TrackedTexture(name="other"))
    assert [t.name for t in store.get_state().textures] == ["other"]


def test_facade_remove_accepts_single_name_and_sets():
    store, mutators = _store_with_facade()
    mutators.add_animation(TrackedAnimation(name="walk", length=1.0))
    mutators.add_animation(TrackedAnimation(name="idle", length=1.0))
    assert mutators.remove_animations("walk") == 1
    assert mutators.remove_animations({"idle"}) == 1
    assert mutators.remove_textures([]) == 0


def test_facade_channel_upsert_on_missing_clip():
    store, mutators = _store_with_facade()
    channel = TrackedAnimationChannel(bone="arm", channel="pos")
    mutators.upsert_animation_channel("missing", channel)
    assert store.get_state().animations == []
