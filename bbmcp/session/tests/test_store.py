from bbmcp.session import SessionState, SessionStateStore, TrackedBone


def test_new_store_has_no_active_project():
    store = SessionStateStore()
    error = store.ensure_active()
    assert error is not None
    assert error.code == "invalid_state"
    assert error.details["reason"] == "no_active_project"


def test_create_activates_empty_session():
    store = SessionStateStore()
    info = store.create("geckolib", "robot")
    assert store.ensure_active() is None
    assert info.name == "robot"
    state = store.get_state()
    assert state.id == info.id
    assert state.bones == []


def test_attach_copies_snapshot():
    store = SessionStateStore()
    snapshot = SessionState(format="vanilla", name="block", bones=[TrackedBone(name="root")])
    response = store.attach(snapshot)
    assert response.ok
    assert store.get_state().id
    snapshot.bones.append(TrackedBone(name="extra"))
    assert [b.name for b in store.get_state().bones] == ["root"]


def test_attach_without_format_fails():
    store = SessionStateStore()
    response = store.attach(SessionState(name="nothing"))
    assert not response.ok
    assert response.error.code == "invalid_state"


def test_snapshot_is_detached_and_reset_clears():
    store = SessionStateStore()
    store.create("geckolib", "robot")
    store.get_state().bones.append(TrackedBone(name="root"))
    snap = store.snapshot()
    snap.bones.clear()
    assert len(store.get_state().bones) == 1
    store.reset()
    assert store.get_state().bones == []
    assert store.ensure_active() is not None


def test_revision_tracks_content():
    store = SessionStateStore()
    store.create("geckolib", "robot")
    first = store.revision()
    assert first == store.revision()
    store.get_state().bones.append(TrackedBone(name="root"))
    assert store.revision() != first


def test_check_revision():
    store = SessionStateStore()
    store.create("geckolib", "robot")
    current = store.revision()
    assert store.check_revision(None) is None
    assert store.check_revision(current, required=True) is None

    missing = store.check_revision(None, required=True)
    assert missing.code == "invalid_state"
    assert missing.details["reason"] == "missing_revision"
    assert missing.details["current_revision"] == current

    stale = store.check_revision("deadbeef")
    assert stale.details == {"reason": "revision_mismatch", "expected": "deadbeef", "current_revision": current}
