from __future__ import annotations

import logging

import pytest

from executable_talk.domain.models import SceneDefinition
from executable_talk.repositories.scenes import SceneStore
from executable_talk.services.exceptions import AuthoredSceneError, SceneLimitError
from executable_talk.state.models import Snapshot


def _snap(index: int = 0) -> Snapshot:
    return Snapshot(slide_index=index)


def test_authored_scene_is_read_only() -> None:
    store = SceneStore()
    store.load_authored([SceneDefinition(name="intro", slide=0)])

    entries = store.list()
    assert len(entries) == 1
    assert entries[0].origin == "authored"
    assert entries[0].snapshot is None

    with pytest.raises(AuthoredSceneError, match="(?i)authored"):
        store.save("intro", _snap(), 0)


def test_authored_scene_cannot_be_deleted() -> None:
    store = SceneStore()
    store.load_authored([SceneDefinition(name="intro", slide=0)])

    with pytest.raises(AuthoredSceneError, match='Cannot delete authored scene "intro"'):
        store.delete("intro")
    assert store.get("intro") is not None


def test_saved_scene_cap() -> None:
    store = SceneStore()
    for i in range(20):
        store.save(f"scene-{i}", _snap(i), i)

    with pytest.raises(SceneLimitError, match=r"Scene limit reached \(20\)"):
        store.save("one-too-many", _snap(), 0)
    assert store.saved_count == 20

    # Overwriting an existing saved name is allowed at the cap
    overwritten = store.save("scene-3", _snap(7), 7)
    assert overwritten.slide_index == 7
    assert store.saved_count == 20


def test_authored_scenes_do_not_count_toward_cap() -> None:
    store = SceneStore(max_saved=1)
    store.load_authored([SceneDefinition(name="a", slide=0), SceneDefinition(name="b", slide=1)])
    store.save("mine", _snap(), 0)
    assert len(store) == 3


def test_list_orders_authored_then_saved() -> None:
    store = SceneStore()
    store.save("zeta", _snap(), 0)
    store.save("alpha", _snap(), 1)
    store.load_authored([SceneDefinition(name="outro", slide=3), SceneDefinition(name="intro", slide=0)])

    names = [entry.name for entry in store.list()]
    assert names == ["intro", "outro", "zeta", "alpha"]


def test_delete_and_restore() -> None:
    store = SceneStore()
    snapshot = _snap(2)
    store.save("demo", snapshot, 2)

    assert store.restore("demo").snapshot is snapshot
    assert store.delete("demo")
    assert not store.delete("demo")
    assert store.restore("demo") is None


def test_load_authored_replaces_previous_authored(caplog: pytest.LogCaptureFixture) -> None:
    store = SceneStore()
    store.load_authored([SceneDefinition(name="old", slide=0)])
    store.save("clash", _snap(), 1)

    with caplog.at_level(logging.WARNING):
        store.load_authored([SceneDefinition(name="clash", slide=2)])

    assert store.get("old") is None
    assert store.get("clash").origin == "authored"
    assert store.get("clash").slide_index == 2
    assert store.saved_count == 0
    assert "replaces a saved scene" in caplog.text


def test_clear() -> None:
    store = SceneStore()
    store.load_authored([SceneDefinition(name="intro", slide=0)])
    store.save("mine", _snap(), 0)
    store.clear()
    assert store.list() == []
