from __future__ import annotations

import pytest

from executable_talk.state.models import Snapshot
from executable_talk.state.stack import StateStack


def _snap(index: int) -> Snapshot:
    return Snapshot(slide_index=index, label=f"snap {index}")


def test_empty_stack() -> None:
    stack = StateStack()
    assert not stack.can_undo()
    assert not stack.can_redo()
    assert stack.undo() is None
    assert stack.redo() is None
    assert stack.peek() is None


def test_capacity_evicts_oldest() -> None:
    stack = StateStack()
    snapshots = [_snap(i) for i in range(51)]
    for snapshot in snapshots:
        stack.push(snapshot)

    assert stack.undo_depth == 50
    assert stack.undo_stack[0] is snapshots[1]
    assert stack.peek() is snapshots[50]


def test_undo_then_redo_returns_the_same_snapshot() -> None:
    stack = StateStack()
    first, second = _snap(0), _snap(1)
    stack.push(first)
    stack.push(second)

    undone = stack.undo()
    assert undone is second
    assert stack.can_redo()
    assert stack.peek() is first

    redone = stack.redo()
    assert redone is second
    assert stack.peek() is second
    assert not stack.can_redo()


def test_push_clears_redo() -> None:
    stack = StateStack()
    stack.push(_snap(0))
    stack.push(_snap(1))
    stack.undo()
    assert stack.redo_depth == 1

    stack.push(_snap(2))
    assert stack.redo_depth == 0
    assert stack.redo() is None


def test_redo_is_unbounded_lifo() -> None:
    stack = StateStack(capacity=3)
    snapshots = [_snap(i) for i in range(3)]
    for snapshot in snapshots:
        stack.push(snapshot)
    while stack.undo() is not None:
        pass

    assert stack.redo_stack == (snapshots[2], snapshots[1], snapshots[0])
    assert stack.redo() is snapshots[0]


def test_clear() -> None:
    stack = StateStack()
    stack.push(_snap(0))
    stack.push(_snap(1))
    stack.undo()
    stack.clear()
    assert not stack.can_undo()
    assert not stack.can_redo()


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        StateStack(capacity=0)


def test_snapshots_are_frozen() -> None:
    snapshot = _snap(0)
    with pytest.raises(Exception):
        snapshot.slide_index = 3
