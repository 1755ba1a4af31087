"""
State Stack - bounded undo/redo over Snapshots.

Two stacks: ``undo`` holds at most ``capacity`` snapshots (oldest evicted
first), ``redo`` is unbounded but emptied by every push. Session-only.
"""

from collections import deque
from typing import Deque, List, Optional, Tuple

from ..config import settings
from .models import Snapshot


class StateStack:
    def __init__(self, capacity: int = settings.UNDO_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        # deque(maxlen) drops from the left, i.e. the oldest snapshot
        self._undo: Deque[Snapshot] = deque(maxlen=capacity)
        self._redo: List[Snapshot] = []

    def push(self, snapshot: Snapshot) -> None:
        """Records a new snapshot. Clears redo; evicts the oldest entry at capacity."""
        self._redo.clear()
        self._undo.append(snapshot)

    def undo(self) -> Optional[Snapshot]:
        """Pops the most recent snapshot, moves it to redo, and returns it for the caller to apply."""
        if not self._undo:
            return None
        snapshot = self._undo.pop()
        self._redo.append(snapshot)
        return snapshot

    def redo(self) -> Optional[Snapshot]:
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._undo.append(snapshot)
        return snapshot

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def peek(self) -> Optional[Snapshot]:
        return self._undo[-1] if self._undo else None

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def undo_stack(self) -> Tuple[Snapshot, ...]:
        """Oldest first."""
        return tuple(self._undo)

    @property
    def redo_stack(self) -> Tuple[Snapshot, ...]:
        return tuple(self._redo)

    def clear(self) -> None:
        """Drops every snapshot (deck close / reset)."""
        self._undo.clear()
        self._redo.clear()
