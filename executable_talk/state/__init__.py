"""
State Layer - Runtime Data Models

Defines the session-scoped runtime state: Actions and their status machine,
Snapshots, scene entries, the undo/redo StateStack and NavigationHistory.
"""

from executable_talk.state.history import NavigationHistory
from executable_talk.state.models import (
    Action,
    ActionStateError,
    ActionStatus,
    DecorationState,
    EditorState,
    NavigationBreadcrumb,
    SceneEntry,
    Snapshot,
    TerminalState,
    VisibleRange,
)
from executable_talk.state.stack import StateStack

__all__ = [
    "Action",
    "ActionStateError",
    "ActionStatus",
    "DecorationState",
    "EditorState",
    "NavigationBreadcrumb",
    "NavigationHistory",
    "SceneEntry",
    "Snapshot",
    "StateStack",
    "TerminalState",
    "VisibleRange",
]
