"""
State Layer - Runtime Data Models

This module defines the session-scoped runtime state: the Action being
executed (with its one-shot status machine), the Snapshots that record which
session-owned resources were open, named SceneEntries, and navigation
breadcrumbs. Nothing here outlives the presentation session.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.models import ActionDefinition, NavigationMethod

ActionStatus = Literal["pending", "running", "success", "failed", "timeout"]

TERMINAL_STATUSES = ("success", "failed", "timeout")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActionStateError(RuntimeError):
    """Raised when an Action is driven through an illegal status transition."""

    def __init__(self, action_id: str, current: str, requested: str):
        super().__init__(
            f"Action {action_id} cannot move from '{current}' to '{requested}'"
        )
        self.action_id = action_id
        self.current = current
        self.requested = requested


class Action(BaseModel):
    """
    One requested operation.

    Created fresh for every invocation (including every sequence step) and
    discarded once the pipeline returns. The status moves
    pending -> running -> success | failed | timeout and never again;
    a retry is always a new Action.
    """
    id: str = Field(default_factory=lambda: f"action-{uuid.uuid4().hex}")
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)
    status: ActionStatus = "pending"
    slide_index: int = 0
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_definition(cls, definition: ActionDefinition, slide_index: int) -> "Action":
        return cls(
            type=definition.type,
            params=dict(definition.params),
            slide_index=slide_index,
        )

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def start(self) -> None:
        if self.status != "pending":
            raise ActionStateError(self.id, self.status, "running")
        self.status = "running"
        self.started_at = utcnow()

    def finish(self, status: ActionStatus, error: Optional[str] = None) -> None:
        if self.status != "running" or status not in TERMINAL_STATUSES:
            raise ActionStateError(self.id, self.status, status)
        self.status = status
        self.error = error
        self.completed_at = utcnow()


# ==========================================================================
# Snapshots
# ==========================================================================


class VisibleRange(BaseModel):
    start: int
    end: int


class EditorState(BaseModel):
    """An open document at capture time."""
    path: str
    view_column: int = 1
    visible_range: Optional[VisibleRange] = None
    opened_by_session: bool = False


class TerminalState(BaseModel):
    name: str
    created_by_session: bool = False


class DecorationState(BaseModel):
    """A session-owned highlight, recorded with enough detail to re-apply it."""
    decoration_id: str
    path: str
    start_line: int
    end_line: int
    style: str = "subtle"
    color: Optional[str] = None


class Snapshot(BaseModel):
    """
    Point-in-time record of the session-owned editing context.

    ``target_slide_index`` is the slide the navigation that triggered the
    capture led to, and ``action_id`` the action run right after it; redo
    uses whichever is set to replay the transition.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"snapshot-{uuid.uuid4().hex}")
    slide_index: int
    label: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)
    open_editors: List[EditorState] = Field(default_factory=list)
    active_editor_path: Optional[str] = None
    active_line: Optional[int] = None
    terminals: List[TerminalState] = Field(default_factory=list)
    decorations: List[DecorationState] = Field(default_factory=list)
    executed_action_ids: List[str] = Field(default_factory=list)
    target_slide_index: Optional[int] = None
    action_id: Optional[str] = None


# ==========================================================================
# Scenes & Navigation
# ==========================================================================

SceneOrigin = Literal["authored", "saved"]


class SceneEntry(BaseModel):
    """
    A named checkpoint.

    ``snapshot`` is None only for an authored scene that was never saved:
    restoring it means navigating to its anchor slide.
    """
    name: str
    origin: SceneOrigin
    slide_index: int
    timestamp: Optional[datetime] = None
    snapshot: Optional[Snapshot] = None

    @property
    def is_authored(self) -> bool:
        return self.origin == "authored"


class NavigationBreadcrumb(BaseModel):
    slide_index: int
    slide_title: Optional[str] = None
    method: NavigationMethod


class NavigationEntry(NavigationBreadcrumb):
    timestamp: datetime = Field(default_factory=utcnow)

    def breadcrumb(self) -> NavigationBreadcrumb:
        return NavigationBreadcrumb(
            slide_index=self.slide_index,
            slide_title=self.slide_title,
            method=self.method,
        )
