"""
Schemas - Session Views

What the Conductor hands back to the reporting/UI layer after each
operation: the current slide and undo/history posture, the outcome of every
action that ran, and any notices to show. Data only; no rendering.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..state.models import ActionStatus, NavigationBreadcrumb
from .results import ExecutionResult


class Notice(BaseModel):
    """
    A message for the presenter. Persistent notices stay until dismissed;
    the others may auto-dismiss.
    """
    level: Literal["info", "warning", "error"]
    code: str
    message: str
    detail: Optional[str] = Field(None, description="Per-step breakdown for sequence failures.")
    persistent: bool = False


class ActionOutcome(BaseModel):
    action_id: str
    status: ActionStatus
    result: ExecutionResult
    notice: Optional[Notice] = None


class SlideState(BaseModel):
    slide_index: int
    total_slides: int
    title: Optional[str] = None
    deck_state: str
    can_undo: bool
    can_redo: bool
    can_go_back: bool
    navigation_history: List[NavigationBreadcrumb] = Field(default_factory=list)
    total_history_entries: int = 0
    actions: List[ActionOutcome] = Field(default_factory=list)
    notices: List[Notice] = Field(default_factory=list)
