"""
Schemas - Execution and Restore Outcomes

These models are the data contract between the engine and the reporting/UI
layer. Failures of every kind (validation, unknown type, trust, timeout,
host errors) travel as an ExecutionResult, never as an exception.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

StepStatus = Literal["success", "failed", "skipped"]

UndoKind = Literal[
    "close_document",
    "dispose_decoration",
    "dispose_terminal",
    "stop_debugging",
    "composite",
]


class UndoOp(BaseModel):
    """
    A serializable description of how to revert one effect.

    The UndoApplier translates it into host calls. A ``composite`` op runs its
    children in list order; builders put them in the order they must be undone.
    """
    op: UndoKind
    target: Optional[str] = None
    children: List["UndoOp"] = Field(default_factory=list)

    @classmethod
    def composite(cls, ops: List["UndoOp"]) -> "UndoOp":
        return cls(op="composite", children=list(ops))


class StepResult(BaseModel):
    """Outcome of a single step within a sequence."""
    type: str
    target: Optional[str] = None
    status: StepStatus
    error: Optional[str] = None


class SequenceErrorDetail(BaseModel):
    """
    Structured breakdown of a sequence failure, one entry per step in order.
    """
    total_steps: int
    failed_step_index: int = Field(..., description="Zero-based index of the step that stopped the sequence.")
    failed_step_type: str
    step_results: List[StepResult]


class ExecutionResult(BaseModel):
    success: bool
    error: Optional[str] = None
    can_undo: bool = False
    undo: Optional[UndoOp] = None
    duration_ms: float = 0.0
    timed_out: bool = False

    # Failure enrichment, filled in by the pipeline for user-facing reports
    action_type: Optional[str] = None
    action_target: Optional[str] = None
    sequence_detail: Optional[SequenceErrorDetail] = None


class SkippedResource(BaseModel):
    type: Literal["editor", "terminal", "decoration"]
    name: str
    reason: str


class RestoreResult(BaseModel):
    """Outcome of a snapshot restore. ``success`` is False when anything was skipped."""
    success: bool = True
    skipped: List[SkippedResource] = Field(default_factory=list)
