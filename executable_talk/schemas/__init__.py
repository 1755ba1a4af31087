"""
Schemas - Parameter and Outcome Models

Defines the typed per-action parameter models and the result shapes
(ExecutionResult, sequence breakdowns, restore reports) exchanged with
the reporting layer.
"""

from executable_talk.schemas.params import (
    ActionParams,
    DebugStartParams,
    EditorHighlightParams,
    FileOpenParams,
    HostCommandParams,
    SequenceParams,
    TerminalRunParams,
    ValidateCommandParams,
    ValidateFileExistsParams,
    ValidatePortParams,
)
from executable_talk.schemas.results import (
    ExecutionResult,
    RestoreResult,
    SequenceErrorDetail,
    SkippedResource,
    StepResult,
    StepStatus,
    UndoOp,
)

__all__ = [
    # Parameters
    "ActionParams",
    "DebugStartParams",
    "EditorHighlightParams",
    "FileOpenParams",
    "HostCommandParams",
    "SequenceParams",
    "TerminalRunParams",
    "ValidateCommandParams",
    "ValidateFileExistsParams",
    "ValidatePortParams",
    # Outcomes
    "ExecutionResult",
    "RestoreResult",
    "SequenceErrorDetail",
    "SkippedResource",
    "StepResult",
    "StepStatus",
    "UndoOp",
]
