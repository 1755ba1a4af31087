"""
Executable Talk

Action execution and session state engine for presentations whose slides
drive an editing environment: a trust/validate/timeout pipeline over
pluggable executors, composite sequences with rollback, bounded undo/redo
over snapshots, named scene checkpoints and navigation history.
"""

from executable_talk.domain import (
    ActionDefinition,
    Deck,
    InteractiveElement,
    SceneDefinition,
    Slide,
)
from executable_talk.state import (
    Action,
    NavigationHistory,
    SceneEntry,
    Snapshot,
    StateStack,
)
from executable_talk.schemas import ExecutionResult, RestoreResult, UndoOp
from executable_talk.execution import (
    ActionRegistry,
    BaseActionExecutor,
    CancellationToken,
    ExecutionContext,
    ExecutionPipeline,
    create_default_registry,
)

__all__ = [
    # Domain Layer
    "ActionDefinition",
    "Deck",
    "InteractiveElement",
    "SceneDefinition",
    "Slide",
    # State Layer
    "Action",
    "NavigationHistory",
    "SceneEntry",
    "Snapshot",
    "StateStack",
    # Schemas
    "ExecutionResult",
    "RestoreResult",
    "UndoOp",
    # Execution Layer
    "ActionRegistry",
    "BaseActionExecutor",
    "CancellationToken",
    "ExecutionContext",
    "ExecutionPipeline",
    "create_default_registry",
]
