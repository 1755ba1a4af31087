"""
Execution Layer - Action Pipeline and Executors

Exposes the registry, the trust/validate/timeout pipeline, the execution
context handed to every executor, and the built-in executors.
"""

from executable_talk.execution.context import CancellationToken, ExecutionContext, ResourceTracker
from executable_talk.execution.errors import (
    ActionError,
    ActionStateError,
    ActionTimeoutError,
    TrustError,
    UnknownActionError,
    ValidationError,
)
from executable_talk.execution.executor import BaseActionExecutor
from executable_talk.execution.pipeline import ExecutionPipeline
from executable_talk.execution.registry import ActionRegistry, create_default_registry
from executable_talk.execution.steps import Step, StepShape, canonicalize
from executable_talk.execution.targets import extract_target
from executable_talk.execution.undo import UndoApplier

__all__ = [
    # Context
    "CancellationToken",
    "ExecutionContext",
    "ResourceTracker",
    # Errors
    "ActionError",
    "ActionStateError",
    "ActionTimeoutError",
    "TrustError",
    "UnknownActionError",
    "ValidationError",
    # Engine
    "ActionRegistry",
    "BaseActionExecutor",
    "ExecutionPipeline",
    "UndoApplier",
    "create_default_registry",
    # Helpers
    "Step",
    "StepShape",
    "canonicalize",
    "extract_target",
]
