"""
Execution errors.

These are raised inside the execution layer (validation, registry lookup,
trust self-checks) and converted to failure ExecutionResults at the pipeline
or sequence boundary. None of them is meant to reach a caller of
``ExecutionPipeline.execute``.
"""

from typing import Optional

from ..state.models import ActionStateError


class ActionError(Exception):
    """Base class for errors raised while preparing or running an action."""

    def __init__(self, message: str, action_type: Optional[str] = None):
        super().__init__(message)
        self.action_type = action_type


class ValidationError(ActionError):
    """A parameter was missing or malformed."""

    def __init__(self, action_type: str, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}", action_type)
        self.field = field
        self.reason = reason


class UnknownActionError(ActionError):
    def __init__(self, action_type: str):
        super().__init__(f"Unknown action type: {action_type}", action_type)


class TrustError(ActionError):
    def __init__(self, action_type: str):
        super().__init__(f'Action "{action_type}" requires workspace trust', action_type)


class ActionTimeoutError(ActionError):
    def __init__(self, action_type: str, timeout_ms: float):
        super().__init__(f"Action timed out after {int(timeout_ms)}ms", action_type)
        self.timeout_ms = timeout_ms


__all__ = [
    "ActionError",
    "ActionStateError",
    "ActionTimeoutError",
    "TrustError",
    "UnknownActionError",
    "ValidationError",
]
