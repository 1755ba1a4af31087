"""
Executor - Base Class for Action Executors

Every action type is implemented by one stateless executor. The base class
owns the descriptor (type id, description, trust requirement, default
timeout budget), parameter validation into the type's Pydantic model, and the
template ``execute`` method that turns any raised exception into a failure
ExecutionResult. Subclasses implement ``run`` only.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional, Type

from pydantic import ValidationError as PydanticValidationError

from ..schemas.params import ActionParams
from ..schemas.results import ExecutionResult, UndoOp
from ..state.models import Action
from .context import ExecutionContext
from .errors import TrustError, ValidationError

logger = logging.getLogger(__name__)


class BaseActionExecutor(ABC):
    action_type: ClassVar[str]
    description: ClassVar[str] = ""
    requires_trust: ClassVar[bool] = False
    default_timeout_ms: ClassVar[float] = 5000
    params_model: ClassVar[Type[ActionParams]] = ActionParams

    def validate(self, params: Dict[str, Any]) -> ActionParams:
        """
        Parses the raw parameter map into the executor's typed model.

        Raises:
            ValidationError: naming the first offending field and the reason.
        """
        try:
            parsed = self.params_model.model_validate(params or {})
        except PydanticValidationError as e:
            raise self._convert(e) from e
        self.check(parsed)
        return parsed

    def check(self, params: ActionParams) -> None:
        """Cross-field checks the model cannot express. Raise ValidationError."""

    async def execute(
        self,
        action: Action,
        context: ExecutionContext,
        params: Optional[ActionParams] = None,
    ) -> ExecutionResult:
        """
        Runs the action and always returns a result.

        When ``params`` is None the executor was invoked directly (e.g. as a
        sequence step) and performs its own trust check and validation.
        """
        started = time.monotonic()
        try:
            if params is None:
                if self.requires_trust and not context.is_trusted:
                    raise TrustError(self.action_type)
                params = self.validate(action.params)
            result = await self.run(action, params, context)
        except Exception as e:
            logger.error(f"{self.action_type} failed: {e}")
            result = ExecutionResult(success=False, error=str(e))
        result.duration_ms = (time.monotonic() - started) * 1000
        return result

    @abstractmethod
    async def run(
        self, action: Action, params: ActionParams, context: ExecutionContext
    ) -> ExecutionResult:
        pass

    # --- Result helpers ---

    @staticmethod
    def success(undo: Optional[UndoOp] = None) -> ExecutionResult:
        return ExecutionResult(success=True, can_undo=undo is not None, undo=undo)

    @staticmethod
    def failure(error: str) -> ExecutionResult:
        return ExecutionResult(success=False, error=error)

    def _convert(self, exc: PydanticValidationError) -> ValidationError:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "params"
        if first["type"] == "missing":
            reason = f"{field} is required"
        elif "error" in first.get("ctx", {}):
            reason = str(first["ctx"]["error"])
        else:
            reason = first["msg"]
        return ValidationError(self.action_type, field, reason)
