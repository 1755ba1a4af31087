"""
Sequence Executor - runs an ordered list of actions as one composite action.

Steps run strictly one after another. Each step is a fresh Action handed
directly to its executor, which performs its own trust check and validation.
When a step fails and ``stopOnError`` is set, every later step is marked
skipped and the undos collected so far are applied newest first. A failed
undo is logged and does not change the sequence's outcome.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from ...config import settings
from ...schemas.params import SequenceParams
from ...schemas.results import ExecutionResult, SequenceErrorDetail, StepResult, UndoOp
from ...state.models import Action
from ..context import ExecutionContext
from ..errors import ValidationError
from ..executor import BaseActionExecutor
from ..steps import Step, canonicalize
from ..undo import UndoApplier

if TYPE_CHECKING:
    from ..registry import ActionRegistry

logger = logging.getLogger(__name__)


class SequenceExecutor(BaseActionExecutor):
    action_type = "sequence"
    description = "Executes a sequence of actions in order"
    # Trust is decided per step by each step's own executor
    requires_trust = False
    default_timeout_ms = 120000
    params_model = SequenceParams

    def __init__(self, registry: "ActionRegistry", step_delay_ms: float = settings.SEQUENCE_STEP_DELAY_MS):
        self.registry = registry
        self.step_delay_ms = step_delay_ms

    def check(self, params: SequenceParams) -> None:
        if params.actions:
            return
        if params.steps is None:
            raise ValidationError(
                self.action_type, "steps", "steps is required and must be an array (or use actions string)"
            )
        if not params.steps:
            raise ValidationError(self.action_type, "steps", "steps cannot be empty")
        for i, step in enumerate(params.steps):
            if not isinstance(step.get("type"), str) or not step["type"]:
                raise ValidationError(self.action_type, f"steps[{i}].type", "each step must have a type")

    async def run(
        self, action: Action, params: SequenceParams, context: ExecutionContext
    ) -> ExecutionResult:
        steps = canonicalize(params)
        if not steps:
            return self.failure("No steps or actions provided")

        delay_ms = params.delay if params.delay is not None else self.step_delay_ms
        stop_on_error = params.stop_on_error
        applier = context.undo_applier

        completed: List[UndoOp] = []
        outcomes: List[StepResult] = []
        # (index, message) of the first failure when the sequence keeps going
        first_failure: Optional[Tuple[int, str]] = None

        for i, step in enumerate(steps):
            # 1. CANCELLATION CHECK
            if context.cancellation.is_cancellation_requested:
                outcomes.extend(self._skipped(steps[i:]))
                logger.info(f"Sequence cancelled before step {i + 1}/{len(steps)}")
                return self._failed("Sequence cancelled", steps, outcomes, i)

            # 2. LOOKUP
            if not self.registry.has(step.type):
                message = f"Unknown action type in sequence: {step.type}"
                if stop_on_error:
                    outcomes.append(StepResult(
                        type=step.type, target=step.target, status="failed",
                        error=f"Unknown action type: {step.type}",
                    ))
                    outcomes.extend(self._skipped(steps[i + 1:]))
                    await self._rollback(completed, applier)
                    return self._failed(message, steps, outcomes, i)
                logger.warning(f"Skipping unknown action type: {step.type}")
                outcomes.append(StepResult(type=step.type, target=step.target, status="skipped"))
                first_failure = first_failure or (i, message)
                continue

            # 3. RUN THE STEP
            executor = self.registry.get(step.type)
            step_action = Action(type=step.type, params=step.params, slide_index=action.slide_index)
            logger.info(f"Executing step {i + 1}/{len(steps)}: {step.type}")
            step_action.start()
            result = await executor.execute(step_action, context)
            step_action.finish("success" if result.success else "failed", result.error)

            if result.success:
                outcomes.append(StepResult(type=step.type, target=step.target, status="success"))
                if result.undo is not None:
                    completed.append(result.undo)
            else:
                outcomes.append(StepResult(
                    type=step.type, target=step.target, status="failed", error=result.error,
                ))
                message = f"Step {i + 1} ({step.type}) failed: {result.error}"
                if stop_on_error:
                    outcomes.extend(self._skipped(steps[i + 1:]))
                    await self._rollback(completed, applier)
                    return self._failed(message, steps, outcomes, i)
                logger.warning(message)
                first_failure = first_failure or (i, message)

            # 4. INTER-STEP DELAY
            if i < len(steps) - 1 and delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000)

        logger.info(f"Completed {len(steps)} steps")
        undo = UndoOp.composite(list(reversed(completed))) if completed else None

        if first_failure is not None:
            index, message = first_failure
            result = self._failed(message, steps, outcomes, index)
            result.can_undo = undo is not None
            result.undo = undo
            return result
        return self.success(undo)

    @staticmethod
    def _skipped(steps: List[Step]) -> List[StepResult]:
        return [StepResult(type=step.type, target=step.target, status="skipped") for step in steps]

    @staticmethod
    async def _rollback(completed: List[UndoOp], applier: UndoApplier) -> None:
        for op in reversed(completed):
            try:
                await applier.apply(op)
            except Exception as e:
                logger.warning(f"Undo failed during rollback: {e}")

    def _failed(
        self, message: str, steps: List[Step], outcomes: List[StepResult], index: int
    ) -> ExecutionResult:
        result = self.failure(message)
        result.sequence_detail = SequenceErrorDetail(
            total_steps=len(steps),
            failed_step_index=index,
            failed_step_type=steps[index].type,
            step_results=outcomes,
        )
        return result
