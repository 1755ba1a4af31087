"""
Execution Pipeline - the boundary every top-level action passes through.

Order of checks:
    1. Action status (only a pending Action may run) and cancellation.
    2. Executor lookup.
    3. Trust gate.
    4. Parameter validation.
    5. Timeout-bounded run.

Every failure, however produced, comes back as an ExecutionResult stamped
with the action type and its target. Nothing raised by an executor escapes.
"""

import asyncio
import logging
import time
from typing import Optional, Set

from ..config import settings
from ..schemas.params import ActionParams
from ..schemas.results import ExecutionResult
from ..state.models import Action, ActionStateError
from .context import ExecutionContext
from .errors import ActionError, ActionTimeoutError, TrustError
from .executor import BaseActionExecutor
from .registry import ActionRegistry
from .targets import extract_target

logger = logging.getLogger(__name__)


class ExecutionPipeline:
    def __init__(self, registry: ActionRegistry, default_timeout_ms: float = settings.DEFAULT_TIMEOUT_MS):
        self.registry = registry
        self.default_timeout_ms = default_timeout_ms
        # Runs that lost the timeout race; held so they are not garbage collected mid-flight
        self._abandoned: Set[asyncio.Task] = set()

    async def execute(
        self,
        action: Action,
        context: ExecutionContext,
        timeout_ms: Optional[float] = None,
        skip_trust_check: bool = False,
        skip_validation: bool = False,
    ) -> ExecutionResult:
        started = time.monotonic()

        # 1. ONE-SHOT: a finished or running Action is never re-run
        try:
            action.start()
        except ActionStateError as e:
            return self._enrich(ExecutionResult(success=False, error=str(e)), action, started)

        try:
            if context.cancellation.is_cancellation_requested:
                raise ActionError("Action cancelled", action.type)

            # 2. LOOKUP
            executor = self.registry.get(action.type)

            # 3. TRUST GATE
            if executor.requires_trust and not context.is_trusted and not skip_trust_check:
                raise TrustError(action.type)

            # 4. VALIDATION
            params = None if skip_validation else executor.validate(action.params)
        except ActionError as e:
            logger.info(f"Action {action.id} rejected: {e}")
            action.finish("failed", str(e))
            return self._enrich(ExecutionResult(success=False, error=str(e)), action, started)

        if params is None:
            # Bypassed validation still needs a typed model for the run
            params = executor.params_model.model_construct(**action.params)

        # 5. TIMEOUT-BOUNDED RUN
        budget = timeout_ms if timeout_ms is not None else (
            executor.default_timeout_ms or self.default_timeout_ms
        )
        result = await self._run_with_timeout(executor, action, context, params, budget)

        if result.timed_out:
            action.finish("timeout", result.error)
        else:
            action.finish("success" if result.success else "failed", result.error)

        if not result.success:
            return self._enrich(result, action, started)
        result.duration_ms = (time.monotonic() - started) * 1000
        return result

    async def _run_with_timeout(
        self,
        executor: BaseActionExecutor,
        action: Action,
        context: ExecutionContext,
        params: ActionParams,
        timeout_ms: float,
    ) -> ExecutionResult:
        """
        Races the executor against a timer. Losing the race only stops the
        wait; the underlying run keeps going until the executor itself
        observes cancellation or finishes.
        """
        task = asyncio.ensure_future(executor.execute(action, context, params))
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
        if task in done:
            return task.result()

        self._abandoned.add(task)
        task.add_done_callback(lambda t: self._settle_abandoned(action, t))
        error = ActionTimeoutError(action.type, timeout_ms)
        logger.warning(f"Action {action.id} ({action.type}): {error}")
        return ExecutionResult(success=False, error=str(error), timed_out=True)

    def _settle_abandoned(self, action: Action, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            logger.info(f"Timed-out action {action.id} was cancelled")
        elif task.exception() is not None:
            logger.error(f"Timed-out action {action.id} raised: {task.exception()}")
        else:
            outcome = task.result()
            logger.info(
                f"Timed-out action {action.id} settled late "
                f"({'success' if outcome.success else outcome.error})"
            )

    @property
    def pending_late_runs(self) -> int:
        return len(self._abandoned)

    @staticmethod
    def _enrich(result: ExecutionResult, action: Action, started: float) -> ExecutionResult:
        result.action_type = action.type
        result.action_target = extract_target(action.type, action.params)
        result.duration_ms = (time.monotonic() - started) * 1000
        return result
