import asyncio
import logging

from ...schemas.params import ValidatePortParams
from ...schemas.results import ExecutionResult
from ...state.models import Action
from ..context import ExecutionContext
from ..executor import BaseActionExecutor

logger = logging.getLogger(__name__)


class ValidatePortExecutor(BaseActionExecutor):
    action_type = "validate.port"
    description = "Validate that a TCP port is open"
    requires_trust = False
    default_timeout_ms = 5000
    params_model = ValidatePortParams

    async def run(
        self, action: Action, params: ValidatePortParams, context: ExecutionContext
    ) -> ExecutionResult:
        # An explicit 0 lifts the limit; the pipeline budget still applies
        timeout_ms = self.default_timeout_ms if params.timeout is None else params.timeout
        address = f"{params.host}:{params.port}"

        try:
            await context.host.connect(
                params.host,
                params.port,
                timeout_s=timeout_ms / 1000 if timeout_ms else None,
                token=context.cancellation,
            )
        except asyncio.TimeoutError:
            return self.failure(f"Connection to {address} timed out")
        except ConnectionAbortedError:
            return self.failure(f"Check of {address} cancelled")
        except OSError as e:
            return self.failure(f"Port {params.port} on {params.host} is not open: {e}")

        logger.info(f"Port open: {address}")
        return self.success()
