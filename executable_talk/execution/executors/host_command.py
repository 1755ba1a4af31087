import logging

from ...schemas.params import HostCommandParams
from ...schemas.results import ExecutionResult
from ...state.models import Action
from ..context import ExecutionContext
from ..executor import BaseActionExecutor

logger = logging.getLogger(__name__)


class HostCommandExecutor(BaseActionExecutor):
    """Invokes an arbitrary host command by id. Commands may have side effects, so trust is required."""

    action_type = "vscode.command"
    description = "Executes a host editor command"
    requires_trust = True
    default_timeout_ms = 10000
    params_model = HostCommandParams

    def check(self, params: HostCommandParams) -> None:
        if "." not in params.id and not params.id.startswith("workbench"):
            logger.warning(f'Command ID "{params.id}" may not be valid (missing namespace)')

    async def run(
        self, action: Action, params: HostCommandParams, context: ExecutionContext
    ) -> ExecutionResult:
        try:
            await context.host.execute_command(params.id, params.resolved_args())
        except Exception as e:
            return self.failure(f'Failed to execute command "{params.id}": {e}')
        return self.success()
