import logging
from typing import Optional

from ...host.interface import WorkspaceFolder
from ...schemas.params import DebugStartParams
from ...schemas.results import ExecutionResult, UndoOp
from ...state.models import Action
from ..context import ExecutionContext
from ..executor import BaseActionExecutor

logger = logging.getLogger(__name__)


class DebugStartExecutor(BaseActionExecutor):
    action_type = "debug.start"
    description = "Starts a debug session"
    requires_trust = True
    default_timeout_ms = 30000
    params_model = DebugStartParams

    async def run(
        self, action: Action, params: DebugStartParams, context: ExecutionContext
    ) -> ExecutionResult:
        folders = context.host.workspace_folders()

        folder: Optional[WorkspaceFolder]
        if params.workspace_folder:
            folder = next(
                (
                    f for f in folders
                    if f.name == params.workspace_folder or str(f.path).endswith(params.workspace_folder)
                ),
                None,
            )
            if folder is None:
                return self.failure(f"Workspace folder not found: {params.workspace_folder}")
        else:
            folder = folders[0] if folders else None

        if folder is None:
            return self.failure("No workspace folder available")

        if params.config_name not in context.host.launch_configurations(folder):
            return self.failure(f"Launch configuration not found: {params.config_name}")

        if not await context.host.start_debugging(folder, params.config_name):
            return self.failure("Failed to start debug session")

        logger.info(f"Started debug session: {params.config_name}")
        return self.success(UndoOp(op="stop_debugging"))
