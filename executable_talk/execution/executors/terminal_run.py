import asyncio
import logging
import sys

from ...config import settings
from ...schemas.params import TerminalRunParams
from ...schemas.results import ExecutionResult, UndoOp
from ...state.models import Action
from ..context import ExecutionContext
from ..executor import BaseActionExecutor

logger = logging.getLogger(__name__)

CLEAR_SETTLE_S = 0.1


class TerminalRunExecutor(BaseActionExecutor):
    action_type = "terminal.run"
    description = "Runs a command in the terminal"
    requires_trust = True
    default_timeout_ms = 30000
    params_model = TerminalRunParams

    async def run(
        self, action: Action, params: TerminalRunParams, context: ExecutionContext
    ) -> ExecutionResult:
        host = context.host
        cwd = context.resolve_path(params.cwd) if params.cwd else context.workspace_root
        name = params.name or settings.DEFAULT_TERMINAL_NAME

        # Reuse a live terminal of the same name, otherwise open a new one
        if not host.terminal_alive(name):
            await host.create_terminal(name, cwd)
            if context.resources is not None:
                context.resources.track_created_terminal(name)

        if params.clear:
            await host.send_to_terminal(name, "cls" if sys.platform.startswith("win") else "clear", reveal=False)
            await asyncio.sleep(CLEAR_SETTLE_S)

        reveal = params.reveal and not params.background
        await host.send_to_terminal(name, params.command, reveal=reveal)

        logger.info(f"Executed: {params.command}")
        return self.success(UndoOp(op="dispose_terminal", target=name))
