import logging
import os
from pathlib import Path

from ...schemas.params import ValidateCommandParams, current_platform
from ...schemas.results import ExecutionResult
from ...state.models import Action
from ..context import ExecutionContext
from ..executor import BaseActionExecutor

logger = logging.getLogger(__name__)

OUTPUT_EXCERPT_CHARS = 200


def expand_placeholders(command: str) -> str:
    """Expands ${pathSep}, ${home}, ${pathDelimiter} and ${shell} in a command."""
    shell = os.environ.get("SHELL") or os.environ.get("COMSPEC") or ""
    return (
        command.replace("${pathSep}", os.sep)
        .replace("${home}", str(Path.home()))
        .replace("${pathDelimiter}", os.pathsep)
        .replace("${shell}", shell)
    )


class ValidateCommandExecutor(BaseActionExecutor):
    action_type = "validate.command"
    description = "Run a command and validate its exit code and optional output"
    requires_trust = True
    default_timeout_ms = 30000
    params_model = ValidateCommandParams

    async def run(
        self, action: Action, params: ValidateCommandParams, context: ExecutionContext
    ) -> ExecutionResult:
        platform = current_platform()
        command = params.command_for(platform)
        if command is None:
            return self.failure(f"Command not available on {platform}. Consider adding a default entry.")
        command = expand_placeholders(command)

        # An explicit 0 lifts the limit; the pipeline budget still applies
        timeout_ms = self.default_timeout_ms if params.timeout is None else params.timeout
        outcome = await context.host.run_process(
            command,
            cwd=context.workspace_root,
            timeout_s=timeout_ms / 1000 if timeout_ms else None,
            token=context.cancellation,
        )

        if outcome.cancelled:
            return self.failure("Command cancelled")
        if outcome.timed_out:
            return self.failure(f"Command timed out after {int(timeout_ms)}ms")
        if outcome.exit_code != 0:
            stderr = outcome.stderr.strip()
            return self.failure(
                f"Command exited with code {outcome.exit_code}" + (f": {stderr}" if stderr else "")
            )

        output = outcome.stdout.strip()
        if params.expect_output and params.expect_output not in output:
            return self.failure(
                f'Expected output to contain "{params.expect_output}" '
                f"but got: {output[:OUTPUT_EXCERPT_CHARS]}"
            )

        logger.info(f"Validated command: {command}")
        return self.success()
