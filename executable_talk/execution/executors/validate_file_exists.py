from ...schemas.params import ValidateFileExistsParams
from ...schemas.results import ExecutionResult
from ...state.models import Action
from ..context import ExecutionContext
from ..executor import BaseActionExecutor


class ValidateFileExistsExecutor(BaseActionExecutor):
    action_type = "validate.fileExists"
    description = "Validate that a file exists (or is absent)"
    requires_trust = False
    default_timeout_ms = 5000
    params_model = ValidateFileExistsParams

    async def run(
        self, action: Action, params: ValidateFileExistsParams, context: ExecutionContext
    ) -> ExecutionResult:
        exists = await context.host.path_exists(context.resolve_path(params.path))

        if params.expect_missing:
            if exists:
                return self.failure(f'File "{params.path}" exists but was expected to be absent')
            return self.success()

        if not exists:
            return self.failure(f'File "{params.path}" not found')
        return self.success()
