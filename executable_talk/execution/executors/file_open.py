import logging

from ...schemas.params import FileOpenParams
from ...schemas.results import ExecutionResult, UndoOp
from ...state.models import Action
from ..context import ExecutionContext
from ..executor import BaseActionExecutor

logger = logging.getLogger(__name__)


class FileOpenExecutor(BaseActionExecutor):
    action_type = "file.open"
    description = "Opens a file in the editor"
    requires_trust = False
    default_timeout_ms = 5000
    params_model = FileOpenParams

    async def run(
        self, action: Action, params: FileOpenParams, context: ExecutionContext
    ) -> ExecutionResult:
        file_path = context.resolve_path(params.path)
        if not await context.host.path_exists(file_path):
            return self.failure(f"File not found: {params.path}")

        await context.host.open_document(
            file_path,
            view_column=params.view_column if params.view_column is not None else 1,
            preview=params.preview,
            selection=params.selection(),
        )
        if context.resources is not None:
            context.resources.track_opened_editor(str(file_path))

        logger.info(f"Opened: {params.path}")
        return self.success(UndoOp(op="close_document", target=str(file_path)))
