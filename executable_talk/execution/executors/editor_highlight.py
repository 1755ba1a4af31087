import asyncio
import logging
from typing import Set

from ...schemas.params import EditorHighlightParams
from ...schemas.results import ExecutionResult, UndoOp
from ...state.models import Action, DecorationState
from ..context import ExecutionContext
from ..executor import BaseActionExecutor

logger = logging.getLogger(__name__)

HIGHLIGHT_COLORS = {
    "subtle": "rgba(255, 255, 0, 0.15)",
    "prominent": "rgba(255, 255, 0, 0.3)",
}


class EditorHighlightExecutor(BaseActionExecutor):
    action_type = "editor.highlight"
    description = "Highlights lines in the editor"
    requires_trust = False
    default_timeout_ms = 5000
    params_model = EditorHighlightParams

    def __init__(self):
        # Pending auto-dispose timers for highlights with a duration
        self._expiring: Set[asyncio.Task] = set()

    async def run(
        self, action: Action, params: EditorHighlightParams, context: ExecutionContext
    ) -> ExecutionResult:
        file_path = context.resolve_path(params.path)
        start_line, end_line = params.line_range
        color = params.color or HIGHLIGHT_COLORS[params.style]

        await context.host.open_document(file_path, preview=True)
        decoration_id = await context.host.create_decoration(
            str(file_path), start_line, end_line, style=params.style, color=color
        )
        await context.host.reveal_range(str(file_path), start_line, end_line)

        if context.resources is not None:
            context.resources.track_decoration(DecorationState(
                decoration_id=decoration_id,
                path=str(file_path),
                start_line=start_line,
                end_line=end_line,
                style=params.style,
                color=color,
            ))

        if params.duration:
            self._expire_later(decoration_id, params.duration, context)

        logger.info(f"Highlighted lines {params.lines} in {params.path}")
        return self.success(UndoOp(op="dispose_decoration", target=decoration_id))

    def _expire_later(self, decoration_id: str, duration_ms: float, context: ExecutionContext) -> None:
        task = asyncio.ensure_future(self._expire(decoration_id, duration_ms, context))
        self._expiring.add(task)
        task.add_done_callback(self._expiring.discard)

    @staticmethod
    async def _expire(decoration_id: str, duration_ms: float, context: ExecutionContext) -> None:
        await asyncio.sleep(duration_ms / 1000)
        try:
            await context.undo_applier.apply(UndoOp(op="dispose_decoration", target=decoration_id))
        except Exception as e:
            logger.warning(f"Could not remove expired highlight {decoration_id}: {e}")

    @property
    def pending_expirations(self) -> int:
        return len(self._expiring)
