"""
Undo Applier - translates serializable UndoOps into host calls.

Executors never hand out closures; they describe the inverse of their effect
as an UndoOp and this applier, bound to the active host, carries it out.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..host.interface import HostEnvironment
from ..schemas.results import UndoOp

if TYPE_CHECKING:
    from .context import ResourceTracker

logger = logging.getLogger(__name__)


class UndoApplier:
    def __init__(self, host: HostEnvironment, resources: Optional["ResourceTracker"] = None):
        self.host = host
        self.resources = resources

    async def apply(self, op: UndoOp) -> None:
        """
        Applies one undo operation.

        A leaf op propagates host errors to the caller. A composite op applies
        every child in order and only logs a failing child, so the remaining
        children still run.
        """
        if op.op == "composite":
            for child in op.children:
                try:
                    await self.apply(child)
                except Exception as e:
                    logger.warning(f"Undo of {child.op} ({child.target}) failed: {e}")
            return

        if op.op == "close_document":
            await self.host.close_document(op.target)
        elif op.op == "dispose_decoration":
            await self.host.dispose_decoration(op.target)
            if self.resources is not None:
                self.resources.forget_decoration(op.target)
        elif op.op == "dispose_terminal":
            await self.host.dispose_terminal(op.target)
            if self.resources is not None:
                self.resources.forget_terminal(op.target)
        elif op.op == "stop_debugging":
            await self.host.stop_debugging()
        else:
            raise ValueError(f"Unsupported undo operation: {op.op}")
