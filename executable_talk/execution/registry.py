"""
Action Registry - lookup table from action type to executor.

One registry is constructed per session (see ``create_default_registry``)
and handed to the pipeline and to the sequence executor.
"""

import logging
from typing import Dict, List

from .errors import UnknownActionError
from .executor import BaseActionExecutor

logger = logging.getLogger(__name__)


class ActionRegistry:
    def __init__(self):
        self._executors: Dict[str, BaseActionExecutor] = {}

    def register(self, executor: BaseActionExecutor) -> None:
        if executor.action_type in self._executors:
            logger.warning(
                f"Overwriting existing executor for action type: {executor.action_type}"
            )
        self._executors[executor.action_type] = executor

    def get(self, action_type: str) -> BaseActionExecutor:
        """
        Raises:
            UnknownActionError: if no executor is registered for the type.
        """
        executor = self._executors.get(action_type)
        if executor is None:
            raise UnknownActionError(action_type)
        return executor

    def has(self, action_type: str) -> bool:
        return action_type in self._executors

    def list_action_types(self) -> List[str]:
        return list(self._executors)

    @property
    def size(self) -> int:
        return len(self._executors)

    def __len__(self) -> int:
        return len(self._executors)

    def clear(self) -> None:
        self._executors.clear()


def create_default_registry() -> ActionRegistry:
    """Builds a registry holding every built-in executor."""
    from .executors import (
        DebugStartExecutor,
        EditorHighlightExecutor,
        FileOpenExecutor,
        HostCommandExecutor,
        SequenceExecutor,
        TerminalRunExecutor,
        ValidateCommandExecutor,
        ValidateFileExistsExecutor,
        ValidatePortExecutor,
    )

    registry = ActionRegistry()
    registry.register(FileOpenExecutor())
    registry.register(EditorHighlightExecutor())
    registry.register(TerminalRunExecutor())
    registry.register(DebugStartExecutor())
    registry.register(HostCommandExecutor())
    registry.register(ValidateCommandExecutor())
    registry.register(ValidateFileExistsExecutor())
    registry.register(ValidatePortExecutor())
    registry.register(SequenceExecutor(registry))
    return registry
