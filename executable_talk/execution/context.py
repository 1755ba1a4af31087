"""
Execution Context - what every executor receives besides its Action.

Bundles the host binding, the workspace, the trust posture, the cooperative
cancellation token and the resource tracker that records which editors,
terminals and decorations the session itself created.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from ..host.interface import HostEnvironment
from ..state.models import DecorationState
from .undo import UndoApplier

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Cooperative cancellation flag.

    Checked at well-defined points (before a pipeline run, before each sequence
    step); executors doing cancellable host work subscribe a callback.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Cancellation callback failed: {e}")

    def on_cancellation_requested(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Registers ``callback`` and returns a function that unregisters it.
        Runs the callback immediately if cancellation was already requested.
        """
        if self._cancelled:
            callback()
            return lambda: None
        self._callbacks.append(callback)

        def unregister() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unregister


class ResourceTracker(Protocol):
    def track_opened_editor(self, path: str) -> None: ...

    def track_created_terminal(self, name: str) -> None: ...

    def track_decoration(self, decoration: DecorationState) -> None: ...

    def forget_decoration(self, decoration_id: str) -> None: ...

    def forget_terminal(self, name: str) -> None: ...


@dataclass
class ExecutionContext:
    host: HostEnvironment
    workspace_root: Path
    is_trusted: bool
    current_slide_index: int = 0
    deck_file_path: Optional[str] = None
    cancellation: CancellationToken = field(default_factory=CancellationToken)
    resources: Optional[ResourceTracker] = None

    def resolve_path(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.workspace_root / candidate

    @property
    def undo_applier(self) -> UndoApplier:
        return UndoApplier(self.host, self.resources)

