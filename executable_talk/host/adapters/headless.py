"""
Headless Host - a HostEnvironment that needs no editor.

Documents, decorations, terminals, debug sessions and host commands are
modelled in memory; the filesystem, subprocesses and TCP connections are real.
Used by the control API and by tests, and as the reference binding for the
capability surface.
"""

import asyncio
import inspect
import logging
import os
import signal
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from ..interface import (
    ActiveEditor,
    HostEnvironment,
    OpenDocument,
    ProcessResult,
    WorkspaceFolder,
)

if TYPE_CHECKING:
    from ...execution.context import CancellationToken

logger = logging.getLogger(__name__)


@dataclass
class HeadlessDecoration:
    decoration_id: str
    path: str
    start_line: int
    end_line: int
    style: str
    color: Optional[str]


@dataclass
class HeadlessTerminal:
    name: str
    cwd: Path
    transcript: List[str] = field(default_factory=list)
    visible: bool = False


class HeadlessHost(HostEnvironment):
    def __init__(
        self,
        workspace_root: Path,
        trusted: bool = False,
        launch_configs: Optional[Dict[str, List[str]]] = None,
        folders: Optional[List[WorkspaceFolder]] = None,
    ):
        self.workspace_root = Path(workspace_root)
        self.trusted = trusted
        self.folders = folders or [WorkspaceFolder(name=self.workspace_root.name, path=self.workspace_root)]
        # folder name -> launch configuration names
        self.launch_configs = launch_configs or {}

        self.documents: Dict[str, OpenDocument] = {}
        self.active_path: Optional[str] = None
        self.active_line = 1
        self.decorations: Dict[str, HeadlessDecoration] = {}
        self.terminals: Dict[str, HeadlessTerminal] = {}
        self.debug_sessions: List[str] = []
        self.commands: Dict[str, Callable[..., Any]] = {}

    def register_command(self, command_id: str, handler: Callable[..., Any]) -> None:
        self.commands[command_id] = handler

    # --- Workspace ---

    def is_trusted(self) -> bool:
        return self.trusted

    def workspace_folders(self) -> List[WorkspaceFolder]:
        return list(self.folders)

    async def path_exists(self, path: Path) -> bool:
        return Path(path).exists()

    # --- Documents ---

    async def open_document(
        self,
        path: Path,
        view_column: int = 1,
        preview: bool = True,
        selection: Optional[Tuple[int, int, int]] = None,
    ) -> None:
        if not Path(path).exists():
            raise FileNotFoundError(f"File not found: {path}")

        key = str(path)
        column = self._resolve_column(view_column)
        document = self.documents.get(key) or OpenDocument(path=key)
        document.view_column = column
        if selection is not None:
            document.visible_start, document.visible_end = selection[0], selection[1]
            self.active_line = selection[0]
        else:
            self.active_line = 1
        self.documents[key] = document
        self.active_path = key

    def _resolve_column(self, view_column: int) -> int:
        if view_column == -1:
            return max((d.view_column for d in self.documents.values()), default=0) + 1
        if view_column == -2:
            active = self.documents.get(self.active_path) if self.active_path else None
            return active.view_column if active else 1
        return view_column

    async def close_document(self, path: str) -> bool:
        if self.documents.pop(path, None) is None:
            return False
        if self.active_path == path:
            self.active_path = next(reversed(self.documents), None) if self.documents else None
            self.active_line = 1
        return True

    def list_open_documents(self) -> List[OpenDocument]:
        return list(self.documents.values())

    def active_editor(self) -> Optional[ActiveEditor]:
        if self.active_path is None:
            return None
        return ActiveEditor(path=self.active_path, line=self.active_line)

    async def reveal_range(self, path: str, start_line: int, end_line: int) -> None:
        document = self.documents.get(path)
        if document is None:
            raise LookupError(f"Document is not open: {path}")
        document.visible_start, document.visible_end = start_line, end_line

    # --- Decorations ---

    async def create_decoration(
        self,
        path: str,
        start_line: int,
        end_line: int,
        style: str = "subtle",
        color: Optional[str] = None,
    ) -> str:
        decoration_id = f"decoration-{uuid.uuid4().hex[:12]}"
        self.decorations[decoration_id] = HeadlessDecoration(
            decoration_id=decoration_id,
            path=path,
            start_line=start_line,
            end_line=end_line,
            style=style,
            color=color,
        )
        return decoration_id

    async def dispose_decoration(self, decoration_id: str) -> None:
        self.decorations.pop(decoration_id, None)

    # --- Terminals ---

    def terminal_alive(self, name: str) -> bool:
        return name in self.terminals

    def list_terminals(self) -> List[str]:
        return list(self.terminals)

    async def create_terminal(self, name: str, cwd: Path) -> None:
        self.terminals[name] = HeadlessTerminal(name=name, cwd=Path(cwd))

    async def send_to_terminal(self, name: str, text: str, reveal: bool = True) -> None:
        terminal = self.terminals.get(name)
        if terminal is None:
            raise LookupError(f"Terminal not found: {name}")
        terminal.transcript.append(text)
        if reveal:
            terminal.visible = True

    async def dispose_terminal(self, name: str) -> bool:
        return self.terminals.pop(name, None) is not None

    # --- Debugging ---

    def launch_configurations(self, folder: WorkspaceFolder) -> List[str]:
        return list(self.launch_configs.get(folder.name, []))

    async def start_debugging(self, folder: WorkspaceFolder, config_name: str) -> bool:
        if config_name not in self.launch_configurations(folder):
            return False
        self.debug_sessions.append(config_name)
        return True

    async def stop_debugging(self) -> None:
        if self.debug_sessions:
            self.debug_sessions.pop()

    # --- Commands, processes, sockets ---

    async def execute_command(self, command_id: str, args: List[Any]) -> Any:
        handler = self.commands.get(command_id)
        if handler is None:
            raise LookupError(f"command '{command_id}' not found")
        result = handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def run_process(
        self,
        command: str,
        cwd: Path,
        timeout_s: Optional[float],
        token: "CancellationToken",
    ) -> ProcessResult:
        # Own process group, so a kill also reaches whatever the shell spawned
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=os.name == "posix",
        )
        unregister = token.on_cancellation_requested(lambda: _kill_process_tree(process))
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout_s)
        except asyncio.TimeoutError:
            _kill_process_tree(process)
            await process.wait()
            logger.warning(f"Process timed out after {timeout_s}s: {command}")
            return ProcessResult(exit_code=None, stdout="", stderr="", timed_out=True)
        except asyncio.CancelledError:
            _kill_process_tree(process)
            raise
        finally:
            unregister()

        return ProcessResult(
            exit_code=process.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            cancelled=token.is_cancellation_requested,
        )

    async def connect(
        self,
        host: str,
        port: int,
        timeout_s: Optional[float],
        token: "CancellationToken",
    ) -> None:
        attempt = asyncio.ensure_future(asyncio.open_connection(host, port))
        unregister = token.on_cancellation_requested(attempt.cancel)
        try:
            _, writer = await asyncio.wait_for(attempt, timeout=timeout_s)
        except asyncio.CancelledError:
            if attempt.cancelled() and token.is_cancellation_requested:
                raise ConnectionAbortedError(f"Connection to {host}:{port} cancelled")
            raise
        finally:
            unregister()

        writer.close()
        await writer.wait_closed()


def _kill_process_tree(process: asyncio.subprocess.Process) -> None:
    """Kills the shell and every process it started. A process that already exited is ignored."""
    try:
        if os.name == "posix":
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass
