from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

if TYPE_CHECKING:
    from ..execution.context import CancellationToken


@dataclass
class OpenDocument:
    path: str
    view_column: int = 1
    visible_start: Optional[int] = None
    visible_end: Optional[int] = None


@dataclass
class ActiveEditor:
    path: str
    line: int


@dataclass
class WorkspaceFolder:
    name: str
    path: Path


@dataclass
class ProcessResult:
    exit_code: Optional[int]
    stdout: str
    stderr: str
    timed_out: bool = False
    cancelled: bool = False


class HostEnvironment(ABC):
    """
    Abstract Base Class that defines the capability surface executors drive
    (editor, decorations, terminals, debugger, host commands, processes, sockets).
    Executors talk only to this interface; bindings live in ``host.adapters``.

    Paths handed to the host are absolute. Lines are 1-based.
    """

    # --- Workspace ---

    @abstractmethod
    def is_trusted(self) -> bool:
        pass

    @abstractmethod
    def workspace_folders(self) -> List[WorkspaceFolder]:
        pass

    @abstractmethod
    async def path_exists(self, path: Path) -> bool:
        pass

    # --- Documents ---

    @abstractmethod
    async def open_document(
        self,
        path: Path,
        view_column: int = 1,
        preview: bool = True,
        selection: Optional[Tuple[int, int, int]] = None,
    ) -> None:
        """
        Opens and shows a document. ``selection`` is (start_line, end_line, column).
        Raises FileNotFoundError when the path does not exist.
        """
        pass

    @abstractmethod
    async def close_document(self, path: str) -> bool:
        """Closes the document. Returns False if it was not open."""
        pass

    @abstractmethod
    def list_open_documents(self) -> List[OpenDocument]:
        pass

    @abstractmethod
    def active_editor(self) -> Optional[ActiveEditor]:
        pass

    @abstractmethod
    async def reveal_range(self, path: str, start_line: int, end_line: int) -> None:
        """Scrolls an open document. Raises LookupError if it is not open."""
        pass

    # --- Decorations ---

    @abstractmethod
    async def create_decoration(
        self,
        path: str,
        start_line: int,
        end_line: int,
        style: str = "subtle",
        color: Optional[str] = None,
    ) -> str:
        """Applies a whole-line highlight and returns its decoration id."""
        pass

    @abstractmethod
    async def dispose_decoration(self, decoration_id: str) -> None:
        """Removes a highlight. Disposing an unknown id is a no-op."""
        pass

    # --- Terminals ---

    @abstractmethod
    def terminal_alive(self, name: str) -> bool:
        pass

    @abstractmethod
    def list_terminals(self) -> List[str]:
        pass

    @abstractmethod
    async def create_terminal(self, name: str, cwd: Path) -> None:
        pass

    @abstractmethod
    async def send_to_terminal(self, name: str, text: str, reveal: bool = True) -> None:
        pass

    @abstractmethod
    async def dispose_terminal(self, name: str) -> bool:
        pass

    # --- Debugging ---

    @abstractmethod
    def launch_configurations(self, folder: WorkspaceFolder) -> List[str]:
        """Names of the launch configurations defined for a workspace folder."""
        pass

    @abstractmethod
    async def start_debugging(self, folder: WorkspaceFolder, config_name: str) -> bool:
        pass

    @abstractmethod
    async def stop_debugging(self) -> None:
        pass

    # --- Commands, processes, sockets ---

    @abstractmethod
    async def execute_command(self, command_id: str, args: List[Any]) -> Any:
        """Runs a host command. Raises LookupError for an unknown id."""
        pass

    @abstractmethod
    async def run_process(
        self,
        command: str,
        cwd: Path,
        timeout_s: Optional[float],
        token: "CancellationToken",
    ) -> ProcessResult:
        """
        Runs a shell command to completion and captures its output.
        The command and everything it spawned are killed on timeout or when
        ``token`` is cancelled. A ``timeout_s`` of None means no limit.
        """
        pass

    @abstractmethod
    async def connect(
        self,
        host: str,
        port: int,
        timeout_s: Optional[float],
        token: "CancellationToken",
    ) -> None:
        """
        Opens and immediately closes a TCP connection (``timeout_s`` None: no limit).
        Raises asyncio.TimeoutError, OSError, or ConnectionAbortedError when
        ``token`` is cancelled mid-attempt.
        """
        pass
