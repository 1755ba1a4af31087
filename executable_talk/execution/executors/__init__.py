"""
Built-in Executors

One executor per action type. ``create_default_registry`` in
``executable_talk.execution.registry`` registers all of them.
"""

from executable_talk.execution.executors.debug_start import DebugStartExecutor
from executable_talk.execution.executors.editor_highlight import EditorHighlightExecutor
from executable_talk.execution.executors.file_open import FileOpenExecutor
from executable_talk.execution.executors.host_command import HostCommandExecutor
from executable_talk.execution.executors.sequence import SequenceExecutor
from executable_talk.execution.executors.terminal_run import TerminalRunExecutor
from executable_talk.execution.executors.validate_command import ValidateCommandExecutor
from executable_talk.execution.executors.validate_file_exists import ValidateFileExistsExecutor
from executable_talk.execution.executors.validate_port import ValidatePortExecutor

__all__ = [
    # Editor
    "EditorHighlightExecutor",
    "FileOpenExecutor",
    # Processes and host
    "DebugStartExecutor",
    "HostCommandExecutor",
    "TerminalRunExecutor",
    # Validation
    "ValidateCommandExecutor",
    "ValidateFileExistsExecutor",
    "ValidatePortExecutor",
    # Composite
    "SequenceExecutor",
]
