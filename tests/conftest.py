from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pytest

from executable_talk.execution.context import CancellationToken, ExecutionContext
from executable_talk.execution.executor import BaseActionExecutor
from executable_talk.execution.executors import SequenceExecutor
from executable_talk.execution.pipeline import ExecutionPipeline
from executable_talk.execution.registry import ActionRegistry
from executable_talk.host.adapters.headless import HeadlessHost
from executable_talk.schemas.params import ActionParams
from executable_talk.schemas.results import ExecutionResult, UndoOp
from executable_talk.state.models import Action


class RecordingHost(HeadlessHost):
    """HeadlessHost that logs every mutating call in order."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: List[Tuple[Any, ...]] = []

    async def open_document(self, path, view_column=1, preview=True, selection=None):
        self.calls.append(("open_document", str(path)))
        await super().open_document(path, view_column=view_column, preview=preview, selection=selection)

    async def close_document(self, path):
        self.calls.append(("close_document", path))
        return await super().close_document(path)

    async def create_decoration(self, path, start_line, end_line, style="subtle", color=None):
        decoration_id = await super().create_decoration(path, start_line, end_line, style=style, color=color)
        self.calls.append(("create_decoration", decoration_id))
        return decoration_id

    async def dispose_decoration(self, decoration_id):
        self.calls.append(("dispose_decoration", decoration_id))
        await super().dispose_decoration(decoration_id)

    async def create_terminal(self, name, cwd):
        self.calls.append(("create_terminal", name))
        await super().create_terminal(name, cwd)

    async def send_to_terminal(self, name, text, reveal=True):
        self.calls.append(("send_to_terminal", name, text))
        await super().send_to_terminal(name, text, reveal=reveal)

    async def dispose_terminal(self, name):
        self.calls.append(("dispose_terminal", name))
        return await super().dispose_terminal(name)

    async def stop_debugging(self):
        self.calls.append(("stop_debugging",))
        await super().stop_debugging()

    async def run_process(self, command, cwd, timeout_s, token):
        self.calls.append(("run_process", command, timeout_s))
        return await super().run_process(command, cwd, timeout_s=timeout_s, token=token)

    async def connect(self, host, port, timeout_s, token):
        self.calls.append(("connect", f"{host}:{port}", timeout_s))
        await super().connect(host, port, timeout_s=timeout_s, token=token)

    def calls_named(self, name: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]


class ScriptedParams(ActionParams):
    name: str = "scripted"
    fail_with: Optional[str] = None
    explode: bool = False
    hang: bool = False
    sleep_ms: float = 0
    cancel: bool = False


class ScriptedExecutor(BaseActionExecutor):
    """
    Scriptable executor. Succeeds with an undo that disposes a terminal named
    after the step, so undo order shows up in RecordingHost.calls.
    """

    action_type = "test.scripted"
    description = "Scriptable test executor"
    default_timeout_ms = 1000
    params_model = ScriptedParams

    def __init__(self, action_type: str = "test.scripted", requires_trust: bool = False) -> None:
        self.action_type = action_type
        self.requires_trust = requires_trust
        self.runs: List[str] = []
        self.started: List[float] = []

    async def run(self, action: Action, params: ScriptedParams, context: ExecutionContext) -> ExecutionResult:
        self.runs.append(params.name)
        self.started.append(time.monotonic())
        if params.cancel:
            context.cancellation.cancel()
        if params.sleep_ms:
            await asyncio.sleep(params.sleep_ms / 1000)
        if params.hang:
            await asyncio.Event().wait()
        if params.explode:
            raise RuntimeError("kaboom")
        if params.fail_with:
            return self.failure(params.fail_with)
        return self.success(UndoOp(op="dispose_terminal", target=params.name))


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("\n".join(f"line {i}" for i in range(1, 41)))
    (tmp_path / "README.md").write_text("# demo\n")
    return tmp_path


@pytest.fixture
def host(workspace: Path) -> RecordingHost:
    return RecordingHost(workspace, trusted=True, launch_configs={workspace.name: ["Run App"]})


@pytest.fixture
def scripted() -> ScriptedExecutor:
    return ScriptedExecutor()


@pytest.fixture
def registry(scripted: ScriptedExecutor) -> ActionRegistry:
    registry = ActionRegistry()
    registry.register(scripted)
    registry.register(SequenceExecutor(registry, step_delay_ms=0))
    return registry


@pytest.fixture
def pipeline(registry: ActionRegistry) -> ExecutionPipeline:
    return ExecutionPipeline(registry)


def make_context(host: HeadlessHost, trusted: bool = True, resources: Any = None) -> ExecutionContext:
    return ExecutionContext(
        host=host,
        workspace_root=host.workspace_root,
        is_trusted=trusted,
        cancellation=CancellationToken(),
        resources=resources,
    )
