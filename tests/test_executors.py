from __future__ import annotations

import asyncio
import socket
import sys
import time

import pytest

from conftest import make_context
from executable_talk.execution.executors.validate_command import expand_placeholders
from executable_talk.execution.pipeline import ExecutionPipeline
from executable_talk.execution.registry import create_default_registry
from executable_talk.execution.undo import UndoApplier
from executable_talk.services.snapshots import SnapshotFactory
from executable_talk.state.models import Action


@pytest.fixture
def engine() -> ExecutionPipeline:
    return ExecutionPipeline(create_default_registry())


@pytest.fixture
def tracker(host, workspace) -> SnapshotFactory:
    return SnapshotFactory(host, workspace)


def _execute(engine, host, action_type, params, trusted=True, resources=None):
    context = make_context(host, trusted=trusted, resources=resources)
    return asyncio.run(engine.execute(Action(type=action_type, params=params), context))


# --- file.open ---

def test_file_open_reveals_range_and_tracks(engine, host, workspace, tracker) -> None:
    result = _execute(engine, host, "file.open", {"path": "src/app.py", "range": "10-20"}, resources=tracker)

    assert result.success
    path = str(workspace / "src" / "app.py")
    document = host.documents[path]
    assert (document.visible_start, document.visible_end) == (10, 20)
    assert host.active_editor().line == 10
    assert tracker.owned_editors == {path}
    assert result.undo.op == "close_document"

    asyncio.run(UndoApplier(host).apply(result.undo))
    assert path not in host.documents


def test_file_open_beside_active_column(engine, host) -> None:
    _execute(engine, host, "file.open", {"path": "README.md"})
    _execute(engine, host, "file.open", {"path": "src/app.py", "viewColumn": -1})

    columns = sorted(document.view_column for document in host.list_open_documents())
    assert columns == [1, 2]


def test_file_open_missing_file(engine, host) -> None:
    result = _execute(engine, host, "file.open", {"path": "nope.py"})
    assert result.error == "File not found: nope.py"
    assert host.calls_named("open_document") == []


# --- editor.highlight ---

def test_highlight_creates_tracked_decoration(engine, host, workspace, tracker) -> None:
    result = _execute(engine, host, "editor.highlight", {"path": "src/app.py", "lines": "3-5"}, resources=tracker)

    assert result.success
    (decoration,) = host.decorations.values()
    assert (decoration.start_line, decoration.end_line) == (3, 5)
    assert decoration.color == "rgba(255, 255, 0, 0.15)"
    assert [d.decoration_id for d in tracker.tracked_decorations] == [decoration.decoration_id]

    asyncio.run(UndoApplier(host, tracker).apply(result.undo))
    assert host.decorations == {}
    assert tracker.tracked_decorations == []


def test_highlight_single_line_prominent(engine, host) -> None:
    result = _execute(engine, host, "editor.highlight", {"path": "src/app.py", "lines": 7, "style": "prominent"})

    assert result.success
    (decoration,) = host.decorations.values()
    assert (decoration.start_line, decoration.end_line) == (7, 7)
    assert decoration.color == "rgba(255, 255, 0, 0.3)"


def test_highlight_rejects_bad_lines(engine, host) -> None:
    result = _execute(engine, host, "editor.highlight", {"path": "src/app.py", "lines": "ten"})
    assert result.error == 'Invalid lines: lines must be in format "N" or "N-M"'
    assert result.action_target == "src/app.py"


def test_highlight_expires_after_duration(host) -> None:
    registry = create_default_registry()
    engine = ExecutionPipeline(registry)
    highlighter = registry.get("editor.highlight")

    async def scenario():
        context = make_context(host)
        result = await engine.execute(
            Action(type="editor.highlight", params={"path": "src/app.py", "lines": "1", "duration": 20}),
            context,
        )
        assert len(host.decorations) == 1
        assert highlighter.pending_expirations == 1
        await asyncio.sleep(0.2)
        return result

    result = asyncio.run(scenario())
    assert result.success
    assert host.decorations == {}
    assert highlighter.pending_expirations == 0


# --- terminal.run ---

def test_terminal_run_creates_then_reuses(engine, host, tracker) -> None:
    first = _execute(engine, host, "terminal.run", {"command": "npm test"}, resources=tracker)
    second = _execute(engine, host, "terminal.run", {"command": "npm run build"}, resources=tracker)

    assert first.success and second.success
    assert host.calls_named("create_terminal") == [("create_terminal", "Executable Talk")]
    assert host.terminals["Executable Talk"].transcript == ["npm test", "npm run build"]
    assert tracker.owned_terminals == {"Executable Talk"}
    assert first.undo.target == "Executable Talk"


def test_terminal_run_background_does_not_reveal(engine, host) -> None:
    _execute(engine, host, "terminal.run", {"command": "serve", "name": "bg", "background": True})
    assert not host.terminals["bg"].visible


def test_terminal_run_clear_first(engine, host) -> None:
    _execute(engine, host, "terminal.run", {"command": "ls", "name": "demo", "clear": True})
    expected = "cls" if sys.platform.startswith("win") else "clear"
    assert host.terminals["demo"].transcript == [expected, "ls"]


def test_terminal_run_requires_trust(engine, host) -> None:
    result = _execute(engine, host, "terminal.run", {"command": "ls"}, trusted=False)
    assert result.error == 'Action "terminal.run" requires workspace trust'
    assert result.action_target == "ls"
    assert host.terminals == {}


# --- debug.start ---

def test_debug_start(engine, host) -> None:
    result = _execute(engine, host, "debug.start", {"configName": "Run App"})
    assert result.success
    assert host.debug_sessions == ["Run App"]

    asyncio.run(UndoApplier(host).apply(result.undo))
    assert host.debug_sessions == []


def test_debug_start_failures(engine, host) -> None:
    unknown = _execute(engine, host, "debug.start", {"configName": "Nope"})
    assert unknown.error == "Launch configuration not found: Nope"
    assert unknown.action_target == "Nope"

    folder = _execute(engine, host, "debug.start", {"configName": "Run App", "workspaceFolder": "other"})
    assert folder.error == "Workspace folder not found: other"

    missing = _execute(engine, host, "debug.start", {})
    assert missing.error == "Invalid configName: configName is required"


# --- vscode.command ---

def test_host_command_passes_decoded_args(engine, host) -> None:
    received = []
    host.register_command("editor.fold", lambda *args: received.append(args))

    result = _execute(engine, host, "vscode.command", {"id": "editor.fold", "args": "%5B1%2C%202%5D"})

    assert result.success
    assert received == [(1, 2)]


def test_host_command_unknown_id(engine, host) -> None:
    result = _execute(engine, host, "vscode.command", {"id": "no.such"})
    assert not result.success
    assert result.error.startswith('Failed to execute command "no.such":')
    assert result.action_target == "no.such"


# --- validate.* ---

def test_validate_file_exists(engine, host) -> None:
    assert _execute(engine, host, "validate.fileExists", {"path": "README.md"}).success

    missing = _execute(engine, host, "validate.fileExists", {"path": "gone.txt"})
    assert missing.error == 'File "gone.txt" not found'

    absent = _execute(engine, host, "validate.fileExists", {"path": "gone.txt", "expectMissing": True})
    assert absent.success

    present = _execute(engine, host, "validate.fileExists", {"path": "README.md", "expectMissing": True})
    assert present.error == 'File "README.md" exists but was expected to be absent'


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX shell commands")
def test_validate_command_output_and_exit_code(engine, host) -> None:
    ok = _execute(engine, host, "validate.command", {"command": "echo hello world", "expectOutput": "hello"})
    assert ok.success

    wrong = _execute(engine, host, "validate.command", {"command": "echo bye", "expectOutput": "hello"})
    assert wrong.error == 'Expected output to contain "hello" but got: bye'

    failed = _execute(engine, host, "validate.command", {"command": "echo oops >&2; exit 3"})
    assert failed.error == "Command exited with code 3: oops"


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX shell commands")
def test_validate_command_timeout(engine, host) -> None:
    result = _execute(engine, host, "validate.command", {"command": "sleep 5", "timeout": 100})
    assert result.error == "Command timed out after 100ms"


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX shell commands")
def test_validate_command_timeout_kills_what_the_shell_started(engine, host) -> None:
    # The trailing echo keeps sh from exec-ing sleep, so sleep is a grandchild
    started = time.monotonic()
    result = _execute(engine, host, "validate.command", {"command": "sleep 5; echo done", "timeout": 200})

    assert result.error == "Command timed out after 200ms"
    assert time.monotonic() - started < 2


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX shell commands")
def test_validate_command_cancelled_mid_run(engine, host) -> None:
    async def scenario():
        context = make_context(host)
        asyncio.get_running_loop().call_later(0.3, context.cancellation.cancel)
        return await engine.execute(
            Action(type="validate.command", params={"command": "sleep 5; echo done"}), context
        )

    started = time.monotonic()
    result = asyncio.run(scenario())

    assert result.error == "Command cancelled"
    assert time.monotonic() - started < 2


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX shell commands")
def test_validate_command_timeout_zero_means_no_limit(engine, host) -> None:
    assert _execute(engine, host, "validate.command", {"command": "true", "timeout": 0}).success
    assert _execute(engine, host, "validate.command", {"command": "true", "timeout": 100}).success
    assert _execute(engine, host, "validate.command", {"command": "true"}).success

    timeouts = [call[2] for call in host.calls_named("run_process")]
    assert timeouts == [None, 0.1, 30.0]


def test_validate_command_rejects_unknown_platform_key(engine, host) -> None:
    result = _execute(engine, host, "validate.command", {"command": {"plan9": "true"}})
    assert not result.success
    assert result.error.startswith("Invalid command")


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="platform map lookup on linux")
def test_validate_command_missing_platform_entry(engine, host) -> None:
    result = _execute(engine, host, "validate.command", {"command": {"windows": "ver", "macos": "sw_vers"}})
    assert result.error == "Command not available on linux. Consider adding a default entry."


def test_expand_placeholders(monkeypatch) -> None:
    monkeypatch.setenv("SHELL", "/bin/zsh")
    assert expand_placeholders("${shell} -c true") == "/bin/zsh -c true"
    assert "${home}" not in expand_placeholders("ls ${home}")


def test_validate_port_open_and_closed(engine, host) -> None:
    async def scenario():
        server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        context = make_context(host)
        try:
            return await engine.execute(
                Action(type="validate.port", params={"host": "127.0.0.1", "port": port}), context
            )
        finally:
            server.close()
            await server.wait_closed()

    assert asyncio.run(scenario()).success

    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        closed_port = sock.getsockname()[1]

    closed = _execute(engine, host, "validate.port", {"host": "127.0.0.1", "port": closed_port})
    assert not closed.success
    assert closed.error.startswith(f"Port {closed_port} on 127.0.0.1 is not open")
    assert closed.action_target == f"127.0.0.1:{closed_port}"


def test_validate_port_range(engine, host) -> None:
    result = _execute(engine, host, "validate.port", {"port": 70000})
    assert result.error == "Invalid port: port must be an integer between 1 and 65535"


def test_validate_port_timeout_zero_means_no_limit(engine, host) -> None:
    async def scenario():
        server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            for params in ({"timeout": 0}, {"timeout": 250}, {}):
                result = await engine.execute(
                    Action(type="validate.port", params={"host": "127.0.0.1", "port": port, **params}),
                    make_context(host),
                )
                assert result.success
        finally:
            server.close()
            await server.wait_closed()

    asyncio.run(scenario())
    assert [call[2] for call in host.calls_named("connect")] == [None, 0.25, 5.0]


def test_validate_port_cancelled_mid_connect(engine, host, monkeypatch) -> None:
    async def never_connects(host, port):
        await asyncio.Event().wait()

    monkeypatch.setattr(asyncio, "open_connection", never_connects)

    async def scenario():
        context = make_context(host)
        asyncio.get_running_loop().call_later(0.1, context.cancellation.cancel)
        return await engine.execute(
            Action(type="validate.port", params={"host": "127.0.0.1", "port": 8080}), context
        )

    started = time.monotonic()
    result = asyncio.run(scenario())

    assert result.error == "Check of 127.0.0.1:8080 cancelled"
    assert result.action_target == "127.0.0.1:8080"
    assert time.monotonic() - started < 1
