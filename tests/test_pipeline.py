from __future__ import annotations

import asyncio
import time

from conftest import ScriptedExecutor, make_context
from executable_talk.execution.errors import ActionTimeoutError
from executable_talk.execution.executors import FileOpenExecutor
from executable_talk.execution.pipeline import ExecutionPipeline
from executable_talk.execution.registry import ActionRegistry
from executable_talk.state.models import Action


def test_unknown_type_is_a_failure_result(pipeline, host) -> None:
    action = Action(type="nope", params={})
    result = asyncio.run(pipeline.execute(action, make_context(host)))

    assert not result.success
    assert result.error == "Unknown action type: nope"
    assert result.action_type == "nope"
    assert action.status == "failed"


def test_trust_gate_blocks_untrusted_context(host) -> None:
    trusted_scripted = ScriptedExecutor("test.trusted", requires_trust=True)
    registry = ActionRegistry()
    registry.register(trusted_scripted)
    pipeline = ExecutionPipeline(registry)

    result = asyncio.run(pipeline.execute(Action(type="test.trusted"), make_context(host, trusted=False)))

    assert not result.success
    assert result.error == 'Action "test.trusted" requires workspace trust'
    assert trusted_scripted.runs == []


def test_trust_check_can_be_bypassed(host) -> None:
    trusted_scripted = ScriptedExecutor("test.trusted", requires_trust=True)
    registry = ActionRegistry()
    registry.register(trusted_scripted)
    pipeline = ExecutionPipeline(registry)

    result = asyncio.run(pipeline.execute(
        Action(type="test.trusted"), make_context(host, trusted=False), skip_trust_check=True
    ))

    assert result.success
    assert trusted_scripted.runs == ["scripted"]


def test_validation_failure_carries_field_and_target(host) -> None:
    registry = ActionRegistry()
    registry.register(FileOpenExecutor())
    pipeline = ExecutionPipeline(registry)

    missing = asyncio.run(pipeline.execute(Action(type="file.open", params={}), make_context(host)))
    assert not missing.success
    assert missing.error == "Invalid path: path is required"

    bad_line = asyncio.run(pipeline.execute(
        Action(type="file.open", params={"path": "src/app.py", "line": 0}), make_context(host)
    ))
    assert bad_line.error == "Invalid line: line must be a positive number"
    assert bad_line.action_type == "file.open"
    assert bad_line.action_target == "src/app.py"


def test_operation_failure_is_enriched(host) -> None:
    registry = ActionRegistry()
    registry.register(FileOpenExecutor())
    pipeline = ExecutionPipeline(registry)

    result = asyncio.run(pipeline.execute(
        Action(type="file.open", params={"path": "missing.py"}), make_context(host)
    ))

    assert not result.success
    assert result.error == "File not found: missing.py"
    assert result.action_type == "file.open"
    assert result.action_target == "missing.py"


def test_raised_exception_becomes_failure(pipeline, host) -> None:
    action = Action(type="test.scripted", params={"explode": True})
    result = asyncio.run(pipeline.execute(action, make_context(host)))

    assert not result.success
    assert result.error == "kaboom"
    assert action.status == "failed"


def test_never_settling_operation_times_out(pipeline, host, scripted) -> None:
    action = Action(type="test.scripted", params={"hang": True})

    started = time.monotonic()
    result = asyncio.run(pipeline.execute(action, make_context(host), timeout_ms=50))
    elapsed = time.monotonic() - started

    assert not result.success
    assert result.timed_out
    assert result.error == "Action timed out after 50ms"
    assert action.status == "timeout"
    assert elapsed < 2
    assert scripted.runs == ["scripted"]


def test_late_completion_does_not_change_the_timeout_result(pipeline, host) -> None:
    action = Action(type="test.scripted", params={"sleep_ms": 100})

    async def scenario():
        result = await pipeline.execute(action, make_context(host), timeout_ms=20)
        assert pipeline.pending_late_runs == 1
        await asyncio.sleep(0.3)
        return result

    result = asyncio.run(scenario())

    assert result.timed_out
    assert not result.success
    assert action.status == "timeout"
    assert pipeline.pending_late_runs == 0


def test_timeout_message_prints_whole_milliseconds() -> None:
    assert str(ActionTimeoutError("sequence", 1000000)) == "Action timed out after 1000000ms"
    assert str(ActionTimeoutError("sequence", 120000)) == "Action timed out after 120000ms"
    assert str(ActionTimeoutError("sequence", 2500.0)) == "Action timed out after 2500ms"


def test_success_result_is_not_enriched(pipeline, host) -> None:
    action = Action(type="test.scripted", params={"name": "one"})
    result = asyncio.run(pipeline.execute(action, make_context(host)))

    assert result.success
    assert result.can_undo
    assert result.undo.op == "dispose_terminal"
    assert result.action_type is None
    assert action.status == "success"
    assert action.started_at is not None and action.completed_at is not None


def test_cancelled_context_does_not_run(pipeline, host, scripted) -> None:
    context = make_context(host)
    context.cancellation.cancel()

    result = asyncio.run(pipeline.execute(Action(type="test.scripted"), context))

    assert not result.success
    assert result.error == "Action cancelled"
    assert scripted.runs == []


def test_an_action_runs_only_once(pipeline, host, scripted) -> None:
    action = Action(type="test.scripted")
    first = asyncio.run(pipeline.execute(action, make_context(host)))
    second = asyncio.run(pipeline.execute(action, make_context(host)))

    assert first.success
    assert not second.success
    assert "cannot move from 'success' to 'running'" in second.error
    assert scripted.runs == ["scripted"]


def test_action_ids_are_unique() -> None:
    ids = {Action(type="test.scripted").id for _ in range(200)}
    assert len(ids) == 200
