"""
Failure summaries for notices and logs.

Turns failure ExecutionResults into the short status line shown to the
presenter and, for sequences, a per-step breakdown with the failing step
marked.
"""

from typing import Optional

from ..schemas.results import ExecutionResult, SequenceErrorDetail
from .loader import render
from .templates import Template

STATUS_MARKS = {"success": "✓", "failed": "✗", "skipped": "–"}


def failure_status(result: ExecutionResult) -> str:
    return render(
        Template.ACTION_FAILURE,
        action_type=result.action_type,
        target=result.action_target,
        error=result.error,
        timed_out=result.timed_out,
    )


def sequence_breakdown(detail: SequenceErrorDetail) -> str:
    return render(Template.SEQUENCE_BREAKDOWN, detail=detail, marks=STATUS_MARKS)


def describe_failure(result: ExecutionResult) -> Optional[str]:
    """Status line plus the breakdown when there is one. None for a success."""
    if result.success:
        return None
    text = failure_status(result)
    if result.sequence_detail is not None:
        text = f"{text}\n{sequence_breakdown(result.sequence_detail)}"
    return text
