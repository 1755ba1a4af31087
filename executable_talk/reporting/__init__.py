"""
Reporting Layer - Failure Summaries

Renders ExecutionResults into short status text and per-step sequence
breakdowns. Pure text; no UI.
"""

from executable_talk.reporting.summaries import (
    STATUS_MARKS,
    describe_failure,
    failure_status,
    sequence_breakdown,
)

__all__ = [
    "STATUS_MARKS",
    "describe_failure",
    "failure_status",
    "sequence_breakdown",
]
