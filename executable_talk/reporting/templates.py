"""
Report template names.

Each constant is the stem of a ``.jinja2`` file in ``reporting/templates/``.
"""


class Template:
    # One-line status for any failed action
    ACTION_FAILURE = "action_failure"
    # Per-step listing of a failed sequence
    SEQUENCE_BREAKDOWN = "sequence_breakdown"
