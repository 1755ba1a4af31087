"""
Sequence step canonicalization.

A sequence may describe its steps in three shapes:

    ENCODED  "file.open?path=a.py,terminal.run?command=ls"
    NESTED   [{"type": "file.open", "params": {"path": "a.py"}}]
    FLAT     [{"type": "file.open", "path": "a.py"}]

The encoded form arrives as the ``actions`` string; list entries are
classified as nested or flat. Every shape is turned into the same list of
``Step`` values before the sequence runs.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from urllib.parse import unquote

from ..schemas.params import SequenceParams
from .targets import extract_target

# Plain decimal numbers only; "1_000", "inf" and "1e3" stay strings
NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


class StepShape(str, Enum):
    NESTED = "nested"
    FLAT = "flat"


@dataclass
class Step:
    type: str
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def target(self) -> Optional[str]:
        return extract_target(self.type, self.params)


def classify(entry: Dict[str, Any]) -> StepShape:
    if isinstance(entry.get("params"), dict):
        return StepShape.NESTED
    return StepShape.FLAT


def coerce_value(value: str) -> Union[bool, int, float, str]:
    """"true"/"false" become booleans, numeric text becomes a number."""
    if value == "true":
        return True
    if value == "false":
        return False
    if not NUMBER_PATTERN.fullmatch(value):
        return value
    return float(value) if "." in value else int(value)


def decode_actions(encoded: str) -> List[Step]:
    steps = []
    for part in encoded.split(","):
        decoded = unquote(part)
        action_type, _, query = decoded.partition("?")
        if not action_type.strip():
            continue

        params: Dict[str, Any] = {}
        for pair in query.split("&") if query else []:
            key, sep, value = pair.partition("=")
            if not sep:
                continue
            params[unquote(key)] = coerce_value(unquote(value))
        steps.append(Step(type=action_type.strip(), params=params))
    return steps


def canonicalize_entry(entry: Dict[str, Any]) -> Step:
    shape = classify(entry)
    if shape is StepShape.NESTED:
        return Step(type=entry["type"], params=dict(entry["params"]))
    return Step(
        type=entry["type"],
        params={key: value for key, value in entry.items() if key != "type"},
    )


def canonicalize(params: SequenceParams) -> List[Step]:
    """An ``actions`` string wins over a ``steps`` list when both are given."""
    if params.actions:
        return decode_actions(params.actions)
    return [canonicalize_entry(entry) for entry in params.steps or []]
