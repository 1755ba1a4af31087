"""
Schemas - Typed Action Parameters

Each action type owns one Pydantic model describing its parameter map.
Executors validate the raw, string-keyed map from the deck into these models
once, before the operation runs, instead of re-checking types by hand.

Deck files use camelCase keys (``configName``, ``stopOnError``); the models
expose snake_case attributes and accept both spellings.
"""

import json
import re
import sys
from typing import Any, Dict, List, Literal, Optional, Tuple, Union
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

LINES_PATTERN = re.compile(r"^(\d+)(?:-(\d+))?$")


class ActionParams(BaseModel):
    """Base for every parameter model."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


def _require_text(value: str, name: str) -> str:
    if not value:
        raise ValueError(f"{name} is required and must be a string")
    return value


class FileOpenParams(ActionParams):
    path: str
    range: Optional[str] = Field(None, description='Line range to reveal, e.g. "10-20".')
    line: Optional[int] = None
    column: Optional[int] = None
    view_column: Optional[int] = Field(
        None, description="Editor column. -1 opens beside the active one, -2 reuses the active one."
    )
    preview: bool = True

    @field_validator("path")
    @classmethod
    def _path_present(cls, v: str) -> str:
        return _require_text(v, "path")

    @field_validator("line", "column")
    @classmethod
    def _positive(cls, v: Optional[int], info) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError(f"{info.field_name} must be a positive number")
        return v

    @field_validator("view_column")
    @classmethod
    def _valid_column(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < -2:
            raise ValueError("viewColumn must be a valid column number")
        return v

    def selection(self) -> Optional[Tuple[int, int, int]]:
        """Returns (start_line, end_line, column), 1-based, or None if no location was given."""
        if self.range:
            start, _, end = self.range.partition("-")
            first = int(start) if start.strip().isdigit() else 1
            last = int(end) if end.strip().isdigit() else first
            return first, last, self.column or 1
        if self.line is not None:
            return self.line, self.line, self.column or 1
        return None


class EditorHighlightParams(ActionParams):
    path: str
    lines: Union[int, str] = Field(..., description='"N" or "N-M", 1-based and inclusive.')
    color: Optional[str] = None
    style: Literal["subtle", "prominent"] = "subtle"
    duration: Optional[float] = Field(
        None, description="Milliseconds before the highlight is removed. 0 keeps it until slide exit."
    )

    @field_validator("path")
    @classmethod
    def _path_present(cls, v: str) -> str:
        return _require_text(v, "path")

    @field_validator("lines")
    @classmethod
    def _lines_format(cls, v: Union[int, str]) -> str:
        text = str(v).strip()
        if not text:
            raise ValueError('lines is required (e.g., "10-20" or "10")')
        if not LINES_PATTERN.match(text):
            raise ValueError('lines must be in format "N" or "N-M"')
        return text

    @field_validator("duration")
    @classmethod
    def _non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("duration must be a non-negative number")
        return v

    @property
    def line_range(self) -> Tuple[int, int]:
        match = LINES_PATTERN.match(str(self.lines))
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else start
        return start, end


class TerminalRunParams(ActionParams):
    command: str
    name: Optional[str] = None
    background: bool = False
    timeout: Optional[float] = None
    clear: bool = False
    reveal: bool = True
    cwd: Optional[str] = None

    @field_validator("command")
    @classmethod
    def _command_present(cls, v: str) -> str:
        return _require_text(v, "command")

    @field_validator("timeout")
    @classmethod
    def _non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("timeout must be a non-negative number")
        return v


class DebugStartParams(ActionParams):
    config_name: str
    workspace_folder: Optional[str] = None
    stop_on_entry: Optional[bool] = None

    @field_validator("config_name")
    @classmethod
    def _name_present(cls, v: str) -> str:
        return _require_text(v, "configName")


class HostCommandParams(ActionParams):
    id: str
    args: Any = None

    @field_validator("id")
    @classmethod
    def _id_present(cls, v: str) -> str:
        return _require_text(v, "id")

    def resolved_args(self) -> List[Any]:
        """
        Normalizes ``args`` into a positional argument list.

        A string is treated as (possibly percent-encoded) JSON; when it does not
        parse it is passed through as a single string argument.
        """
        if self.args is None or self.args == "":
            return []
        if isinstance(self.args, str):
            decoded = unquote(self.args)
            try:
                parsed = json.loads(decoded)
            except ValueError:
                return [decoded]
            return parsed if isinstance(parsed, list) else [parsed]
        if isinstance(self.args, list):
            return list(self.args)
        return [self.args]


PlatformKey = Literal["macos", "windows", "linux", "default"]


def current_platform() -> str:
    if sys.platform == "darwin":
        return "macos"
    if sys.platform.startswith("win"):
        return "windows"
    return "linux"


class ValidateCommandParams(ActionParams):
    command: Union[str, Dict[PlatformKey, str]]
    expect_output: Optional[str] = None
    timeout: Optional[float] = None

    @field_validator("command")
    @classmethod
    def _command_present(cls, v):
        if isinstance(v, str):
            return _require_text(v, "command")
        if not v:
            raise ValueError("command must be a string or a platform command map")
        return v

    @field_validator("timeout")
    @classmethod
    def _non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("timeout must be a non-negative number")
        return v

    def command_for(self, platform: str) -> Optional[str]:
        if isinstance(self.command, str):
            return self.command
        return self.command.get(platform) or self.command.get("default")


class ValidateFileExistsParams(ActionParams):
    path: str
    expect_missing: bool = False

    @field_validator("path")
    @classmethod
    def _path_present(cls, v: str) -> str:
        return _require_text(v, "path")


class ValidatePortParams(ActionParams):
    port: int
    host: str = "localhost"
    timeout: Optional[float] = None

    @field_validator("port")
    @classmethod
    def _port_range(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("port must be an integer between 1 and 65535")
        return v

    @field_validator("timeout")
    @classmethod
    def _non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("timeout must be a non-negative number")
        return v


class SequenceParams(ActionParams):
    steps: Optional[List[Dict[str, Any]]] = Field(
        None, description="Step list, either {type, params} entries or flat {type, key: value} entries."
    )
    actions: Optional[str] = Field(
        None, description='Compact encoded form: "type1?k=v,type2?k=v".'
    )
    delay: Optional[float] = None
    stop_on_error: bool = True

    @field_validator("delay")
    @classmethod
    def _non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("delay must be a non-negative number")
        return v
