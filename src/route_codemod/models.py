from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator


class Span(BaseModel):
    """Half-open UTF-8 byte range ``[start, end)``."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    column: int


class Edit(BaseModel):
    model_config = ConfigDict(frozen=True)

    span: Span
    replacement: str = ""
    trim_leading_whitespace: bool = False

    @classmethod
    def delete(cls, start: int, end: int, trim_leading_whitespace: bool = False) -> "Edit":
        return cls(span=Span(start=start, end=end), trim_leading_whitespace=trim_leading_whitespace)

    @classmethod
    def insert(cls, position: int, content: str) -> "Edit":
        return cls(span=Span(start=position, end=position), replacement=content)


class HookRole(str, Enum):
    PRIMARY_DATA = "primary_data"
    ACTION_RESULT = "action_result"


class HookBinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: HookRole
    canonical_name: str
    bound_pattern_text: str


class StaticValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["static"] = "static"
    key: str
    value_text: str
    source_position: Span | None = None


class MethodEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["method"] = "method"
    key: str
    source_position: Span | None = None
    args_text: str | None = None
    body_text: str | None = None
    is_async: bool = False

    @model_validator(mode="after")
    def _require_body_or_position(self) -> "MethodEntry":
        if self.body_text is None and self.source_position is None:
            raise ValueError(f"Method '{self.key}' needs a body or a source position")
        return self


PropertyEntry = StaticValue | MethodEntry


class Diagnostic(BaseModel):
    message: str
    start: Position
    end: Position

    def display(self, path: str | None = None) -> str:
        location = f"{self.start.row + 1}:{self.start.column + 1}"
        if path:
            location = f"{path}:{location}"
        return f"{location}: {self.message}"


class RejectReason(str, Enum):
    SYNTAX_ERROR = "syntax_error"
    ALREADY_MIGRATED = "already_migrated"


class Unchanged(BaseModel):
    status: Literal["unchanged"] = "unchanged"
    text: str


class Rewritten(BaseModel):
    status: Literal["rewritten"] = "rewritten"
    text: str
    dropped_edits: list[Edit] = []


class Rejected(BaseModel):
    status: Literal["rejected"] = "rejected"
    reason: RejectReason
    message: str
    diagnostics: list[Diagnostic] = []


RewriteResult = Unchanged | Rewritten | Rejected
