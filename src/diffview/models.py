from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LineType(str, Enum):
    """Type of line in a diff."""
    CONTEXT = "context"
    ADDED = "added"
    DELETED = "deleted"

    @classmethod
    def coerce(cls, value: Any) -> "LineType":
        """Map any upstream value onto a line type, falling back to CONTEXT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.CONTEXT


class ViewMode(str, Enum):
    """How a file diff is laid out."""
    UNIFIED = "unified"
    SPLIT = "split"


class DiffLine(BaseModel):
    """A single classified line of a file diff."""

    model_config = ConfigDict(frozen=True)

    line_type: LineType = LineType.CONTEXT
    old_line_number: Optional[int] = None
    new_line_number: Optional[int] = None
    content: str = ""

    @field_validator("line_type", mode="before")
    @classmethod
    def normalize_line_type(cls, v: Any) -> LineType:
        return LineType.coerce(v)

    @field_validator("content", mode="before")
    @classmethod
    def default_content(cls, v: Any) -> Any:
        return "" if v is None else v

    @classmethod
    def context(cls, old_line_number: int, new_line_number: int, content: str = "") -> "DiffLine":
        return cls(
            line_type=LineType.CONTEXT,
            old_line_number=old_line_number,
            new_line_number=new_line_number,
            content=content,
        )

    @classmethod
    def added(cls, new_line_number: int, content: str = "") -> "DiffLine":
        return cls(line_type=LineType.ADDED, new_line_number=new_line_number, content=content)

    @classmethod
    def deleted(cls, old_line_number: int, content: str = "") -> "DiffLine":
        return cls(line_type=LineType.DELETED, old_line_number=old_line_number, content=content)


class DiffResult(BaseModel):
    """One file's diff as delivered by the git-sync service."""

    model_config = ConfigDict(frozen=True)

    file_path: str = ""
    diff_lines: List[DiffLine] = Field(default_factory=list)
    old_content: Optional[str] = None
    new_content: Optional[str] = None

    @field_validator("file_path", mode="before")
    @classmethod
    def default_file_path(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("diff_lines", mode="before")
    @classmethod
    def default_diff_lines(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def is_empty(self) -> bool:
        """True when the file has no changes to display."""
        return not self.diff_lines


class SplitRow(BaseModel):
    """One row of the side-by-side view. At least one side is present."""

    model_config = ConfigDict(frozen=True)

    old: Optional[DiffLine] = None
    new: Optional[DiffLine] = None

    @model_validator(mode="after")
    def check_not_empty(self) -> "SplitRow":
        if self.old is None and self.new is None:
            raise ValueError("SplitRow needs at least one of 'old' or 'new'")
        return self

    @property
    def is_context(self) -> bool:
        return (
            self.old is not None
            and self.old.line_type == LineType.CONTEXT
            and self.old == self.new
        )


class UnifiedRow(BaseModel):
    """One row of the single-column view."""

    model_config = ConfigDict(frozen=True)

    line: DiffLine
    sign: Literal["+", "-", " "]


class DiffStats(BaseModel):
    """Added and deleted line counts."""

    model_config = ConfigDict(frozen=True)

    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)

    def __add__(self, other: "DiffStats") -> "DiffStats":
        return DiffStats(
            additions=self.additions + other.additions,
            deletions=self.deletions + other.deletions,
        )

    @property
    def total(self) -> int:
        return self.additions + self.deletions


class DiffSummary(BaseModel):
    """Aggregate numbers for a multi-file diff header."""
    files_changed: int = 0
    additions: int = 0
    deletions: int = 0

    def format(self) -> str:
        noun = "file" if self.files_changed == 1 else "files"
        return f"{self.files_changed} {noun} changed, +{self.additions} -{self.deletions}"
