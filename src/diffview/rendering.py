"""Adapters from row models to visual rows.

Visual rows carry everything a template needs to draw a line (number, sign,
text and background class) but no markup. Split rows always produce a cell on
both sides so that the two columns keep the same row count.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from diffview.aligner import align_lines
from diffview.models import (
    DiffLine,
    DiffResult,
    DiffStats,
    LineType,
    SplitRow,
    UnifiedRow,
    ViewMode,
)
from diffview.stats import get_diff_stats
from diffview.unified import line_sign, to_unified, visible_new_number, visible_old_number


NO_CHANGES_MESSAGE = "No changes to display"

DIFF_COLORS: Dict[str, Dict[str, str]] = {
    "added": {
        "bg": "bg-green-50 dark:bg-green-950/30",
        "text": "text-green-900 dark:text-green-100",
    },
    "deleted": {
        "bg": "bg-red-50 dark:bg-red-950/30",
        "text": "text-red-900 dark:text-red-100",
    },
    "context": {
        "bg": "bg-background",
        "text": "text-muted-foreground",
    },
    "empty": {
        "bg": "bg-gray-50 dark:bg-gray-950/30",
        "text": "",
    },
}


def line_type_class(line_type: Optional[LineType]) -> str:
    """Background and text classes for a line, or for an empty cell when None."""
    key = line_type.value if line_type is not None else "empty"
    colors = DIFF_COLORS[key]
    return " ".join(c for c in (colors["bg"], colors["text"]) if c)


class RenderedCell(BaseModel):
    """One side of a split row."""
    line_number: Optional[int] = None
    sign: str = " "
    content: str = ""
    css_class: str = ""
    is_placeholder: bool = False


class SplitVisualRow(BaseModel):
    left: RenderedCell
    right: RenderedCell


class UnifiedVisualRow(BaseModel):
    old_number: Optional[int] = None
    new_number: Optional[int] = None
    sign: str = " "
    content: str = ""
    css_class: str = ""


class RenderedDiff(BaseModel):
    """A file diff laid out for one view mode."""
    file_path: str
    view_mode: ViewMode
    stats: DiffStats
    empty: bool = False
    message: Optional[str] = None
    split_rows: List[SplitVisualRow] = []
    unified_rows: List[UnifiedVisualRow] = []


def _placeholder_cell() -> RenderedCell:
    return RenderedCell(css_class=line_type_class(None), is_placeholder=True)


def _cell(line: DiffLine, line_number: Optional[int], show_line_numbers: bool) -> RenderedCell:
    return RenderedCell(
        line_number=line_number if show_line_numbers else None,
        sign=line_sign(line.line_type),
        content=line.content,
        css_class=line_type_class(line.line_type),
    )


def render_split_row(row: SplitRow, show_line_numbers: bool = True) -> SplitVisualRow:
    """Old side on the left, new side on the right, placeholder where absent."""
    left = (
        _cell(row.old, row.old.old_line_number, show_line_numbers)
        if row.old is not None
        else _placeholder_cell()
    )
    right = (
        _cell(row.new, row.new.new_line_number, show_line_numbers)
        if row.new is not None
        else _placeholder_cell()
    )
    return SplitVisualRow(left=left, right=right)


def render_unified_row(row: UnifiedRow, show_line_numbers: bool = True) -> UnifiedVisualRow:
    line = row.line
    return UnifiedVisualRow(
        old_number=visible_old_number(line) if show_line_numbers else None,
        new_number=visible_new_number(line) if show_line_numbers else None,
        sign=row.sign,
        content=line.content,
        css_class=line_type_class(line.line_type),
    )


def render_diff(
    diff: DiffResult,
    view_mode: ViewMode = ViewMode.UNIFIED,
    show_line_numbers: bool = True,
) -> RenderedDiff:
    """Lay out one file's diff in the requested view mode."""
    rendered = RenderedDiff(
        file_path=diff.file_path,
        view_mode=view_mode,
        stats=get_diff_stats(diff),
    )
    if diff.is_empty:
        rendered.empty = True
        rendered.message = NO_CHANGES_MESSAGE
        return rendered

    if view_mode == ViewMode.SPLIT:
        rendered.split_rows = [
            render_split_row(row, show_line_numbers) for row in align_lines(diff.diff_lines)
        ]
    else:
        rendered.unified_rows = [
            render_unified_row(row, show_line_numbers) for row in to_unified(diff.diff_lines)
        ]
    return rendered


def render_text(rendered: RenderedDiff, width: int = 60) -> str:
    """Plain-text rendering, used by the MCP tools and for debugging."""
    if rendered.empty:
        return rendered.message or NO_CHANGES_MESSAGE

    def num(value: Optional[int]) -> str:
        return f"{value:>5}" if value is not None else " " * 5

    out: List[str] = []
    if rendered.view_mode == ViewMode.SPLIT:
        for row in rendered.split_rows:
            left = f"{num(row.left.line_number)} {row.left.sign} {row.left.content}"
            right = f"{num(row.right.line_number)} {row.right.sign} {row.right.content}"
            out.append(f"{left[:width]:<{width}} | {right}")
    else:
        for urow in rendered.unified_rows:
            out.append(f"{num(urow.old_number)} {num(urow.new_number)} {urow.sign} {urow.content}")
    return "\n".join(out)
