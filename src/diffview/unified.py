from typing import List, Optional, Sequence

from diffview.models import DiffLine, LineType, UnifiedRow


def line_sign(line_type: LineType) -> str:
    """Prefix glyph for a line in the unified view."""
    if line_type == LineType.ADDED:
        return "+"
    if line_type == LineType.DELETED:
        return "-"
    return " "


def visible_old_number(line: DiffLine) -> Optional[int]:
    """Old-side line number, shown only for context and deleted lines."""
    if line.line_type in (LineType.CONTEXT, LineType.DELETED):
        return line.old_line_number
    return None


def visible_new_number(line: DiffLine) -> Optional[int]:
    """New-side line number, shown only for context and added lines."""
    if line.line_type in (LineType.CONTEXT, LineType.ADDED):
        return line.new_line_number
    return None


def to_unified(lines: Sequence[DiffLine]) -> List[UnifiedRow]:
    """One sign-prefixed row per line, in input order."""
    return [UnifiedRow(line=line, sign=line_sign(line.line_type)) for line in lines]
