"""Diff alignment and rendering for the workspace diff viewers."""

from __future__ import annotations

from diffview.aligner import align_lines
from diffview.models import (
    DiffLine,
    DiffResult,
    DiffStats,
    DiffSummary,
    LineType,
    SplitRow,
    UnifiedRow,
    ViewMode,
)
from diffview.rendering import render_diff
from diffview.stats import calculate_total_stats, get_diff_stats, stats_of, summarize
from diffview.unified import to_unified

__all__: list[str] = [
    "DiffLine",
    "DiffResult",
    "DiffStats",
    "DiffSummary",
    "LineType",
    "SplitRow",
    "UnifiedRow",
    "ViewMode",
    "align_lines",
    "calculate_total_stats",
    "get_diff_stats",
    "render_diff",
    "stats_of",
    "summarize",
    "to_unified",
]
