"""Addition and deletion counts for single files and whole change sets."""

from typing import Iterable

from diffview.models import DiffLine, DiffResult, DiffStats, DiffSummary, LineType


def stats_of(lines: Iterable[DiffLine]) -> DiffStats:
    """Count added and deleted lines."""
    additions = 0
    deletions = 0
    for line in lines:
        if line.line_type == LineType.ADDED:
            additions += 1
        elif line.line_type == LineType.DELETED:
            deletions += 1
    return DiffStats(additions=additions, deletions=deletions)


def get_diff_stats(diff: DiffResult) -> DiffStats:
    """Stats for one file's diff."""
    return stats_of(diff.diff_lines)


def calculate_total_stats(diffs: Iterable[DiffResult]) -> DiffStats:
    """Sum the per-file stats of every diff. Empty input gives zero counts."""
    total = DiffStats()
    for diff in diffs:
        total = total + get_diff_stats(diff)
    return total


def summarize(diffs: Iterable[DiffResult]) -> DiffSummary:
    """Files-changed count plus total stats, for "N files changed" headers."""
    diffs = list(diffs)
    total = calculate_total_stats(diffs)
    return DiffSummary(
        files_changed=len(diffs),
        additions=total.additions,
        deletions=total.deletions,
    )
