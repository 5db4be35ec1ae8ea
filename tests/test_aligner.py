"""Tests for side-by-side alignment."""

from typing import List

import pytest

from diffview.aligner import AlignState, PairAligner, align_lines
from diffview.models import DiffLine, LineType, SplitRow
from diffview.stats import stats_of


L1 = DiffLine.context(1, 1, "L1")
L2 = DiffLine.deleted(2, "L2")
L3 = DiffLine.deleted(3, "L3")
L2_NEW = DiffLine.added(2, "L2'")
L3_NEW = DiffLine.added(3, "L3'")


def sides(rows: List[SplitRow]) -> List[tuple]:
    return [(row.old, row.new) for row in rows]


class TestScenarios:
    """Run lengths and adjacency."""

    def test_equal_length_blocks(self) -> None:
        """A deleted line followed by an added line shares one row."""
        rows = align_lines([L1, L2, L2_NEW])
        assert sides(rows) == [(L1, L1), (L2, L2_NEW)]

    def test_deleted_run_longer(self) -> None:
        """Surplus deletions get rows with an empty new side."""
        rows = align_lines([L2, L3, L2_NEW])
        assert sides(rows) == [(L2, L2_NEW), (L3, None)]

    def test_added_run_longer(self) -> None:
        """Surplus additions get rows with an empty old side."""
        rows = align_lines([L2, L2_NEW, L3_NEW])
        assert sides(rows) == [(L2, L2_NEW), (None, L3_NEW)]

    def test_no_adjacency(self) -> None:
        """Context between a deletion and an addition keeps them apart."""
        l3 = DiffLine.context(3, 2, "L3")
        l4 = DiffLine.added(3, "L4'")
        rows = align_lines([L2, l3, l4])
        assert sides(rows) == [(L2, None), (l3, l3), (None, l4)]

    def test_empty_input(self) -> None:
        assert align_lines([]) == []

    def test_added_before_deleted_is_not_paired(self) -> None:
        """Only a deleted run looks ahead; an added run never looks ahead."""
        rows = align_lines([L2_NEW, L2])
        assert sides(rows) == [(None, L2_NEW), (L2, None)]

    def test_pairing_is_positional_not_by_content(self) -> None:
        """The k-th deletion pairs with the k-th addition even if text matches elsewhere."""
        deleted = [DiffLine.deleted(1, "foo"), DiffLine.deleted(2, "bar"), DiffLine.deleted(3, "baz")]
        added = [DiffLine.added(1, "baz"), DiffLine.added(2, "foo")]
        rows = align_lines(deleted + added)
        assert sides(rows) == [
            (deleted[0], added[0]),
            (deleted[1], added[1]),
            (deleted[2], None),
        ]

    def test_multiple_hunks(self, mixed_lines: List[DiffLine]) -> None:
        rows = align_lines(mixed_lines)
        assert sides(rows) == [
            (mixed_lines[0], mixed_lines[0]),
            (mixed_lines[1], mixed_lines[3]),
            (mixed_lines[2], None),
            (mixed_lines[4], mixed_lines[4]),
            (None, mixed_lines[5]),
        ]

    def test_deleted_run_at_end(self) -> None:
        rows = align_lines([L1, L2, L3])
        assert sides(rows) == [(L1, L1), (L2, None), (L3, None)]


class TestProperties:
    """Invariants that hold for any input."""

    def test_context_only(self) -> None:
        lines = [DiffLine.context(i, i, f"line {i}") for i in range(1, 6)]
        rows = align_lines(lines)
        assert len(rows) == len(lines)
        for row, line in zip(rows, lines):
            assert row.old == line
            assert row.new == line
            assert row.is_context

    def test_no_line_dropped_or_duplicated(self, mixed_lines: List[DiffLine]) -> None:
        rows = align_lines(mixed_lines)
        stats = stats_of(mixed_lines)

        added_in_rows = [r.new for r in rows if r.new is not None and r.new.line_type == LineType.ADDED]
        deleted_in_rows = [r.old for r in rows if r.old is not None and r.old.line_type == LineType.DELETED]
        assert len(added_in_rows) == stats.additions
        assert len(deleted_in_rows) == stats.deletions

        emitted = [r.old for r in rows if r.old is not None] + [
            r.new for r in rows if r.new is not None and not r.is_context
        ]
        assert sorted(emitted, key=mixed_lines.index) == mixed_lines

    def test_idempotent(self, mixed_lines: List[DiffLine]) -> None:
        assert align_lines(mixed_lines) == align_lines(mixed_lines)

    def test_every_row_has_a_side(self, mixed_lines: List[DiffLine]) -> None:
        for row in align_lines(mixed_lines):
            assert row.old is not None or row.new is not None

    def test_unknown_kind_is_treated_as_context(self) -> None:
        odd = DiffLine(line_type="modified", old_line_number=5, new_line_number=5, content="?")
        rows = align_lines([L2, odd, L2_NEW])
        assert sides(rows) == [(L2, None), (odd, odd), (None, L2_NEW)]

    def test_large_input(self) -> None:
        lines = []
        for i in range(2000):
            lines.append(DiffLine.deleted(i + 1, f"d{i}"))
        for i in range(1500):
            lines.append(DiffLine.added(i + 1, f"a{i}"))
        rows = align_lines(lines)
        assert len(rows) == 2000
        assert rows[1499].new is not None
        assert rows[1500].new is None


class TestPairAligner:
    """State machine details."""

    @pytest.mark.parametrize(
        "first, expected",
        [
            (L1, AlignState.AT_CONTEXT),
            (L2, AlignState.IN_DELETED_RUN),
            (L2_NEW, AlignState.AT_ADDED_ONLY),
        ],
    )
    def test_initial_state(self, first: DiffLine, expected: AlignState) -> None:
        assert PairAligner([first])._next_state() is expected

    def test_done_on_empty(self) -> None:
        assert PairAligner([])._next_state() is AlignState.DONE

    def test_deleted_run_moves_to_pairing_when_followed_by_added(self) -> None:
        aligner = PairAligner([L2, L3, L2_NEW, L1])
        assert aligner._in_deleted_run() is AlignState.PAIRING_RUNS
        assert aligner.rows == []
        assert aligner._pairing_runs() is AlignState.AT_CONTEXT
        assert aligner.pos == 3

    def test_deleted_run_alone_emits_old_only_rows(self) -> None:
        aligner = PairAligner([L2, L3, L1])
        assert aligner._in_deleted_run() is AlignState.AT_CONTEXT
        assert sides(aligner.rows) == [(L2, None), (L3, None)]
        assert aligner.pos == 2
