"""Side-by-side alignment of classified diff lines.

Deleted lines are paired with the added lines that immediately follow them,
k-th with k-th. Lines are never matched by content: a run of three deletions
followed by two additions yields two paired rows and one old-only row,
whatever the text says.
"""

from enum import Enum
from typing import List, Sequence

from diffview.models import DiffLine, LineType, SplitRow


class AlignState(Enum):
    """States of the alignment scan."""
    AT_CONTEXT = "at_context"
    IN_DELETED_RUN = "in_deleted_run"
    PAIRING_RUNS = "pairing_runs"
    AT_ADDED_ONLY = "at_added_only"
    DONE = "done"


class PairAligner:
    """Single left-to-right scan turning diff lines into split rows.

    The scan keeps three indices into the input: the cursor, the end of the
    current deleted run and the end of the added run that follows it. Runs are
    never copied, so the only extra memory is the output list.
    """

    def __init__(self, lines: Sequence[DiffLine]) -> None:
        self.lines = lines
        self.rows: List[SplitRow] = []
        self.pos = 0
        self._deleted_end = 0
        self._added_end = 0

    def align(self) -> List[SplitRow]:
        """Run the state machine to completion and return the rows."""
        handlers = {
            AlignState.AT_CONTEXT: self._at_context,
            AlignState.IN_DELETED_RUN: self._in_deleted_run,
            AlignState.PAIRING_RUNS: self._pairing_runs,
            AlignState.AT_ADDED_ONLY: self._at_added_only,
        }
        state = self._next_state()
        while state is not AlignState.DONE:
            state = handlers[state]()
        return self.rows

    def _next_state(self) -> AlignState:
        if self.pos >= len(self.lines):
            return AlignState.DONE
        line_type = self.lines[self.pos].line_type
        if line_type == LineType.DELETED:
            return AlignState.IN_DELETED_RUN
        if line_type == LineType.ADDED:
            return AlignState.AT_ADDED_ONLY
        return AlignState.AT_CONTEXT

    def _run_end(self, start: int, line_type: LineType) -> int:
        end = start
        while end < len(self.lines) and self.lines[end].line_type == line_type:
            end += 1
        return end

    def _at_context(self) -> AlignState:
        line = self.lines[self.pos]
        self.rows.append(SplitRow(old=line, new=line))
        self.pos += 1
        return self._next_state()

    def _in_deleted_run(self) -> AlignState:
        self._deleted_end = self._run_end(self.pos, LineType.DELETED)
        self._added_end = self._run_end(self._deleted_end, LineType.ADDED)
        if self._added_end > self._deleted_end:
            return AlignState.PAIRING_RUNS

        # Nothing to pair with: every deleted line stands alone.
        for k in range(self.pos, self._deleted_end):
            self.rows.append(SplitRow(old=self.lines[k]))
        self.pos = self._deleted_end
        return self._next_state()

    def _pairing_runs(self) -> AlignState:
        deleted_start = self.pos
        added_start = self._deleted_end
        deleted_count = self._deleted_end - deleted_start
        added_count = self._added_end - added_start
        paired = min(deleted_count, added_count)

        for k in range(paired):
            self.rows.append(
                SplitRow(old=self.lines[deleted_start + k], new=self.lines[added_start + k])
            )
        for k in range(paired, deleted_count):
            self.rows.append(SplitRow(old=self.lines[deleted_start + k]))
        for k in range(paired, added_count):
            self.rows.append(SplitRow(new=self.lines[added_start + k]))

        self.pos = self._added_end
        return self._next_state()

    def _at_added_only(self) -> AlignState:
        self.rows.append(SplitRow(new=self.lines[self.pos]))
        self.pos += 1
        return self._next_state()


def align_lines(lines: Sequence[DiffLine]) -> List[SplitRow]:
    """Align diff lines into rows for the split view."""
    return PairAligner(lines).align()
