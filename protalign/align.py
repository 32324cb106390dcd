"""Core alignment engine – Smith-Waterman local alignment with traceback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from protalign.penalty import SubstitutionMatrix

if TYPE_CHECKING:
    from protalign.io import Protein

logger = logging.getLogger(__name__)

# Upper bound on n*m for one alignment; None disables the check.
DEFAULT_MAX_CELLS = 10_000_000


class OversizedInputError(ValueError):
    """Raised when a sequence pair would need more DP cells than allowed."""

    def __init__(self, cells: int, limit: int):
        super().__init__(f"alignment needs {cells} cells, limit is {limit}")
        self.cells = cells
        self.limit = limit


class Trace(IntEnum):
    """Traceback tags stored in the DP matrix. STOP is the only terminal state."""
    STOP = 0
    DIAG = 1
    UP = 2
    LEFT = 3


@dataclass
class AlignmentResult:
    """Stores the result of a local alignment."""

    score: int = 0
    aligned_a: str = ""
    aligned_b: str = ""
    start_a: int = 0
    end_a: int = 0
    start_b: int = 0
    end_b: int = 0
    index: Optional[int] = None
    record: Optional["Protein"] = None
    gap: str = "*"
    ops: str = ""

    def __bool__(self) -> bool:
        return bool(self.aligned_a)

    @property
    def length(self) -> int:
        return len(self.aligned_a)

    @property
    def column_ops(self) -> str:
        """One of ``M``, ``X``, ``I``, ``D`` per alignment column.

        Taken from the traceback when available.  Otherwise columns are
        classified by comparing against ``gap``, which cannot tell a residue
        equal to the gap symbol from a real gap.
        """
        if self.ops:
            return self.ops
        return "".join(
            "D" if b == self.gap else "I" if a == self.gap else "M" if a == b else "X"
            for a, b in zip(self.aligned_a, self.aligned_b)
        )

    @property
    def identity(self) -> float:
        """Fraction of alignment columns that pair identical symbols."""
        if not self.aligned_a:
            return 0.0
        return self.column_ops.count("M") / len(self.aligned_a)

    @property
    def cigar(self) -> str:
        """Generate a CIGAR string from the aligned columns."""
        if not self.aligned_a:
            return ""
        ops: list[tuple[str, int]] = []
        for op in self.column_ops:
            if ops and ops[-1][0] == op:
                ops[-1] = (op, ops[-1][1] + 1)
            else:
                ops.append((op, 1))
        return "".join(f"{count}{op}" for op, count in ops)


class DPMatrix:
    """Score and traceback grids for one sequence pair.

    Both grids are flat buffers of ``rows * cols`` cells addressed as
    ``i * cols + j``.  Row 0 and column 0 hold score 0 and ``Trace.STOP``.
    """

    __slots__ = ("rows", "cols", "scores", "trace")

    def __init__(self, n: int, m: int):
        self.rows = n + 1
        self.cols = m + 1
        self.scores = np.zeros(self.rows * self.cols, dtype=np.int64)
        self.trace = np.zeros(self.rows * self.cols, dtype=np.uint8)

    def __repr__(self) -> str:
        return f"DPMatrix({self.rows}x{self.cols})"

    def score(self, i: int, j: int) -> int:
        return int(self.scores[i * self.cols + j])

    def tag(self, i: int, j: int) -> Trace:
        return Trace(int(self.trace[i * self.cols + j]))

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """2-D views of the score and traceback grids."""
        shape = (self.rows, self.cols)
        return self.scores.reshape(shape), self.trace.reshape(shape)

    def best(self) -> Tuple[int, int, int]:
        """Return ``(score, i, j)`` of the highest cell, first in row-major order."""
        flat = int(np.argmax(self.scores))
        i, j = divmod(flat, self.cols)
        return int(self.scores[flat]), i, j

    def traceback(
        self, seq_a: str, seq_b: str, i: int, j: int, gap: str
    ) -> Tuple[str, str, str, int, int]:
        """Walk back from (*i*, *j*) until a STOP cell.

        Returns ``(aligned_a, aligned_b, ops, start_i, start_j)`` where
        *ops* holds one CIGAR operation per column and the start indices are
        the row/column the walk stopped at.
        """
        cols_a: List[str] = []
        cols_b: List[str] = []
        ops: List[str] = []
        state = self.tag(i, j)
        while state is not Trace.STOP:
            if state is Trace.DIAG:
                cols_a.append(seq_a[i - 1])
                cols_b.append(seq_b[j - 1])
                ops.append("M" if seq_a[i - 1] == seq_b[j - 1] else "X")
                i -= 1
                j -= 1
            elif state is Trace.UP:
                cols_a.append(seq_a[i - 1])
                cols_b.append(gap)
                ops.append("D")
                i -= 1
            else:
                cols_a.append(gap)
                cols_b.append(seq_b[j - 1])
                ops.append("I")
                j -= 1
            state = self.tag(i, j)
        cols_a.reverse()
        cols_b.reverse()
        ops.reverse()
        return "".join(cols_a), "".join(cols_b), "".join(ops), i, j


class LocalAligner:
    """Smith-Waterman local aligner bound to one substitution matrix."""

    def __init__(
        self,
        matrix: SubstitutionMatrix,
        max_cells: Optional[int] = DEFAULT_MAX_CELLS,
    ):
        self.matrix = matrix
        self.max_cells = max_cells

    def fill(self, seq_a: str, seq_b: str) -> DPMatrix:
        """Build the score and traceback grids for *seq_a* x *seq_b*.

        On equal candidates the tag prefers DIAG, then UP, then LEFT.  A cell
        whose best candidate is not positive scores 0 and is tagged STOP.
        """
        n = len(seq_a)
        m = len(seq_b)
        if self.max_cells is not None and n * m > self.max_cells:
            raise OversizedInputError(n * m, self.max_cells)
        dp = DPMatrix(n, m)
        if n == 0 or m == 0:
            return dp

        pm = self.matrix
        pm.require(seq_a, seq_b)
        logger.debug("Filling %dx%d DP matrix", n + 1, m + 1)

        # Per-symbol penalty rows so the inner loop is plain int arithmetic
        alphabet_b = sorted(set(seq_b))
        col_of = {s: k for k, s in enumerate(alphabet_b)}
        enc_b = [col_of[c] for c in seq_b]
        sub = {a: pm.table([a], alphabet_b)[0].tolist() for a in set(seq_a)}
        del_cost = {a: pm.get_penalty(a, pm.gap) for a in set(seq_a)}
        ins_cost = [pm.get_penalty(pm.gap, c) for c in seq_b]

        cols = dp.cols
        prev = [0] * cols
        for i in range(1, n + 1):
            sub_row = sub[seq_a[i - 1]]
            up_cost = del_cost[seq_a[i - 1]]
            cur = [0] * cols
            tags = [Trace.STOP] * cols
            for j in range(1, cols):
                diag = prev[j - 1] + sub_row[enc_b[j - 1]]
                up = prev[j] + up_cost
                left = cur[j - 1] + ins_cost[j - 1]
                best = max(diag, up, left)
                if best <= 0:
                    continue
                cur[j] = best
                if diag == best:
                    tags[j] = Trace.DIAG
                elif up == best:
                    tags[j] = Trace.UP
                else:
                    tags[j] = Trace.LEFT
            dp.scores[i * cols:(i + 1) * cols] = cur
            dp.trace[i * cols:(i + 1) * cols] = tags
            prev = cur
        return dp

    def align(self, seq_a: str, seq_b: str) -> AlignmentResult:
        """Best local alignment of *seq_a* against *seq_b*.

        Empty input yields an empty result with score 0.
        """
        gap = self.matrix.gap
        if not seq_a or not seq_b:
            return AlignmentResult(gap=gap)

        dp = self.fill(seq_a, seq_b)
        best_score, best_i, best_j = dp.best()
        if best_score == 0:
            return AlignmentResult(gap=gap)

        aligned_a, aligned_b, ops, start_i, start_j = dp.traceback(seq_a, seq_b, best_i, best_j, gap)
        return AlignmentResult(
            score=best_score,
            aligned_a=aligned_a,
            aligned_b=aligned_b,
            ops=ops,
            start_a=start_i,
            end_a=best_i,
            start_b=start_j,
            end_b=best_j,
            gap=gap,
        )


def align(
    seq_a: str,
    seq_b: str,
    matrix: SubstitutionMatrix,
    max_cells: Optional[int] = DEFAULT_MAX_CELLS,
) -> AlignmentResult:
    """Local alignment of *seq_a* and *seq_b* under *matrix*."""
    return LocalAligner(matrix, max_cells=max_cells).align(seq_a, seq_b)
