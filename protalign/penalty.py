"""Substitution penalty table for protein alignment."""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

import numpy as np


DEFAULT_GAP = "*"


class MissingPenaltyError(KeyError):
    """Raised when a penalty is requested for a pair that was never set."""

    def __init__(self, pair: Tuple[str, str]):
        super().__init__(pair)
        self.pair = pair

    def __str__(self) -> str:
        a, b = self.pair
        return f"no penalty defined for pair ({a!r}, {b!r})"


class SubstitutionMatrix:
    """Penalty for every ordered pair of symbols, including the gap symbol.

    Symbols get a rank the first time they are seen and penalties live in a
    dense 2-D array indexed by rank.  A parallel boolean mask records which
    pairs were actually set, so an unset pair is never confused with a
    stored zero.  ``(a, b)`` and ``(b, a)`` are independent entries.
    """

    def __init__(self, gap: str = DEFAULT_GAP):
        _check_symbol(gap)
        self.gap = gap
        self._ranks: Dict[str, int] = {}
        self._values = np.zeros((0, 0), dtype=np.int64)
        self._defined = np.zeros((0, 0), dtype=bool)

    @classmethod
    def from_dict(
        cls, penalties: Dict[Tuple[str, str], int], gap: str = DEFAULT_GAP
    ) -> "SubstitutionMatrix":
        matrix = cls(gap=gap)
        for (a, b), value in penalties.items():
            matrix.set_penalty(a, b, value)
        return matrix

    def __len__(self) -> int:
        return len(self._ranks)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._ranks

    def __repr__(self) -> str:
        return f"SubstitutionMatrix(symbols={''.join(self.symbols)!r}, gap={self.gap!r})"

    def __str__(self) -> str:
        return self.format()

    @property
    def symbols(self) -> Tuple[str, ...]:
        """Known symbols in rank order."""
        return tuple(self._ranks)

    def set_penalty(self, a: str, b: str, value: int) -> None:
        """Store the penalty for the ordered pair (*a*, *b*)."""
        i = self._rank(a)
        j = self._rank(b)
        self._values[i, j] = int(value)
        self._defined[i, j] = True

    def get_penalty(self, a: str, b: str) -> int:
        """Return the penalty for (*a*, *b*) or raise ``MissingPenaltyError``."""
        i = self._ranks.get(a)
        j = self._ranks.get(b)
        if i is None or j is None or not self._defined[i, j]:
            raise MissingPenaltyError((a, b))
        return int(self._values[i, j])

    def has_penalty(self, a: str, b: str) -> bool:
        i = self._ranks.get(a)
        j = self._ranks.get(b)
        return i is not None and j is not None and bool(self._defined[i, j])

    def table(self, rows: Iterable[str], cols: Iterable[str]) -> np.ndarray:
        """Penalties for every (row, col) pair as a ``len(rows) x len(cols)`` array.

        Raises ``MissingPenaltyError`` for the first pair that was never set,
        scanning in row-major order.
        """
        rows = list(rows)
        cols = list(cols)
        for a in rows:
            for b in cols:
                if not self.has_penalty(a, b):
                    raise MissingPenaltyError((a, b))
        ri = [self._ranks[a] for a in rows]
        ci = [self._ranks[b] for b in cols]
        return self._values[np.ix_(ri, ci)].copy()

    def require(self, symbols_a: Iterable[str], symbols_b: Iterable[str]) -> None:
        """Check that aligning *symbols_a* against *symbols_b* is fully costed.

        Every substitution pair, every ``(a, gap)`` and every ``(gap, b)``
        must be defined.
        """
        symbols_a = sorted(set(symbols_a))
        symbols_b = sorted(set(symbols_b))
        self.table(symbols_a, symbols_b)
        self.table(symbols_a, [self.gap])
        self.table([self.gap], symbols_b)

    def copy(self) -> "SubstitutionMatrix":
        other = SubstitutionMatrix(gap=self.gap)
        other._ranks = dict(self._ranks)
        other._values = self._values.copy()
        other._defined = self._defined.copy()
        return other

    def format(self, width: int = 4) -> str:
        """Render the table with one row per symbol; unset pairs show as ``.``."""
        symbols = self.symbols
        lines = [" " + "".join(s.rjust(width) for s in symbols)]
        for a in symbols:
            cells = []
            for b in symbols:
                cells.append(str(self.get_penalty(a, b)) if self.has_penalty(a, b) else ".")
            lines.append(a + "".join(c.rjust(width) for c in cells))
        return "\n".join(lines)

    def _rank(self, symbol: str) -> int:
        rank = self._ranks.get(symbol)
        if rank is not None:
            return rank
        _check_symbol(symbol)
        rank = len(self._ranks)
        self._ranks[symbol] = rank
        # Grow both arrays by one row and one column
        self._values = np.pad(self._values, ((0, 1), (0, 1)))
        self._defined = np.pad(self._defined, ((0, 1), (0, 1)))
        return rank


def _check_symbol(symbol: str) -> None:
    if not isinstance(symbol, str) or len(symbol) != 1:
        raise ValueError(f"Symbols must be single characters, got {symbol!r}")
