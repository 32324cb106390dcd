"""Protein and penalty-table I/O (plain and gzipped)."""

from __future__ import annotations

import gzip
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from protalign.penalty import SubstitutionMatrix, DEFAULT_GAP

logger = logging.getLogger(__name__)

HEADER_MARKER = "$"


@dataclass(frozen=True)
class Protein:
    """A described protein sequence."""

    description: str
    sequence: str


class MatrixFormatError(ValueError):
    """Raised for a malformed line in a penalty table file."""

    def __init__(self, message: str, lineno: int):
        super().__init__(f"line {lineno}: {message}")
        self.lineno = lineno


def _opener(filepath: Path):
    return gzip.open if filepath.suffix == ".gz" else open


def read_proteins(filepath: Union[str, Path]) -> List[Protein]:
    """Load proteins from a FASTA file with one line per sequence.

    A ``>`` line gives the description (marker stripped) and the next
    non-empty line is the whole sequence.  Blank lines are skipped and a
    sequence line with no description before it is dropped.  Supports
    gzip-compressed files (.gz).
    """
    filepath = Path(filepath)
    proteins: List[Protein] = []
    description: Optional[str] = None

    with _opener(filepath)(filepath, "rt", encoding="utf-8") as fh:  # type: ignore[operator]
        for lineno, line in enumerate(fh, start=1):
            line = line.rstrip("\n").rstrip("\r")
            if not line:
                continue
            if line.startswith(">"):
                if description is not None:
                    logger.debug("%s:%d: description %r has no sequence", filepath, lineno, description)
                description = line[1:]
            elif description is not None:
                proteins.append(Protein(description, line))
                description = None
            else:
                logger.debug("%s:%d: dropping sequence line without description", filepath, lineno)

    logger.debug("Loaded %d proteins from %s", len(proteins), filepath)
    return proteins


def write_proteins(filepath: Union[str, Path], proteins: Iterable[Protein]) -> None:
    """Write proteins as ``>description`` / sequence line pairs."""
    filepath = Path(filepath)
    with _opener(filepath)(filepath, "wt", encoding="utf-8") as fh:  # type: ignore[operator]
        for protein in proteins:
            fh.write(f">{protein.description}\n")
            fh.write(f"{protein.sequence}\n")


def read_substitution_matrix(
    filepath: Union[str, Path], gap: str = DEFAULT_GAP
) -> SubstitutionMatrix:
    """Load a penalty table.

    The header line starts with ``$`` and lists the column symbols.  Every
    other line is a row symbol followed by one integer per column.  Lines
    starting with ``#`` are comments.  Nothing is returned unless the whole
    file parses.
    """
    filepath = Path(filepath)
    matrix = SubstitutionMatrix(gap=gap)
    columns: Optional[List[str]] = None

    with _opener(filepath)(filepath, "rt", encoding="utf-8") as fh:  # type: ignore[operator]
        for lineno, line in enumerate(fh, start=1):
            line = line.rstrip("\n").rstrip("\r")
            if not line.strip() or line.startswith("#"):
                continue
            if line.startswith(HEADER_MARKER):
                columns = [token[0] for token in line[1:].split()]
                continue
            if columns is None:
                raise MatrixFormatError("penalty row before the $ header", lineno)

            row_symbol = line[0]
            tokens = line[1:].split()
            if len(tokens) != len(columns):
                raise MatrixFormatError(
                    f"row {row_symbol!r} has {len(tokens)} penalties, expected {len(columns)}",
                    lineno,
                )
            for col_symbol, token in zip(columns, tokens):
                try:
                    value = int(token)
                except ValueError:
                    raise MatrixFormatError(f"invalid penalty {token!r}", lineno) from None
                matrix.set_penalty(row_symbol, col_symbol, value)

    logger.debug("Loaded %d-symbol penalty table from %s", len(matrix), filepath)
    return matrix


def write_substitution_matrix(filepath: Union[str, Path], matrix: SubstitutionMatrix) -> None:
    """Write *matrix* in the ``$``-header format read by ``read_substitution_matrix``.

    Every pair of known symbols must be set.
    """
    filepath = Path(filepath)
    symbols = matrix.symbols
    values = matrix.table(symbols, symbols)
    with _opener(filepath)(filepath, "wt", encoding="utf-8") as fh:  # type: ignore[operator]
        fh.write(HEADER_MARKER + " " + " ".join(symbols) + "\n")
        for symbol, row in zip(symbols, values.tolist()):
            fh.write(symbol + " " + " ".join(str(v) for v in row) + "\n")
