"""
protalign: local alignment of protein sequences under a substitution matrix.

Smith-Waterman alignment with an arbitrary integer penalty table, plus a
linear best-match search over a collection of proteins.
"""

__version__ = "0.1.0"

from protalign.penalty import SubstitutionMatrix, MissingPenaltyError
from protalign.align import (
    AlignmentResult,
    DPMatrix,
    LocalAligner,
    OversizedInputError,
    Trace,
    align,
)
from protalign.search import find_best, rank_matches
from protalign.io import (
    MatrixFormatError,
    Protein,
    read_proteins,
    read_substitution_matrix,
    write_proteins,
    write_substitution_matrix,
)

__all__ = [
    "SubstitutionMatrix",
    "MissingPenaltyError",
    "AlignmentResult",
    "DPMatrix",
    "LocalAligner",
    "OversizedInputError",
    "Trace",
    "align",
    "find_best",
    "rank_matches",
    "Protein",
    "MatrixFormatError",
    "read_proteins",
    "write_proteins",
    "read_substitution_matrix",
    "write_substitution_matrix",
]
