"""Best-match search – scan a collection of proteins with local alignment."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, TYPE_CHECKING

from protalign.align import AlignmentResult, LocalAligner, DEFAULT_MAX_CELLS
from protalign.penalty import SubstitutionMatrix

if TYPE_CHECKING:
    from protalign.io import Protein

logger = logging.getLogger(__name__)


def _scan(
    query: str,
    collection: Sequence["Protein"],
    matrix: SubstitutionMatrix,
    max_cells: Optional[int],
):
    aligner = LocalAligner(matrix, max_cells=max_cells)
    for index, record in enumerate(collection):
        result = aligner.align(query, record.sequence)
        result.index = index
        result.record = record
        logger.debug("Record %d (%s): score %d", index, record.description, result.score)
        yield result


def find_best(
    query: str,
    collection: Sequence["Protein"],
    matrix: SubstitutionMatrix,
    max_cells: Optional[int] = DEFAULT_MAX_CELLS,
) -> Optional[AlignmentResult]:
    """Return the best local alignment of *query* against any record.

    Every record is aligned; the strictly highest score wins, so on equal
    scores the record with the lowest index is kept.  Returns ``None`` for
    an empty collection or when no alignment scores above 0.
    """
    best: Optional[AlignmentResult] = None
    for result in _scan(query, collection, matrix, max_cells):
        if result.score > 0 and (best is None or result.score > best.score):
            best = result
    if best is None:
        logger.debug("No match for query among %d records", len(collection))
    return best


def rank_matches(
    query: str,
    collection: Sequence["Protein"],
    matrix: SubstitutionMatrix,
    top: Optional[int] = None,
    max_cells: Optional[int] = DEFAULT_MAX_CELLS,
) -> List[AlignmentResult]:
    """All positive-scoring alignments, best first (lowest index on ties)."""
    hits = [r for r in _scan(query, collection, matrix, max_cells) if r.score > 0]
    hits.sort(key=lambda r: (-r.score, r.index))
    if top is not None:
        hits = hits[:top]
    return hits
