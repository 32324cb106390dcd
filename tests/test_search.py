"""Tests for best-match search."""

import pytest

from protalign.align import OversizedInputError, align
from protalign.io import Protein
from protalign.penalty import MissingPenaltyError
from protalign.search import find_best, rank_matches


class TestFindBest:
    def test_finds_exact_match(self, collection, protein_matrix):
        best = find_best("KLMNPQRS", collection, protein_matrix)
        assert best.score == 40
        assert best.record.description == "exact"

    def test_lowest_index_wins_ties(self, collection, protein_matrix):
        # "exact" (index 2) and "exact copy" (index 3) both score 40
        best = find_best("KLMNPQRS", collection, protein_matrix)
        assert best.index == 2
        assert best.record is collection[2]

    def test_score_not_below_any_record(self, protein_matrix, random_proteins):
        proteins = [Protein(f"p{i}", s) for i, s in enumerate(random_proteins[1:])]
        query = random_proteins[0]
        best = find_best(query, proteins, protein_matrix)
        for p in proteins:
            assert best.score >= align(query, p.sequence, protein_matrix).score

    def test_empty_collection(self, protein_matrix):
        assert find_best("ACDE", [], protein_matrix) is None

    def test_no_positive_match(self, protein_matrix):
        proteins = [Protein("w", "WWWW"), Protein("y", "YYYY")]
        assert find_best("ACDE", proteins, protein_matrix) is None

    def test_empty_query(self, collection, protein_matrix):
        assert find_best("", collection, protein_matrix) is None

    def test_errors_propagate(self, collection, ac_matrix, protein_matrix):
        with pytest.raises(MissingPenaltyError):
            find_best("AC", collection, ac_matrix)
        with pytest.raises(OversizedInputError):
            find_best("KLMNPQRS", collection, protein_matrix, max_cells=10)


class TestRankMatches:
    def test_ordering(self, collection, protein_matrix):
        hits = rank_matches("KLMNPQRS", collection, protein_matrix)
        assert [h.index for h in hits] == [2, 3, 1]
        assert [h.score for h in hits] == [40, 40, 30]

    def test_top(self, collection, protein_matrix):
        hits = rank_matches("KLMNPQRS", collection, protein_matrix, top=1)
        assert len(hits) == 1
        assert hits[0].record.description == "exact"

    def test_first_hit_agrees_with_find_best(self, collection, protein_matrix):
        best = find_best("GGKLM", collection, protein_matrix)
        hits = rank_matches("GGKLM", collection, protein_matrix)
        assert hits[0].index == best.index
        assert hits[0].score == best.score
