"""Shared test fixtures for protalign tests."""

import random

import pytest

from protalign.io import Protein
from protalign.penalty import SubstitutionMatrix


AMINO_ACIDS = "ACDEFGHIKLMNPQRSTVWY"


def _build_matrix(alphabet, match=5, mismatch=-3, gap_penalty=-4, gap="*"):
    """Symmetric table: *match* on the diagonal, *mismatch* elsewhere."""
    matrix = SubstitutionMatrix(gap=gap)
    for a in alphabet:
        for b in alphabet:
            matrix.set_penalty(a, b, match if a == b else mismatch)
        matrix.set_penalty(a, gap, gap_penalty)
        matrix.set_penalty(gap, a, gap_penalty)
    matrix.set_penalty(gap, gap, gap_penalty)
    return matrix


def _replay_score(result, matrix):
    """Sum the penalties of the alignment columns."""
    return sum(matrix.get_penalty(a, b) for a, b in zip(result.aligned_a, result.aligned_b))


@pytest.fixture
def ac_matrix():
    """Two-letter alphabet with '-' as gap: match 2, mismatch -1, gap -1."""
    return SubstitutionMatrix.from_dict(
        {
            ("A", "A"): 2, ("C", "C"): 2,
            ("A", "C"): -1, ("C", "A"): -1,
            ("A", "-"): -1, ("C", "-"): -1,
            ("-", "A"): -1, ("-", "C"): -1,
        },
        gap="-",
    )


@pytest.fixture
def skewed_matrix():
    """Every ordered pair differs from its reverse, including the gap costs."""
    return SubstitutionMatrix.from_dict({
        ("A", "A"): 3, ("C", "C"): 3,
        ("A", "C"): -2, ("C", "A"): 0,
        ("A", "*"): -2, ("*", "A"): -4,
        ("C", "*"): -1, ("*", "C"): -3,
    })


@pytest.fixture
def protein_matrix():
    return _build_matrix(AMINO_ACIDS)


@pytest.fixture
def make_matrix():
    """Factory for symmetric match/mismatch tables."""
    return _build_matrix


@pytest.fixture
def replay_score():
    return _replay_score


@pytest.fixture
def random_proteins():
    """A reproducible set of random protein sequences."""
    random.seed(42)
    return [
        "".join(random.choice(AMINO_ACIDS) for _ in range(random.randint(5, 40)))
        for _ in range(10)
    ]


@pytest.fixture
def collection():
    return [
        Protein("unrelated", "WWWWWWWW"),
        Protein("partial", "GGGKLMNPQGGG"),
        Protein("exact", "TTKLMNPQRSTT"),
        Protein("exact copy", "KLMNPQRS"),
    ]


@pytest.fixture
def matrix_file(tmp_path):
    p = tmp_path / "penalties.txt"
    p.write_text(
        "# small test table\n"
        "$ A C D E *\n"
        "A 4 0 -2 -1 -4\n"
        "C 0 9 -3 -4 -4\n"
        "D -2 -3 6 2 -4\n"
        "E -1 -4 2 5 -4\n"
        "* -4 -4 -4 -4 1\n"
    )
    return p


@pytest.fixture
def protein_file(tmp_path):
    p = tmp_path / "proteins.fa"
    p.write_text(">first protein\nACDE\n\n>second protein\nDDEECA\n")
    return p
