"""CLI entry point for protalign."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from protalign.align import AlignmentResult, LocalAligner, DEFAULT_MAX_CELLS
from protalign.io import read_proteins, read_substitution_matrix
from protalign.penalty import MissingPenaltyError, DEFAULT_GAP
from protalign.search import find_best


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protalign",
        description="protalign – local protein alignment under a substitution matrix",
    )
    sub = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--matrix", required=True, help="Penalty table file ($ header format)")
    common.add_argument("--gap", default=DEFAULT_GAP, help="Gap symbol used in the penalty table")
    common.add_argument("--max-cells", type=int, default=DEFAULT_MAX_CELLS,
                        help="Refuse pairs needing more DP cells than this")
    common.add_argument("--output", choices=["text", "json"], default="text")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    # align sub-command
    align_p = sub.add_parser("align", parents=[common], help="Align every query against every target")
    align_p.add_argument("query", help="Query FASTA file")
    align_p.add_argument("target", help="Target FASTA file")

    # search sub-command
    search_p = sub.add_parser("search", parents=[common], help="Find the best match for each query")
    search_p.add_argument("query", help="Query FASTA file")
    search_p.add_argument("database", help="FASTA file to search")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "align":
            _cmd_align(args)
        elif args.command == "search":
            _cmd_search(args)
    except (OSError, ValueError, MissingPenaltyError) as e:
        print(f"Error: {e}")
        sys.exit(1)


def _cmd_align(args) -> None:
    matrix = read_substitution_matrix(args.matrix, gap=args.gap)
    aligner = LocalAligner(matrix, max_cells=args.max_cells)

    queries = read_proteins(args.query)
    targets = read_proteins(args.target)

    results = []
    for query in queries:
        for target in targets:
            aln = aligner.align(query.sequence, target.sequence)
            results.append((query.description, target.description, aln))

    if args.output == "json":
        print(json.dumps([_to_dict(q, t, aln) for q, t, aln in results], indent=2))
    else:
        for q, t, aln in results:
            _print_text(q, t, aln)


def _cmd_search(args) -> None:
    matrix = read_substitution_matrix(args.matrix, gap=args.gap)
    queries = read_proteins(args.query)
    database = read_proteins(args.database)

    results = []
    for query in queries:
        best = find_best(query.sequence, database, matrix, max_cells=args.max_cells)
        results.append((query.description, best))

    if args.output == "json":
        data = [
            _to_dict(q, best.record.description, best) if best else {"query": q, "target": None}
            for q, best in results
        ]
        print(json.dumps(data, indent=2))
    else:
        for q, best in results:
            if best is None:
                print(f"{q}\tno match")
            else:
                _print_text(q, best.record.description, best)


def _to_dict(query_name: str, target_name: str, aln: AlignmentResult) -> dict:
    return {
        "query": query_name,
        "target": target_name,
        "index": aln.index,
        "score": aln.score,
        "query_start": aln.start_a,
        "query_end": aln.end_a,
        "target_start": aln.start_b,
        "target_end": aln.end_b,
        "aligned_query": aln.aligned_a,
        "aligned_target": aln.aligned_b,
        "cigar": aln.cigar,
        "identity": aln.identity,
    }


def _print_text(query_name: str, target_name: str, aln: AlignmentResult) -> None:
    print(
        f"{query_name}\t{aln.start_a}-{aln.end_a}\t"
        f"{target_name}\t{aln.start_b}-{aln.end_b}\t"
        f"score={aln.score}\tidentity={aln.identity:.4f}\t"
        f"cigar={aln.cigar}"
    )
    if aln:
        print(f"  {aln.aligned_a}")
        print(f"  {aln.aligned_b}")
