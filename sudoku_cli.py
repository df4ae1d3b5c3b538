# sudoku_cli.py
"""
Ligne de commande du moteur Sudoku.

    python sudoku_cli.py generate -d Medium --seed 42
    python sudoku_cli.py generate -d Hard --count 9 --pdf hard.pdf
    python sudoku_cli.py validate 530070000600195000...
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import json
import logging
import random
import sys

from sudoku_core import (
    SudokuError,
    count_blanks,
    conflicting_cells,
    is_complete_and_correct,
    is_valid_board_state,
)
from sudoku_codec import (
    format_grid,
    grid_from_string,
    hash_grid_sha256,
    puzzle_to_record,
)
from sudoku_difficulty import PROFILES, resolve_profile, generate_batch

log = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "Medium"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sudoku",
        description="Génération et validation de grilles Sudoku à solution unique.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="logs détaillés")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="générer un ou plusieurs puzzles")
    gen.add_argument(
        "-d", "--difficulty",
        default=DEFAULT_DIFFICULTY,
        help=f"difficulté parmi : {', '.join(PROFILES)} (défaut : {DEFAULT_DIFFICULTY})",
    )
    gen.add_argument("--seed", type=int, default=None, help="graine (génération reproductible)")
    gen.add_argument("--count", type=int, default=1, help="nombre de puzzles distincts")
    gen.add_argument("--format", choices=("json", "text"), default="json")
    gen.add_argument("--pdf", default=None, metavar="PATH", help="exporter aussi en PDF")

    val = sub.add_parser("validate", help="valider une grille (81 caractères, 0 ou . = vide)")
    val.add_argument("grid")
    val.add_argument("--solution", default=None, help="solution attendue (81 caractères)")
    return parser


def _cmd_generate(args) -> int:
    profile = resolve_profile(args.difficulty)
    rng = random.Random(args.seed)
    puzzles = generate_batch(profile, args.count, rng=rng)

    if args.format == "json":
        records = [puzzle_to_record(p, s, profile) for (p, s) in puzzles]
        print(json.dumps(records))
    else:
        for i, (puzzle, solution) in enumerate(puzzles, start=1):
            print(f"# {i} - {profile.name} - {count_blanks(puzzle)} cases vides - {hash_grid_sha256(puzzle)[:8]}")
            print(format_grid(puzzle))
            print()
            print(format_grid(solution))
            print()

    if args.pdf:
        # import tardif : matplotlib n'est utile qu'à l'export
        from sudoku_book import build_book_pdf

        label = profile.label or profile.name
        _hashes, book_hash = build_book_pdf(
            puzzles,
            args.pdf,
            title=f"Sudoku - Niveau {label}",
            puzzle_labels=[label] * len(puzzles),
        )
        log.info("PDF généré : %s (hash %s)", args.pdf, book_hash)
    return 0


def _cmd_validate(args) -> int:
    grid = grid_from_string(args.grid)
    valid = is_valid_board_state(grid)
    print(f"valid: {'yes' if valid else 'no'}")
    if not valid:
        cells = " ".join(f"({r},{c})" for (r, c) in sorted(conflicting_cells(grid)))
        print(f"conflicts: {cells}")
    print(f"blanks: {count_blanks(grid)}")

    if args.solution is not None:
        solution = grid_from_string(args.solution)
        complete = is_complete_and_correct(grid, solution)
        print(f"solved: {'yes' if complete else 'no'}")
    return 0 if valid else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "generate":
            return _cmd_generate(args)
        return _cmd_validate(args)
    except SudokuError as e:
        print(f"erreur : {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
