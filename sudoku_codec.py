# sudoku_codec.py
"""
Représentations d'échange des grilles (frontière avec la persistance) :
- chaîne canonique de 81 caractères
- hash SHA256 d'une grille et d'un lot de puzzles
- enregistrement {initial_grid, solution_grid, difficulty}
- affichage texte

Aucune écriture disque ici : le stockage appartient à l'appelant.
"""

from __future__ import annotations
from typing import List, Tuple, Dict, Any
import hashlib
import json

from sudoku_core import (
    Grid,
    SIZE,
    BLANK,
    InvalidArgument,
    check_grid,
    copy_grid,
    count_blanks,
    is_valid_board_state,
)
from sudoku_difficulty import Difficulty, resolve_profile

RECORD_KEYS = ("initial_grid", "solution_grid", "difficulty")


# ---------- Chaîne canonique ----------

def grid_to_string(grid: Grid) -> str:
    """Chaîne canonique pour une grille (ligne par ligne, 0 = vide)."""
    check_grid(grid)
    return "".join("".join(str(v) for v in row) for row in grid)


def grid_from_string(text: str) -> Grid:
    """
    Inverse de grid_to_string. Accepte '0' ou '.' pour une case vide,
    ignore les espaces et retours à la ligne.
    """
    if not isinstance(text, str):
        raise InvalidArgument(f"chaîne attendue, reçu {type(text).__name__}")
    chars = [ch for ch in text if not ch.isspace()]
    if len(chars) != SIZE * SIZE:
        raise InvalidArgument(f"{SIZE * SIZE} cases attendues, reçu {len(chars)}")
    values = []
    for i, ch in enumerate(chars):
        if ch == ".":
            values.append(BLANK)
        elif ch in "0123456789":
            values.append(int(ch))
        else:
            raise InvalidArgument(f"caractère invalide en position {i} : {ch!r}")
    return [values[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]


# ---------- Hashes ----------

def hash_grid_sha256(grid: Grid) -> str:
    """Hash hex (64) d'une grille basée sur grid_to_string (exact match)."""
    return hashlib.sha256(grid_to_string(grid).encode("utf-8")).hexdigest().lower()


def batch_hash(puzzles: List[Tuple[Grid, Grid]]) -> str:
    """
    Hash d'ensemble indépendant de l'ordre :
    - hash de chaque puzzle,
    - tri,
    - payload versionné,
    - re-hash.
    """
    per = sorted(hash_grid_sha256(p) for (p, _s) in puzzles)
    payload = "sudoku-batch:v1\ncount=" + str(len(per)) + "\n" + "\n".join(per) + "\n"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest().lower()


# ---------- Enregistrements ----------

def puzzle_to_record(initial: Grid, solution: Grid, difficulty: Difficulty) -> Dict[str, Any]:
    """Ligne telle que stockée par la couche de persistance (listes d'entiers, sans métadonnées)."""
    check_grid(initial, "initial_grid")
    check_grid(solution, "solution_grid")
    profile = resolve_profile(difficulty)
    return {
        "initial_grid": copy_grid(initial),
        "solution_grid": copy_grid(solution),
        "difficulty": profile.name,
    }


def puzzle_from_record(record: Dict[str, Any]) -> Tuple[Grid, Grid, str]:
    """
    Relit un enregistrement et vérifie sa cohérence :
    solution complète et valide, puzzle initial inclus dans la solution.
    """
    if not isinstance(record, dict):
        raise InvalidArgument("enregistrement attendu sous forme de dict")
    missing = [k for k in RECORD_KEYS if k not in record]
    if missing:
        raise InvalidArgument(f"clés manquantes : {', '.join(missing)}")

    initial = record["initial_grid"]
    solution = record["solution_grid"]
    check_grid(initial, "initial_grid")
    check_grid(solution, "solution_grid")
    profile = resolve_profile(record["difficulty"])

    if count_blanks(solution) or not is_valid_board_state(solution):
        raise InvalidArgument("solution_grid n'est pas une grille complète et valide")
    for r in range(SIZE):
        for c in range(SIZE):
            v = initial[r][c]
            if v != BLANK and v != solution[r][c]:
                raise InvalidArgument(
                    f"indice ({r},{c}) = {v} différent de la solution ({solution[r][c]})"
                )
    return copy_grid(initial), copy_grid(solution), profile.name


def record_to_json(record: Dict[str, Any]) -> str:
    return json.dumps(record, separators=(",", ":"))


def record_from_json(text: str) -> Tuple[Grid, Grid, str]:
    try:
        record = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidArgument(f"JSON invalide : {e}") from e
    return puzzle_from_record(record)


# ---------- Affichage ----------

def format_grid(grid: Grid, show_dots: bool = True) -> str:
    """
    Grille 9x9 en texte, blocs 3x3 séparés.
    show_dots=True affiche les cases vides en '.', show_dots=False en '0'.
    """
    check_grid(grid)
    lines = []
    for i, row in enumerate(grid):
        cells = [str(v) if (v != BLANK or not show_dots) else "." for v in row]
        lines.append(" | ".join(" ".join(cells[j:j + 3]) for j in range(0, SIZE, 3)))
        if i in (2, 5):
            lines.append("------+-------+------")
    return "\n".join(lines)
