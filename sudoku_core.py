# sudoku_core.py
"""
Moteur Sudoku commun :
- grille 9x9 (0 = case vide)
- UNITS / PEERS
- règles de placement et validation d'une grille
- exceptions du moteur
"""

from __future__ import annotations
from typing import List, Tuple, Dict, Set

Grid = List[List[int]]
Pos = Tuple[int, int]

SIZE = 9
BOX = 3
BLANK = 0
DIGITS = tuple(range(1, SIZE + 1))


# ---------- Exceptions ----------

class SudokuError(Exception):
    """Erreur de base du moteur Sudoku."""


class InvalidArgument(SudokuError, ValueError):
    """Argument invalide : difficulté inconnue, grille mal formée, index hors bornes..."""


class InternalInvariantViolation(SudokuError, RuntimeError):
    """Bug du solveur (remplissage impossible, plafond de sécurité dépassé)."""


# ---------- UNITS & PEERS communs ----------

UNITS: List[List[Pos]] = []
PEERS: Dict[Pos, Set[Pos]] = {}

# Lignes
for r in range(SIZE):
    UNITS.append([(r, c) for c in range(SIZE)])
# Colonnes
for c in range(SIZE):
    UNITS.append([(r, c) for r in range(SIZE)])
# Blocs 3x3
for br in range(0, SIZE, BOX):
    for bc in range(0, SIZE, BOX):
        UNITS.append([(br + dr, bc + dc) for dr in range(BOX) for dc in range(BOX)])

# Voisins de chaque case : union de ses trois unités, sans la case elle-même
for unit in UNITS:
    for pos in unit:
        PEERS.setdefault(pos, set()).update(unit)
for pos, peers in PEERS.items():
    peers.discard(pos)


# ---------- Contrôles d'arguments ----------

def _is_cell_value(v) -> bool:
    # bool est un int en Python : on le refuse explicitement
    return isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= SIZE


def check_grid(grid: Grid, name: str = "grid") -> None:
    """
    Vérifie qu'une grille est une liste 9x9 d'entiers dans [0, 9].
    Lève InvalidArgument sinon (pas de validation partielle).
    """
    if not isinstance(grid, (list, tuple)) or len(grid) != SIZE:
        raise InvalidArgument(f"{name} doit contenir {SIZE} lignes")
    for r, row in enumerate(grid):
        if not isinstance(row, (list, tuple)) or len(row) != SIZE:
            raise InvalidArgument(f"{name} : la ligne {r} doit contenir {SIZE} cases")
        for c, v in enumerate(row):
            if not _is_cell_value(v):
                raise InvalidArgument(f"{name} : valeur invalide en ({r},{c}) : {v!r}")


def check_position(row: int, col: int) -> None:
    for label, idx in (("row", row), ("col", col)):
        if not isinstance(idx, int) or isinstance(idx, bool) or not 0 <= idx < SIZE:
            raise InvalidArgument(f"{label} hors bornes : {idx!r}")


def check_digit(value: int) -> None:
    if not _is_cell_value(value) or value == BLANK:
        raise InvalidArgument(f"valeur à placer hors bornes (1..9) : {value!r}")


# ---------- Utilitaires de grille ----------

def empty_grid() -> Grid:
    return [[BLANK] * SIZE for _ in range(SIZE)]


def copy_grid(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def count_blanks(grid: Grid) -> int:
    return sum(1 for row in grid for v in row if v == BLANK)


# ---------- Règle de placement ----------

def can_place_unchecked(grid: Grid, r: int, c: int, v: int) -> bool:
    # version sans contrôles, utilisée dans les boucles de backtracking
    for (pr, pc) in PEERS[(r, c)]:
        if grid[pr][pc] == v:
            return False
    return True


def can_place(grid: Grid, row: int, col: int, value: int) -> bool:
    """
    True si `value` n'apparaît ni dans la ligne, ni dans la colonne,
    ni dans le bloc 3x3 de (row, col). La case elle-même est ignorée.
    """
    check_grid(grid)
    check_position(row, col)
    check_digit(value)
    return can_place_unchecked(grid, row, col, value)


# ---------- Validation d'une grille ----------

def conflicting_cells(grid: Grid) -> Set[Pos]:
    """Toutes les cases non vides qui partagent leur valeur avec un voisin."""
    check_grid(grid)
    conflicts: Set[Pos] = set()
    for unit in UNITS:
        seen: Dict[int, Pos] = {}
        for (r, c) in unit:
            v = grid[r][c]
            if v == BLANK:
                continue
            if v in seen:
                conflicts.add((r, c))
                conflicts.add(seen[v])
            else:
                seen[v] = (r, c)
    return conflicts


def is_valid_board_state(grid: Grid) -> bool:
    """
    True si aucune ligne / colonne / bloc ne contient deux fois le même chiffre.
    Les cases vides sont ignorées : une grille vide est valide.
    """
    check_grid(grid)
    for unit in UNITS:
        vals = [grid[r][c] for (r, c) in unit if grid[r][c] != BLANK]
        if len(vals) != len(set(vals)):
            return False
    return True


def is_move_correct(grid: Grid, solution: Grid, row: int, col: int, value: int) -> bool:
    """Un coup est correct s'il reproduit la solution connue à cette case."""
    check_grid(grid)
    check_grid(solution, "solution")
    check_position(row, col)
    check_digit(value)
    return solution[row][col] == value


def is_complete_and_correct(grid: Grid, solution: Grid) -> bool:
    """
    Condition de victoire : aucune case vide ET identique case par case
    à la solution générée (pas de re-vérification des règles).
    """
    check_grid(grid)
    check_grid(solution, "solution")
    for r in range(SIZE):
        for c in range(SIZE):
            if grid[r][c] == BLANK or grid[r][c] != solution[r][c]:
                return False
    return True
