# sudoku_difficulty.py
"""
Génération de puzzles Sudoku à solution unique :
- profils de difficulté (nombre de cases à vider)
- remplissage aléatoire d'une grille complète (backtracking, pile explicite)
- comptage borné des solutions (bitsets)
- creusage (suppression de cases en préservant l'unicité)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Dict, Optional, Union
import logging
import random

from sudoku_core import (
    Grid,
    Pos,
    SIZE,
    BLANK,
    DIGITS,
    InvalidArgument,
    InternalInvariantViolation,
    check_grid,
    copy_grid,
    count_blanks,
    empty_grid,
    is_valid_board_state,
    can_place_unchecked,
)

log = logging.getLogger(__name__)

N_CELLS = SIZE * SIZE

# plafond de solutions recherchées : on distingue seulement "1" de "plus d'une"
SOLUTION_LIMIT = 2

# garde-fou du remplissage (jamais atteint en pratique sur une grille vide)
FILL_MAX_STEPS = 200_000
FILL_MAX_ATTEMPTS = 3


# ====================================================
#   PROFILS
# ====================================================

@dataclass(frozen=True)
class DifficultyProfile:
    name: str
    cells_to_remove: int  # plafond, pas une garantie
    label: str = ""


BEGINNER_PROFILE = DifficultyProfile("Beginner", 15, "débutant")
EASY_PROFILE = DifficultyProfile("Easy", 30, "facile")
MEDIUM_PROFILE = DifficultyProfile("Medium", 40, "moyen")
HARD_PROFILE = DifficultyProfile("Hard", 50, "difficile")
SANDY_PROFILE = DifficultyProfile("Sandy", 60, "extrême")

PROFILES: Dict[str, DifficultyProfile] = {
    BEGINNER_PROFILE.name: BEGINNER_PROFILE,
    EASY_PROFILE.name: EASY_PROFILE,
    MEDIUM_PROFILE.name: MEDIUM_PROFILE,
    HARD_PROFILE.name: HARD_PROFILE,
    SANDY_PROFILE.name: SANDY_PROFILE,
}

_PROFILES_BY_KEY = {name.lower(): p for name, p in PROFILES.items()}

Difficulty = Union[str, DifficultyProfile]


def resolve_profile(difficulty: Difficulty) -> DifficultyProfile:
    """
    Nom de profil (insensible à la casse) ou DifficultyProfile -> profil.
    Aucune valeur par défaut : une difficulté inconnue lève InvalidArgument.
    """
    if isinstance(difficulty, DifficultyProfile):
        n = difficulty.cells_to_remove
        if not isinstance(n, int) or isinstance(n, bool) or not 0 <= n <= N_CELLS:
            raise InvalidArgument(f"cells_to_remove invalide pour {difficulty.name} : {n!r}")
        return difficulty
    if isinstance(difficulty, str):
        profile = _PROFILES_BY_KEY.get(difficulty.strip().lower())
        if profile is not None:
            return profile
    raise InvalidArgument(
        f"Difficulté inconnue : {difficulty!r} (attendu : {', '.join(PROFILES)})"
    )


# ====================================================
#   SOLVEUR / UNICITÉ — BITSETS
# ====================================================

FULL_MASK = (1 << SIZE) - 1  # 9 bits


def _box_idx(r: int, c: int) -> int:
    return (r // 3) * 3 + (c // 3)


def _init_masks_bitset(grid: Grid):
    """
    Masques des chiffres utilisés par ligne / colonne / bloc.
    Retourne None si la grille contient déjà un doublon.
    """
    row_used = [0] * SIZE
    col_used = [0] * SIZE
    box_used = [0] * SIZE
    empties: List[Pos] = []
    for r in range(SIZE):
        for c in range(SIZE):
            v = grid[r][c]
            if v:
                b = 1 << (v - 1)
                bidx = _box_idx(r, c)
                if (row_used[r] | col_used[c] | box_used[bidx]) & b:
                    return None
                row_used[r] |= b
                col_used[c] |= b
                box_used[bidx] |= b
            else:
                empties.append((r, c))
    return row_used, col_used, box_used, empties


def _count_solutions_bitset(grid: Grid, limit: int) -> int:
    masks = _init_masks_bitset(grid)
    if masks is None:
        return 0
    row_used, col_used, box_used, empties = masks
    sols = 0

    def dfs(k: int) -> None:
        nonlocal sols
        if k == len(empties):
            sols += 1
            return

        # MRV : la case vide la plus contrainte passe en position k
        best, best_mask, best_n = k, 0, SIZE + 1
        for i in range(k, len(empties)):
            r, c = empties[i]
            m = FULL_MASK ^ (row_used[r] | col_used[c] | box_used[_box_idx(r, c)])
            n = m.bit_count()
            if n < best_n:
                best, best_mask, best_n = i, m, n
                if n <= 1:
                    break
        if best_n == 0:
            return

        empties[k], empties[best] = empties[best], empties[k]
        r, c = empties[k]
        bidx = _box_idx(r, c)
        x = best_mask
        while x:
            lsb = x & -x
            x ^= lsb
            row_used[r] |= lsb
            col_used[c] |= lsb
            box_used[bidx] |= lsb
            dfs(k + 1)
            row_used[r] ^= lsb
            col_used[c] ^= lsb
            box_used[bidx] ^= lsb
            if sols >= limit:
                break
        empties[k], empties[best] = empties[best], empties[k]

    dfs(0)
    return sols


def count_solutions(grid: Grid, limit: int = SOLUTION_LIMIT) -> int:
    """
    Compte les solutions de la grille, en s'arrêtant dès que `limit` est atteint.
    Une grille qui contient déjà un doublon a 0 solution.
    La grille passée n'est jamais modifiée.
    """
    check_grid(grid)
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise InvalidArgument(f"limit doit être un entier >= 1 : {limit!r}")
    return _count_solutions_bitset(copy_grid(grid), limit)


def has_unique_solution(grid: Grid) -> bool:
    return count_solutions(grid, limit=SOLUTION_LIMIT) == 1


# ====================================================
#   GÉNÉRATION D'UNE GRILLE COMPLÈTE
# ====================================================

def _shuffled_digits(rng: random.Random) -> List[int]:
    vals = list(DIGITS)
    rng.shuffle(vals)
    return vals


def generate_full_grid(
    rng: Optional[random.Random] = None,
    max_steps: int = FILL_MAX_STEPS,
) -> Grid:
    """
    Génère une grille complète valide (9x9).

    Cases visitées dans l'ordre ligne par ligne ; pour chaque case on essaie
    les chiffres 1..9 dans un ordre mélangé, en sautant ceux refusés par la
    règle de placement. Pile explicite de (index de case, candidats restants),
    retour arrière en remettant la case à 0.
    """
    if rng is None:
        rng = random.Random()
    grid = empty_grid()
    stack: List[Tuple[int, List[int]]] = [(0, _shuffled_digits(rng))]
    steps = 0

    while stack:
        steps += 1
        if steps > max_steps:
            raise InternalInvariantViolation(
                f"Remplissage interrompu après {max_steps} étapes"
            )

        k, cands = stack[-1]
        r, c = divmod(k, SIZE)
        grid[r][c] = BLANK

        placed = False
        while cands:
            v = cands.pop(0)
            if can_place_unchecked(grid, r, c, v):
                grid[r][c] = v
                placed = True
                break

        if not placed:
            stack.pop()  # impasse : retour à la case précédente
            continue

        if k == N_CELLS - 1:
            log.debug("Grille complète en %d étapes", steps)
            return grid

        stack.append((k + 1, _shuffled_digits(rng)))

    raise InternalInvariantViolation("Backtracking épuisé sans grille complète")


def _generate_full_grid_with_retries(rng: random.Random) -> Grid:
    last_err: Optional[InternalInvariantViolation] = None
    for attempt in range(1, FILL_MAX_ATTEMPTS + 1):
        try:
            return generate_full_grid(rng)
        except InternalInvariantViolation as e:
            last_err = e
            log.warning("Échec du remplissage (essai %d/%d) : %s", attempt, FILL_MAX_ATTEMPTS, e)
            # nouvelle graine, dérivée pour rester reproductible
            rng = random.Random(rng.getrandbits(64))
    raise InternalInvariantViolation(
        f"Aucune grille complète après {FILL_MAX_ATTEMPTS} essais : {last_err}"
    )


# ====================================================
#   CREUSAGE
# ====================================================

def dig_puzzle(
    solution: Grid,
    cells_to_remove: int,
    rng: Optional[random.Random] = None,
) -> Tuple[Grid, int]:
    """
    Vide au plus `cells_to_remove` cases de `solution` en gardant une solution unique.
    Chaque case est testée une seule fois, dans un ordre mélangé.
    Retourne (puzzle, nombre de cases vidées).
    """
    check_grid(solution, "solution")
    if count_blanks(solution) or not is_valid_board_state(solution):
        raise InvalidArgument("solution doit être une grille complète et valide")
    if (
        not isinstance(cells_to_remove, int)
        or isinstance(cells_to_remove, bool)
        or not 0 <= cells_to_remove <= N_CELLS
    ):
        raise InvalidArgument(f"cells_to_remove hors bornes : {cells_to_remove!r}")
    if rng is None:
        rng = random.Random()

    puzzle = copy_grid(solution)
    cells = [(r, c) for r in range(SIZE) for c in range(SIZE)]
    rng.shuffle(cells)

    removed = 0
    while removed < cells_to_remove and cells:
        r, c = cells.pop()
        keep = puzzle[r][c]
        puzzle[r][c] = BLANK
        if _count_solutions_bitset(copy_grid(puzzle), SOLUTION_LIMIT) == 1:
            removed += 1
        else:
            puzzle[r][c] = keep

    log.debug("Creusage : %d/%d cases vidées", removed, cells_to_remove)
    return puzzle, removed


# ====================================================
#   API PUBLIQUE
# ====================================================

def generate(
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Tuple[Grid, Grid]:
    """
    Génère (puzzle initial, solution) pour une difficulté.
    Le puzzle peut avoir moins de cases vides que demandé si l'unicité l'impose.
    """
    profile = resolve_profile(difficulty)
    if rng is None:
        rng = random.Random()

    solution = _generate_full_grid_with_retries(rng)
    puzzle, removed = dig_puzzle(solution, profile.cells_to_remove, rng)
    if removed < profile.cells_to_remove:
        log.info(
            "[%s] %d cases vidées sur %d demandées (unicité)",
            profile.name, removed, profile.cells_to_remove,
        )
    return puzzle, solution


def generate_batch(
    difficulty: Difficulty,
    count: int,
    rng: Optional[random.Random] = None,
    max_tries: Optional[int] = None,
) -> List[Tuple[Grid, Grid]]:
    """
    Génère `count` puzzles distincts pour une difficulté
    (les doublons dans la série courante sont écartés).
    """
    profile = resolve_profile(difficulty)
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise InvalidArgument(f"count doit être un entier >= 1 : {count!r}")
    if rng is None:
        rng = random.Random()
    if max_tries is None:
        max_tries = count * 100

    puzzles: List[Tuple[Grid, Grid]] = []
    seen = set()
    tries = 0

    while len(puzzles) < count and tries < max_tries:
        if tries and tries % 50 == 0:
            log.info("[%s] tries=%d, ok=%d/%d", profile.name, tries, len(puzzles), count)
        tries += 1

        puzzle, solution = generate(profile, rng)
        sig = tuple(tuple(row) for row in puzzle)
        if sig in seen:
            log.warning("[%s] puzzle en double ignoré", profile.name)
            continue

        seen.add(sig)
        puzzles.append((puzzle, solution))

    if len(puzzles) < count:
        raise InternalInvariantViolation(
            f"Seulement {len(puzzles)} puzzles générés pour le profil {profile.name}"
        )
    return puzzles
