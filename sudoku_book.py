# sudoku_book.py
"""
Export PDF imprimable (puzzles + solutions) de puzzles générés.

- build_book_pdf(...) : rend une liste (puzzle, solution) déjà générée.
- build_book_for_difficulty(...) : génère un lot pour une difficulté puis le rend.
"""

from __future__ import annotations
from typing import List, Tuple, Optional
import logging
import random

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from sudoku_core import Grid, SIZE, InvalidArgument, check_grid
from sudoku_codec import hash_grid_sha256, batch_hash
from sudoku_difficulty import Difficulty, resolve_profile, generate_batch

log = logging.getLogger(__name__)

TRIM_W_DEFAULT = 6.0
TRIM_H_DEFAULT = 9.0

DEFAULT_GIVEN_COLOR = "black"
DEFAULT_ADDED_COLOR = "red"

BLOCK_SHADE_COLOR = "#e9e9e9"
BLOCK_SHADE_ALPHA = 1.0

PAGE_DPI = 150


def chunk(lst, n):
    for i in range(0, len(lst), n):
        yield lst[i : i + n]


# ---------- Dessin d'une grille ----------

def _draw_frame(ax, left: float, bottom: float, size: float, outer_lw: float, block_lw: float, cell_lw: float):
    cell = size / SIZE
    block = size / 3.0

    # fond alterné par bloc 3x3
    for br in range(3):
        for bc in range(3):
            if (br + bc) % 2 == 0:
                ax.add_patch(
                    plt.Rectangle(
                        (left + bc * block, bottom + br * block),
                        block,
                        block,
                        facecolor=BLOCK_SHADE_COLOR,
                        edgecolor="none",
                        alpha=BLOCK_SHADE_ALPHA,
                        zorder=0,
                    )
                )

    ax.add_patch(
        plt.Rectangle((left, bottom), size, size, fill=False, linewidth=outer_lw, color="k", zorder=3)
    )

    for i in range(1, SIZE):
        lw = block_lw if i % 3 == 0 else cell_lw
        ax.plot([left + i * cell, left + i * cell], [bottom, bottom + size], linewidth=lw, color="k", zorder=2)
        ax.plot([left, left + size], [bottom + i * cell, bottom + i * cell], linewidth=lw, color="k", zorder=2)


def draw_sudoku_at(
    ax,
    grid: Grid,
    left: float,
    bottom: float,
    size: float,
    puzzle_grid: Grid | None = None,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
    thin: bool = False,
):
    """
    Dessine `grid` dans le rectangle (left, bottom, size).
    Si `puzzle_grid` est fourni, les chiffres absents du puzzle sont
    dessinés en `added_color` (page de solutions).
    """
    if thin:
        _draw_frame(ax, left, bottom, size, 1.25, 0.6, 0.25)
    else:
        _draw_frame(ax, left, bottom, size, 3, 2, 0.8)

    cell = size / SIZE
    font_pts = cell * 0.5 * 72

    for r in range(SIZE):
        for c in range(SIZE):
            v = grid[r][c]
            if not v:
                continue
            added = puzzle_grid is not None and puzzle_grid[r][c] == 0
            ax.text(
                left + c * cell + cell / 2,
                bottom + (SIZE - 1 - r) * cell + cell * 0.47,
                str(v),
                ha="center",
                va="center",
                fontsize=font_pts,
                fontweight="bold" if added else "normal",
                color=added_color if added else given_color,
                zorder=4,
            )


# ---------- Pages ----------

def _new_page(trim_w: float, trim_h: float):
    fig = plt.figure(figsize=(trim_w, trim_h))
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, trim_w)
    ax.set_ylim(0, trim_h)
    ax.axis("off")
    return fig, ax


def _layout(trim_w, trim_h, rows, cols, margin_x, margin_y):
    cell_w = (trim_w - 2 * margin_x) / cols
    cell_h = (trim_h - 2 * margin_y) / rows
    size = min(cell_w, cell_h) * 0.90
    for idx in range(rows * cols):
        r, c = divmod(idx, cols)
        left = margin_x + c * cell_w + (cell_w - size) / 2
        bottom = margin_y + (rows - 1 - r) * cell_h + (cell_h - size) / 2
        yield left, bottom, size


def _page_header_footer(ax, trim_w, trim_h, title, page_num):
    ax.text(trim_w / 2, trim_h - 0.3, title, ha="center", va="top", fontsize=12, fontweight="bold")
    ax.text(trim_w - 0.2, 0.2, str(page_num), ha="right", va="bottom", fontsize=10)


def draw_puzzles_page_figure(
    puzzles: List[Grid],
    trim_w: float,
    trim_h: float,
    rows: int,
    cols: int,
    page_num: int,
    title: str,
    puzzle_labels: Optional[List[str]] = None,
    start_idx: int = 1,  # numéro (1-based) du premier puzzle de la page
):
    fig, ax = _new_page(trim_w, trim_h)
    slots = _layout(trim_w, trim_h, rows, cols, 0.5, 0.8)

    for idx, (grid, (left, bottom, size)) in enumerate(zip(puzzles[: rows * cols], slots)):
        draw_sudoku_at(ax, grid, left, bottom, size)

        label = ""
        if puzzle_labels is not None and idx < len(puzzle_labels) and puzzle_labels[idx]:
            label = f" - {puzzle_labels[idx].strip()}"
        ax.text(left + size / 2, bottom - 0.1, f"{start_idx + idx}{label}", ha="center", va="top", fontsize=8)

    _page_header_footer(ax, trim_w, trim_h, title, page_num)
    return fig


def draw_solutions_page_figure(
    puzzles_and_solutions: List[Tuple[Grid, Grid]],
    trim_w: float,
    trim_h: float,
    rows: int,
    cols: int,
    page_num: int,
    start_idx: int,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
):
    fig, ax = _new_page(trim_w, trim_h)
    slots = _layout(trim_w, trim_h, rows, cols, 0.6, 0.95)

    items = puzzles_and_solutions[: rows * cols]
    for idx, ((puz, sol), (left, bottom, size)) in enumerate(zip(items, slots)):
        draw_sudoku_at(
            ax, sol, left, bottom, size,
            puzzle_grid=puz, given_color=given_color, added_color=added_color, thin=True,
        )
        ax.text(left + size / 2, bottom - 0.1, f"{start_idx + idx}", ha="center", va="top", fontsize=8)

    last = start_idx + len(items) - 1
    title = f"Solutions {start_idx}" if start_idx == last else f"Solutions {start_idx}-{last}"
    _page_header_footer(ax, trim_w, trim_h, title, page_num)
    return fig


# ---------- Rendu d'un livre ----------

def build_book_pdf(
    puzzles: List[Tuple[Grid, Grid]],
    output_path: str,
    title: str = "Sudoku",
    puzzle_labels: Optional[List[str]] = None,
    trim_w: float = TRIM_W_DEFAULT,
    trim_h: float = TRIM_H_DEFAULT,
    puzzle_rows: int = 1,
    puzzle_cols: int = 1,
    solution_rows: int = 3,
    solution_cols: int = 3,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
) -> Tuple[List[str], str]:
    """
    Dessine les pages puzzles puis les pages solutions dans un PDF.
    Retourne (hash de chaque puzzle, hash du lot).
    """
    if not puzzles:
        raise InvalidArgument("aucun puzzle à rendre")
    for puz, sol in puzzles:
        check_grid(puz, "puzzle")
        check_grid(sol, "solution")
    if trim_w <= 0 or trim_h <= 0:
        raise InvalidArgument("trim_w et trim_h doivent être > 0")
    if min(puzzle_rows, puzzle_cols, solution_rows, solution_cols) <= 0:
        raise InvalidArgument("lignes/colonnes de mise en page doivent être > 0")

    puzzles_per_page = puzzle_rows * puzzle_cols
    solutions_per_page = solution_rows * solution_cols
    page_no = 1

    with PdfPages(output_path) as pdf:
        label_pages = list(chunk(puzzle_labels, puzzles_per_page)) if puzzle_labels else []
        for page_i, page_puzzles in enumerate(chunk(puzzles, puzzles_per_page)):
            fig = draw_puzzles_page_figure(
                [p for (p, _s) in page_puzzles],
                trim_w=trim_w,
                trim_h=trim_h,
                rows=puzzle_rows,
                cols=puzzle_cols,
                page_num=page_no,
                title=title,
                puzzle_labels=label_pages[page_i] if page_i < len(label_pages) else None,
                start_idx=page_i * puzzles_per_page + 1,
            )
            pdf.savefig(fig, dpi=PAGE_DPI)
            plt.close(fig)
            page_no += 1

        for sol_i, puz_sols in enumerate(chunk(puzzles, solutions_per_page)):
            fig = draw_solutions_page_figure(
                puz_sols,
                trim_w=trim_w,
                trim_h=trim_h,
                rows=solution_rows,
                cols=solution_cols,
                page_num=page_no,
                start_idx=sol_i * solutions_per_page + 1,
                given_color=given_color,
                added_color=added_color,
            )
            pdf.savefig(fig, dpi=PAGE_DPI)
            plt.close(fig)
            page_no += 1

    log.info("PDF %s : %d puzzle(s), %d page(s)", output_path, len(puzzles), page_no - 1)
    per_puzzle_hashes = [hash_grid_sha256(p) for (p, _s) in puzzles]
    return per_puzzle_hashes, batch_hash(puzzles)


def build_book_for_difficulty(
    difficulty: Difficulty,
    n_puzzles: int,
    output_path: str,
    rng: Optional[random.Random] = None,
    title: str = "Sudoku",
    **layout,
) -> Tuple[List[Tuple[Grid, Grid]], List[str], str]:
    """
    Génère `n_puzzles` puzzles distincts pour une difficulté et les rend en PDF.
    Retourne (puzzles, hash de chaque puzzle, hash du lot).
    """
    profile = resolve_profile(difficulty)
    puzzles = generate_batch(profile, n_puzzles, rng=rng)
    label = profile.label or profile.name
    per_puzzle_hashes, book_hash = build_book_pdf(
        puzzles,
        output_path,
        title=f"{title} - Niveau {label}",
        puzzle_labels=[label] * len(puzzles),
        **layout,
    )
    return puzzles, per_puzzle_hashes, book_hash
