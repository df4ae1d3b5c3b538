"""Unit tests for puzzle generation."""

import logging
import random

import pytest

import sudoku_difficulty
from sudoku_core import (
    InternalInvariantViolation,
    InvalidArgument,
    copy_grid,
    count_blanks,
    is_valid_board_state,
)
from sudoku_difficulty import (
    PROFILES,
    DifficultyProfile,
    count_solutions,
    dig_puzzle,
    generate,
    generate_batch,
    generate_full_grid,
    has_unique_solution,
    resolve_profile,
)


def assert_full_and_valid(grid):
    target = list(range(1, 10))
    assert is_valid_board_state(grid)
    for r in range(9):
        assert sorted(grid[r]) == target
    for c in range(9):
        assert sorted(grid[r][c] for r in range(9)) == target
    for br in range(0, 9, 3):
        for bc in range(0, 9, 3):
            box = [grid[r][c] for r in range(br, br + 3) for c in range(bc, bc + 3)]
            assert sorted(box) == target


def assert_subset(puzzle, solution):
    for r in range(9):
        for c in range(9):
            assert puzzle[r][c] in (0, solution[r][c])


def find_swappable_rectangle(grid):
    """Two rows in different bands whose values swap between two columns of one stack."""
    for r1 in range(9):
        for r2 in range(r1 + 1, 9):
            if r1 // 3 == r2 // 3:
                continue
            for c1 in range(9):
                for c2 in range(c1 + 1, 9):
                    if c1 // 3 != c2 // 3:
                        continue
                    a, b = grid[r1][c1], grid[r1][c2]
                    if grid[r2][c1] == b and grid[r2][c2] == a:
                        return [(r1, c1), (r1, c2), (r2, c1), (r2, c2)]
    return None


class TestProfiles:
    def test_removal_targets(self):
        targets = {name: p.cells_to_remove for name, p in PROFILES.items()}
        assert targets == {"Beginner": 15, "Easy": 30, "Medium": 40, "Hard": 50, "Sandy": 60}

    def test_resolve_by_name(self):
        assert resolve_profile("Medium") is PROFILES["Medium"]
        assert resolve_profile(" sandy ") is PROFILES["Sandy"]

    def test_resolve_custom_profile(self):
        custom = DifficultyProfile("none", 0)
        assert resolve_profile(custom) is custom

    @pytest.mark.parametrize("value", ["Expert", "", None, 40, DifficultyProfile("bad", 82)])
    def test_unknown_difficulty_rejected(self, value):
        with pytest.raises(InvalidArgument):
            resolve_profile(value)


class TestFill:
    def test_full_grid_is_valid(self, rng):
        assert_full_and_valid(generate_full_grid(rng))

    def test_seed_is_reproducible(self):
        assert generate_full_grid(random.Random(3)) == generate_full_grid(random.Random(3))

    def test_seeds_give_different_grids(self):
        assert generate_full_grid(random.Random(1)) != generate_full_grid(random.Random(2))

    def test_step_cap(self, rng):
        with pytest.raises(InternalInvariantViolation):
            generate_full_grid(rng, max_steps=10)


class TestCountSolutions:
    def test_solved_grid(self, solved):
        assert count_solutions(solved) == 1

    def test_unique_puzzle(self, puzzle):
        assert count_solutions(puzzle) == 1
        assert has_unique_solution(puzzle)

    def test_empty_grid_stops_at_limit(self, empty):
        assert count_solutions(empty) == 2
        assert count_solutions(empty, limit=5) == 5

    def test_two_solutions(self, solved):
        cells = find_swappable_rectangle(solved)
        if cells is None:
            pytest.skip("no swappable rectangle in this grid")
        grid = copy_grid(solved)
        for (r, c) in cells:
            grid[r][c] = 0
        assert count_solutions(grid) == 2
        assert not has_unique_solution(grid)

    def test_contradiction_has_no_solution(self, puzzle):
        puzzle[0][2] = 5  # duplicate in row 0
        assert count_solutions(puzzle) == 0

    def test_input_not_modified(self, puzzle):
        before = copy_grid(puzzle)
        count_solutions(puzzle)
        assert puzzle == before

    def test_bad_limit(self, puzzle):
        with pytest.raises(InvalidArgument):
            count_solutions(puzzle, limit=0)


class TestDig:
    def test_zero_removal(self, solved, rng):
        puzzle, removed = dig_puzzle(solved, 0, rng)
        assert removed == 0
        assert puzzle == solved
        assert puzzle is not solved

    def test_removal_keeps_uniqueness(self, solved, rng):
        puzzle, removed = dig_puzzle(solved, 40, rng)
        assert removed == count_blanks(puzzle) == 40
        assert_subset(puzzle, solved)
        assert count_solutions(puzzle, limit=2) == 1

    def test_solution_not_modified(self, solved, rng):
        before = copy_grid(solved)
        dig_puzzle(solved, 30, rng)
        assert solved == before

    def test_rejects_incomplete_solution(self, puzzle, rng):
        with pytest.raises(InvalidArgument):
            dig_puzzle(puzzle, 10, rng)

    @pytest.mark.parametrize("n", [-1, 82, "10"])
    def test_rejects_bad_target(self, solved, rng, n):
        with pytest.raises(InvalidArgument):
            dig_puzzle(solved, n, rng)


class TestGenerate:
    @pytest.mark.parametrize("seed", range(30))
    def test_easy_scenario(self, seed):
        puzzle, solution = generate("Easy", random.Random(seed))
        assert_full_and_valid(solution)
        assert_subset(puzzle, solution)
        assert count_blanks(puzzle) == 30
        assert count_solutions(puzzle, limit=2) == 1

    @pytest.mark.parametrize("name", list(PROFILES))
    def test_every_profile(self, name):
        puzzle, solution = generate(name, random.Random(name))
        assert_full_and_valid(solution)
        assert_subset(puzzle, solution)
        target = PROFILES[name].cells_to_remove
        if name in ("Hard", "Sandy"):
            # ceiling only, digging often stops short
            assert 0 < count_blanks(puzzle) <= target
        else:
            assert count_blanks(puzzle) == target
        assert has_unique_solution(puzzle)

    def test_no_removal_profile(self, rng):
        puzzle, solution = generate(DifficultyProfile("none", 0), rng)
        assert count_blanks(puzzle) == 0
        assert puzzle == solution

    def test_seed_is_reproducible(self):
        assert generate("Medium", random.Random(7)) == generate("Medium", random.Random(7))

    def test_global_random_untouched(self, rng):
        random.seed(99)
        state = random.getstate()
        generate("Beginner", rng)
        assert random.getstate() == state

    def test_unknown_difficulty(self, rng):
        with pytest.raises(InvalidArgument):
            generate("Impossible", rng)

    def test_fill_retry_is_logged(self, monkeypatch, caplog, rng):
        real = sudoku_difficulty.generate_full_grid
        calls = []

        def flaky(r):
            calls.append(r)
            if len(calls) == 1:
                raise InternalInvariantViolation("boom")
            return real(r)

        monkeypatch.setattr(sudoku_difficulty, "generate_full_grid", flaky)
        with caplog.at_level(logging.WARNING, logger="sudoku_difficulty"):
            puzzle, solution = generate("Beginner", rng)
        assert len(calls) == 2
        assert_full_and_valid(solution)
        assert "boom" in caplog.text

    def test_fill_gives_up(self, monkeypatch, rng):
        def broken(r):
            raise InternalInvariantViolation("boom")

        monkeypatch.setattr(sudoku_difficulty, "generate_full_grid", broken)
        with pytest.raises(InternalInvariantViolation):
            generate("Easy", rng)


class TestBatch:
    def test_distinct_puzzles(self, rng):
        puzzles = generate_batch("Beginner", 3, rng)
        assert len(puzzles) == 3
        assert len({str(p) for (p, _s) in puzzles}) == 3

    def test_bad_count(self, rng):
        with pytest.raises(InvalidArgument):
            generate_batch("Easy", 0, rng)

    def test_duplicates_exhaust_tries(self, monkeypatch, solved, rng):
        monkeypatch.setattr(sudoku_difficulty, "generate", lambda d, r: (copy_grid(solved), solved))
        with pytest.raises(InternalInvariantViolation):
            generate_batch("Easy", 2, rng, max_tries=5)
