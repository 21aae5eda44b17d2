"""Solving engine: naked and hidden singles, minimum-remaining-values guessing with snapshot/restore, the fixpoint loop that ties them together, and the tool-friendly wrappers used by the CLI and the API."""

# sudoku_tools.py
# Solve loop, in order, until the board is complete:
#   1) naked single  (first cell in index order with one candidate)
#   2) hidden single (rows, then columns, then boxes; digits ascending)
#   3) guess         (fewest candidates first, recurse, restore on failure)
# Candidates are recomputed at the top of every pass; neither rule derives them.

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Optional

from types_sudoku import Grid, GridString, Issue, Move, SolvePayload

from .solver_core import (
    DIGITS,
    Board,
    Cell,
    compute_candidates,
    recompute_candidates,
)

log = logging.getLogger(__name__)


@dataclass
class SolveStats:
    naked_singles: int = 0
    hidden_singles: int = 0
    guesses: int = 0
    backtracks: int = 0
    max_depth: int = 0


@dataclass
class SolveState:
    """Bookkeeping shared by one solve: counters, optional trace, guess depth.

    `moves` is None when tracing is off.
    """

    stats: SolveStats = field(default_factory=SolveStats)
    moves: Optional[list[Move]] = None
    depth: int = 0

    def placed(self, technique: str, cell: Cell, digit: int, unit: str | None = None) -> None:
        if technique == "naked_single":
            self.stats.naked_singles += 1
        elif technique == "hidden_single":
            self.stats.hidden_singles += 1
        if self.moves is None:
            return
        move: Move = {
            "index": len(self.moves) + 1,
            "technique": technique,
            "type": "placement",
            "cell": cell.key,
            "digit": digit,
            "depth": self.depth,
        }
        if unit is not None:
            move["unit"] = unit
        self.moves.append(move)

    def mark(self) -> int:
        return len(self.moves) if self.moves is not None else 0

    def rewind(self, mark: int) -> None:
        if self.moves is not None:
            del self.moves[mark:]


def solve_next_cell(board: Board, state: SolveState | None = None) -> bool:
    """Naked single: fix the first unknown cell (index order) with exactly one candidate."""
    for cell in board.cells:
        if cell.value == 0 and len(cell.candidates) == 1:
            (digit,) = cell.candidates
            cell.assign(digit)
            if state is not None:
                state.placed("naked_single", cell, digit)
            return True
    return False


def solve_next_unit(board: Board, state: SolveState | None = None) -> bool:
    """Hidden single: a missing digit with exactly one possible cell in a unit.

    Units are scanned rows first, then columns, then boxes; digits ascending.
    The first hit is placed and the scan stops.
    """
    for label, cells in board.units():
        missing = sorted(DIGITS - {cell.value for cell in cells})
        for digit in missing:
            spots = [cell for cell in cells if cell.value == 0 and digit in cell.candidates]
            if len(spots) == 1:
                spots[0].assign(digit)
                if state is not None:
                    state.placed("hidden_single", spots[0], digit, unit=label)
                return True
    return False


def select_guess_cell(board: Board) -> Cell | None:
    """Unknown cell with the fewest (but at least one) candidates; ties go to the lowest index.

    None means no unknown cell has a candidate left: the current assignment is a dead end.
    """
    best = None
    for cell in board.cells:
        if cell.value != 0 or not cell.candidates:
            continue
        if best is None or len(cell.candidates) < len(best.candidates):
            best = cell
    return best


def guess(board: Board, state: SolveState | None = None) -> bool:
    """Try each candidate of the selected cell and recurse into the solve loop.

    On success the board holds the solution. On failure the board is back at
    the state it had on entry.
    """
    if state is None:
        state = SolveState()
    cell = select_guess_cell(board)
    if cell is None:
        log.debug("dead end at depth %d: no open candidates", state.depth)
        return False

    snapshot = board.snapshot()
    mark = state.mark()
    options = sorted(cell.candidates)

    state.depth += 1
    state.stats.max_depth = max(state.stats.max_depth, state.depth)
    try:
        for digit in options:
            log.debug("guess %s=%d of %s at depth %d", cell.key, digit, options, state.depth)
            state.stats.guesses += 1
            cell.assign(digit)
            state.placed("guess", cell, digit)
            if solve_all(board, state):
                return True
            board.restore(snapshot)
            state.rewind(mark)
            state.stats.backtracks += 1
        return False
    finally:
        state.depth -= 1


def solve_all(board: Board, state: SolveState | None = None) -> bool:
    """Run singles to a fixpoint, guessing when they stall. Returns whether the board ends solved.

    A failed guess ends the loop with the board as the search left it; that is
    the give-up exit, not an error.
    """
    if state is None:
        state = SolveState()
    while not board.is_complete():
        recompute_candidates(board)
        if solve_next_cell(board, state):
            continue
        if solve_next_unit(board, state):
            continue
        if not guess(board, state):
            break
    # complete is not enough: a filled grid that breaks a unit counts as unsolved
    return board.is_solved()


def find_duplicates(board: Board) -> list[Issue]:
    issues: list[Issue] = []
    for label, cells in board.units():
        seen = set()
        dups = set()
        for cell in cells:
            if cell.value == 0:
                continue
            if cell.value in seen:
                dups.add(cell.value)
            seen.add(cell.value)
        if dups:
            issues.append(
                {
                    "type": "duplicate",
                    "unit": label,
                    "digits": sorted(dups),
                    "cells": [cell.key for cell in cells if cell.value in dups],
                }
            )
    return issues


def find_stuck_cells(board: Board) -> list[Issue]:
    """Unknown cells whose peers already hold every digit. Refreshes candidates."""
    recompute_candidates(board)
    return [{"type": "no_candidates", "cell": cell.key} for cell in board.unknown_cells() if not cell.candidates]


def sanity_check(original: Grid, current: Grid) -> dict:
    """Duplicates in any unit of `current`, and givens of `original` that `current` overwrote."""
    before = Board.from_grid(original)
    after = Board.from_grid(current)
    issues: list[Issue] = []
    for given, found in zip(before.cells, after.cells):
        if given.value != 0 and found.value not in (0, given.value):
            issues.append(
                {"type": "given_overwritten", "cell": found.key, "given": given.value, "found": found.value}
            )
    issues.extend(find_duplicates(after))
    return {"ok": len(issues) == 0, "issues": issues}


@dataclass
class SolveResult:
    puzzle: GridString
    grid: GridString
    solved: bool
    stats: SolveStats
    moves: list[Move] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def status(self) -> str:
        return "solved" if self.solved else "unsolvable"

    def board(self) -> Board:
        return Board(self.grid)

    def to_payload(self) -> SolvePayload:
        return {
            "puzzle": self.puzzle,
            "grid": self.grid,
            "solved": self.solved,
            "status": self.status,
            "stats": asdict(self.stats),
            "moves": list(self.moves),
            "issues": list(self.issues),
            "elapsed": round(self.elapsed, 6),
        }


def solve(puzzle: GridString, trace: bool = False) -> SolveResult:
    """Solve an 81-character puzzle string.

    Raises InvalidGrid before any solving if the string is malformed. Givens
    that already repeat a digit in some unit, or that leave an empty cell with
    no legal digit, are reported as unsolvable without searching; the issues
    are attached to the result.
    """
    t0 = time.perf_counter()
    board = Board(puzzle)
    state = SolveState(moves=[] if trace else None)

    issues = find_duplicates(board) or find_stuck_cells(board)
    if issues:
        log.info(
            "givens conflict in %s; not solving",
            ", ".join(i.get("unit") or i.get("cell", "?") for i in issues),
        )
        solved = False
    else:
        solved = solve_all(board, state)

    elapsed = time.perf_counter() - t0
    s = state.stats
    log.info(
        "%s in %.4fs (naked=%d hidden=%d guesses=%d backtracks=%d depth=%d)",
        "solved" if solved else "unsolvable",
        elapsed,
        s.naked_singles,
        s.hidden_singles,
        s.guesses,
        s.backtracks,
        s.max_depth,
    )
    return SolveResult(
        puzzle=puzzle,
        grid=board.to_string(),
        solved=solved,
        stats=s,
        moves=state.moves or [],
        issues=issues,
        elapsed=elapsed,
    )


def compute_candidates_tool(current: Grid) -> dict:
    """Compute candidate digits for each empty cell in the current grid. Returns a dict like {'candidates': {'r1c2': [1, 2, 5], ...}}."""
    return {"candidates": compute_candidates(current)}


def solve_tool(puzzle: GridString, trace: bool = False) -> SolvePayload:
    return solve(puzzle, trace=trace).to_payload()
