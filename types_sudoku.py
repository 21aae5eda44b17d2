# types_sudoku.py
from __future__ import annotations

from typing import Any, TypedDict

Grid = list[list[int]]
"""A 9x9 Sudoku grid as rows of integers (0 = empty)."""

GridString = str
"""An 81-character row-major digit string ('0' = empty)."""

Candidates = dict[str, list[int]]
"""Map from cell key (e.g., 'r1c1') to a list of candidate digits (1..9)."""


class Move(TypedDict, total=False):
    """A single placement made by the engine, recorded in the solve trace."""

    index: int  # 1-based order in the trace
    technique: str  # 'naked_single', 'hidden_single' or 'guess'
    type: str  # always 'placement'
    digit: int  # the digit being placed
    cell: str  # target cell (e.g., 'r4c7')
    unit: str  # hidden singles only: the unit that forced it ('r3', 'c5', 'b9')
    depth: int  # guess nesting depth at the time of the placement


class Issue(TypedDict, total=False):
    """A problem reported by the sanity check or the pre-solve check on givens."""

    type: str  # 'duplicate', 'given_overwritten' or 'no_candidates'
    unit: str
    digits: list[int]
    cells: list[str]
    cell: str
    given: int
    found: int


class SolvePayload(TypedDict, total=False):
    """JSON-friendly view of a solve result, used by the CLI and the API."""

    puzzle: str
    grid: str
    solved: bool
    status: str
    stats: dict[str, Any]
    moves: list[Move]
    issues: list[Issue]
    elapsed: float
