"""Core Sudoku model used by the solving engine: cells, the 81-cell board, unit views, grid-string parsing and candidate propagation."""

# solver_core.py
# Board model for the solving engine:
# - Cell: index, derived row/column/box, value, candidate set
# - Board: 81 cells, unit views, string snapshot/restore, validity queries
# - candidate propagation
# Rows, columns and boxes are 0-based internally. Cell keys ('r1c1') are 1-based
# so they line up with the candidate maps handed to the tool layer.

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from types_sudoku import Candidates, Grid, GridString

SIZE = 9
CELL_COUNT = SIZE * SIZE
DIGITS: frozenset[int] = frozenset(range(1, SIZE + 1))
GRID_CHARS = frozenset("0123456789")


class InvalidGrid(ValueError):
    """The puzzle is not 81 characters of digits 0-9."""


def rc_to_key(r: int, c: int) -> str:
    return f"r{r}c{c}"


def which_box(row: int, column: int) -> int:
    return (row // 3) * 3 + column // 3


def unit_cells_row(r: int) -> list[int]:
    return [r * SIZE + c for c in range(SIZE)]


def unit_cells_col(c: int) -> list[int]:
    return [r * SIZE + c for r in range(SIZE)]


def unit_cells_box(b: int) -> list[int]:
    r0 = 3 * (b // 3)
    c0 = 3 * (b % 3)
    return [(r0 + i) * SIZE + c0 + j for i in range(3) for j in range(3)]


# Static index tables, built once. Never mutated.
ROWS = tuple(tuple(unit_cells_row(i)) for i in range(SIZE))
COLUMNS = tuple(tuple(unit_cells_col(i)) for i in range(SIZE))
BOXES = tuple(tuple(unit_cells_box(i)) for i in range(SIZE))


def _peers_of(index: int) -> tuple[int, ...]:
    row, column = divmod(index, SIZE)
    ps = set(ROWS[row]) | set(COLUMNS[column]) | set(BOXES[which_box(row, column)])
    ps.discard(index)
    return tuple(sorted(ps))


PEERS = tuple(_peers_of(i) for i in range(CELL_COUNT))


def parse_grid(values: GridString) -> list[int]:
    """Validate an 81-character puzzle string and return its digits.

    Raises InvalidGrid for anything other than exactly 81 characters drawn
    from '0'..'9'. No whitespace or placeholder normalisation is done here.
    """
    if not isinstance(values, str):
        raise InvalidGrid(f"Expected a string of {CELL_COUNT} digits, got {type(values).__name__}")
    if len(values) != CELL_COUNT:
        raise InvalidGrid(f"Expected {CELL_COUNT} characters, got {len(values)}")
    for pos, ch in enumerate(values):
        if ch not in GRID_CHARS:
            raise InvalidGrid(f"Unexpected character {ch!r} at position {pos}")
    return [int(ch) for ch in values]


def grid_to_string(grid: Grid) -> GridString:
    if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
        raise InvalidGrid("Expected a 9x9 grid")
    out = []
    for row in grid:
        for v in row:
            if not isinstance(v, int) or not 0 <= v <= 9:
                raise InvalidGrid(f"Grid values must be integers 0..9, got {v!r}")
            out.append(str(v))
    return "".join(out)


@dataclass
class Cell:
    """One grid position. row/column/box are derived from index at construction."""

    index: int
    value: int = 0
    candidates: set[int] = field(default_factory=set)
    row: int = field(init=False)
    column: int = field(init=False)
    box: int = field(init=False)

    def __post_init__(self) -> None:
        if not 0 <= self.index < CELL_COUNT:
            raise InvalidGrid(f"Cell index out of range: {self.index}")
        self.row, self.column = divmod(self.index, SIZE)
        self.box = which_box(self.row, self.column)
        self.reset_candidates()

    @property
    def key(self) -> str:
        return rc_to_key(self.row + 1, self.column + 1)

    def reset_candidates(self) -> None:
        # Fixed cells have no open candidates; unknown cells start wide open
        # until the next propagation pass.
        self.candidates = set() if self.value else set(DIGITS)

    def assign(self, digit: int) -> None:
        self.value = digit
        self.candidates = set()


class Board:
    """The 81-cell grid. Mutated in place by the engine.

    The board can be captured as an immutable 81-character snapshot at any
    point and restored from it in place, which is what the search engine uses
    to undo a failed guess.
    """

    def __init__(self, values: GridString):
        digits = parse_grid(values)
        self.cells: list[Cell] = [Cell(i, d) for i, d in enumerate(digits)]
        self._rows = [[self.cells[i] for i in unit] for unit in ROWS]
        self._cols = [[self.cells[i] for i in unit] for unit in COLUMNS]
        self._boxes = [[self.cells[i] for i in unit] for unit in BOXES]

    @classmethod
    def from_grid(cls, grid: Grid) -> "Board":
        return cls(grid_to_string(grid))

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"

    def __str__(self) -> str:
        return self.to_string()

    # unit views
    def cells_in_row(self, i: int) -> list[Cell]:
        return self._rows[i]

    def cells_in_column(self, i: int) -> list[Cell]:
        return self._cols[i]

    def cells_in_box(self, i: int) -> list[Cell]:
        return self._boxes[i]

    def units(self):
        """Yield (label, cells) for rows, then columns, then boxes."""
        for i, cells in enumerate(self._rows):
            yield f"r{i + 1}", cells
        for i, cells in enumerate(self._cols):
            yield f"c{i + 1}", cells
        for i, cells in enumerate(self._boxes):
            yield f"b{i + 1}", cells

    def peers(self, cell: Cell) -> list[Cell]:
        return [self.cells[i] for i in PEERS[cell.index]]

    # serialization
    def to_string(self) -> GridString:
        return "".join(str(cell.value) for cell in self.cells)

    snapshot = to_string

    def restore(self, snapshot: GridString) -> None:
        """Reset every cell's value from a snapshot. Candidates go stale and
        must be recomputed before the next inference pass."""
        digits = parse_grid(snapshot)
        for cell, d in zip(self.cells, digits):
            cell.value = d
            cell.reset_candidates()

    def to_grid(self) -> Grid:
        return [[cell.value for cell in row] for row in self._rows]

    def to_array(self) -> np.ndarray:
        return np.array([cell.value for cell in self.cells], dtype=np.int8).reshape(SIZE, SIZE)

    # queries
    def unknown_cells(self) -> list[Cell]:
        return [cell for cell in self.cells if cell.value == 0]

    def is_complete(self) -> bool:
        return all(cell.value != 0 for cell in self.cells)

    def is_valid(self) -> bool:
        """True when no row, column or box repeats a digit (blanks ignored)."""
        for unit in unit_arrays(self.to_array()):
            filled = unit[unit != 0]
            if filled.size != np.unique(filled).size:
                return False
        return True

    def is_solved(self) -> bool:
        """Complete and every row, column and box holds 1..9 exactly once."""
        if not self.is_complete():
            return False
        units = np.sort(unit_arrays(self.to_array()), axis=1)
        return bool((units == np.arange(1, SIZE + 1)).all())

    def euler_answer(self) -> int:
        """Three-digit number in the top-left of the grid (Project Euler #96)."""
        a, b, c = (cell.value for cell in self.cells[:3])
        return a * 100 + b * 10 + c

    def render(self, blank: str = ".") -> str:
        lines = []
        for r, row in enumerate(self._rows):
            if r in (3, 6):
                lines.append("------+-------+------")
            chunks = [
                " ".join(str(cell.value) if cell.value else blank for cell in row[k : k + 3])
                for k in (0, 3, 6)
            ]
            lines.append(" | ".join(chunks))
        return "\n".join(lines)


def unit_arrays(arr: np.ndarray) -> np.ndarray:
    """Stack the 27 units of a 9x9 array: rows, then columns, then boxes."""
    boxes = arr.reshape(3, 3, 3, 3).swapaxes(1, 2).reshape(SIZE, SIZE)
    return np.concatenate([arr, arr.T, boxes])


def recompute_candidates(board: Board) -> None:
    """Refresh every cell's candidate set from the current values of its peers."""
    cells = board.cells
    for cell in cells:
        if cell.value:
            cell.candidates = set()
            continue
        used = {cells[p].value for p in PEERS[cell.index]}
        cell.candidates = set(DIGITS) - used


def candidate_map(board: Board) -> Candidates:
    """Candidates of every unknown cell, keyed like 'r1c3'. Assumes a fresh propagation pass."""
    return {cell.key: sorted(cell.candidates) for cell in board.unknown_cells()}


def compute_candidates(grid: Grid) -> Candidates:
    board = Board.from_grid(grid)
    recompute_candidates(board)
    return candidate_map(board)
