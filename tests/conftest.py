# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "apps", "solver" and "types_sudoku" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Project Euler #96, grid 01. Solvable by singles alone.
CLASSIC = "003020600900305001001806400008102900700000008006708200002609500800203009005010300"
CLASSIC_SOLUTION = (
    "483921657"
    "967345821"
    "251876493"
    "548132976"
    "729564138"
    "136798245"
    "372689514"
    "814253769"
    "695417382"
)

# Arto Inkala's puzzle. Singles stall early, so it needs the search.
HARD = "800000000003600000070090200050007000000045700000100030001000068008500010090000400"
HARD_SOLUTION = (
    "812753649"
    "943682175"
    "675491283"
    "154237896"
    "369845721"
    "287169534"
    "521974368"
    "438526917"
    "796318452"
)


@pytest.fixture
def classic():
    return CLASSIC


@pytest.fixture
def classic_solution():
    return CLASSIC_SOLUTION


@pytest.fixture
def hard():
    return HARD


@pytest.fixture
def hard_solution():
    return HARD_SOLUTION
