"""Batch driver for the solving engine: reads puzzle strings one per line, solves each, prints the grid (solved or best effort) and the total execution time."""

# batch_cli.py
# Usage:
#   python -m apps.cli.batch_cli input.txt
#   python -m apps.cli.batch_cli --config configs/batch.yaml --progress
#   python -m apps.cli.batch_cli input.txt --format json --trace > report.jsonl
#
# Exit codes: 0 all solved, 1 some puzzle unsolved or invalid, 2 bad input file/config.

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, TextIO

from tqdm import tqdm

from solver.solver_core import InvalidGrid
from solver.sudoku_tools import SolveResult, solve

from .config import load_config

log = logging.getLogger(__name__)

FORMATS = ("grid", "line", "json")


def read_puzzles(path: str | Path) -> List[str]:
    """Non-empty lines of the file, minus '#' comments, with line endings stripped."""
    puzzles = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            puzzles.append(line)
    return puzzles


def format_result(result: SolveResult, fmt: str, trace: bool = False) -> str:
    if fmt == "json":
        payload = result.to_payload()
        if not trace:
            payload.pop("moves", None)
        return json.dumps(payload)
    if fmt == "line":
        return f"{result.grid} {result.status}"
    text = result.board().render()
    if not result.solved:
        text = "Couldn't solve this grid.\n" + text
    return text + "\n"


def format_invalid(puzzle: str, err: InvalidGrid, fmt: str) -> str:
    if fmt == "json":
        return json.dumps({"puzzle": puzzle, "status": "invalid", "error": str(err)})
    if fmt == "line":
        return f"{puzzle} invalid"
    return f"Invalid grid: {puzzle}\n"


def run(puzzles: List[str], cfg, out: Optional[TextIO] = None) -> dict:
    """Solve every puzzle in order and write one report per puzzle to `out` (stdout by default)."""
    if out is None:
        out = sys.stdout
    counts = {"solved": 0, "unsolvable": 0, "invalid": 0}
    euler_sum = 0
    for puzzle in tqdm(puzzles, desc="solve", unit="grid", disable=not cfg.progress, file=sys.stderr):
        try:
            result = solve(puzzle, trace=bool(cfg.trace))
        except InvalidGrid as e:
            log.warning("invalid grid %r: %s", puzzle, e)
            counts["invalid"] += 1
            print(format_invalid(puzzle, e, cfg.format), file=out)
            continue
        counts[result.status] += 1
        if result.solved:
            euler_sum += result.board().euler_answer()
        print(format_result(result, cfg.format, trace=bool(cfg.trace)), file=out)
    counts["euler_sum"] = euler_sum
    return counts


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Solve 9x9 Sudoku puzzles listed one per line.")
    ap.add_argument("input", nargs="?", default=None, help="Puzzle file (default: input.txt).")
    ap.add_argument("--config", type=str, default=None, help="YAML config; flags override it.")
    ap.add_argument("--format", type=str, default=None, choices=FORMATS)
    ap.add_argument("--euler", action="store_true", default=None, help="Print the sum of top-left 3-digit numbers.")
    ap.add_argument("--trace", action="store_true", default=None, help="Include placements in json output.")
    ap.add_argument("--progress", action="store_true", default=None, help="Show a progress bar.")
    ap.add_argument("--verbose", action="store_true", default=None, help="DEBUG logging.")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(
            args.config,
            input=args.input,
            format=args.format,
            euler=args.euler,
            trace=args.trace,
            progress=args.progress,
            verbose=args.verbose,
        )
    except (OSError, ValueError) as e:
        print(f"[error] config: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if cfg.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if cfg.format not in FORMATS:
        print(f"[error] unknown format {cfg.format!r}; choose from {', '.join(FORMATS)}", file=sys.stderr)
        return 2

    start = time.perf_counter()
    try:
        puzzles = read_puzzles(cfg.input)
    except OSError as e:
        print(f"[error] {cfg.input}: {e}", file=sys.stderr)
        return 2

    counts = run(puzzles, cfg)
    elapsed = time.perf_counter() - start

    if cfg.euler:
        print(f"Euler sum: {counts['euler_sum']}")
    print(
        f"Execution took {elapsed:.3f} seconds "
        f"({counts['solved']} solved, {counts['unsolvable']} unsolved, {counts['invalid']} invalid)."
    )
    return 0 if counts["unsolvable"] == 0 and counts["invalid"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
