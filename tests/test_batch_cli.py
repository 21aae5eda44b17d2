# tests/test_batch_cli.py
import json

import pytest

from apps.cli.batch_cli import main, read_puzzles
from apps.cli.config import DotDict, load_config, merge_overrides


def _write(tmp_path, name, text):
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_read_puzzles_skips_blank_and_comments(tmp_path, classic):
    p = _write(tmp_path, "in.txt", f"# header\n\n{classic}\n  \n{classic}\r\n")
    assert read_puzzles(p) == [classic, classic]


def test_grid_output(tmp_path, capsys, classic):
    p = _write(tmp_path, "in.txt", classic + "\n")
    assert main([str(p)]) == 0
    out = capsys.readouterr().out
    assert "4 8 3 | 9 2 1 | 6 5 7" in out
    assert "------+-------+------" in out
    assert "Couldn't solve" not in out
    assert "Execution took" in out


def test_invalid_and_unsolved_reported(tmp_path, capsys, classic):
    p = _write(tmp_path, "in.txt", "\n".join(["123", "55" + "0" * 79, classic]) + "\n")
    assert main([str(p), "--euler"]) == 1
    out = capsys.readouterr().out
    assert "Invalid grid: 123" in out
    assert out.count("Couldn't solve this grid.") == 1
    assert "Euler sum: 483" in out
    assert "(1 solved, 1 unsolved, 1 invalid)" in out


def test_line_output(tmp_path, capsys, classic, classic_solution):
    p = _write(tmp_path, "in.txt", classic + "\n")
    assert main([str(p), "--format", "line"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"{classic_solution} solved"


def test_json_output_with_trace(tmp_path, capsys, classic, classic_solution):
    p = _write(tmp_path, "in.txt", classic + "\nabc\n")
    assert main([str(p), "--format", "json", "--trace"]) == 1
    lines = capsys.readouterr().out.splitlines()
    first = json.loads(lines[0])
    assert first["status"] == "solved"
    assert first["grid"] == classic_solution
    assert len(first["moves"]) == classic.count("0")
    second = json.loads(lines[1])
    assert second["status"] == "invalid"
    assert second["puzzle"] == "abc"


def test_json_output_without_trace_has_no_moves(tmp_path, capsys, classic):
    p = _write(tmp_path, "in.txt", classic + "\n")
    assert main([str(p), "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out.splitlines()[0])
    assert "moves" not in payload


def test_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 2
    assert "[error]" in capsys.readouterr().err


def test_config_file_and_overrides(tmp_path, capsys, classic, classic_solution):
    puzzles = _write(tmp_path, "in.txt", classic + "\n")
    cfg = _write(tmp_path, "batch.yaml", f"input: {puzzles}\nformat: json\neuler: true\n")
    assert main(["--config", str(cfg), "--format", "line"]) == 0
    out = capsys.readouterr().out
    assert f"{classic_solution} solved" in out
    assert "Euler sum: 483" in out


def test_config_rejects_unknown_keys(tmp_path, capsys):
    cfg = _write(tmp_path, "batch.yaml", "inptu: x.txt\n")
    assert main(["--config", str(cfg)]) == 2
    assert "unknown config keys" in capsys.readouterr().err


def test_load_config_layers(tmp_path):
    cfg_path = _write(tmp_path, "c.yaml", "format: line\nprogress: true\n")
    cfg = load_config(cfg_path, format=None, verbose=True)
    assert isinstance(cfg, DotDict)
    assert cfg.format == "line"
    assert cfg.progress is True
    assert cfg.verbose is True
    assert cfg.input == "input.txt"
    assert load_config().format == "grid"


def test_merge_overrides_skips_none():
    assert merge_overrides({"a": 1, "b": 2}, a=None, b=3) == {"a": 1, "b": 3}


def test_load_config_rejects_non_mapping(tmp_path):
    cfg_path = _write(tmp_path, "c.yaml", "- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(cfg_path)
