# tests/test_tool_api.py
from fastapi.testclient import TestClient

from apps.api.sudoku_tool_api import app
from solver.solver_core import Board

client = TestClient(app)


def test_solve_endpoint(classic, classic_solution):
    r = client.post("/solve", json={"puzzle": classic})
    assert r.status_code == 200
    body = r.json()
    assert body["solved"] is True
    assert body["status"] == "solved"
    assert body["grid"] == classic_solution
    assert body["moves"] == []


def test_solve_endpoint_trace(classic):
    body = client.post("/solve", json={"puzzle": classic, "trace": True}).json()
    assert body["solved"] is True
    assert len(body["moves"]) == classic.count("0")
    assert body["moves"][0]["index"] == 1


def test_solve_endpoint_unsolvable():
    body = client.post("/solve", json={"puzzle": "55" + "0" * 79}).json()
    assert body["solved"] is False
    assert body["status"] == "unsolvable"
    assert body["issues"]


def test_solve_endpoint_invalid_grid():
    r = client.post("/solve", json={"puzzle": "0" * 80})
    assert r.status_code == 422
    assert "Invalid grid" in r.json()["detail"]


def test_candidates_endpoint(classic):
    r = client.post("/candidates", json={"grid": Board(classic).to_grid()})
    assert r.status_code == 200
    assert r.json()["candidates"]["r1c1"] == [4, 5]


def test_candidates_endpoint_bad_shape():
    r = client.post("/candidates", json={"grid": [[0] * 9] * 3})
    assert r.status_code == 422


def test_sanity_check_endpoint(classic):
    grid = Board(classic).to_grid()
    current = [row[:] for row in grid]
    current[0][0] = 3
    body = client.post("/sanity_check", json={"original": grid, "current": current}).json()
    assert body["ok"] is False
    assert any(i["type"] == "duplicate" and i["unit"] == "r1" for i in body["issues"])
