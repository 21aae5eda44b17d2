# sudoku_tool_api.py
# Optional FastAPI wrapper for the tool functions.
# Run with: uvicorn apps.api.sudoku_tool_api:app --reload
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import List, Dict

from solver.solver_core import InvalidGrid
from solver.sudoku_tools import sanity_check, compute_candidates_tool, solve_tool

app = FastAPI(title="Sudoku Solver Tool API")

class SolveRequest(BaseModel):
    puzzle: str
    trace: bool = False

class GridModel(BaseModel):
    grid: List[List[int]]

class SanityRequest(BaseModel):
    original: List[List[int]]
    current: List[List[int]]

@app.post("/solve")
def api_solve(req: SolveRequest):
    try:
        return solve_tool(req.puzzle, trace=req.trace)
    except InvalidGrid as e:
        raise HTTPException(status_code=422, detail=f"Invalid grid: {e}")

@app.post("/candidates")
def api_cands(payload: GridModel) -> Dict[str, Dict[str, List[int]]]:
    try:
        return compute_candidates_tool(payload.grid)
    except InvalidGrid as e:
        raise HTTPException(status_code=422, detail=f"Invalid grid: {e}")

@app.post("/sanity_check")
def api_sanity(req: SanityRequest):
    try:
        return sanity_check(req.original, req.current)
    except InvalidGrid as e:
        raise HTTPException(status_code=422, detail=f"Invalid grid: {e}")
