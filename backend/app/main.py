import io
from typing import Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from backend.app import storage
from solver import config, graph
from solver.complex_parser import parse_complex, to_polar, to_rect
from solver.engine import (
    blank_system,
    build_history_entry,
    clamp_size,
    example_system,
    solve_complex_system,
)
from solver.errors import SolverError
from solver.logging_config import get_logger

logger = get_logger(__name__)


class ParseRequest(BaseModel):
    text: str


class ParseResponse(BaseModel):
    re: float
    im: float
    rect: str
    polar: str


class SolveRequest(BaseModel):
    matrix: list[list[str]]
    vector: list[str]


class StepInfo(BaseModel):
    step_number: int
    description: str
    expression: str
    explanation: str


class SolutionInfo(BaseModel):
    polar: list[str]
    rect: list[str]
    values: list[list[float]]


class SolveResponse(BaseModel):
    given: dict
    method: dict
    steps: list[StepInfo]
    solution: SolutionInfo
    final_answer: str
    verification_steps: list[StepInfo]
    summary: dict


class GridResponse(BaseModel):
    size: int
    matrix: list[list[str]]
    vector: list[str]


class ThemeRequest(BaseModel):
    theme: str


class ThemeResponse(BaseModel):
    theme: str


def _error_detail(err: SolverError) -> dict:
    return {"code": err.code, "message": err.message}


def create_app(store: Optional[storage.KeyValueStore] = None) -> FastAPI:
    """Build the API around *store* (defaults to the JSON file in config)."""
    if store is None:
        store = storage.JsonFileStore(config.DATA_FILE)
    history = storage.SessionHistory()

    app = FastAPI(title="Complex Calc API")
    app.state.store = store
    app.state.history = history

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/parse", response_model=ParseResponse)
    def parse(req: ParseRequest):
        try:
            value = parse_complex(req.text)
        except SolverError as e:
            raise HTTPException(status_code=400, detail=_error_detail(e))
        return ParseResponse(re=value.re, im=value.im, rect=to_rect(value), polar=to_polar(value))

    @app.post("/api/solve", response_model=SolveResponse)
    def solve(req: SolveRequest):
        try:
            result = solve_complex_system(req.matrix, req.vector)
        except SolverError as e:
            logger.info("solve rejected (%s): %s", e.code, e.message.splitlines()[0])
            raise HTTPException(status_code=400, detail=_error_detail(e))

        entry = build_history_entry(result)
        history.add(entry)
        storage.save_system(store, entry)
        return result

    @app.post("/api/solve/diagram")
    def solve_diagram(req: SolveRequest):
        try:
            result = solve_complex_system(req.matrix, req.vector)
        except SolverError as e:
            raise HTTPException(status_code=400, detail=_error_detail(e))

        buf = io.BytesIO()
        graph.save_figure(result, buf, theme=storage.get_theme(store))
        return Response(content=buf.getvalue(), media_type="image/png")

    @app.get("/api/history")
    def get_history():
        return [entry.to_dict() for entry in history.entries()]

    @app.delete("/api/history")
    def clear_history():
        history.clear()
        return {"cleared": True}

    @app.get("/api/saved")
    def get_saved():
        return storage.load_saved_systems(store)

    @app.delete("/api/saved")
    def clear_saved():
        storage.clear_saved_systems(store)
        return {"cleared": True}

    @app.get("/api/saved/{index}", response_model=GridResponse)
    def get_saved_grid(index: int):
        saved = storage.load_saved_systems(store)
        if not 0 <= index < len(saved):
            raise HTTPException(status_code=404, detail="No saved system at that index.")
        size, matrix, vector = storage.saved_system_grid(saved[index])
        return GridResponse(size=size, matrix=matrix, vector=vector)

    @app.get("/api/examples/{size}", response_model=GridResponse)
    def get_example(size: int):
        n = clamp_size(size)
        grid = example_system(n) or blank_system(n)
        matrix, vector = grid
        return GridResponse(size=n, matrix=matrix, vector=vector)

    @app.get("/api/settings/theme", response_model=ThemeResponse)
    def get_theme():
        return ThemeResponse(theme=storage.get_theme(store))

    @app.put("/api/settings/theme", response_model=ThemeResponse)
    def put_theme(req: ThemeRequest):
        try:
            theme = storage.set_theme(store, req.theme)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return ThemeResponse(theme=theme)

    @app.post("/api/settings/theme/cycle", response_model=ThemeResponse)
    def cycle_theme():
        return ThemeResponse(theme=storage.cycle_theme(store))

    return app


app = create_app()
