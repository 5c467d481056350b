"""Complex number parsing and complex linear system solving."""

from solver.complex_parser import parse_complex, to_polar, to_rect
from solver.errors import (
    NumericOverflowError,
    ParseError,
    SingularMatrixError,
    SolverError,
    SystemShapeError,
)
from solver.linear import solve_system
from solver.types import ComplexValue, HistoryEntry

__all__ = [
    "ComplexValue",
    "HistoryEntry",
    "NumericOverflowError",
    "ParseError",
    "SingularMatrixError",
    "SolverError",
    "SystemShapeError",
    "parse_complex",
    "solve_system",
    "to_polar",
    "to_rect",
]
