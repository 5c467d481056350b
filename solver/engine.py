"""Step-by-step complex linear system solver.

Takes the text cells of a coefficient matrix ``A`` and a right-hand side
``b`` (e.g. ``[["2+1i", "-1"], ["-1", "2"]]`` and ``["1", "1i"]``), parses
every cell, solves ``A·x = b`` by Gaussian elimination and produces a result
record with human-readable steps, the answer in polar and rectangular form,
and a NumPy residual check.
"""

import math
import platform
import time
from datetime import datetime

import numpy as np

from solver import config
from solver.complex_parser import format_significant, parse_complex, to_polar, to_rect
from solver.errors import NumericOverflowError, ParseError
from solver.linear import back_substitute, forward_eliminate
from solver.logging_config import get_logger
from solver.types import HistoryEntry

logger = get_logger(__name__)

DEFAULT_CELL = "1∠0"
DEFAULT_RHS = "0"

# Sample circuits offered for the common grid sizes.
EXAMPLES = {
    2: {
        "matrix": [
            ["2+1i", "-1"],
            ["-1", "2"],
        ],
        "vector": ["1", "1i"],
    },
    3: {
        "matrix": [
            ["2+1i", "-1", "0"],
            ["-1", "2+0.5i", "-1"],
            ["0", "-1", "2"],
        ],
        "vector": ["1", "0", "1i"],
    },
    4: {
        "matrix": [
            ["3", "-1", "0", "0"],
            ["-1", "3", "-1", "0"],
            ["0", "-1", "3", "-1"],
            ["0", "0", "-1", "3"],
        ],
        "vector": ["1", "0", "0", "1"],
    },
    5: {
        "matrix": [
            ["4", "-1", "0", "0", "0"],
            ["-1", "4", "-1", "0", "0"],
            ["0", "-1", "4", "-1", "0"],
            ["0", "0", "-1", "4", "-1"],
            ["0", "0", "0", "-1", "4"],
        ],
        "vector": ["1", "0", "0", "0", "1"],
    },
}


# ── Input grid helpers ───────────────────────────────────────────────────

def clamp_size(n) -> int:
    """Clamp a requested grid size into the supported range."""
    return min(max(config.MIN_SYSTEM_SIZE, int(n)), config.MAX_SYSTEM_SIZE)


def blank_system(n: int) -> tuple[list[list[str]], list[str]]:
    """Return a fresh ``n × n`` grid of ``1∠0`` cells and a zero vector."""
    n = clamp_size(n)
    return [[DEFAULT_CELL] * n for _ in range(n)], [DEFAULT_RHS] * n


def example_system(n: int):
    """Return copies of the example grid for size *n*, or None."""
    example = EXAMPLES.get(n)
    if example is None:
        return None
    return [list(row) for row in example["matrix"]], list(example["vector"])


def parse_system(matrix_cells, vector_cells):
    """Parse every text cell; errors name the offending cell (1-based)."""
    matrix = []
    for r, row in enumerate(matrix_cells):
        parsed_row = []
        for c, cell in enumerate(row):
            try:
                parsed_row.append(parse_complex(cell))
            except ParseError as e:
                raise e.at_cell(f"A[{r + 1}][{c + 1}]") from e
        matrix.append(parsed_row)

    vector = []
    for r, cell in enumerate(vector_cells):
        try:
            vector.append(parse_complex(cell))
        except ParseError as e:
            raise e.at_cell(f"b[{r + 1}]") from e
    return matrix, vector


# ── Formatting helpers ───────────────────────────────────────────────────

def _format_row(values) -> str:
    return "[" + ", ".join(to_polar(v) for v in values) + "]"


def _format_matrix(matrix) -> str:
    return "\n".join(f"  {_format_row(row)}" for row in matrix)


def _residuals(matrix, vector, x) -> np.ndarray:
    """``A·x − b`` computed independently with NumPy."""
    a = np.array([[complex(c) for c in row] for row in matrix], dtype=np.complex128)
    b = np.array([complex(c) for c in vector], dtype=np.complex128)
    xs = np.array([complex(c) for c in x], dtype=np.complex128)
    return a @ xs - b


# ── Main public entry point ─────────────────────────────────────────────

def solve_complex_system(matrix_cells, vector_cells) -> dict:
    """
    Parse and solve the complex system ``A·x = b`` given as text cells.

    Returns a dict with:
      - given: the problem statement and the inputs in polar form
      - method: the algorithm used
      - steps: list of {step_number, description, expression, explanation}
      - solution: {polar, rect, values}
      - final_answer: one ``x<k> = …`` line per unknown
      - verification_steps: residual check of every equation
      - summary: runtime, counts, validation status, timestamp

    Raises ParseError, SystemShapeError, SingularMatrixError or
    NumericOverflowError.
    """
    t_start = time.perf_counter()

    matrix, vector = parse_system(matrix_cells, vector_cells)
    n = len(matrix)
    matrix_polar = [[to_polar(c) for c in row] for row in matrix]
    vector_polar = [to_polar(c) for c in vector]

    steps = []
    steps.append({
        "description": "Read the system A·x = b",
        "expression": f"A =\n{_format_matrix(matrix)}\nb = {_format_row(vector)}",
        "explanation": (
            f"Every entry was parsed as a complex number (rectangular or "
            f"phasor form) and is shown here in polar form. The system has "
            f"{n} equation{'s' if n != 1 else ''} in {n} unknown{'s' if n != 1 else ''}."
        ),
    })
    steps.append({
        "description": "Form the augmented matrix [A | b]",
        "expression": f"{n} × {n + 1} working copy",
        "explanation": (
            "The right-hand side is appended as an extra column so that every "
            "row operation is applied to it as well."
        ),
    })

    aug, pivots = forward_eliminate(matrix, vector)
    for p in pivots:
        col, row = p["column"] + 1, p["row"] + 1
        swap = f"swap row {col} ↔ row {row}" if row != col else f"row {col} stays in place"
        logger.debug("pivot column %d: row %d, |pivot| = %g", col, row, p["magnitude"])
        steps.append({
            "description": f"Pivot on column {col}",
            "expression": f"{swap},  |pivot| = {format_significant(p['magnitude'])}",
            "explanation": (
                f"The entry with the largest magnitude in column {col} "
                f"(rows {col}–{n}) becomes the pivot. Multiples of the pivot "
                f"row are subtracted from every row below it to clear column {col}."
                if col < n else
                f"The last pivot is non-zero, so the matrix is upper triangular "
                f"and has a unique solution."
            ),
        })

    x = back_substitute(aug)
    for k, v in enumerate(x):
        if not (math.isfinite(v.re) and math.isfinite(v.im)):
            logger.warning("solution x%d overflowed to %r", k + 1, v)
            raise NumericOverflowError(k)
    steps.append({
        "description": "Back substitution",
        "expression": f"x{n} → x1",
        "explanation": (
            "Starting from the last row, each unknown equals the row's "
            "right-hand side minus the already known terms, divided by the "
            "diagonal entry."
        ),
    })

    x_polar = [to_polar(v) for v in x]
    x_rect = [to_rect(v) for v in x]
    for k, (p_str, r_str) in enumerate(zip(x_polar, x_rect), 1):
        steps.append({
            "description": f"x{k} = {p_str}",
            "expression": f"x{k} = {p_str}  =  {r_str}",
            "explanation": f"The value of unknown x{k} in polar and rectangular form.",
        })

    final_answer = "\n".join(
        f"x{k} = {p_str}  ({r_str})" for k, (p_str, r_str) in enumerate(zip(x_polar, x_rect), 1)
    )

    # ── Verification ─────────────────────────────────────────────────
    residual = np.abs(_residuals(matrix, vector, x))
    max_residual = float(residual.max())
    all_ok = bool(max_residual < config.RESIDUAL_TOLERANCE)

    verification_steps = [{
        "description": "Substitute into every equation",
        "expression": "r = A·x − b",
        "explanation": "Multiply A by the solution and compare with b row by row.",
    }]
    for i, r in enumerate(residual, 1):
        ok = r < config.RESIDUAL_TOLERANCE
        verification_steps.append({
            "description": f"Equation ({i})",
            "expression": f"|r{i}| = {float(r):.3e}  →  {'✓' if ok else '✗'}",
            "explanation": (
                "Both sides agree within floating-point precision."
                if ok else "Sides differ. The system is badly conditioned."
            ),
        })
    verification_steps.append({
        "description": "All equations verified" if all_ok else "Verification failed",
        "expression": "All equations satisfied  ✓" if all_ok else "Residual above tolerance  ✗",
        "explanation": (
            "The solution is correct."
            if all_ok else
            f"The largest residual {max_residual:.3e} exceeds "
            f"{config.RESIDUAL_TOLERANCE:g}."
        ),
    })

    for i, s in enumerate(steps, 1):
        s["step_number"] = i
    for i, s in enumerate(verification_steps, 1):
        s["step_number"] = i

    t_end = time.perf_counter()
    runtime_ms = round((t_end - t_start) * 1000, 2)
    logger.info("solved %dx%d system in %.2f ms (max residual %.3e)",
                n, n, runtime_ms, max_residual)

    return {
        "given": {
            "problem": f"Solve the {n}×{n} complex linear system A·x = b",
            "inputs": {
                "size": n,
                "matrix": matrix_polar,
                "vector": vector_polar,
            },
        },
        "method": {
            "name": "Gaussian Elimination (Partial Pivoting)",
            "description": (
                "Reduce [A | b] to upper-triangular form, choosing the "
                "largest-magnitude pivot in each column, then back-substitute."
            ),
            "parameters": {
                "system_size": f"{n} × {n}",
                "pivot_tolerance": f"{config.PIVOT_TOLERANCE:g}",
                "approach": "Parse → Augment → Eliminate → Back-substitute → Verify",
            },
        },
        "steps": steps,
        "solution": {
            "polar": x_polar,
            "rect": x_rect,
            "values": [v.as_pair() for v in x],
        },
        "final_answer": final_answer,
        "verification_steps": verification_steps,
        "summary": {
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "validation_status": "pass" if all_ok else "fail",
            "max_residual": max_residual,
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": f"NumPy {np.__version__}",
            "python": platform.python_version(),
        },
    }


def build_history_entry(result: dict) -> HistoryEntry:
    """Snapshot a solve result as an immutable :class:`HistoryEntry`."""
    inputs = result["given"]["inputs"]
    solution = result["solution"]
    return HistoryEntry(
        timestamp=result["summary"]["timestamp"],
        size=inputs["size"],
        matrix_polar=tuple(tuple(row) for row in inputs["matrix"]),
        vector_polar=tuple(inputs["vector"]),
        solution_polar=tuple(solution["polar"]),
        solution_rect=tuple(solution["rect"]),
        solution=tuple((re, im) for re, im in solution["values"]),
    )
