"""Exception types raised by the parser and the linear system solver."""

from __future__ import annotations

_SINGULAR_TIPS = (
    "Singular Matrix Error\n\n"
    "This means the system has no unique solution.\n\n"
    "Tips:\n"
    "• Check if rows are linearly dependent\n"
    "• Verify matrix has non-zero determinant\n"
    "• Make sure equations are independent\n"
    "• Try different coefficient values"
)


class SolverError(ValueError):
    """Base class for every error the solve pipeline reports to a caller."""

    def __init__(self, message: str, code: str = "SOLVER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ParseError(SolverError):
    """Raised when a text cell is not a valid complex value."""

    def __init__(self, text: str, message: str | None = None):
        self.text = text
        self.cell: str | None = None
        if message is None:
            message = f"invalid complex value: {text}"
        super().__init__(message, code="PARSE_ERROR")

    def at_cell(self, cell: str) -> "ParseError":
        """Return a copy of this error tagged with the grid position *cell*."""
        err = ParseError(self.text, f"{cell}: {self.message}")
        err.cell = cell
        return err


class SingularMatrixError(SolverError):
    """Raised when elimination meets a pivot that is numerically zero."""

    def __init__(self, column: int):
        self.column = column
        super().__init__(_SINGULAR_TIPS, code="SINGULAR_MATRIX")


class SystemShapeError(SolverError):
    """Raised when the matrix and vector do not form a supported square system."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_SHAPE")


class NumericOverflowError(SolverError):
    """Raised when a solve on finite input produces a non-finite unknown."""

    def __init__(self, unknown: int):
        self.unknown = unknown
        super().__init__(
            f"Numeric overflow: x{unknown + 1} is not a finite number. "
            f"Rescale the coefficients and try again.",
            code="NUMERIC_OVERFLOW",
        )
