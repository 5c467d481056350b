"""Value types shared by the parser, the solver and the storage layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ComplexValue:
    """A complex number held as its rectangular parts."""

    re: float
    im: float = 0.0

    def __complex__(self) -> complex:
        return complex(self.re, self.im)

    @classmethod
    def from_complex(cls, value: complex) -> ComplexValue:
        value = complex(value)
        return cls(value.real, value.imag)

    def as_pair(self) -> list[float]:
        return [self.re, self.im]


@dataclass(frozen=True)
class HistoryEntry:
    """One successful solve, in the display forms shown back to the user.

    ``matrix_polar`` / ``vector_polar`` are the inputs re-rendered as polar
    text, so the entry can be loaded back into an input grid.
    """

    timestamp: str
    size: int
    matrix_polar: tuple[tuple[str, ...], ...]
    vector_polar: tuple[str, ...]
    solution_polar: tuple[str, ...]
    solution_rect: tuple[str, ...]
    solution: tuple[tuple[float, float], ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp,
            "size": self.size,
            "A_polar": [list(row) for row in self.matrix_polar],
            "b_polar": list(self.vector_polar),
            "x_polar": list(self.solution_polar),
            "x_rect": list(self.solution_rect),
            "x": [{"re": re, "im": im} for re, im in self.solution],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        """Rebuild an entry from :meth:`to_dict` output."""
        return cls(
            timestamp=str(data.get("timestamp", "")),
            size=int(data["size"]),
            matrix_polar=tuple(tuple(row) for row in data.get("A_polar", [])),
            vector_polar=tuple(data.get("b_polar", [])),
            solution_polar=tuple(data.get("x_polar", [])),
            solution_rect=tuple(data.get("x_rect", [])),
            solution=tuple(
                (float(item["re"]), float(item["im"])) for item in data.get("x", [])
            ),
        )
