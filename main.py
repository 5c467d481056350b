"""
Complex Calc — command-line entry point.

Solve a complex linear system from the shell:

    python main.py --matrix "2+1j, -1; -1, 2" --vector "1, 1j"
    python main.py --example 3 --json
    python main.py --example 2 --plot phasors.png --theme light
"""

import argparse
import json
import sys

from solver import config, graph
from solver.engine import clamp_size, example_system, solve_complex_system
from solver.errors import SolverError
from solver.logging_config import setup_logging


def _split_matrix(text: str) -> list[list[str]]:
    return [[cell.strip() for cell in row.split(",")] for row in text.split(";") if row.strip()]


def _split_vector(text: str) -> list[str]:
    return [cell.strip() for cell in text.split(",")]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="complexcalc",
        description="Solve A·x = b over the complex numbers (rectangular or phasor input).",
    )
    parser.add_argument("--matrix", type=str, help='Rows separated by ";", cells by ","')
    parser.add_argument("--vector", type=str, help='Cells separated by ","')
    parser.add_argument("--example", type=int, help="Solve the built-in example of this size")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--plot", type=str, metavar="FILE", help="Save the phasor diagram as PNG")
    parser.add_argument("--theme", default="dark", choices=["dark", "light", "pink"],
                        help="Colour palette for --plot")
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.example is not None:
        grid = example_system(clamp_size(args.example))
        if grid is None:
            parser.error(f"no example for size {args.example}; examples exist for 2 to 5")
        matrix, vector = grid
    elif args.matrix and args.vector:
        matrix, vector = _split_matrix(args.matrix), _split_vector(args.vector)
    else:
        parser.error("give --matrix and --vector, or --example")

    try:
        result = solve_complex_system(matrix, vector)
    except SolverError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.plot:
        graph.save_figure(result, args.plot, theme=args.theme)

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print(result["final_answer"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
