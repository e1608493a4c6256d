"""
Command-Line Runner
===================
Reads a circuit file, solves it and logs a summary of the result.

Usage::

    python -m circuitfield CIRCUIT_FILE [--log-level LEVEL] [--log-file PATH]
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from circuitfield.exceptions import CircuitError
from circuitfield.logging_config import LEVEL_NAMES, setup_logging
from circuitfield.model.board import CircuitBoard
from circuitfield.model.io import read_circuit
from circuitfield.solvers.solver import Solver

logger = logging.getLogger("circuitfield.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="circuitfield",
        description="Solve the currents, potentials and fields of a planar grid circuit.",
    )
    parser.add_argument("circuit_file", help="Path to a circuit description file.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=LEVEL_NAMES,
        type=str.upper,
        help="Logging verbosity (default: INFO).",
    )
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return parser


def log_summary(solver: Solver) -> None:
    board: CircuitBoard = solver.board
    for element in board.elements:
        logger.info(f"{element!r}: {element.current:.6g} A flowing {element.assigned_direction.name}")
    for loop in board.bounded_loops:
        logger.info(f"Loop {loop.index}: {loop.current:+.6g} A, {len(loop.points)} points, "
                    f"{len(loop.flow_lines)} flow lines")
    if solver.relaxation is not None:
        logger.info(f"Relaxation: {solver.relaxation.sweeps} sweeps, residual {solver.relaxation.residual:.3g}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        description = read_circuit(args.circuit_file)
        board = CircuitBoard.from_description(description)
        solver = Solver(board)
        solver.solve()
    except CircuitError as e:
        logger.error(str(e))
        return 1

    log_summary(solver)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
