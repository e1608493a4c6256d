from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from circuitfield.analysis.equations import fill_interior_currents, solve_currents
from circuitfield.analysis.fields import derive_fields, normalize_fields
from circuitfield.analysis.flowlines import trace_flow_lines
from circuitfield.analysis.potential import solve_potentials
from circuitfield.analysis.topology import extract_loops
from circuitfield.config import SolverSettings

if TYPE_CHECKING:
    from circuitfield.analysis.potential import RelaxationResult
    from circuitfield.model.board import CircuitBoard

logger = logging.getLogger(__name__)


class Solver:
    """
    Class for the circuit field solver.
    """

    def __init__(
        self,
        board: CircuitBoard,
        settings: Optional[SolverSettings] = None,
    ) -> None:
        """
        Initialize the solver with a board.

        Args:
            board: The circuit to be solved.
            settings: Tunables for relaxation and flow tracing. Defaults to `SolverSettings()`.
        """
        self.board = board
        self.settings = settings or SolverSettings()
        self.max_current: float = 0.0
        self.relaxation: Optional[RelaxationResult] = None
        self.flow_line_count: int = 0

    def solve(self) -> CircuitBoard:
        """
        Run every phase on the board: loops, currents, potentials, fields, flow lines.

        The board is either fully solved afterwards or marked as failed; a failed
        board refuses access to its derived data.

        Raises:
            CircuitError: If the circuit is malformed or its field cannot be traced.
            RuntimeError: If the board already failed an earlier solve.
        """
        board = self.board
        if board.failure is not None:
            raise RuntimeError(f"Circuit '{board.name}' failed to solve before: {board.failure}")
        if board.is_solved:
            logger.info(f"Circuit '{board.name}' is already solved.")
            return board

        logger.info(f"Solving circuit '{board.name}' ({board.width}x{board.height}, {len(board.elements)} elements).")
        try:
            extract_loops(board)
            self.max_current = solve_currents(board)
            fill_interior_currents(board)

            self.relaxation = solve_potentials(board, self.settings)

            board.maxima = derive_fields(board, self.max_current)
            normalize_fields(board, board.maxima)

            self.flow_line_count = trace_flow_lines(board, self.settings, self.max_current)
        except Exception as e:
            board.failure = e
            logger.error(f"Solving circuit '{board.name}' failed: {e}")
            raise

        board.is_solved = True
        logger.info(f"Circuit '{board.name}' solved.")
        return board
