"""
Potentials on and between the circuit elements.

Phase 1 walks every loop's element cycle, letting each element set the potential
along its run. Phase 2 fills the enclosed free space by Gauss-Seidel relaxation
of the discrete Laplace equation, with the circuit as the fixed boundary.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, List, Set, Tuple

from circuitfield.model.direction import Direction

if TYPE_CHECKING:
    from circuitfield.config import SolverSettings
    from circuitfield.model.board import CircuitBoard
    from circuitfield.model.elements import Element
    from circuitfield.model.lattice import LatticePoint
    from circuitfield.model.loop import Loop

logger = logging.getLogger(__name__)


@dataclass
class RelaxationResult:
    """Outcome of the relaxation phase."""
    sweeps: int
    residual: float
    tolerance: float
    converged: bool


def propagate_potentials(board: CircuitBoard, reference: float = 0.0) -> None:
    """
    Set the potential of every on-circuit point by walking the loops.

    The first loop is walked from its first element at `reference`. Every loop
    sharing an element with a walked loop is then walked from that element,
    starting from the potential where the walked loop left it.
    """
    loops = board.bounded_loops
    if not loops:
        return

    first = loops[0]
    worklist: List[Tuple[Loop, Element, float]] = [(first, first.elements[0], reference)]
    visited: Set[Loop] = {first}

    while worklist:
        loop, start, potential = worklist.pop()
        for element in loop.elements_from(start):
            potential = element.set_potentials(potential, loop)
            for neighbor in element.loops:
                if neighbor not in visited:
                    visited.add(neighbor)
                    # The neighbour walks this element the other way round
                    worklist.append((neighbor, element, potential))

    logger.debug(f"Propagated potentials through {len(visited)} loops.")


def initialize_interior(board: CircuitBoard) -> float:
    """
    Shift the circuit potentials so the lowest is zero and seed the free space.

    Enclosed off-circuit points start at the mean circuit potential, points outside
    every loop are set to zero.

    Returns:
        The mean circuit potential after the shift.
    """
    on_circuit = [p for p in board if p.on_circuit]
    lowest = min(p.potential for p in on_circuit)
    highest = max(p.potential for p in on_circuit)
    average = sum(p.potential for p in on_circuit) / len(on_circuit) - lowest

    for p in board:
        if p.on_circuit:
            p.potential -= lowest
        elif p.loop_membership_count > 0:
            p.potential = average
        else:
            p.potential = 0.0

    logger.debug(f"Circuit potentials span {highest - lowest:.6g} V; free space seeded at {average:.6g} V.")
    return average


def relaxation_tolerance(board: CircuitBoard, divisor: float) -> float:
    """Smallest potential drop across a resistor or source, divided by `divisor`."""
    drops = [element.potential_drop for element in board.elements if not element.is_conductor]
    if not drops:
        return 0.0
    return min(drops) / divisor


def relax(board: CircuitBoard, tolerance: float, max_sweeps: int) -> RelaxationResult:
    """
    Replace each enclosed free-space potential by the mean of its four neighbours,
    sweeping column by column, until no point moves by more than `tolerance`.

    Hitting `max_sweeps` is not an error; the last sweep's values are kept.
    """
    free: List[LatticePoint] = [p for p in board if not p.on_circuit and p.loop_membership_count > 0]
    neighbors = [_grid_neighbors(board, p) for p in free]

    sweeps = 0
    residual = 0.0
    while sweeps < max_sweeps:
        sweeps += 1
        residual = 0.0
        for p, around in zip(free, neighbors):
            value = sum(q.potential for q in around) / len(around)
            residual = max(residual, abs(value - p.potential))
            p.potential = value
        if residual <= tolerance:
            break

    converged = residual <= tolerance
    if converged:
        logger.info(f"Relaxed {len(free)} points in {sweeps} sweeps (residual {residual:.3g}).")
    else:
        logger.warning(f"Relaxation stopped after {sweeps} sweeps with residual {residual:.3g} > {tolerance:.3g}.")
    return RelaxationResult(sweeps=sweeps, residual=residual, tolerance=tolerance, converged=converged)


def _grid_neighbors(board: CircuitBoard, point: LatticePoint) -> List[LatticePoint]:
    steps = (board.step(point, d) for d in Direction)
    return [q for q in steps if q is not None]


def solve_potentials(board: CircuitBoard, settings: SolverSettings) -> RelaxationResult:
    """Run both potential phases."""
    propagate_potentials(board)
    initialize_interior(board)
    tolerance = relaxation_tolerance(board, settings.tolerance_divisor)
    return relax(board, tolerance, settings.max_relaxation_sweeps)
