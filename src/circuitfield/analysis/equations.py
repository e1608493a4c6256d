"""
Kirchhoff system assembly and current recovery.

Unknowns are branch currents indexed by the pair of loops an element borders:
an element shared by loops i <= j owns column i*L + j, an element bordering only
loop i owns the diagonal column i*L + i. Elements in series along the same
boundary share a column and so a current. The last column is the right-hand side.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Set

import numpy as np

from circuitfield.analysis.linalg import rref
from circuitfield.model.direction import Direction
from circuitfield.model.elements import Resistor, Source

if TYPE_CHECKING:
    import numpy.typing as npt

    from circuitfield.model.board import CircuitBoard
    from circuitfield.model.elements import Element
    from circuitfield.model.loop import Loop

logger = logging.getLogger(__name__)


def assign_directions(board: CircuitBoard) -> None:
    """Give every element the traversal direction of the first loop that walks it."""
    for loop in board.bounded_loops:
        for element in loop.elements:
            if element.assigned_direction is None:
                element.assigned_direction = element.direction_for(loop)


def assemble_system(board: CircuitBoard) -> npt.NDArray[np.float64]:
    """
    Build the augmented Kirchhoff matrix: one current-law row per node followed by
    one voltage-law row per loop.
    """
    loops = board.bounded_loops
    nodes = board.nodes
    n_loops = len(loops)
    rhs = n_loops * n_loops

    matrix = np.zeros((len(nodes) + n_loops, rhs + 1), dtype=np.float64)

    for row, node in enumerate(nodes):
        for element in node.elements:
            matrix[row, element.loops_index(n_loops)] += element.node_sign(node)

    for loop in loops:
        row = len(nodes) + loop.index
        for element in loop.elements:
            if isinstance(element, Source):
                sign = 1 if element.direction_for(loop) is element.polarity else -1
                matrix[row, rhs] += element.voltage * sign
            elif isinstance(element, Resistor):
                sign = 1 if element.direction_for(loop) is element.assigned_direction else -1
                matrix[row, element.loops_index(n_loops)] += element.resistance * sign

    logger.debug(f"Assembled {matrix.shape[0]}x{matrix.shape[1]} Kirchhoff system.")
    return matrix


def solve_currents(board: CircuitBoard) -> float:
    """
    Solve for every element's current and every loop's signed current.

    After this call each element's `assigned_direction` is the direction its
    current actually flows and `current` is non-negative.

    Returns:
        The largest loop current magnitude.
    """
    assign_directions(board)
    matrix = assemble_system(board)
    n_loops = len(board.bounded_loops)
    reduced, pivots = rref(matrix, n_unknowns=n_loops * n_loops)

    for element in board.elements:
        column = element.loops_index(n_loops)
        row = pivots.get(column)
        if row is None:
            logger.warning(f"Current through {element!r} is undetermined; treating it as zero.")
            value = 0.0
        else:
            value = float(reduced[row, -1])
        element.current = abs(value)
        if value < 0:
            element.assigned_direction = element.assigned_direction.flip()
        logger.debug(f"{element!r}: {element.current:.6g} A {element.assigned_direction.name}")

    max_current = _fill_loop_currents(board.bounded_loops, n_loops)
    logger.info(f"Solved currents for {len(board.elements)} elements; max loop current {max_current:.6g} A.")
    return max_current


def _signed_current(element: Element, loop: Loop) -> float:
    """Element current measured along `loop`'s traversal direction."""
    sign = 1 if element.direction_for(loop) is element.assigned_direction else -1
    return element.current * sign


def _fill_loop_currents(loops: List[Loop], n_loops: int) -> float:
    known: Set[Loop] = set()
    for loop in loops:
        for element in loop.elements:
            if element.loops_index(n_loops) == loop.index * (n_loops + 1):
                loop.current = _signed_current(element, loop)
                known.add(loop)
                break

    # Loops walled in by other loops: I_loop = I_element + I_neighbour across a shared element
    pending = [loop for loop in loops if loop not in known]
    while pending:
        resolved = []
        for loop in pending:
            for element in loop.elements:
                neighbours = [other for other in element.loops if other is not loop and other in known]
                if neighbours:
                    loop.current = _signed_current(element, loop) + neighbours[0].current
                    resolved.append(loop)
                    break
        if not resolved:
            logger.warning(f"Could not determine the current of {len(pending)} loops.")
            break
        known.update(resolved)
        pending = [loop for loop in pending if loop not in known]

    return max(abs(loop.current) for loop in loops)


def fill_interior_currents(board: CircuitBoard) -> None:
    """
    Find the off-circuit points enclosed by each loop and give them the loop's current.

    Points are found by scanning east from each point of the loop's northbound
    elements, whose right-hand side is the loop interior, up to the next circuit point.
    """
    for loop in board.bounded_loops:
        for element in loop.elements:
            if element.direction_for(loop) is not Direction.NORTH:
                continue
            for p in element.points:
                q = board.step(p, Direction.EAST)
                while q is not None and not q.on_circuit:
                    q.current = loop.current
                    loop.enclose(q)
                    q = board.step(q, Direction.EAST)
        logger.debug(f"Loop {loop.index} encloses {len(loop.points)} points.")
