"""
Loop extraction by perimeter tracing.

From every junction node, each outgoing connection is followed by always taking
the rightmost available turn. Such a walk goes clockwise around exactly one face
of the planar element graph. Its accumulated turning number is +4 for a bounded
face and -4 for the unbounded outer face, which is discarded.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Tuple

from circuitfield.exceptions import (
    DirectionError,
    EmptyCircuitError,
    OpenCircuitError,
    OverlappingElementsError,
)
from circuitfield.model.direction import Direction, Turn
from circuitfield.model.loop import Loop

if TYPE_CHECKING:
    from circuitfield.model.board import CircuitBoard
    from circuitfield.model.elements import Element
    from circuitfield.model.lattice import LatticePoint

logger = logging.getLogger(__name__)

_PREFERENCE = (Turn.RIGHT, Turn.STRAIGHT, Turn.LEFT)


def extract_loops(board: CircuitBoard) -> List[Loop]:
    """
    Find every bounded mesh face of the circuit and store it on `board.loops`.

    Each element gets the traversal direction of each bordering face recorded
    in its direction table, the outer face included (with index -1).

    Raises:
        OverlappingElementsError: If an element passes through a node without ending there.
        OpenCircuitError: If a walk reaches a dead end.
        DirectionError: If an element would border a third face or two faces in one direction.
        EmptyCircuitError: If no bounded face exists.
    """
    check_nodes(board)

    if not board.nodes and board.elements:
        # A single ring has no junction; any point on it will do as a start
        board.add_node(board.elements[0].start)

    loops: List[Loop] = []
    walk_id = 0
    for node in board.nodes:
        for direction in node.neighbor_directions:
            first_element = _element_leaving(node, direction, board)
            if first_element.directions.has_direction(direction):
                # This face was already traced from another start
                continue

            walk_id += 1
            loop, turns = _trace_face(board, node, direction, walk_id)
            if turns > 0:
                loop.index = len(loops)
                loops.append(loop)
                for p in loop.perimeter:
                    loop.enclose(p)
                logger.debug(f"Walk {walk_id} from {node} {direction.name}: loop {loop.index} "
                             f"with {len(loop.elements)} elements.")
            else:
                loop.index = -1
                logger.debug(f"Walk {walk_id} from {node} {direction.name}: outer face (turns={turns}).")

    if not loops:
        raise EmptyCircuitError(f"Circuit '{board.name}' does not enclose any loop.")

    board.loops = loops
    logger.info(f"Found {len(loops)} loops and {len(board.nodes)} nodes.")
    return loops


def check_nodes(board: CircuitBoard) -> None:
    """Every element touching a node must have an endpoint there."""
    for node in board.nodes:
        for element in node.elements:
            if not element.is_endpoint(node):
                raise OverlappingElementsError(
                    f"Error at point {node}: Circuit elements may not overlap except at endpoints. "
                    f"{element!r} passes through it."
                )


def rightmost_direction(point: LatticePoint, incoming: Direction) -> Direction:
    """
    Leaving direction at `point` for a walk that arrived travelling `incoming`.

    Raises:
        OpenCircuitError: If only the way back is connected.
    """
    for turn in _PREFERENCE:
        candidate = incoming.turn(turn)
        if point.has_neighbor(candidate):
            return candidate
    raise OpenCircuitError(f"Error at point {point}: Dead end.")


def _element_leaving(node: LatticePoint, direction: Direction, board: CircuitBoard) -> Element:
    neighbor = board.step(node, direction)
    for element in node.elements:
        if neighbor in element.points:
            return element
    raise OverlappingElementsError(f"No element connects {node} to {neighbor}.")


def _trace_face(
    board: CircuitBoard,
    node: LatticePoint,
    direction: Direction,
    walk_id: int,
) -> Tuple[Loop, int]:
    """
    Walk clockwise around the face to the right of the connection leaving `node`.

    Returns:
        The traced loop (index not yet assigned) and the accumulated turning number.
    """
    loop = Loop(index=-1)
    turns = 0
    prev, point = node, board.step(node, direction)
    latest_endpoint = node

    while point.walk_mark != walk_id:
        point.walk_mark = walk_id
        loop.add_perimeter_point(point)

        incoming = Direction.between(prev, point)
        element = board.element_between(latest_endpoint, point)
        if element is not None:
            try:
                element.add_loop(loop, incoming)
            except DirectionError as e:
                raise DirectionError(
                    f"{e} Walk {walk_id} from {node} going {direction.name} reached it after its faces were "
                    "already traced. This happens when a single element bridges two otherwise separate circuits."
                ) from e
            loop.add_element(element)
            latest_endpoint = point

        outgoing = rightmost_direction(point, incoming)
        turns += Direction.turn_between(incoming, outgoing)
        prev, point = point, board.step(point, outgoing)

    return loop, turns
