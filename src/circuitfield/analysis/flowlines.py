"""
Flow-line tracing.

Energy flows along the equipotentials of the normalized potential. Inside each
loop a set of evenly spaced levels is traced as polylines: every level crossing
on the loop boundary starts a line, which is followed cell by cell through the
loop until it leaves the loop or the board.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from circuitfield.exceptions import FieldTracingError
from circuitfield.model.direction import Direction, Turn

if TYPE_CHECKING:
    import numpy.typing as npt

    from circuitfield.config import SolverSettings
    from circuitfield.model.board import CircuitBoard
    from circuitfield.model.lattice import LatticePoint
    from circuitfield.model.loop import Loop

logger = logging.getLogger(__name__)

Edge = Tuple["LatticePoint", "LatticePoint"]


def level_count(loop_current: float, max_current: float, max_regions: int) -> int:
    """Number of potential bands for a loop; the strongest loop gets `max_regions`."""
    if max_current == 0.0:
        return 0
    return int(abs(loop_current) * max_regions / max_current + 0.5)


def flow_levels(low: float, high: float, n_regions: int, margin: float) -> List[float]:
    """Levels dividing [low, high] into `n_regions` bands, dropping any within `margin` of `high`."""
    if n_regions <= 1:
        return []
    step = (high - low) / n_regions
    levels = [low + k * step for k in range(1, n_regions)]
    return [level for level in levels if level < high - margin]


def _brackets(a: LatticePoint, b: LatticePoint, level: float) -> bool:
    return (a.potential - level) * (b.potential - level) <= 0.0


def _lower(a: LatticePoint, b: LatticePoint) -> LatticePoint:
    return a if a.potential <= b.potential else b


def _crossing(q0: LatticePoint, q1: LatticePoint, level: float) -> Tuple[float, float]:
    """Point on segment q0-q1 where the linearly interpolated potential equals `level`."""
    span = q1.potential - q0.potential
    fraction = 0.0 if span == 0.0 else (level - q0.potential) / span
    dx, dy = Direction.between(q0, q1).offset
    return q0.x + fraction * dx, q0.y + fraction * dy


def _next_edge(board: CircuitBoard, loop: Loop, edge: Edge, level: float) -> Optional[Edge]:
    """
    Edge through which the level leaves the cell on the left of `edge`.

    Returns:
        None if that cell is off the board or not inside `loop`.

    Raises:
        FieldTracingError: If no other edge of the cell brackets the level.
    """
    q0, q1 = edge
    left = Direction.between(q0, q1).turn(Turn.LEFT)
    a = board.step(q0, left)
    b = board.step(q1, left)
    if a is None or b is None or not (loop.contains(a) and loop.contains(b)):
        return None

    # Straight across, then the edge on q0's side, then the edge on q1's side
    for candidate in ((a, b), (q0, a), (b, q1)):
        if _brackets(candidate[0], candidate[1], level):
            return candidate
    raise FieldTracingError(
        f"Error tracing level {level:.6g} in loop {loop.index}: no edge of the cell at {q0}-{q1} brackets it."
    )


def trace_line(board: CircuitBoard, loop: Loop, start: Edge, level: float) -> npt.NDArray[np.float64]:
    """
    Follow one level from the boundary edge `start` into `loop`.

    The lower points of the starting and final edges are marked with the level,
    so the same line is not traced again from either end.

    Returns:
        The crossing points as an (N, 2) array of lattice coordinates.
    """
    max_steps = 4 * len(loop.points) + 4
    points = [_crossing(start[0], start[1], level)]
    last = start

    for _ in range(max_steps):
        edge = _next_edge(board, loop, last, level)
        if edge is None:
            break
        points.append(_crossing(edge[0], edge[1], level))
        last = edge
    else:
        raise FieldTracingError(f"Flow line at level {level:.6g} in loop {loop.index} does not terminate.")

    _lower(*start).flow_mark = level
    _lower(*last).flow_mark = level
    return np.array(points, dtype=np.float64)


def trace_loop_flow_lines(
    board: CircuitBoard,
    loop: Loop,
    n_regions: int,
    margin: float = 0.001,
) -> List[npt.NDArray[np.float64]]:
    """Trace every level of `loop` from each boundary crossing not yet used at that level."""
    loop.set_potential_extremes()
    lines: List[npt.NDArray[np.float64]] = []

    for level in flow_levels(loop.potential_min, loop.potential_max, n_regions, margin):
        for previous, current in loop.perimeter_pairs():
            if not _brackets(previous, current, level):
                continue
            if _lower(current, previous).flow_mark == level:
                continue
            lines.append(trace_line(board, loop, (current, previous), level))

    loop.flow_lines = lines
    return lines


def trace_flow_lines(board: CircuitBoard, settings: SolverSettings, max_current: float) -> int:
    """
    Trace flow lines for every loop; each loop gets a number of levels proportional
    to its share of the largest loop current.

    Returns:
        Total number of lines traced.
    """
    total = 0
    for loop in board.bounded_loops:
        n_regions = level_count(loop.current, max_current, settings.max_flow_regions)
        lines = trace_loop_flow_lines(board, loop, n_regions, settings.flow_level_margin)
        logger.debug(f"Loop {loop.index}: {len(lines)} flow lines over {n_regions} regions.")
        total += len(lines)
    logger.info(f"Traced {total} flow lines in {len(board.bounded_loops)} loops.")
    return total
