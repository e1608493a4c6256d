from __future__ import annotations

from typing import Callable, Dict, List, Tuple

import pytest

from circuitfield.model.board import CircuitBoard, CircuitDescription, ElementSpec
from circuitfield.model.elements import ElementKind
from circuitfield.solvers.solver import Solver

W = ElementKind.CONDUCTOR
R = ElementKind.RESISTOR
B = ElementKind.SOURCE

# 5 V source on the right, 10 ohm resistor along the bottom
SINGLE_CELL = (1, 1, [
    (W, (0, 0), (1, 0), None),
    (B, (1, 0), (1, 1), 5.0),
    (R, (1, 1), (0, 1), 10.0),
    (W, (0, 1), (0, 0), None),
])

# Two cells sharing a 10 ohm resistor; 10 V source on the left, 5 ohm on the right
TWO_CELLS = (2, 1, [
    (B, (0, 1), (0, 0), 10.0),
    (W, (0, 0), (1, 0), None),
    (W, (1, 0), (2, 0), None),
    (R, (2, 0), (2, 1), 5.0),
    (W, (2, 1), (1, 1), None),
    (W, (1, 1), (0, 1), None),
    (R, (1, 0), (1, 1), 10.0),
])

# 12 V source up the left side, 6 ohm down the right side, 3x3 free points inside
SQUARE = (4, 4, [
    (B, (0, 4), (0, 0), 12.0),
    (W, (0, 0), (4, 0), None),
    (R, (4, 0), (4, 4), 6.0),
    (W, (4, 4), (0, 4), None),
])


def _unit_mesh(size: int, sources: Dict[Tuple, float]) -> Tuple:
    """Square mesh of 1 ohm unit resistors; `sources` replaces some segments by (first, second): voltage."""
    segments = []
    for a in range(size + 1):
        for b in range(size):
            segments.append(((b, a), (b + 1, a)))
            segments.append(((a, b), (a, b + 1)))
    elements = []
    for first, second in segments:
        for (start, end), voltage in sources.items():
            if {start, end} == {first, second}:
                elements.append((B, start, end, voltage))
                break
        else:
            elements.append((R, first, second, 1.0))
    return size, size, elements


# 3x3 cells; both sources drive their corner cell clockwise, the centre cell touches no source
MESH = _unit_mesh(3, {((0, 1), (0, 0)): 10.0, ((3, 3), (2, 3)): 5.0})


def describe(width: int, height: int, elements: List[Tuple], name: str = "test") -> CircuitDescription:
    return CircuitDescription(
        width=width,
        height=height,
        elements=[ElementSpec(kind, start, end, value) for kind, start, end, value in elements],
        name=name,
    )


def make_board(circuit: Tuple) -> CircuitBoard:
    width, height, elements = circuit
    return CircuitBoard.from_description(describe(width, height, elements))


@pytest.fixture
def make_circuit() -> Callable[..., CircuitBoard]:
    """Factory: make_circuit(width, height, [(kind, start, end, value), ...])."""
    def factory(width: int, height: int, elements: List[Tuple]) -> CircuitBoard:
        return make_board((width, height, elements))
    return factory


@pytest.fixture
def single_cell() -> CircuitBoard:
    return make_board(SINGLE_CELL)


@pytest.fixture
def two_cells() -> CircuitBoard:
    return make_board(TWO_CELLS)


@pytest.fixture
def square() -> CircuitBoard:
    return make_board(SQUARE)


@pytest.fixture
def solved_single_cell(single_cell: CircuitBoard) -> Solver:
    solver = Solver(single_cell)
    solver.solve()
    return solver


@pytest.fixture
def solved_two_cells(two_cells: CircuitBoard) -> Solver:
    solver = Solver(two_cells)
    solver.solve()
    return solver


@pytest.fixture
def solved_square(square: CircuitBoard) -> Solver:
    solver = Solver(square)
    solver.solve()
    return solver


@pytest.fixture
def solved_mesh() -> Solver:
    solver = Solver(make_board(MESH))
    solver.solve()
    return solver
