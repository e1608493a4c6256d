"""
Circuit Board (Data Model)
==========================
The lattice, the elements laid on it, its junction nodes and its loops.

Why is this file needed?
------------------------
1. Ownership: Every LatticePoint, Element and Loop of one circuit lives here;
   algorithms receive the board and never keep their own copies.
2. Input Interface: `CircuitDescription` is what a circuit reader produces and
   what `CircuitBoard.from_description` consumes.
3. Output Interface: Renderers read per-point fields as NumPy arrays through
   `CircuitBoard.field` once a solve has completed.

Classes:
    ElementSpec: One parsed element (type, endpoints, value).
    CircuitDescription: Board bounds plus the parsed elements.
    CircuitBoard: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterator, List, Optional, Tuple

import numpy as np

from circuitfield.exceptions import CircuitError, EmptyCircuitError, OverlappingElementsError
from circuitfield.model.direction import Direction
from circuitfield.model.elements import Conductor, Element, ElementKind, Resistor, Source
from circuitfield.model.lattice import LatticePoint

if TYPE_CHECKING:
    import numpy.typing as npt

    from circuitfield.analysis.fields import FieldMaxima
    from circuitfield.model.loop import Loop

logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]

FIELD_NAMES = ("potential", "current", "e_field_x", "e_field_y", "b_field_z", "flow_x", "flow_y")


@dataclass(frozen=True)
class ElementSpec:
    """
    One element as delivered by a circuit reader.

    `value` is the resistance in ohms for resistors and the voltage for sources;
    conductors carry none. For sources the potential rises from `start` to `end`.
    """
    kind: ElementKind
    start: Coordinate
    end: Coordinate
    value: Optional[float] = None


@dataclass
class CircuitDescription:
    """
    Board bounds and elements of one circuit.

    `width` and `height` are the largest usable x and y coordinates, so the
    lattice holds (width + 1) x (height + 1) points.
    """
    width: int
    height: int
    elements: List[ElementSpec] = field(default_factory=list)
    name: str = ""


class CircuitBoard:
    """
    The full lattice of one circuit together with its elements, nodes and loops.
    """
    def __init__(self, width: int, height: int, name: str = "") -> None:
        """
        Initialize an empty board.

        Args:
            width: Largest x coordinate.
            height: Largest y coordinate.
            name: Label used in log messages.
        """
        if width <= 0 or height <= 0:
            raise CircuitError(f"Board bounds must be positive. Found: ({width}, {height})")
        self.name = name
        self.width = width
        self.height = height
        self._grid: List[List[LatticePoint]] = [
            [LatticePoint(x, y) for y in range(height + 1)] for x in range(width + 1)
        ]

        self._elements: Dict[FrozenSet[Coordinate], Element] = {}
        self._nodes: Dict[Coordinate, LatticePoint] = {}
        self.loops: List[Loop] = []
        self.maxima: Optional[FieldMaxima] = None

        self.is_solved: bool = False
        self.failure: Optional[Exception] = None

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(name='{self.name}', shape={self.shape}, "
                f"elements={len(self._elements)}, loops={len(self.loops)})")

    @classmethod
    def from_description(cls, description: CircuitDescription) -> CircuitBoard:
        """
        Build a board and lay out every element of `description` on it.

        Raises:
            EmptyCircuitError: If the description has no elements.
            MalformedTopologyError: If an element is invalid or overlaps another.
        """
        board = cls(description.width, description.height, name=description.name)
        for spec in description.elements:
            board.add_element(spec)
        if not board._elements:
            raise EmptyCircuitError(f"Circuit '{description.name}' contains no circuit elements.")
        logger.debug(f"Built board {board}.")
        return board

    # Lattice access

    @property
    def shape(self) -> Tuple[int, int]:
        """Number of lattice points along x and y."""
        return self.width + 1, self.height + 1

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x <= self.width and 0 <= y <= self.height

    def point(self, x: int, y: int) -> LatticePoint:
        if not self.contains(x, y):
            raise CircuitError(f"Coordinates ({x},{y}) out of bounds ({self.width},{self.height}).")
        return self._grid[x][y]

    def step(self, point: LatticePoint, direction: Direction) -> Optional[LatticePoint]:
        """The lattice point one step from `point`, or None past the board edge."""
        dx, dy = direction.offset
        x, y = point.x + dx, point.y + dy
        if not self.contains(x, y):
            return None
        return self._grid[x][y]

    def __iter__(self) -> Iterator[LatticePoint]:
        """Iterate over all points, column by column."""
        for column in self._grid:
            yield from column

    # Elements and nodes

    def add_element(self, spec: ElementSpec) -> Element:
        """
        Create the element described by `spec` and link it into the lattice.

        Raises:
            OverlappingElementsError: If an element with the same endpoints exists.
        """
        first = self.point(*spec.start)
        second = self.point(*spec.end)
        key = frozenset((spec.start, spec.end))
        if key in self._elements:
            raise OverlappingElementsError(
                f"Elements {self._elements[key]!r} and {spec.kind.name.lower()} {first} {second} overlap."
            )

        if spec.kind is ElementKind.CONDUCTOR:
            element: Element = Conductor(first, second, self)
        elif spec.kind is ElementKind.RESISTOR:
            element = Resistor(first, second, self, resistance=_required_value(spec))
        elif spec.kind is ElementKind.SOURCE:
            element = Source(first, second, self, voltage=_required_value(spec))
        else:
            raise CircuitError(f"Unknown element type: {spec.kind}")

        self._elements[key] = element
        return element

    @property
    def elements(self) -> List[Element]:
        return list(self._elements.values())

    def element_between(self, a: LatticePoint, b: LatticePoint) -> Optional[Element]:
        """The element whose endpoints are exactly `a` and `b`."""
        return self._elements.get(frozenset((a.key, b.key)))

    def add_node(self, point: LatticePoint) -> None:
        self._nodes.setdefault(point.key, point)

    @property
    def nodes(self) -> List[LatticePoint]:
        """Junction points ordered by (x, y)."""
        return [self._nodes[k] for k in sorted(self._nodes)]

    @property
    def bounded_loops(self) -> List[Loop]:
        return [loop for loop in self.loops if loop.is_bounded]

    # Solved data

    def require_solved(self) -> None:
        if self.failure is not None:
            raise RuntimeError(f"Solving circuit '{self.name}' failed: {self.failure}")
        if not self.is_solved:
            raise RuntimeError(f"Circuit '{self.name}' has not been solved yet.")

    def field(self, name: str) -> npt.NDArray[np.float64]:
        """
        Per-point values of one field as an array indexed [x, y].

        Args:
            name: One of FIELD_NAMES.
        """
        if name not in FIELD_NAMES:
            raise ValueError(f"Unknown field '{name}'. Expected one of {FIELD_NAMES}.")
        self.require_solved()
        return self.field_array(name)

    def field_array(self, name: str) -> npt.NDArray[np.float64]:
        """Unchecked version of `field`, for use while solving."""
        return np.array([[getattr(p, name) for p in column] for column in self._grid], dtype=np.float64)

    def set_field_array(self, name: str, values: npt.NDArray[np.float64]) -> None:
        if values.shape != self.shape:
            raise ValueError(f"Expected shape {self.shape}, got {values.shape}.")
        for x, column in enumerate(self._grid):
            for y, p in enumerate(column):
                setattr(p, name, float(values[x, y]))

    @property
    def flow_lines(self) -> Dict[int, List[npt.NDArray[np.float64]]]:
        """Traced flow lines keyed by loop index."""
        self.require_solved()
        return {loop.index: loop.flow_lines for loop in self.bounded_loops}


def _required_value(spec: ElementSpec) -> float:
    if spec.value is None:
        raise CircuitError(f"A {spec.kind.name.lower()} from {spec.start} to {spec.end} needs a value.")
    return float(spec.value)
