from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Iterator, List, Tuple

from circuitfield.exceptions import (
    CircuitError,
    DirectionError,
    NotAxisAlignedError,
    OverlappingElementsError,
    ZeroLengthElementError,
)
from circuitfield.model.direction import Direction

if TYPE_CHECKING:
    from circuitfield.model.board import CircuitBoard
    from circuitfield.model.lattice import LatticePoint
    from circuitfield.model.loop import Loop


class ElementKind(StrEnum):
    """Element types, valued by their letter in a circuit file."""
    CONDUCTOR = "w"
    RESISTOR = "r"
    SOURCE = "b"


class DirectionTable:
    """
    Traversal direction of an element for each loop bordering it.

    A grid-aligned segment borders at most two faces of a planar graph, and the
    two faces traverse it in opposite directions, so the table holds at most two
    (loop, direction) pairs with distinct directions.
    """
    CAPACITY: ClassVar[int] = 2

    def __init__(self) -> None:
        self._entries: List[Tuple[Loop, Direction]] = []

    def __repr__(self) -> str:
        return "{ " + " ".join(f"({loop}, {d.name})" for loop, d in self._entries) + " }"

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, loop: Loop, direction: Direction) -> None:
        if len(self._entries) >= self.CAPACITY:
            raise DirectionError(f"A direction table can't hold more than two loops. {self}")
        if self.has_direction(direction):
            raise DirectionError(f"A direction table can't hold two loops going in the same direction. {self}")
        self._entries.append((loop, direction))

    def get(self, loop: Loop) -> Direction:
        for entry_loop, direction in self._entries:
            if entry_loop is loop:
                return direction
        raise DirectionError(f"This direction table does not contain {loop}. {self}")

    def has_direction(self, direction: Direction) -> bool:
        return any(d is direction for _, d in self._entries)

    @property
    def loops(self) -> List[Loop]:
        """Bordering loops that take part in the solve (index >= 0)."""
        return [loop for loop, _ in self._entries if loop.index >= 0]

    def indices(self) -> Tuple[int, int]:
        """
        Ordered loop indices (i, j), i <= j, of the bordering genuine loops.

        An element bordering one genuine loop i reports (i, i).
        """
        indices = sorted(loop.index for loop in self.loops)
        if not indices:
            raise DirectionError(f"This direction table does not contain any loops. {self}")
        return indices[0], indices[-1]


class Element(ABC):
    """
    Abstract base class for circuit elements.

    An element covers every lattice point of a straight horizontal or vertical run
    between its endpoints. `start` is always the endpoint with the smaller (x, y).
    """
    kind: ClassVar[ElementKind]

    def __init__(
        self,
        first: LatticePoint,
        second: LatticePoint,
        board: CircuitBoard,
    ) -> None:
        """
        Initialize the element and link its points into the board's circuit graph.

        Args:
            first: One endpoint, as given in the circuit description.
            second: The other endpoint.
            board: The board owning both points.

        Raises:
            ZeroLengthElementError: If both endpoints coincide.
            NotAxisAlignedError: If the endpoints share neither a row nor a column.
            OverlappingElementsError: If a segment of the run is already occupied.
        """
        if first.key == second.key:
            raise ZeroLengthElementError(f"Elements may not be of zero length. Found {first} to {second}.")
        if first.x != second.x and first.y != second.y:
            raise NotAxisAlignedError(
                f"Element from {first} to {second} must be positioned either horizontally or vertically."
            )

        self.start, self.end = sorted((first, second), key=lambda p: p.key)
        self.is_horizontal = self.start.y == self.end.y
        self.directions = DirectionTable()
        self.current: float = 0.0
        self.assigned_direction: Direction | None = None

        step = Direction.EAST if self.is_horizontal else Direction.SOUTH
        self.points: List[LatticePoint] = [self.start]
        while self.points[-1] is not self.end:
            self.points.append(board.step(self.points[-1], step))

        # The whole run is checked before any point is linked
        for prev, nxt in zip(self.points, self.points[1:]):
            if prev.has_neighbor(step) or nxt.has_neighbor(step.flip()):
                raise OverlappingElementsError(
                    f"Element {self!r} overlaps another element between {prev} and {nxt}."
                )

        self._register(self.start)
        for prev, nxt in zip(self.points, self.points[1:]):
            prev.add_neighbor(step)
            nxt.add_neighbor(step.flip())
            self._register(nxt)
            for p in (prev, nxt):
                if p.neighbor_count > 2:
                    board.add_node(p)

    def _register(self, point: LatticePoint) -> None:
        point.on_circuit = True
        point.add_element(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.start}, {self.end})"

    @property
    def length(self) -> int:
        """Number of unit segments spanned."""
        return len(self.points) - 1

    @property
    def is_conductor(self) -> bool:
        return False

    @property
    def potential_drop(self) -> float:
        """Magnitude of the potential change across the element."""
        return 0.0

    @abstractmethod
    def set_potentials(self, potential: float, loop: Loop) -> float:
        """
        Assign potentials to the element's points, walking it in `loop`'s traversal order.

        Args:
            potential: Potential at the point where `loop` enters the element.
            loop: The loop being walked.

        Returns:
            The potential where `loop` leaves the element.
        """
        pass

    # Loop bookkeeping

    def add_loop(self, loop: Loop, direction: Direction) -> None:
        try:
            self.directions.add(loop, direction)
        except DirectionError as e:
            raise DirectionError(f"Error with {self!r}: {e}") from e

    def direction_for(self, loop: Loop) -> Direction:
        return self.directions.get(loop)

    @property
    def loops(self) -> List[Loop]:
        return self.directions.loops

    def loops_index(self, n_loops: int) -> int:
        """Column of this element's branch current among n_loops**2 unknowns."""
        i, j = self.directions.indices()
        return i * n_loops + j

    def is_endpoint(self, point: LatticePoint) -> bool:
        return point is self.start or point is self.end

    def iter_along(self, loop: Loop) -> Iterator[LatticePoint]:
        """Points in `loop`'s traversal order."""
        if self.direction_for(loop).signum > 0:
            return iter(self.points)
        return reversed(self.points)

    def node_sign(self, node: LatticePoint) -> int:
        """
        +1 if the assigned current direction leads away from `node`, -1 if towards it.

        Raises:
            DirectionError: If no direction has been assigned yet.
            OverlappingElementsError: If `node` is not an endpoint of this element.
        """
        if self.assigned_direction is None:
            raise DirectionError(f"{self!r} has no assigned direction.")
        outward = self.assigned_direction.signum
        if node is self.start:
            return outward
        if node is self.end:
            return -outward
        raise OverlappingElementsError(
            f"Element {self!r} passes through node {node} without having an endpoint there."
        )

    def _distribute(self, potential: float, change: float, loop: Loop) -> float:
        """Spread `change` linearly over the points, starting from `potential`."""
        increment = change / self.length
        value = potential
        for p in self.iter_along(loop):
            p.potential = value
            value += increment
        return potential + change


class Conductor(Element):
    """Ideal wire: no resistance, constant potential."""
    kind = ElementKind.CONDUCTOR

    @property
    def is_conductor(self) -> bool:
        return True

    def set_potentials(self, potential: float, loop: Loop) -> float:
        for p in self.points:
            p.potential = potential
        return potential


class Resistor(Element):
    kind = ElementKind.RESISTOR

    def __init__(self, first: LatticePoint, second: LatticePoint, board: CircuitBoard, resistance: float) -> None:
        if resistance < 0:
            raise CircuitError(f"Resistance may not be negative. Found: {resistance}")
        self.value = float(resistance)
        super().__init__(first, second, board)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.start}, {self.end}, {self.value:g} ohm)"

    @property
    def resistance(self) -> float:
        return self.value

    @property
    def potential_drop(self) -> float:
        return abs(self.value * self.current)

    def set_potentials(self, potential: float, loop: Loop) -> float:
        # Walking with the current loses potential, walking against it gains
        sign = -1 if self.assigned_direction is self.direction_for(loop) else 1
        return self._distribute(potential, self.value * self.current * sign, loop)


class Source(Element):
    """
    Battery. The potential rises by `voltage` from the first to the second endpoint
    as given in the description; `is_forward` records whether that is towards the
    larger coordinate.
    """
    kind = ElementKind.SOURCE

    def __init__(self, first: LatticePoint, second: LatticePoint, board: CircuitBoard, voltage: float) -> None:
        self.value = float(voltage)
        super().__init__(first, second, board)
        self.is_forward = self.start is first

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.start}, {self.end}, {self.value:g} V)"

    @property
    def voltage(self) -> float:
        return self.value

    @property
    def potential_drop(self) -> float:
        return abs(self.value)

    @property
    def polarity(self) -> Direction:
        """Direction in which the source drives current."""
        if self.is_horizontal:
            return Direction.EAST if self.is_forward else Direction.WEST
        return Direction.SOUTH if self.is_forward else Direction.NORTH

    def set_potentials(self, potential: float, loop: Loop) -> float:
        sign = self.direction_for(loop).signum * (1 if self.is_forward else -1)
        return self._distribute(potential, self.value * sign, loop)
