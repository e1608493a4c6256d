from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional

from circuitfield.model.direction import Direction

if TYPE_CHECKING:
    from circuitfield.model.elements import Element


class LatticePoint:
    """
    Represents one integer point of the circuit board and the field values solved at it.
    """
    def __init__(self, x: int, y: int) -> None:
        """
        Initialize the lattice point with its coordinates.

        Args:
            x: Column of the point (grows eastward).
            y: Row of the point (grows southward).
        """
        self.x = x
        self.y = y

        self.current: float = 0.0  # A, positive = clockwise
        self.potential: float = 0.0  # V, normalized after solving
        self.e_field_x: float = 0.0  # N/C
        self.e_field_y: float = 0.0
        self.b_field_z: float = 0.0  # mT
        self.flow_x: float = 0.0  # W/m^2
        self.flow_y: float = 0.0

        self.on_circuit: bool = False
        self.loop_membership_count: int = 0
        self.elements: List[Element] = []

        self._neighbors: List[bool] = [False, False, False, False]
        self.neighbor_count: int = 0

        # Scratch marks, one per algorithm; cleared by `clear_marks`
        self.walk_mark: Optional[int] = None
        self.flow_mark: Optional[float] = None

    def __repr__(self) -> str:
        return f"({self.x},{self.y})"

    @property
    def key(self) -> tuple[int, int]:
        """Sort key: by x first, then by y."""
        return self.x, self.y

    def add_neighbor(self, direction: Direction) -> bool:
        """
        Record a circuit connection leaving this point in `direction`.

        Returns:
            False if the connection already existed, True otherwise.
        """
        if self._neighbors[direction.value]:
            return False
        self._neighbors[direction.value] = True
        self.neighbor_count += 1
        return True

    def has_neighbor(self, direction: Direction) -> bool:
        return self._neighbors[direction.value]

    @property
    def neighbor_directions(self) -> List[Direction]:
        """Connected directions in WEST, NORTH, EAST, SOUTH order."""
        return [d for d in Direction if self._neighbors[d.value]]

    def add_element(self, element: Element) -> None:
        self.elements.append(element)

    def clear_marks(self) -> None:
        self.walk_mark = None
        self.flow_mark = None

    @property
    def e_field_magnitude(self) -> float:
        return math.hypot(self.e_field_x, self.e_field_y)

    @property
    def flow_magnitude(self) -> float:
        return math.hypot(self.flow_x, self.flow_y)

    @property
    def b_field_into_plane(self) -> bool:
        """True when the magnetic field points into the board, False when out of it."""
        return self.b_field_z > 0
