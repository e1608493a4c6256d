from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Iterator, List, Set

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

    from circuitfield.model.elements import Element
    from circuitfield.model.lattice import LatticePoint


class Loop:
    """
    A mesh face of the circuit: the elements and boundary points met when walking
    around it clockwise, plus every lattice point it encloses.

    Both sequences are circular; `elements_from` walks the element cycle from any
    member element with wrap-around indexing.
    """
    def __init__(self, index: int) -> None:
        """
        Initialize an empty loop.

        Args:
            index: Row/column selector in the Kirchhoff system; -1 excludes the loop.
        """
        self.index = index
        self.elements: List[Element] = []
        self.perimeter: List[LatticePoint] = []
        self.points: Set[LatticePoint] = set()
        self.current: float = 0.0  # A, positive = clockwise
        self.potential_min: float = math.inf
        self.potential_max: float = -math.inf
        self.flow_lines: List[npt.NDArray[np.float64]] = []

        self._positions: Dict[Element, int] = {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(index={self.index}, elements={len(self.elements)})"

    @property
    def is_bounded(self) -> bool:
        return self.index >= 0

    def add_element(self, element: Element) -> None:
        self._positions[element] = len(self.elements)
        self.elements.append(element)

    def add_perimeter_point(self, point: LatticePoint) -> None:
        self.perimeter.append(point)

    def enclose(self, point: LatticePoint) -> None:
        """Count `point` as belonging to this loop."""
        if point not in self.points:
            self.points.add(point)
            point.loop_membership_count += 1

    def contains(self, point: LatticePoint) -> bool:
        return point in self.points

    def elements_from(self, element: Element) -> Iterator[Element]:
        """Every element of the loop once, in traversal order, starting at `element`."""
        n = len(self.elements)
        first = self._positions[element]
        for k in range(n):
            yield self.elements[(first + k) % n]

    def perimeter_pairs(self) -> Iterator[tuple[LatticePoint, LatticePoint]]:
        """Consecutive (previous, current) boundary points, including the closing pair."""
        n = len(self.perimeter)
        for k in range(n):
            yield self.perimeter[k - 1], self.perimeter[k]

    def set_potential_extremes(self) -> None:
        potentials = [p.potential for p in self.perimeter]
        self.potential_min = min(potentials)
        self.potential_max = max(potentials)
