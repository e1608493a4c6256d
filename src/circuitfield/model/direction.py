"""
Compass directions on the lattice.

The y axis grows downward (screen coordinates): SOUTH is +y, EAST is +x.
Values are ordered clockwise, so turning right is +1 and turning left is -1.
"""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Tuple

from circuitfield.exceptions import DirectionError

if TYPE_CHECKING:
    from circuitfield.model.lattice import LatticePoint


class Turn(IntEnum):
    LEFT = -1
    STRAIGHT = 0
    RIGHT = 1


class Direction(Enum):
    WEST = 0
    NORTH = 1
    EAST = 2
    SOUTH = 3

    @property
    def offset(self) -> Tuple[int, int]:
        """Lattice step (dx, dy) of one move in this direction."""
        return _OFFSETS[self]

    @property
    def signum(self) -> int:
        """+1 when moving towards larger coordinates (EAST, SOUTH), -1 otherwise."""
        return 1 if self in (Direction.EAST, Direction.SOUTH) else -1

    def flip(self) -> Direction:
        return Direction((self.value + 2) % 4)

    def turn(self, turn: int) -> Direction:
        return Direction((self.value + int(turn) + 4) % 4)

    @staticmethod
    def between(a: LatticePoint, b: LatticePoint) -> Direction:
        """
        Direction of travel from point `a` to point `b`.

        Raises:
            DirectionError: If the points coincide or are not on a common row/column.
        """
        if a.y == b.y:
            if a.x < b.x:
                return Direction.EAST
            if a.x > b.x:
                return Direction.WEST
            raise DirectionError(f"Error finding direction from {a} to {b}: the points coincide.")
        if a.x == b.x:
            return Direction.SOUTH if a.y < b.y else Direction.NORTH
        raise DirectionError(f"Points {a} and {b} are positioned neither horizontally nor vertically.")

    @staticmethod
    def turn_between(incoming: Direction, outgoing: Direction) -> Turn:
        """
        Classify the turn made when leaving along `outgoing` after arriving along `incoming`.

        Raises:
            DirectionError: For a U-turn, which is not a valid turn.
        """
        delta = (outgoing.value - incoming.value) % 4
        if delta == 0:
            return Turn.STRAIGHT
        if delta == 1:
            return Turn.RIGHT
        if delta == 3:
            return Turn.LEFT
        raise DirectionError(f"{incoming.name} to {outgoing.name} is not a valid turn.")


_OFFSETS = {
    Direction.WEST: (-1, 0),
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
}
