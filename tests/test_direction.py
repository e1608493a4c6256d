import pytest

from circuitfield.exceptions import DirectionError
from circuitfield.model.direction import Direction, Turn
from circuitfield.model.lattice import LatticePoint


def test_flip_is_opposite():
    assert Direction.NORTH.flip() is Direction.SOUTH
    assert Direction.EAST.flip() is Direction.WEST
    for d in Direction:
        assert d.flip().flip() is d


def test_turns_are_clockwise():
    assert Direction.NORTH.turn(Turn.RIGHT) is Direction.EAST
    assert Direction.NORTH.turn(Turn.LEFT) is Direction.WEST
    assert Direction.WEST.turn(Turn.LEFT) is Direction.SOUTH
    assert Direction.SOUTH.turn(Turn.STRAIGHT) is Direction.SOUTH


def test_signum_and_offsets():
    assert Direction.EAST.signum == 1
    assert Direction.SOUTH.signum == 1
    assert Direction.WEST.signum == -1
    assert Direction.NORTH.signum == -1
    assert Direction.SOUTH.offset == (0, 1)
    assert Direction.NORTH.offset == (0, -1)


def test_between():
    a = LatticePoint(1, 1)
    assert Direction.between(a, LatticePoint(3, 1)) is Direction.EAST
    assert Direction.between(a, LatticePoint(0, 1)) is Direction.WEST
    assert Direction.between(a, LatticePoint(1, 5)) is Direction.SOUTH
    assert Direction.between(a, LatticePoint(1, 0)) is Direction.NORTH


def test_between_rejects_diagonal_and_same_point():
    with pytest.raises(DirectionError):
        Direction.between(LatticePoint(0, 0), LatticePoint(1, 1))
    with pytest.raises(DirectionError):
        Direction.between(LatticePoint(2, 2), LatticePoint(2, 2))


def test_turn_between():
    assert Direction.turn_between(Direction.EAST, Direction.SOUTH) is Turn.RIGHT
    assert Direction.turn_between(Direction.EAST, Direction.NORTH) is Turn.LEFT
    assert Direction.turn_between(Direction.WEST, Direction.WEST) is Turn.STRAIGHT
    with pytest.raises(DirectionError):
        Direction.turn_between(Direction.EAST, Direction.WEST)
