"""
Circuit Errors
==============
Every condition that aborts loading or solving a circuit.

All of them derive from `CircuitError`, itself a `ValueError`, so callers
that only care about "this circuit is unusable" can catch one class.
"""
from __future__ import annotations

from typing import Optional


class CircuitError(ValueError):
    """Base class for errors that make a circuit unsolvable."""


class CircuitParseError(CircuitError):
    """A line of a circuit description could not be read."""

    def __init__(self, message: str, line_no: Optional[int] = None, line: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_no = line_no
        self.line = line

    def set_line(self, line_no: int, line: str) -> None:
        self.line_no = line_no
        self.line = line

    def __str__(self) -> str:
        if self.line_no is None:
            return self.message
        return f"Error in line {self.line_no}: {self.line}\n{self.message}"


class MalformedTopologyError(CircuitError):
    """The element graph is not a valid planar circuit."""


class ZeroLengthElementError(MalformedTopologyError):
    pass


class NotAxisAlignedError(MalformedTopologyError):
    pass


class OverlappingElementsError(MalformedTopologyError):
    pass


class OpenCircuitError(MalformedTopologyError):
    """Perimeter tracing reached a point with nowhere to go."""


class DirectionError(MalformedTopologyError):
    """Invalid direction arithmetic or an inconsistent loop/direction assignment."""


class FieldTracingError(CircuitError):
    """A flow line could not be continued through the derived field."""


class EmptyCircuitError(CircuitError):
    """The circuit has no elements or encloses no loop."""
