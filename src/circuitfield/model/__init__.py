"""
The MODEL layer contains pure data structures.
It has NO knowledge of how circuits are solved or rendered.
It deals with the lattice, the circuit elements, loops and circuit files.
"""
from circuitfield.model.board import CircuitBoard, CircuitDescription, ElementSpec
from circuitfield.model.direction import Direction, Turn
from circuitfield.model.elements import Conductor, DirectionTable, Element, ElementKind, Resistor, Source
from circuitfield.model.lattice import LatticePoint
from circuitfield.model.loop import Loop

__all__ = [
    "CircuitBoard",
    "CircuitDescription",
    "Conductor",
    "Direction",
    "DirectionTable",
    "Element",
    "ElementKind",
    "ElementSpec",
    "LatticePoint",
    "Loop",
    "Resistor",
    "Source",
    "Turn",
]
