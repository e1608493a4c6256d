"""
circuitfield
Steady-state currents, potentials and fields of planar grid circuits.
"""
from circuitfield.config import SolverSettings
from circuitfield.exceptions import CircuitError
from circuitfield.model.board import CircuitBoard, CircuitDescription, ElementSpec
from circuitfield.model.io import parse_circuit, read_circuit
from circuitfield.solvers.solver import Solver

__version__ = "0.1.0"

__all__ = [
    "CircuitBoard",
    "CircuitDescription",
    "CircuitError",
    "ElementSpec",
    "Solver",
    "SolverSettings",
    "parse_circuit",
    "read_circuit",
]
