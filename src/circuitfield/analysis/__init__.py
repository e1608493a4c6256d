"""
The ANALYSIS layer holds the algorithms that run over a `CircuitBoard`,
one module per solve phase.
"""
from circuitfield.analysis.equations import assemble_system, fill_interior_currents, solve_currents
from circuitfield.analysis.fields import FieldMaxima, derive_fields, normalize_fields
from circuitfield.analysis.flowlines import trace_flow_lines, trace_loop_flow_lines
from circuitfield.analysis.linalg import rref
from circuitfield.analysis.potential import RelaxationResult, propagate_potentials, relax, solve_potentials
from circuitfield.analysis.topology import extract_loops

__all__ = [
    "FieldMaxima",
    "RelaxationResult",
    "assemble_system",
    "derive_fields",
    "extract_loops",
    "fill_interior_currents",
    "normalize_fields",
    "propagate_potentials",
    "relax",
    "rref",
    "solve_currents",
    "solve_potentials",
    "trace_flow_lines",
    "trace_loop_flow_lines",
]
