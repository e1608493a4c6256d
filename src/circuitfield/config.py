"""
Physical Constants & Solver Settings
====================================
Central registry for the constants used by the field derivation and for the
tunable parameters of the numerical phases.

Exports:
    GRID_SPACING (float): Distance between neighbouring lattice points [m].
    MU_NAUGHT (float): Vacuum permeability [H/m].
    WIRE_THICKNESS (float): Conductor thickness used for current density [m].
    MILLI (float): Scale from tesla to millitesla.
    SolverSettings: Tunables for relaxation and flow-line tracing.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

# Global Constants
GRID_SPACING: float = 0.01  # 1 cm
MU_NAUGHT: float = 4 * math.pi * 1e-7  # H/m
WIRE_THICKNESS: float = 0.001  # 1 mm
MILLI: float = 1000.0


@dataclass(frozen=True)
class SolverSettings:
    """
    Tunable parameters of the solve pipeline.

    Attributes:
        max_relaxation_sweeps: Hard cap on relaxation sweeps.
        tolerance_divisor: The relaxation stops once the largest per-sweep change
            drops below (smallest non-conductor potential drop / tolerance_divisor).
        max_flow_regions: Number of potential levels drawn for the loop carrying
            the largest current.
        flow_level_margin: Levels closer than this to a loop's maximum potential
            are not traced.
    """
    max_relaxation_sweeps: int = 2477
    tolerance_divisor: float = 500.0
    max_flow_regions: int = 31
    flow_level_margin: float = 0.001

    def __post_init__(self) -> None:
        if self.max_relaxation_sweeps < 1:
            raise ValueError(f"max_relaxation_sweeps must be positive, got {self.max_relaxation_sweeps}.")
        if self.tolerance_divisor <= 0.0:
            raise ValueError(f"tolerance_divisor must be positive, got {self.tolerance_divisor}.")
        if self.max_flow_regions < 0:
            raise ValueError(f"max_flow_regions may not be negative, got {self.max_flow_regions}.")
