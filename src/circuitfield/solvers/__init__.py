from circuitfield.solvers.solver import Solver

__all__ = ["Solver"]
