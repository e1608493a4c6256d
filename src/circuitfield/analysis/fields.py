"""
Field Derivation
================
Electric field, magnetic field and energy flow at every lattice point, derived
from the relaxed potential and the per-point current.

    E = -grad(V)                          finite differences, spacing GRID_SPACING
    B = mu0 * (I / WIRE_THICKNESS)        reported in mT, positive into the board
    S = B x E = (B * Ey, -B * Ex)

After derivation every field is divided by its largest magnitude; the maxima are
kept in a `FieldMaxima` so physical values can be recovered.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Dict

import numpy as np

from circuitfield.config import GRID_SPACING, MILLI, MU_NAUGHT, WIRE_THICKNESS

if TYPE_CHECKING:
    import numpy.typing as npt

    from circuitfield.model.board import CircuitBoard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldMaxima:
    """
    Largest magnitudes seen while deriving the fields.

    Attributes:
        potential: max |V| [V]
        e_field: max |E| [N/C]
        b_field: max |B| [mT]
        flow: max |S|
        current: max |loop current| [A]
    """
    potential: float
    e_field: float
    b_field: float
    flow: float
    current: float

    def scale_for(self, name: str) -> float:
        """
        Factor turning normalized values of field `name` back into physical ones.

        Fields that were not normalized (zero maximum, or `current`) scale by 1.
        """
        scales: Dict[str, float] = {
            "potential": self.potential,
            "e_field_x": self.e_field,
            "e_field_y": self.e_field,
            "b_field_z": self.b_field,
            "flow_x": self.flow,
            "flow_y": self.flow,
            "current": 1.0,
        }
        if name not in scales:
            raise ValueError(f"Unknown field '{name}'.")
        return scales[name] or 1.0


def gradient(values: npt.NDArray[np.float64], axis: int, spacing: float = GRID_SPACING) -> npt.NDArray[np.float64]:
    """
    Derivative of `values` along `axis`.

    Interior points blend the forward, backward and central differences as
    (forward + backward + 4 * central) / 6. The first and last points use the
    one-sided difference towards the interior.
    """
    v = np.moveaxis(np.asarray(values, dtype=np.float64), axis, 0)
    steps = np.diff(v, axis=0) / spacing

    result = np.empty_like(v)
    result[0] = steps[0]
    result[-1] = steps[-1]
    if v.shape[0] > 2:
        forward = steps[1:]
        backward = steps[:-1]
        central = (v[2:] - v[:-2]) / (2.0 * spacing)
        result[1:-1] = (forward + backward + 4.0 * central) / 6.0
    return np.moveaxis(result, 0, axis)


def derive_fields(board: CircuitBoard, max_current: float = 0.0) -> FieldMaxima:
    """
    Compute E, B and flow at every point of `board` from its potentials and currents.

    Args:
        board: A board whose potentials have been relaxed.
        max_current: Largest loop current magnitude, recorded in the maxima.

    Returns:
        The largest magnitude of each field.
    """
    potential = board.field_array("potential")
    current = board.field_array("current")

    e_x = -gradient(potential, axis=0)
    e_y = -gradient(potential, axis=1)
    b_z = MU_NAUGHT * (current / WIRE_THICKNESS) * MILLI
    flow_x = b_z * e_y
    flow_y = -b_z * e_x

    for name, values in (
        ("e_field_x", e_x),
        ("e_field_y", e_y),
        ("b_field_z", b_z),
        ("flow_x", flow_x),
        ("flow_y", flow_y),
    ):
        board.set_field_array(name, values)

    maxima = FieldMaxima(
        potential=float(np.max(np.abs(potential))),
        e_field=float(np.max(np.hypot(e_x, e_y))),
        b_field=float(np.max(np.abs(b_z))),
        flow=float(np.max(np.hypot(flow_x, flow_y))),
        current=abs(float(max_current)),
    )
    logger.info(f"Field maxima: V={maxima.potential:.6g} V, |E|={maxima.e_field:.6g} N/C, "
                f"|B|={maxima.b_field:.6g} mT, |S|={maxima.flow:.6g}")
    return maxima


def normalize_fields(board: CircuitBoard, maxima: FieldMaxima) -> None:
    """
    Divide potential, E, B and flow by their maxima and clear every point's scratch marks.

    A field whose maximum is zero is left as it is.
    """
    for names, maximum in (
        (("potential",), maxima.potential),
        (("e_field_x", "e_field_y"), maxima.e_field),
        (("b_field_z",), maxima.b_field),
        (("flow_x", "flow_y"), maxima.flow),
    ):
        if maximum == 0.0:
            logger.warning(f"Maximum of {'/'.join(names)} is zero; leaving it unnormalized.")
            continue
        for name in names:
            board.set_field_array(name, board.field_array(name) / maximum)

    for p in board:
        p.clear_marks()
