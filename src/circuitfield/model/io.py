"""
Circuit File Reader
Turns the plain-text circuit format into a `CircuitDescription`.

Format::

    # comment
    maxX, maxY
    w x1,y1 x2,y2           # conductor
    r x1,y1 x2,y2 ohms      # resistor
    b x1,y1 x2,y2 volts     # source, potential rises from (x1,y1) to (x2,y2)
"""
from __future__ import annotations

import logging
import os
import re
from typing import Iterable, Optional, Tuple

from circuitfield.exceptions import CircuitParseError
from circuitfield.model.board import CircuitDescription, ElementSpec
from circuitfield.model.elements import ElementKind

logger = logging.getLogger(__name__)

_BLANK = re.compile(r"[ \t]+")


def read_circuit(filepath: str) -> CircuitDescription:
    """
    Read a circuit file from disk.

    Raises:
        CircuitParseError: If the file cannot be read or is not a valid circuit.
    """
    logger.info(f"Reading circuit from: {filepath}")
    name = os.path.basename(filepath)
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise CircuitParseError(f"Cannot read file {filepath}: {e}") from e
    return parse_circuit(text.splitlines(), name=name)


def parse_circuit(lines: Iterable[str], name: str = "") -> CircuitDescription:
    """
    Parse the lines of a circuit description.

    Raises:
        CircuitParseError: On the first invalid line, or if no bounds or no elements are found.
    """
    description: Optional[CircuitDescription] = None

    for line_no, raw in enumerate(lines, start=1):
        line = raw.split("#")[0].strip()
        if not line:
            continue
        try:
            if description is None:
                width, height = _parse_bounds(line)
                description = CircuitDescription(width=width, height=height, name=name)
            else:
                description.elements.append(_parse_element(line, description))
        except CircuitParseError as e:
            e.set_line(line_no, raw)
            raise

    if description is None:
        raise CircuitParseError(f"File {name} is empty.")
    if not description.elements:
        raise CircuitParseError(f"File {name} contains no circuit elements.")

    logger.debug(f"Parsed {len(description.elements)} elements on a {description.width}x{description.height} board.")
    return description


def _parse_bounds(line: str) -> Tuple[int, int]:
    parts = line.split(",")
    if len(parts) < 2:
        raise CircuitParseError("Expected: Maximum y-bound. Found: End of line")
    if len(parts) > 2:
        raise CircuitParseError(f"Expected: End of line. Found: ,{parts[2]}")

    bounds = []
    for axis, text in zip("xy", parts):
        value = _parse_int(text.strip(), f"Maximum {axis}-bound")
        if value <= 0:
            raise CircuitParseError(f"Maximum {axis}-bound must be positive. Found: {value}")
        bounds.append(value)
    return bounds[0], bounds[1]


def _parse_element(line: str, description: CircuitDescription) -> ElementSpec:
    tokens = _BLANK.split(line)

    letter = tokens[0].lower()
    try:
        kind = ElementKind(letter)
    except ValueError:
        raise CircuitParseError(f"Expected: Element type ('w', 'r', or 'b'). Found: {tokens[0]}") from None

    if len(tokens) < 2:
        raise CircuitParseError("Expected: Start coordinate. Found: End of line")
    if len(tokens) < 3:
        raise CircuitParseError("Expected: End coordinate. Found: End of line")

    start = _parse_coordinate(tokens[1], "Start", description)
    end = _parse_coordinate(tokens[2], "End", description)

    if kind is ElementKind.CONDUCTOR:
        if len(tokens) > 3:
            raise CircuitParseError(f"Expected: End of line. Found: {tokens[3]}")
        return ElementSpec(kind=kind, start=start, end=end)

    quantity = "Resistance" if kind is ElementKind.RESISTOR else "Voltage"
    if len(tokens) < 4:
        unit = "ohms" if kind is ElementKind.RESISTOR else "volts"
        raise CircuitParseError(f"Expected: {quantity} in {unit}. Found: End of line")
    if len(tokens) > 4:
        raise CircuitParseError(f"Expected: End of line. Found: {tokens[4]}")
    try:
        value = float(tokens[3])
    except ValueError:
        raise CircuitParseError(f"{quantity} must be an integer or decimal. Found: {tokens[3]}") from None
    if kind is ElementKind.RESISTOR and value < 0:
        raise CircuitParseError(f"Resistance may not be negative. Found: {tokens[3]}")

    return ElementSpec(kind=kind, start=start, end=end, value=value)


def _parse_coordinate(token: str, label: str, description: CircuitDescription) -> Tuple[int, int]:
    parts = token.split(",")
    if len(parts) < 2:
        raise CircuitParseError(f"Expected: {label} y-coordinate. Found: {token}")
    if len(parts) > 2:
        raise CircuitParseError(f"Expected: Single coordinate pair. Found: {token}")

    x = _parse_int(parts[0], f"{label} x-coordinate")
    y = _parse_int(parts[1], f"{label} y-coordinate")
    if x < 0 or y < 0:
        raise CircuitParseError(f"{label} coordinates may not be negative. Found: ({token})")
    if x > description.width or y > description.height:
        raise CircuitParseError(
            f"{label} coordinates out of bounds. Coordinate: ({token}), "
            f"Bounds: ({description.width},{description.height})"
        )
    return x, y


def _parse_int(text: str, label: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise CircuitParseError(f"{label} must be an integer. Found: {text}") from None
