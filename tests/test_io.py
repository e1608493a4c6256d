import pytest

from circuitfield.exceptions import CircuitParseError
from circuitfield.model.elements import ElementKind
from circuitfield.model.io import parse_circuit, read_circuit

SINGLE_CELL_TEXT = """\
# one cell, 5 V over 10 ohm
1, 1

w 0,0 1,0
B 1,0 1,1 5
r 1,1 0,1 10   # bottom edge
w 0,1 0,0
"""


def test_parse_single_cell():
    description = parse_circuit(SINGLE_CELL_TEXT.splitlines(), name="cell")

    assert (description.width, description.height) == (1, 1)
    assert description.name == "cell"
    assert [e.kind for e in description.elements] == [
        ElementKind.CONDUCTOR, ElementKind.SOURCE, ElementKind.RESISTOR, ElementKind.CONDUCTOR,
    ]
    source = description.elements[1]
    assert source.start == (1, 0)
    assert source.end == (1, 1)
    assert source.value == 5.0
    assert description.elements[0].value is None


def test_read_circuit_from_file(tmp_path):
    path = tmp_path / "cell.txt"
    path.write_text(SINGLE_CELL_TEXT, encoding="utf-8")

    description = read_circuit(str(path))
    assert description.name == "cell.txt"
    assert len(description.elements) == 4


def test_missing_file():
    with pytest.raises(CircuitParseError):
        read_circuit("/nonexistent/circuit.txt")


@pytest.mark.parametrize("text, fragment", [
    ("", "empty"),
    ("# only comments\n", "empty"),
    ("2, 2\n", "no circuit elements"),
    ("2\n", "Maximum y-bound"),
    ("2, 2, 2\n", "End of line"),
    ("0, 2\n", "must be positive"),
    ("a, 2\n", "must be an integer"),
    ("2, 2\nx 0,0 1,0\n", "Element type"),
    ("2, 2\nw 0,0\n", "End coordinate"),
    ("2, 2\nw 0,0 1,0 3\n", "End of line"),
    ("2, 2\nr 0,0 1,0\n", "Resistance in ohms"),
    ("2, 2\nb 0,0 1,0 abc\n", "Voltage must be"),
    ("2, 2\nr 0,0 1,0 -4\n", "may not be negative"),
    ("2, 2\nw 0,0 3,0\n", "out of bounds"),
    ("2, 2\nw 0 1,0\n", "y-coordinate"),
    ("2, 2\nw 0,0,0 1,0\n", "Single coordinate pair"),
])
def test_invalid_input(text, fragment):
    with pytest.raises(CircuitParseError) as info:
        parse_circuit(text.splitlines(), name="bad")
    assert fragment in str(info.value)


def test_error_reports_line():
    with pytest.raises(CircuitParseError) as info:
        parse_circuit(["# header", "2, 2", "w 0,0 1,0", "q 1,0 1,1"])

    assert info.value.line_no == 4
    assert info.value.line == "q 1,0 1,1"
    assert str(info.value).startswith("Error in line 4: q 1,0 1,1")
