import logging

import pytest

from circuitfield.logging_config import resolve_level, setup_logging
from circuitfield.main import main

SQUARE_TEXT = """\
4, 4
b 0,4 0,0 12
w 0,0 4,0
r 4,0 4,4 6
w 4,4 0,4
"""


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logging.getLogger("circuitfield").handlers.clear()


def test_solves_a_file(tmp_path, capsys):
    path = tmp_path / "square.txt"
    path.write_text(SQUARE_TEXT, encoding="utf-8")
    log_file = tmp_path / "run.log"

    assert main([str(path), "--log-file", str(log_file)]) == 0

    out = capsys.readouterr().out
    assert "Loop 0: +2 A" in out
    assert "30 flow lines" in out
    assert "Found 1 loops" in log_file.read_text(encoding="utf-8")


def test_bad_file_exits_with_error(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("4, 4\nw 0,0 5,0\n", encoding="utf-8")

    assert main([str(path), "--log-level", "ERROR"]) == 1
    assert "out of bounds" in capsys.readouterr().out


def test_open_circuit_exits_with_error(tmp_path, capsys):
    path = tmp_path / "open.txt"
    path.write_text("3, 3\nw 0,0 3,0\n", encoding="utf-8")

    assert main([str(path)]) == 1
    assert "Dead end" in capsys.readouterr().out


def test_level_names_are_case_insensitive(tmp_path, capsys):
    path = tmp_path / "square.txt"
    path.write_text(SQUARE_TEXT, encoding="utf-8")

    assert main([str(path), "--log-level", "debug"]) == 0
    assert logging.getLogger("circuitfield").level == logging.DEBUG
    assert "Logging initialized at DEBUG" in capsys.readouterr().out


def test_resolve_level():
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ValueError):
        resolve_level("verbose")


def test_setup_logging_replaces_handlers(tmp_path):
    setup_logging("INFO", log_file=str(tmp_path / "first.log"))
    setup_logging("INFO")
    assert len(logging.getLogger("circuitfield").handlers) == 1
