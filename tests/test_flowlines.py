import numpy as np
import pytest

from circuitfield.analysis.flowlines import flow_levels, level_count, trace_line, trace_loop_flow_lines
from circuitfield.exceptions import FieldTracingError


def test_level_count_scales_with_current():
    assert level_count(3.0, 3.0, 31) == 31
    assert level_count(-2.0, 3.0, 31) == 21
    assert level_count(0.01, 3.0, 31) == 0
    assert level_count(1.0, 0.0, 31) == 0


def test_levels_split_the_range():
    levels = flow_levels(0.0, 1.0, 4, margin=0.001)
    assert levels == pytest.approx([0.25, 0.5, 0.75])
    assert flow_levels(0.0, 1.0, 1, margin=0.001) == []
    assert flow_levels(0.0, 1.0, 0, margin=0.001) == []


def test_levels_near_the_top_are_dropped():
    assert flow_levels(0.0, 1.0, 2, margin=0.6) == []


def test_single_cell_lines_cut_the_corner(solved_single_cell):
    board = solved_single_cell.board
    lines = board.flow_lines[0]

    assert len(lines) == 30
    for k, line in enumerate(lines, start=1):
        level = k / 31
        assert line.shape == (2, 2)
        assert np.allclose(line[0], [1.0, level])
        assert np.allclose(line[1], [level, 1.0])


def test_square_lines_cross_the_loop(solved_square):
    board = solved_square.board
    lines = board.flow_lines[0]

    assert solved_square.flow_line_count == 30
    assert len(lines) == 30
    for line in lines:
        assert line.shape == (5, 2)
        assert np.allclose(line[:, 0], [4.0, 3.0, 2.0, 1.0, 0.0])
        assert np.all((line[:, 1] > 0.0) & (line[:, 1] < 4.0))


def test_points_lie_on_lattice_edges(solved_two_cells):
    for lines in solved_two_cells.board.flow_lines.values():
        for line in lines:
            for x, y in line:
                on_vertical_edge = x == int(x)
                on_horizontal_edge = y == int(y)
                assert on_vertical_edge or on_horizontal_edge
                assert 0.0 <= x <= 2.0 and 0.0 <= y <= 1.0


def test_two_cell_line_counts(solved_two_cells):
    lines = solved_two_cells.board.flow_lines
    assert len(lines[0]) == 20
    assert len(lines[1]) == 30


def test_traced_levels_are_not_traced_again(solved_single_cell):
    board = solved_single_cell.board
    loop = board.bounded_loops[0]
    # Both ends of the last line carry its level
    assert board.point(1, 0).flow_mark == pytest.approx(30 / 31)
    assert board.point(0, 1).flow_mark == pytest.approx(30 / 31)

    assert len(trace_loop_flow_lines(board, loop, 2)) == 1
    assert board.point(0, 1).flow_mark == pytest.approx(0.5)
    assert trace_loop_flow_lines(board, loop, 2) == []


def test_level_missing_from_the_cell_is_an_error(solved_square):
    board = solved_square.board
    loop = board.bounded_loops[0]
    for p in board:
        p.potential = 0.0

    # Flat potentials: no edge of the first interior cell brackets the level
    with pytest.raises(FieldTracingError, match="brackets"):
        trace_line(board, loop, (board.point(4, 2), board.point(4, 1)), 0.5)
