import numpy as np

from circuitfield.analysis.linalg import rref


def test_solves_augmented_system():
    a = np.array([
        [2.0, 1.0, -1.0, 8.0],
        [-3.0, -1.0, 2.0, -11.0],
        [-2.0, 1.0, 2.0, -3.0],
    ])
    reduced, pivots = rref(a, n_unknowns=3)

    assert pivots == {0: 0, 1: 1, 2: 2}
    assert np.allclose(reduced[:, :3], np.eye(3))
    assert np.allclose(reduced[:, 3], [2.0, 3.0, -1.0])


def test_input_is_not_modified():
    a = np.array([[0.0, 1.0, 2.0], [1.0, 0.0, 3.0]])
    original = a.copy()
    rref(a, n_unknowns=2)
    assert np.array_equal(a, original)


def test_zero_pivot_swaps_rows():
    reduced, pivots = rref([[0.0, 2.0, 4.0], [3.0, 0.0, 6.0]], n_unknowns=2)
    assert set(pivots) == {0, 1}
    assert np.allclose(reduced, [[1.0, 0.0, 2.0], [0.0, 1.0, 2.0]])


def test_dependent_rows_leave_a_zero_row():
    a = np.array([
        [1.0, -1.0, 0.0],
        [-1.0, 1.0, 0.0],
        [0.0, 10.0, 5.0],
    ])
    reduced, pivots = rref(a, n_unknowns=2)

    assert set(pivots) == {0, 1}
    assert np.allclose(reduced[pivots[1], 2], 0.5)
    assert np.allclose(reduced[pivots[0], 2], 0.5)
    assert np.allclose(reduced[2], 0.0)


def test_empty_column_gets_no_pivot():
    a = np.array([
        [1.0, 0.0, 1.0, 3.0],
        [0.0, 0.0, 2.0, 4.0],
    ])
    reduced, pivots = rref(a, n_unknowns=3)

    assert 1 not in pivots
    assert np.allclose(reduced[pivots[0], 3], 1.0)
    assert np.allclose(reduced[pivots[2], 3], 2.0)
