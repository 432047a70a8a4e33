import numpy as np
import pytest

from mlpnet.core.errors import DimensionError, RangeError
from mlpnet.core.matrix import Matrix


def test_zero_construction_and_negative_dimensions():
    m = Matrix(2, 3)
    assert m.shape == (2, 3)
    assert np.array_equal(m.to_array(), np.zeros((2, 3)))
    with pytest.raises(DimensionError):
        Matrix(-1, 2)
    with pytest.raises(DimensionError):
        Matrix(2, -1)
    with pytest.raises(DimensionError):
        Matrix(2.5, 3)
    with pytest.raises(DimensionError):
        Matrix(2, True)
    assert Matrix(2.0, np.int64(3)).shape == (2, 3)


def test_from_array_copies_values():
    source = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
    m = Matrix.from_array(source)
    source[0, 0] = 99.0
    assert m.shape == (3, 2)
    assert m[0, 0] == 1.0
    with pytest.raises(DimensionError):
        Matrix.from_array([1.0, 2.0])
    with pytest.raises(DimensionError):
        Matrix.from_array([[1.0, 2.0], [3.0]])


def test_random_is_uniform_in_range_and_reproducible():
    a = Matrix.random(20, 30, np.random.default_rng(5))
    b = Matrix.random(20, 30, np.random.default_rng(5))
    values = a.to_array()
    assert a == b
    assert values.min() >= -1.0 and values.max() < 1.0
    assert values.std() > 0.3


def test_element_access_is_bounds_checked():
    m = Matrix(2, 2)
    m[1, 0] = 4.5
    assert m[1, 0] == 4.5
    with pytest.raises(RangeError):
        m[2, 0]
    with pytest.raises(RangeError):
        m[0, 2] = 1.0
    with pytest.raises(IndexError):
        m[-1, 0]
    with pytest.raises(TypeError, match=r"\(row, column\) pair"):
        m[1]
    with pytest.raises(TypeError, match=r"\(row, column\) pair"):
        m[0, 0, 0] = 1.0


def test_rows_and_columns():
    m = Matrix.from_array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    assert np.array_equal(m.get_row(1), [4.0, 5.0, 6.0])
    assert np.array_equal(m.get_column(2), [3.0, 6.0])

    row = m.get_row(0)
    row[0] = 100.0
    assert m[0, 0] == 1.0

    m.set_row(0, [7.0, 8.0, 9.0])
    m.set_column(1, [0.5, 0.25])
    assert np.array_equal(m.to_array(), [[7.0, 0.5, 9.0], [4.0, 0.25, 6.0]])

    with pytest.raises(DimensionError):
        m.set_row(0, [1.0, 2.0])
    with pytest.raises(DimensionError):
        m.set_column(0, [1.0, 2.0, 3.0])
    with pytest.raises(RangeError):
        m.get_row(2)
    with pytest.raises(RangeError):
        m.set_column(3, [1.0, 2.0])


def test_addition_and_subtraction_require_equal_shapes():
    a = Matrix.from_array([[1.0, 2.0], [3.0, 4.0]])
    b = Matrix.from_array([[0.5, 0.5], [1.0, -1.0]])
    assert np.array_equal((a + b).to_array(), [[1.5, 2.5], [4.0, 3.0]])
    assert np.array_equal((a - b).to_array(), [[0.5, 1.5], [2.0, 5.0]])
    with pytest.raises(DimensionError):
        a + Matrix(2, 1)
    with pytest.raises(DimensionError):
        a - Matrix(1, 2)


def test_matrix_product():
    a = Matrix.from_array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    b = Matrix.from_array([[1.0], [0.0], [-1.0]])
    product = a * b
    assert product.shape == (2, 1)
    assert np.array_equal(product.to_array(), [[-2.0], [-2.0]])
    assert (a @ b) == product
    with pytest.raises(DimensionError):
        b * a.transpose()


def test_scalar_multiplication_commutes():
    a = Matrix.from_array([[1.0, -2.0], [0.5, 4.0]])
    assert (2.5 * a) == (a * 2.5)
    assert np.array_equal((a * 2).to_array(), [[2.0, -4.0], [1.0, 8.0]])
    assert np.array_equal((-a).to_array(), [[-1.0, 2.0], [-0.5, -4.0]])


def test_hadamard_is_commutative_and_checks_shape():
    rng = np.random.default_rng(0)
    a = Matrix.random(3, 4, rng)
    b = Matrix.random(3, 4, rng)
    assert Matrix.hadamard(a, b) == Matrix.hadamard(b, a)
    assert np.array_equal(Matrix.hadamard(a, b).to_array(), a.to_array() * b.to_array())
    with pytest.raises(DimensionError):
        Matrix.hadamard(a, Matrix(4, 3))


def test_transpose_twice_is_identity():
    a = Matrix.random(3, 5, np.random.default_rng(1))
    t = a.transpose()
    assert t.shape == (5, 3)
    assert t[4, 2] == a[2, 4]
    assert t.transpose() == a
    assert a.T == t


def test_multiplication_is_associative_within_tolerance():
    rng = np.random.default_rng(2)
    for _ in range(5):
        n, k, m, p = rng.integers(1, 6, size=4)
        a = Matrix.random(n, k, rng)
        b = Matrix.random(k, m, rng)
        c = Matrix.random(m, p, rng)
        np.testing.assert_allclose(((a * b) * c).to_array(), (a * (b * c)).to_array(), atol=1e-12)


def test_apply_preserves_shape():
    a = Matrix.from_array([[1.0, -2.0, 3.0]])
    squared = Matrix.apply(a, lambda x: x * x)
    assert np.array_equal(squared.to_array(), [[1.0, 4.0, 9.0]])
    doubled = Matrix.apply(a, lambda arr: arr * 2.0, vectorized=True)
    assert np.array_equal(doubled.to_array(), [[2.0, -4.0, 6.0]])
    assert a[0, 1] == -2.0
    with pytest.raises(DimensionError):
        Matrix.apply(a, lambda arr: arr.ravel(), vectorized=True)


def test_string_rendering_is_deterministic():
    a = Matrix.from_array([[1.0, -0.5], [0.0, 2.0]])
    assert str(a) == "[ 1.000000 -0.500000]\n[ 0.000000  2.000000]"
    assert str(a) == str(a.copy())
    assert repr(a) == "Matrix(rows=2, columns=2)"
