"""Dense two-dimensional matrix with explicit dimension checking.

The values live in a ``float64`` :class:`numpy.ndarray`, but every operation
checks operand shapes itself before handing the arithmetic to numpy, so
broadcasting can never turn a shape mismatch into a silently wrong result.
"""

from __future__ import annotations

from numbers import Real
from typing import Callable, Iterable, Sequence, Tuple

import numpy as np

from .errors import DimensionError, RangeError
from .types import Array


class Matrix:
    """A ``rows x columns`` matrix of floating point numbers.

    ``Matrix(rows, columns)`` builds a zero matrix. Use :meth:`from_array`,
    :meth:`column_vector` or :meth:`random` for the other constructors.
    Arithmetic returns new matrices; only item assignment, :meth:`set_row`
    and :meth:`set_column` mutate in place.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: int, columns: int) -> None:
        for size in (rows, columns):
            if isinstance(size, bool) or int(size) != size or size < 0:
                raise DimensionError(
                    f"Matrix dimensions must be non-negative integers, got {rows}x{columns}"
                )
        rows, columns = int(rows), int(columns)
        self._data = np.zeros((rows, columns), dtype=np.float64)

    # ------------------------------------------------------------------
    # Constructors

    @classmethod
    def _wrap(cls, data: Array) -> "Matrix":
        matrix = cls.__new__(cls)
        matrix._data = data
        return matrix

    @classmethod
    def from_array(cls, values: Sequence[Sequence[float]] | Array) -> "Matrix":
        """Copy a two-dimensional array; the shape is taken from ``values``."""

        try:
            data = np.array(values, dtype=np.float64)
        except ValueError as exc:
            raise DimensionError("Every row must have the same number of values") from exc
        if data.ndim != 2:
            raise DimensionError(
                f"Expected a two-dimensional array, got {data.ndim} dimension(s)"
            )
        return cls._wrap(data)

    @classmethod
    def column_vector(cls, values: Iterable[float] | Array) -> "Matrix":
        """Build an ``n x 1`` matrix from a flat sequence."""

        data = np.array(values, dtype=np.float64)
        if data.ndim != 1:
            raise DimensionError(
                f"Expected a flat sequence, got {data.ndim} dimension(s)"
            )
        return cls._wrap(data.reshape(-1, 1))

    @classmethod
    def random(cls, rows: int, columns: int, rng: np.random.Generator) -> "Matrix":
        """Each element drawn independently and uniformly from ``[-1, 1)``."""

        matrix = cls(rows, columns)
        matrix._data[...] = rng.uniform(-1.0, 1.0, size=matrix.shape)
        return matrix

    # ------------------------------------------------------------------
    # Shape and element access

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def columns(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.columns

    def _check_index(self, index: Tuple[int, int]) -> Tuple[int, int]:
        if not isinstance(index, tuple) or len(index) != 2:
            raise TypeError(f"Matrix indices must be a (row, column) pair, got {index!r}")
        i, j = int(index[0]), int(index[1])
        if not (0 <= i < self.rows and 0 <= j < self.columns):
            raise RangeError(
                f"Index ({i}, {j}) is out of bounds for a {self.rows}x{self.columns} matrix"
            )
        return i, j

    def __getitem__(self, index: Tuple[int, int]) -> float:
        i, j = self._check_index(index)
        return float(self._data[i, j])

    def __setitem__(self, index: Tuple[int, int], value: float) -> None:
        i, j = self._check_index(index)
        self._data[i, j] = value

    def get_row(self, i: int) -> Array:
        self._check_row(i)
        return self._data[int(i)].copy()

    def set_row(self, i: int, values: Sequence[float] | Array) -> None:
        self._check_row(i)
        row = np.asarray(values, dtype=np.float64)
        if row.shape != (self.columns,):
            raise DimensionError(
                f"Row must have {self.columns} values, got shape {row.shape}"
            )
        self._data[int(i)] = row

    def get_column(self, j: int) -> Array:
        self._check_column(j)
        return self._data[:, int(j)].copy()

    def set_column(self, j: int, values: Sequence[float] | Array) -> None:
        self._check_column(j)
        column = np.asarray(values, dtype=np.float64)
        if column.shape != (self.rows,):
            raise DimensionError(
                f"Column must have {self.rows} values, got shape {column.shape}"
            )
        self._data[:, int(j)] = column

    def _check_row(self, i: int) -> None:
        if not 0 <= int(i) < self.rows:
            raise RangeError(f"Row {i} is out of bounds for {self.rows} row(s)")

    def _check_column(self, j: int) -> None:
        if not 0 <= int(j) < self.columns:
            raise RangeError(f"Column {j} is out of bounds for {self.columns} column(s)")

    def to_array(self) -> Array:
        """Return a copy of the values as a two-dimensional numpy array."""

        return self._data.copy()

    def copy(self) -> "Matrix":
        return Matrix._wrap(self._data.copy())

    # ------------------------------------------------------------------
    # Arithmetic

    def _require_same_shape(self, other: "Matrix", operation: str) -> None:
        if self.shape != other.shape:
            raise DimensionError(
                f"Cannot {operation} a {self.rows}x{self.columns} matrix and a "
                f"{other.rows}x{other.columns} matrix"
            )

    def __add__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_shape(other, "add")
        return Matrix._wrap(self._data + other._data)

    def __sub__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_shape(other, "subtract")
        return Matrix._wrap(self._data - other._data)

    def __neg__(self) -> "Matrix":
        return Matrix._wrap(-self._data)

    def __matmul__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.columns != other.rows:
            raise DimensionError(
                f"Cannot multiply a {self.rows}x{self.columns} matrix by a "
                f"{other.rows}x{other.columns} matrix"
            )
        return Matrix._wrap(self._data @ other._data)

    def __mul__(self, other: "Matrix | float") -> "Matrix":
        if isinstance(other, Matrix):
            return self @ other
        if isinstance(other, (Real, np.number)) and not isinstance(other, bool):
            return Matrix._wrap(self._data * float(other))
        return NotImplemented

    def __rmul__(self, other: float) -> "Matrix":
        if isinstance(other, (Real, np.number)) and not isinstance(other, bool):
            return Matrix._wrap(float(other) * self._data)
        return NotImplemented

    @staticmethod
    def hadamard(a: "Matrix", b: "Matrix") -> "Matrix":
        """Element-wise product of two equally shaped matrices."""

        a._require_same_shape(b, "take the Hadamard product of")
        return Matrix._wrap(a._data * b._data)

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._data.T.copy())

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    @staticmethod
    def apply(
        matrix: "Matrix",
        fn: Callable[[float], float] | Callable[[Array], Array],
        *,
        vectorized: bool = False,
    ) -> "Matrix":
        """Return a new matrix with ``fn`` applied to every element.

        With ``vectorized=True`` ``fn`` is called once with the whole backing
        array and must return an array of the same shape.
        """

        if vectorized:
            result = np.asarray(fn(matrix._data.copy()), dtype=np.float64)
            if result.shape != matrix.shape:
                raise DimensionError(
                    f"Vectorised function changed the shape from {matrix.shape} to {result.shape}"
                )
            return Matrix._wrap(result)
        result = np.empty_like(matrix._data)
        for index, value in np.ndenumerate(matrix._data):
            result[index] = fn(float(value))
        return Matrix._wrap(result)

    # ------------------------------------------------------------------
    # Comparison and rendering

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, columns={self.columns})"

    def __str__(self) -> str:
        return "\n".join(
            "[" + " ".join(f"{value: .6f}" for value in row) + "]" for row in self._data
        )


__all__ = ["Matrix"]
