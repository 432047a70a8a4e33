"""Paired input/expected-output samples for supervised training."""

from __future__ import annotations

from typing import Iterator, Sequence

import numpy as np

from ..core.errors import DimensionError, RangeError, SampleSizeMismatchError
from ..core.matrix import Matrix
from ..core.types import Array


class TrainingData:
    """A set of training samples, one sample per row.

    Row ``i`` of the inputs always corresponds to row ``i`` of the expected
    outputs; :meth:`shuffle` is the only operation that reorders rows and it
    applies one permutation to both.
    """

    def __init__(
        self,
        inputs: Sequence[Sequence[float]] | Array | Matrix,
        expected_outputs: Sequence[Sequence[float]] | Array | Matrix,
    ) -> None:
        input_matrix = _as_matrix(inputs, "inputs")
        output_matrix = _as_matrix(expected_outputs, "expected outputs")
        if input_matrix.rows != output_matrix.rows:
            raise SampleSizeMismatchError(
                f"Sample size must be equal for inputs ({input_matrix.rows}) and "
                f"expected outputs ({output_matrix.rows})"
            )
        self._inputs = input_matrix
        self._expected_outputs = output_matrix

    @property
    def sample_size(self) -> int:
        return self._inputs.rows

    @property
    def input_size(self) -> int:
        return self._inputs.columns

    @property
    def output_size(self) -> int:
        return self._expected_outputs.columns

    @property
    def inputs(self) -> Matrix:
        return self._inputs.copy()

    @property
    def expected_outputs(self) -> Matrix:
        return self._expected_outputs.copy()

    def __len__(self) -> int:
        return self.sample_size

    def shuffle(self, rng: np.random.Generator) -> None:
        """Reorder the samples in place with one uniformly random permutation."""

        permutation = rng.permutation(self.sample_size)
        self._inputs = Matrix.from_array(self._inputs.to_array()[permutation])
        self._expected_outputs = Matrix.from_array(
            self._expected_outputs.to_array()[permutation]
        )

    def get_input(self, i: int) -> Array:
        self._check_sample(i)
        return self._inputs.get_row(i)

    def get_expected_output(self, i: int) -> Array:
        self._check_sample(i)
        return self._expected_outputs.get_row(i)

    def get_mini_batch(self, start_index: int, size: int) -> "TrainingData":
        """Return the contiguous samples ``[start_index, start_index + size)``."""

        if not 0 <= start_index < self.sample_size:
            raise RangeError(
                f"Mini-batch start index {start_index} is out of bounds for "
                f"{self.sample_size} sample(s)"
            )
        if size < 0 or start_index + size > self.sample_size:
            raise RangeError(
                f"Mini-batch size {size} is too large for start index {start_index} "
                f"with {self.sample_size} sample(s)"
            )
        inputs = self._inputs.to_array()[start_index : start_index + size]
        outputs = self._expected_outputs.to_array()[start_index : start_index + size]
        return TrainingData(inputs, outputs)

    def mini_batches(self, size: int) -> Iterator["TrainingData"]:
        """Yield consecutive full mini-batches; a short tail is dropped."""

        if size < 1:
            raise ValueError(f"Mini-batch size must be at least 1, got {size}")
        for start in range(0, self.sample_size - size + 1, size):
            yield self.get_mini_batch(start, size)

    def _check_sample(self, i: int) -> None:
        if not 0 <= i < self.sample_size:
            raise RangeError(f"Sample index {i} is out of bounds for {self.sample_size} sample(s)")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TrainingData):
            return NotImplemented
        return (
            self._inputs == other._inputs
            and self._expected_outputs == other._expected_outputs
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"TrainingData(sample_size={self.sample_size}, "
            f"input_size={self.input_size}, output_size={self.output_size})"
        )

    def __str__(self) -> str:
        return f"INPUTS\n{self._inputs}\nEXPECTED OUTPUTS\n{self._expected_outputs}"


def _as_matrix(values, label: str) -> Matrix:
    if isinstance(values, Matrix):
        return values.copy()
    try:
        return Matrix.from_array(values)
    except DimensionError as exc:
        raise DimensionError(f"Training {label} must be a two-dimensional array") from exc


__all__ = ["TrainingData"]
