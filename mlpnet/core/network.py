"""Feed-forward sigmoid network trained by mini-batch gradient descent."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Mapping, Sequence

import numpy as np

from .activations import sigmoid, sigmoid_prime
from .errors import DimensionError, StructureError
from .losses import quadratic_cost
from .matrix import Matrix
from .types import Array, ForwardPass, Gradients, ModelDescription

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ..data.training_data import TrainingData

logger = logging.getLogger(__name__)


class NeuralNetwork:
    """Multilayer perceptron with sigmoid activations and a quadratic cost.

    ``weights[l]`` has shape ``(structure[l + 1], structure[l])`` and
    ``biases[l]`` has shape ``(structure[l + 1], 1)``. Parameters are drawn
    uniformly from ``[-1, 1)`` using ``rng``; the same generator shuffles the
    training data in :meth:`train` unless another one is passed there.

    ``cost`` holds the quadratic cost of the most recent sample seen by
    :meth:`cost_gradient`; it is not an average over a batch or epoch.
    """

    def __init__(
        self, structure: Sequence[int], rng: np.random.Generator | None = None
    ) -> None:
        self.structure = _validate_structure(structure)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cost = 0.0
        self.weights: List[Matrix] = []
        self.biases: List[Matrix] = []
        for n_in, n_out in zip(self.structure[:-1], self.structure[1:]):
            self.weights.append(Matrix.random(n_out, n_in, self.rng))
            self.biases.append(Matrix.random(n_out, 1, self.rng))

    @classmethod
    def from_parameters(
        cls,
        weights: Sequence[Matrix],
        biases: Sequence[Matrix],
        rng: np.random.Generator | None = None,
    ) -> "NeuralNetwork":
        """Build a network around existing parameters (copied)."""

        if len(weights) != len(biases):
            raise StructureError(
                f"Got {len(weights)} weight matrices but {len(biases)} bias matrices"
            )
        if not weights:
            raise StructureError("A network needs at least one layer transition")
        structure = [weights[0].columns] + [w.rows for w in weights]
        network = cls.__new__(cls)
        network.structure = _validate_structure(structure)
        network.rng = rng if rng is not None else np.random.default_rng()
        network.cost = 0.0
        network.weights = [w.copy() for w in weights]
        network.biases = [b.copy() for b in biases]
        network._check_parameters()
        return network

    @property
    def layer_count(self) -> int:
        return len(self.structure)

    def describe(self) -> ModelDescription:
        return ModelDescription(structure=list(self.structure))

    # ------------------------------------------------------------------
    # Forward and backward passes

    def feed_forward(self, input_column: Matrix) -> ForwardPass:
        """Propagate one ``(structure[0], 1)`` column through every layer."""

        self._require_column(input_column, self.structure[0], "input")
        activations = [input_column]
        preactivations: List[Matrix] = []
        for weight, bias in zip(self.weights, self.biases):
            z = weight * activations[-1] + bias
            preactivations.append(z)
            activations.append(Matrix.apply(z, sigmoid, vectorized=True))
        return ForwardPass(activations=activations, preactivations=preactivations)

    def compute(self, inputs: Sequence[float] | Array) -> Array:
        """Return the output layer activations for one input sample."""

        values = np.asarray(inputs, dtype=np.float64)
        if values.ndim != 1 or values.shape[0] != self.structure[0]:
            raise DimensionError(
                f"Expected {self.structure[0]} input value(s), got shape {values.shape}"
            )
        return self.feed_forward(Matrix.column_vector(values)).output.get_column(0)

    def cost_gradient(self, input_column: Matrix, expected_output: Matrix) -> Gradients:
        """Back-propagate one sample and return ``(weight_grads, bias_grads)``.

        Also records the sample's quadratic cost in :attr:`cost`.
        """

        self._require_column(expected_output, self.structure[-1], "expected output")
        forward = self.feed_forward(input_column)
        activations = forward.activations
        preactivations = forward.preactivations

        cost, output_delta = quadratic_cost(forward.output, expected_output)
        self.cost = cost

        transitions = self.layer_count - 1
        errors: List[Matrix] = [None] * transitions  # type: ignore[list-item]
        errors[-1] = Matrix.hadamard(
            output_delta,
            Matrix.apply(preactivations[-1], sigmoid_prime, vectorized=True),
        )
        for layer in reversed(range(transitions - 1)):
            errors[layer] = Matrix.hadamard(
                self.weights[layer + 1].transpose() * errors[layer + 1],
                Matrix.apply(preactivations[layer], sigmoid_prime, vectorized=True),
            )

        # The bias enters the pre-activation additively, so dC/db is the error.
        bias_gradients = errors
        weight_gradients = [
            errors[layer] * activations[layer].transpose() for layer in range(transitions)
        ]
        return weight_gradients, bias_gradients

    # ------------------------------------------------------------------
    # Training

    def step_gradient_descent(self, mini_batch: "TrainingData", learning_rate: float) -> None:
        """Apply one gradient descent step using the mean gradient of ``mini_batch``."""

        self._require_compatible(mini_batch)
        batch_size = mini_batch.sample_size
        if batch_size < 1:
            raise ValueError("A mini-batch must contain at least one sample")

        weight_sums = [Matrix(*w.shape) for w in self.weights]
        bias_sums = [Matrix(*b.shape) for b in self.biases]
        for i in range(batch_size):
            weight_grads, bias_grads = self.cost_gradient(
                Matrix.column_vector(mini_batch.get_input(i)),
                Matrix.column_vector(mini_batch.get_expected_output(i)),
            )
            for layer in range(self.layer_count - 1):
                weight_sums[layer] = weight_sums[layer] + weight_grads[layer]
                bias_sums[layer] = bias_sums[layer] + bias_grads[layer]

        scale = float(learning_rate) / float(batch_size)
        for layer in range(self.layer_count - 1):
            self.weights[layer] = self.weights[layer] - scale * weight_sums[layer]
            self.biases[layer] = self.biases[layer] - scale * bias_sums[layer]

    def train(
        self,
        training_data: "TrainingData",
        learning_rate: float,
        epochs: int,
        mini_batch_size: int,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Run ``epochs`` passes of shuffled mini-batch gradient descent.

        ``mini_batch_size`` is clamped to the sample size; samples left over
        after the last full mini-batch are skipped for that epoch.
        """

        self._require_compatible(training_data)
        if epochs < 0:
            raise ValueError(f"Epoch count must be non-negative, got {epochs}")
        if mini_batch_size < 1:
            raise ValueError(f"Mini-batch size must be at least 1, got {mini_batch_size}")
        if training_data.sample_size == 0:
            raise ValueError("Cannot train on an empty training set")

        rng = rng if rng is not None else self.rng
        mini_batch_size = min(mini_batch_size, training_data.sample_size)
        n_batches = training_data.sample_size // mini_batch_size
        for epoch in range(epochs):
            training_data.shuffle(rng)
            for mini_batch in training_data.mini_batches(mini_batch_size):
                self.step_gradient_descent(mini_batch, learning_rate)
            logger.debug(
                "epoch %d/%d: %d mini-batch(es), last sample cost %.6f",
                epoch + 1,
                epochs,
                n_batches,
                self.cost,
            )

    def evaluate_cost(self, training_data: "TrainingData") -> float:
        """Mean quadratic cost over every sample; leaves :attr:`cost` untouched."""

        self._require_compatible(training_data)
        if training_data.sample_size == 0:
            return 0.0
        costs = []
        for i in range(training_data.sample_size):
            output = self.feed_forward(Matrix.column_vector(training_data.get_input(i))).output
            expected = Matrix.column_vector(training_data.get_expected_output(i))
            costs.append(quadratic_cost(output, expected)[0])
        return float(np.mean(costs))

    def predict(self, inputs: Sequence[Sequence[float]] | Array) -> Array:
        """Run :meth:`compute` on every row of ``inputs``."""

        rows = np.asarray(inputs, dtype=np.float64)
        if rows.ndim != 2:
            raise DimensionError(f"Expected a two-dimensional array, got shape {rows.shape}")
        return np.array([self.compute(row) for row in rows]).reshape(
            rows.shape[0], self.structure[-1]
        )

    # ------------------------------------------------------------------
    # Parameter access and persistence

    def state_dict(self) -> Mapping[str, Array]:
        state = {}
        for idx, (weight, bias) in enumerate(zip(self.weights, self.biases)):
            state[f"W{idx}"] = weight.to_array()
            state[f"b{idx}"] = bias.to_array()
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        weights, biases = [], []
        for idx in range(self.layer_count - 1):
            for key in (f"W{idx}", f"b{idx}"):
                if key not in state:
                    raise KeyError(f"Missing parameter {key} in state dict")
            weights.append(Matrix.from_array(state[f"W{idx}"]))
            biases.append(Matrix.from_array(state[f"b{idx}"]))
        previous = self.weights, self.biases
        self.weights, self.biases = weights, biases
        try:
            self._check_parameters()
        except DimensionError:
            self.weights, self.biases = previous
            raise

    def save(self, path: str | Path) -> Path:
        from ..persistence import save

        return save(self, path)

    @classmethod
    def load(cls, path: str | Path, rng: np.random.Generator | None = None) -> "NeuralNetwork":
        from ..persistence import load

        return load(path, rng=rng)

    # ------------------------------------------------------------------
    # Validation helpers

    def _check_parameters(self) -> None:
        for idx, (weight, bias) in enumerate(zip(self.weights, self.biases)):
            expected_weight = (self.structure[idx + 1], self.structure[idx])
            expected_bias = (self.structure[idx + 1], 1)
            if weight.shape != expected_weight:
                raise DimensionError(
                    f"Weights {idx} have shape {weight.shape}, expected {expected_weight}"
                )
            if bias.shape != expected_bias:
                raise DimensionError(
                    f"Biases {idx} have shape {bias.shape}, expected {expected_bias}"
                )

    @staticmethod
    def _require_column(column: Matrix, size: int, label: str) -> None:
        if column.shape != (size, 1):
            raise DimensionError(
                f"Expected a {size}x1 {label} column, got {column.rows}x{column.columns}"
            )

    def _require_compatible(self, data: "TrainingData") -> None:
        if data.input_size != self.structure[0]:
            raise DimensionError(
                f"Training inputs have {data.input_size} value(s), "
                f"network expects {self.structure[0]}"
            )
        if data.output_size != self.structure[-1]:
            raise DimensionError(
                f"Training outputs have {data.output_size} value(s), "
                f"network produces {self.structure[-1]}"
            )

    def __repr__(self) -> str:
        return f"NeuralNetwork(structure={self.structure})"

    def __str__(self) -> str:
        last = self.layer_count - 1
        parts = [f"_INPUT_LAYER_\nNeurons: {self.structure[0]}\n"]
        for layer in range(1, self.layer_count):
            title = "_OUTPUT_LAYER_" if layer == last else f"_HIDDEN_LAYER_#{layer}_"
            parts.append(
                f"\n{title}\n"
                f"Incoming Weights:\n{self.weights[layer - 1]}\n"
                f"Biases:\n{self.biases[layer - 1]}\n"
            )
        return "".join(parts)


def _validate_structure(structure: Sequence[int]) -> List[int]:
    sizes = list(structure)
    if len(sizes) < 2:
        raise StructureError(
            f"A network needs at least 2 layers (input and output), got {len(sizes)}"
        )
    for size in sizes:
        if isinstance(size, bool) or int(size) != size or int(size) < 1:
            raise StructureError(f"Layer sizes must be positive integers, got {sizes}")
    return [int(size) for size in sizes]


__all__ = ["NeuralNetwork"]
