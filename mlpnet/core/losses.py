"""Quadratic cost used by the network's backward pass."""

from __future__ import annotations

from .activations import total
from .matrix import Matrix


def quadratic_cost(output: Matrix, expected: Matrix) -> tuple[float, Matrix]:
    """Return ``sum((expected - output)^2) / 2`` and its gradient ``output - expected``."""

    difference = output - expected
    squared = Matrix.hadamard(difference, difference)
    cost = total(squared.to_array().ravel().tolist(), 0.0) / 2.0
    return float(cost), difference


__all__ = ["quadratic_cost"]
