"""Activation and summation helpers for mlpnet."""

from __future__ import annotations

from typing import Iterable, TypeVar

import numpy as np

from .types import Array

T = TypeVar("T", int, float, np.floating, np.integer)


def sigmoid(x: Array) -> Array:
    """Return the logistic function ``1 / (1 + e^-x)`` element-wise."""

    # exp(-x) overflows to inf for very negative x; 1 / inf is the correct 0.
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-x))


def sigmoid_prime(x: Array) -> Array:
    """Derivative of :func:`sigmoid`, ``s(x) * (1 - s(x))``."""

    s = sigmoid(x)
    return s * (1.0 - s)


def total(values: Iterable[T], start: T = 0) -> T:
    """Sum ``values`` in order, keeping the element type of the inputs."""

    result = start
    for value in values:
        result = result + value
    return result


__all__ = ["sigmoid", "sigmoid_prime", "total"]
