"""Core typing contracts for mlpnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple

import numpy as np

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .matrix import Matrix

Array = np.ndarray


@dataclass(frozen=True)
class ForwardPass:
    """Per-layer values produced by one forward pass.

    ``activations[0]`` is the input column; ``preactivations[l]`` is
    ``weights[l] * activations[l] + biases[l]`` and therefore has one entry
    fewer than ``activations``.
    """

    activations: List["Matrix"]
    preactivations: List["Matrix"]

    @property
    def output(self) -> "Matrix":
        return self.activations[-1]


# (weight gradients, bias gradients), one matrix per layer transition.
Gradients = Tuple[List["Matrix"], List["Matrix"]]


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    structure: List[int]

    @property
    def parameter_count(self) -> int:
        dims = self.structure
        return sum(dims[i + 1] * (dims[i] + 1) for i in range(len(dims) - 1))


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`mlpnet.training.trainer.Trainer.run`."""

    epochs: int
    cost: float
    best_cost: float
    converged: bool
    model_path: str = ""
    metrics_path: str = ""
    summary_path: str = ""
