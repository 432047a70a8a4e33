"""Epoch-by-epoch training driver with a cost-threshold stopping rule."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..core.network import NeuralNetwork
from ..core.types import Array, RunResult
from ..data.training_data import TrainingData
from ..persistence import save
from .metrics import compute_metrics

logger = logging.getLogger(__name__)


class Trainer:
    """Repeatedly train ``network`` one epoch at a time.

    After every epoch the mean quadratic cost over the whole training set is
    computed and sent, with any extra metrics, to each callback's
    ``on_epoch(epoch, metrics)`` (or to the callback itself if it is a plain
    callable).
    """

    def __init__(
        self,
        network: NeuralNetwork,
        learning_rate: float,
        mini_batch_size: int,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if learning_rate <= 0:
            raise ValueError(f"Learning rate must be positive, got {learning_rate}")
        if mini_batch_size < 1:
            raise ValueError(f"Mini-batch size must be at least 1, got {mini_batch_size}")
        self.network = network
        self.learning_rate = float(learning_rate)
        self.mini_batch_size = int(mini_batch_size)
        self.callbacks = list(callbacks or [])

    def run(
        self,
        training_data: TrainingData,
        epochs: int,
        *,
        target_cost: float | None = None,
        rng: np.random.Generator | None = None,
        metric_names: Sequence[str] = (),
        checkpoint_dir: str | Path | None = None,
    ) -> RunResult:
        if epochs < 0:
            raise ValueError(f"Epoch count must be non-negative, got {epochs}")

        best_cost = float("inf")
        best_state: Mapping[str, Array] | None = None
        cost = self.network.evaluate_cost(training_data)
        converged = target_cost is not None and cost <= target_cost
        completed = 0

        while not converged and completed < epochs:
            self.network.train(
                training_data,
                self.learning_rate,
                1,
                self.mini_batch_size,
                rng=rng,
            )
            completed += 1
            metrics = self._evaluate(training_data, metric_names)
            cost = metrics["cost"]
            if cost < best_cost:
                best_cost = cost
                best_state = self.network.state_dict()
            self._emit_epoch(completed, metrics)
            logger.debug("epoch %d: cost %.6f", completed, cost)
            converged = target_cost is not None and cost <= target_cost

        if best_state is None:
            best_cost = cost

        if checkpoint_dir is not None:
            checkpoint_dir = Path(checkpoint_dir)
            save(self.network, checkpoint_dir / "last.xml")
            if best_state is not None:
                best = NeuralNetwork(self.network.structure, rng=np.random.default_rng(0))
                best.load_state_dict(best_state)
                save(best, checkpoint_dir / "best.xml")

        logger.info(
            "trained %d epoch(s): cost %.6f, best %.6f%s",
            completed,
            cost,
            best_cost,
            " (target reached)" if converged else "",
        )
        return RunResult(
            epochs=completed,
            cost=float(cost),
            best_cost=float(best_cost),
            converged=bool(converged),
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _evaluate(self, training_data: TrainingData, metric_names: Sequence[str]) -> dict:
        metrics = {
            "cost": self.network.evaluate_cost(training_data),
            "last_sample_cost": float(self.network.cost),
        }
        extra = [name for name in metric_names if name != "cost"]
        if extra:
            predictions = self.network.predict(training_data.inputs.to_array())
            targets = training_data.expected_outputs.to_array()
            metrics.update(compute_metrics(extra, predictions, targets))
        return metrics

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Trainer"]
