"""Pure in-memory synthetic regression data."""

from __future__ import annotations

import numpy as np

from ..registry import DataSpec, DatasetSpec, register_dataset
from ..training_data import TrainingData


def _make_dataset(freq: float, n_points: int, noise: float, seed: int) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    x = np.linspace(0.0, 1.0, n_points, dtype=np.float64).reshape(-1, 1)
    y_true = 0.5 + 0.4 * np.sin(freq * np.pi * x)
    y = y_true + noise * rng.standard_normal(size=y_true.shape)
    # Targets must stay inside the sigmoid's range.
    return x, np.clip(y, 0.0, 1.0)


@register_dataset("synthetic")
def load_synthetic(
    freq: float = 2.0,
    n_points: int = 64,
    noise: float = 0.02,
    seed: int = 0,
    **_: object,
) -> DatasetSpec:
    if n_points < 1:
        raise ValueError(f"n_points must be positive, got {n_points}")
    x, y = _make_dataset(freq=freq, n_points=n_points, noise=noise, seed=seed)
    return DatasetSpec(
        name="synthetic",
        training_data=TrainingData(x, y),
        data_spec=DataSpec(
            d_in=1,
            d_out=1,
            task_type="regression",
            normalization={"targets": "0.5 + 0.4 * sin(freq * pi * x), clipped to [0, 1]"},
        ),
        provenance={
            "type": "synthetic",
            "freq": freq,
            "n_points": n_points,
            "noise": noise,
            "seed": seed,
        },
    )


__all__ = ["load_synthetic"]
