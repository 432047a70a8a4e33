"""Generic CSV loaders for regression and classification tasks.

Feature columns are min-max scaled into ``[0, 1]`` so that they suit the
sigmoid activation; the scaling is recorded in ``data_spec.normalization``.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder

from ..registry import DataSpec, DatasetSpec, register_dataset
from ..training_data import TrainingData
from ..utils import min_max_scale, one_hot


def _load_csv(path: Path, target_col: str) -> tuple[np.ndarray, np.ndarray]:
    df = pd.read_csv(path)
    if target_col not in df.columns:
        raise KeyError(f"Target column {target_col!r} not found in CSV")
    y = df.pop(target_col).to_numpy()
    X = df.to_numpy(dtype=np.float64)
    return X, y


@register_dataset("csv_regression")
def load_csv_regression(
    *,
    csv_path: str | Path,
    target_col: str = "target",
    **_: object,
) -> DatasetSpec:
    """Load a regression dataset; both features and target are scaled."""

    path = Path(csv_path)
    X_raw, y_raw = _load_csv(path, target_col)
    X, x_low, x_span = min_max_scale(X_raw)
    y, y_low, y_span = min_max_scale(np.asarray(y_raw, dtype=np.float64).reshape(-1, 1))

    return DatasetSpec(
        name="csv_regression",
        training_data=TrainingData(X, y),
        data_spec=DataSpec(
            d_in=int(X.shape[1]),
            d_out=1,
            task_type="regression",
            normalization={
                "inputs": {"min": x_low.ravel().tolist(), "range": x_span.ravel().tolist()},
                "targets": {"min": y_low.ravel().tolist(), "range": y_span.ravel().tolist()},
            },
        ),
        provenance={"path": str(path), "target_col": target_col},
    )


@register_dataset("csv_classification")
def load_csv_classification(
    *,
    csv_path: str | Path,
    target_col: str = "target",
    **_: object,
) -> DatasetSpec:
    """Load a classification dataset with one-hot encoded labels."""

    path = Path(csv_path)
    X_raw, y_raw = _load_csv(path, target_col)
    X, x_low, x_span = min_max_scale(X_raw)
    encoder = LabelEncoder()
    y_encoded = encoder.fit_transform(y_raw)
    num_classes = int(len(encoder.classes_))

    return DatasetSpec(
        name="csv_classification",
        training_data=TrainingData(X, one_hot(y_encoded, num_classes)),
        data_spec=DataSpec(
            d_in=int(X.shape[1]),
            d_out=num_classes,
            task_type="multiclass",
            num_classes=num_classes,
            normalization={
                "inputs": {"min": x_low.ravel().tolist(), "range": x_span.ravel().tolist()},
            },
        ),
        provenance={
            "path": str(path),
            "target_col": target_col,
            "classes": [str(label) for label in encoder.classes_.tolist()],
        },
    )


__all__ = ["load_csv_classification", "load_csv_regression"]
