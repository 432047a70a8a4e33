"""Training data container, dataset registry and built-in loaders."""

# Ensure built-in datasets register themselves when the package is imported.
from . import loaders as _loaders  # noqa: F401
from .registry import (
    DatasetSpec,
    DataSpec,
    available_datasets,
    get_dataset,
    register_dataset,
)
from .training_data import TrainingData

__all__ = [
    "DataSpec",
    "DatasetSpec",
    "TrainingData",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
