"""mlpnet public API."""

from .core.errors import (
    DimensionError,
    MlpNetError,
    PersistenceError,
    RangeError,
    SampleSizeMismatchError,
    StructureError,
)
from .core.matrix import Matrix
from .core.network import NeuralNetwork
from .data import TrainingData, get_dataset
from .persistence import dumps, load, loads, save
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__version__ = "0.1.0"

__all__ = [
    "DimensionError",
    "Matrix",
    "MlpNetError",
    "NeuralNetwork",
    "PersistenceError",
    "RangeError",
    "SampleSizeMismatchError",
    "StructureError",
    "Trainer",
    "TrainingData",
    "dumps",
    "get_dataset",
    "load",
    "load_preset",
    "loads",
    "presets",
    "run_pipeline",
    "save",
]
