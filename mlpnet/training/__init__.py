"""Training driver, metrics and config-driven pipelines."""

from .metrics import compute_metrics, default_metrics
from .trainer import Trainer

__all__ = ["Trainer", "compute_metrics", "default_metrics"]
