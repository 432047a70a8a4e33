"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

from .training_data import TrainingData

TASK_TYPES = ("regression", "multiclass", "binary")


@dataclass(frozen=True)
class DataSpec:
    """Structural information about a dataset.

    Attributes
    ----------
    d_in:
        Number of input values per sample.
    d_out:
        Number of expected output values per sample.
    task_type:
        One of ``{"regression", "multiclass", "binary"}``.
    num_classes:
        Number of classes when ``task_type`` is ``"multiclass"``.
    normalization:
        Description of the scaling applied to inputs or targets so that a
        run can be reproduced on raw data.
    """

    d_in: int
    d_out: int
    task_type: str
    num_classes: int | None = None
    normalization: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DatasetSpec:
    """A loaded dataset ready to be trained on."""

    name: str
    training_data: TrainingData
    data_spec: DataSpec
    provenance: Dict[str, Any]


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory, either directly or as a decorator::

        @register_dataset("xor")
        def make_xor(**options):
            ...
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(name: str, /, **options: Any) -> DatasetSpec:
    """Build the dataset registered as ``name`` with ``options``."""

    if name not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {name!r}. Available datasets: {available}")
    spec = _REGISTRY[name](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    data_spec = spec.data_spec
    if data_spec.task_type not in TASK_TYPES:
        raise ValueError(f"Invalid task type: {data_spec.task_type}")
    if data_spec.task_type == "multiclass" and data_spec.num_classes is None:
        raise ValueError("Multiclass datasets must define num_classes")
    if spec.training_data.input_size != data_spec.d_in:
        raise ValueError(
            f"Dataset {spec.name!r} declares d_in={data_spec.d_in} but holds "
            f"{spec.training_data.input_size} input value(s) per sample"
        )
    if spec.training_data.output_size != data_spec.d_out:
        raise ValueError(
            f"Dataset {spec.name!r} declares d_out={data_spec.d_out} but holds "
            f"{spec.training_data.output_size} output value(s) per sample"
        )


__all__ = [
    "DataSpec",
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
