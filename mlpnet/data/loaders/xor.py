"""The four-sample exclusive-or table."""

from __future__ import annotations

import numpy as np

from ..registry import DataSpec, DatasetSpec, register_dataset
from ..training_data import TrainingData

XOR_INPUTS = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
XOR_OUTPUTS = np.array([[0.0], [1.0], [1.0], [0.0]])


@register_dataset("xor")
def load_xor(**_: object) -> DatasetSpec:
    return DatasetSpec(
        name="xor",
        training_data=TrainingData(XOR_INPUTS, XOR_OUTPUTS),
        data_spec=DataSpec(d_in=2, d_out=1, task_type="binary"),
        provenance={"type": "xor", "samples": 4},
    )


__all__ = ["XOR_INPUTS", "XOR_OUTPUTS", "load_xor"]
