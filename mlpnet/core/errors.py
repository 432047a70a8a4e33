"""Exception hierarchy for mlpnet."""

from __future__ import annotations


class MlpNetError(Exception):
    """Base class for every error raised by mlpnet."""


class DimensionError(MlpNetError, ValueError):
    """Operand shapes are incompatible, or an input has the wrong width."""


class RangeError(MlpNetError, IndexError):
    """An index or slice falls outside the valid bounds."""


class SampleSizeMismatchError(MlpNetError, ValueError):
    """Inputs and expected outputs hold a different number of samples."""


class StructureError(MlpNetError, ValueError):
    """A network layer structure is invalid."""


class PersistenceError(MlpNetError, ValueError):
    """A saved network could not be parsed."""


__all__ = [
    "DimensionError",
    "MlpNetError",
    "PersistenceError",
    "RangeError",
    "SampleSizeMismatchError",
    "StructureError",
]
