"""Built-in dataset loaders.

Importing this package registers every loader with
:mod:`mlpnet.data.registry`.
"""

from . import csv_generic, synthetic, xor  # noqa: F401

__all__ = ["csv_generic", "synthetic", "xor"]
