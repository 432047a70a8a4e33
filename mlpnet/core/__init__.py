"""Core numerical primitives: matrices, activations and the network."""

from . import activations, errors, losses, matrix, network, types

__all__ = ["activations", "errors", "losses", "matrix", "network", "types"]
