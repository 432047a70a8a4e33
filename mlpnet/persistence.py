"""Text persistence for trained networks.

A saved network is a sequence of ``<Layer>`` blocks, one per layer::

    <Layer Name="L1">
      <Neuron Name="N0" Bias="0.25">
        <IncomingWeights>
          <Weight Layer="L0" Neuron="0" Strength="-0.5" />
        </IncomingWeights>
      </Neuron>
    </Layer>

The input layer ``L0`` lists its neurons with a zero bias and no incoming
weights. Values are written with ``repr`` so they read back bit-for-bit.
"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List

import numpy as np

from .core.errors import PersistenceError
from .core.matrix import Matrix
from .core.network import NeuralNetwork

logger = logging.getLogger(__name__)

_INDENT = "  "
_XML_DECLARATION = re.compile(r"^\ufeff?\s*<\?xml[^>]*\?>")


def _format(value: float) -> str:
    return repr(float(value))


def dumps(network: NeuralNetwork) -> str:
    """Render ``network`` in the layer/neuron text layout."""

    lines: List[str] = ['<Layer Name="L0">']
    for neuron in range(network.structure[0]):
        lines.append(f'{_INDENT}<Neuron Name="N{neuron}" Bias="{_format(0.0)}" />')
    lines.append("</Layer>")

    for layer in range(1, network.layer_count):
        weights = network.weights[layer - 1]
        biases = network.biases[layer - 1]
        lines.append(f'<Layer Name="L{layer}">')
        for neuron in range(network.structure[layer]):
            bias = _format(biases[neuron, 0])
            lines.append(f'{_INDENT}<Neuron Name="N{neuron}" Bias="{bias}">')
            lines.append(f"{_INDENT * 2}<IncomingWeights>")
            for source in range(network.structure[layer - 1]):
                strength = _format(weights[neuron, source])
                lines.append(
                    f'{_INDENT * 3}<Weight Layer="L{layer - 1}" Neuron="{source}" '
                    f'Strength="{strength}" />'
                )
            lines.append(f"{_INDENT * 2}</IncomingWeights>")
            lines.append(f"{_INDENT}</Neuron>")
        lines.append("</Layer>")
    return "\n".join(lines) + "\n"


def loads(text: str, rng: np.random.Generator | None = None) -> NeuralNetwork:
    """Rebuild a network from the text produced by :func:`dumps`."""

    layers = _parse_layers(text)
    if len(layers) < 2:
        raise PersistenceError(f"A saved network needs at least 2 layers, found {len(layers)}")

    structure = []
    for index, layer in enumerate(layers):
        _expect_name(layer, f"L{index}", "layer")
        neurons = layer.findall("Neuron")
        if not neurons:
            raise PersistenceError(f"Layer L{index} has no neurons")
        for neuron_index, neuron in enumerate(neurons):
            _expect_name(neuron, f"N{neuron_index}", f"neuron in layer L{index}")
        structure.append(len(neurons))

    weights: List[Matrix] = []
    biases: List[Matrix] = []
    for index in range(1, len(layers)):
        n_in, n_out = structure[index - 1], structure[index]
        weight = Matrix(n_out, n_in)
        bias = Matrix(n_out, 1)
        for neuron_index, neuron in enumerate(layers[index].findall("Neuron")):
            bias[neuron_index, 0] = _number(neuron, "Bias")
            incoming = neuron.find("IncomingWeights")
            if incoming is None:
                raise PersistenceError(
                    f"Neuron N{neuron_index} in layer L{index} has no IncomingWeights"
                )
            seen = set()
            for element in incoming.findall("Weight"):
                if element.get("Layer") != f"L{index - 1}":
                    raise PersistenceError(
                        f"Weight into L{index}/N{neuron_index} references layer "
                        f"{element.get('Layer')!r}, expected 'L{index - 1}'"
                    )
                source = _integer(element, "Neuron")
                if not 0 <= source < n_in or source in seen:
                    raise PersistenceError(
                        f"Invalid or duplicated source neuron {source} for L{index}/N{neuron_index}"
                    )
                seen.add(source)
                weight[neuron_index, source] = _number(element, "Strength")
            if len(seen) != n_in:
                raise PersistenceError(
                    f"Neuron N{neuron_index} in layer L{index} has {len(seen)} incoming "
                    f"weight(s), expected {n_in}"
                )
        weights.append(weight)
        biases.append(bias)

    return NeuralNetwork.from_parameters(weights, biases, rng=rng)


def save(network: NeuralNetwork, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(network), encoding="utf-8")
    logger.debug("saved network %s to %s", network.structure, path)
    return path


def load(path: str | Path, rng: np.random.Generator | None = None) -> NeuralNetwork:
    path = Path(path)
    network = loads(path.read_text(encoding="utf-8"), rng=rng)
    logger.debug("loaded network %s from %s", network.structure, path)
    return network


def _parse_layers(text: str) -> List[ET.Element]:
    text = _XML_DECLARATION.sub("", text, count=1)
    try:
        root = ET.fromstring(f"<Network>{text}</Network>")
    except ET.ParseError as exc:
        raise PersistenceError(f"Malformed network file: {exc}") from exc
    layers = root.findall("Layer")
    # Documents that already carry their own root element.
    if not layers and len(root) == 1:
        layers = root[0].findall("Layer")
    return layers


def _expect_name(element: ET.Element, expected: str, what: str) -> None:
    name = element.get("Name")
    if name != expected:
        raise PersistenceError(f"Expected {what} named {expected!r}, found {name!r}")


def _number(element: ET.Element, attribute: str) -> float:
    raw = element.get(attribute)
    if raw is None:
        raise PersistenceError(f"<{element.tag}> is missing the {attribute} attribute")
    try:
        value = float(raw)
    except ValueError as exc:
        raise PersistenceError(f"{attribute}={raw!r} is not a number") from exc
    if not math.isfinite(value):
        raise PersistenceError(f"{attribute}={raw!r} is not a finite number")
    return value


def _integer(element: ET.Element, attribute: str) -> int:
    raw = element.get(attribute)
    try:
        return int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise PersistenceError(f"{attribute}={raw!r} is not an integer") from exc


__all__ = ["dumps", "load", "loads", "save"]
