import numpy as np

from mlpnet.core.network import NeuralNetwork
from mlpnet.data import get_dataset


def _train(seed: int) -> NeuralNetwork:
    data = get_dataset("synthetic", n_points=24, seed=0).training_data
    net = NeuralNetwork([1, 5, 1], rng=np.random.default_rng(seed))
    net.train(data, learning_rate=1.5, epochs=15, mini_batch_size=5)
    return net


def test_fixed_seed_gives_bit_identical_training():
    first, second = _train(11), _train(11)
    for a, b in zip(first.weights + first.biases, second.weights + second.biases):
        assert np.array_equal(a.to_array(), b.to_array())
    assert first.cost == second.cost


def test_different_seeds_diverge():
    first, second = _train(11), _train(12)
    assert not np.array_equal(first.weights[0].to_array(), second.weights[0].to_array())


def test_explicit_shuffle_stream_overrides_network_rng():
    data_a = get_dataset("xor").training_data
    data_b = get_dataset("xor").training_data
    a = NeuralNetwork([2, 3, 1], rng=np.random.default_rng(5))
    b = NeuralNetwork([2, 3, 1], rng=np.random.default_rng(5))
    a.train(data_a, 1.0, 3, 2, rng=np.random.default_rng(99))
    b.train(data_b, 1.0, 3, 2, rng=np.random.default_rng(99))
    assert a.weights == b.weights
    assert data_a == data_b
