import numpy as np
import pytest

from mlpnet.data import available_datasets, get_dataset
from mlpnet.data.utils import min_max_scale, one_hot


def test_registry_lists_builtin_datasets():
    names = set(available_datasets())
    assert {"xor", "synthetic", "csv_regression", "csv_classification"} <= names
    with pytest.raises(KeyError):
        get_dataset("mnist")


def test_xor_dataset():
    spec = get_dataset("xor")
    data = spec.training_data
    assert data.sample_size == 4
    assert spec.data_spec.d_in == 2 and spec.data_spec.d_out == 1
    pairs = {tuple(data.get_input(i)): data.get_expected_output(i)[0] for i in range(4)}
    assert pairs == {(0.0, 0.0): 0.0, (0.0, 1.0): 1.0, (1.0, 0.0): 1.0, (1.0, 1.0): 0.0}


def test_synthetic_dataset_is_seeded_and_in_unit_range():
    a = get_dataset("synthetic", n_points=32, seed=4)
    b = get_dataset("synthetic", n_points=32, seed=4)
    assert a.training_data == b.training_data
    outputs = a.training_data.expected_outputs.to_array()
    inputs = a.training_data.inputs.to_array()
    assert outputs.shape == (32, 1)
    assert outputs.min() >= 0.0 and outputs.max() <= 1.0
    assert inputs.min() == 0.0 and inputs.max() == 1.0
    with pytest.raises(ValueError):
        get_dataset("synthetic", n_points=0)


def test_csv_classification(tmp_path):
    path = tmp_path / "iris_like.csv"
    path.write_text("a,b,label\n1,10,cat\n3,10,dog\n2,10,cat\n5,10,bird\n")
    spec = get_dataset("csv_classification", csv_path=path, target_col="label")
    data = spec.training_data
    assert spec.data_spec.num_classes == 3
    assert data.input_size == 2 and data.output_size == 3
    inputs = data.inputs.to_array()
    np.testing.assert_allclose(inputs[:, 0], [0.0, 0.5, 0.25, 1.0])
    assert np.array_equal(inputs[:, 1], np.zeros(4))
    assert spec.provenance["classes"] == ["bird", "cat", "dog"]
    assert np.array_equal(data.get_expected_output(0), [0.0, 1.0, 0.0])


def test_csv_regression(tmp_path):
    path = tmp_path / "reg.csv"
    path.write_text("x,target\n0,10\n5,20\n10,30\n")
    spec = get_dataset("csv_regression", csv_path=path)
    outputs = spec.training_data.expected_outputs.to_array().ravel()
    np.testing.assert_allclose(outputs, [0.0, 0.5, 1.0])
    assert spec.data_spec.normalization["targets"]["min"] == [10.0]
    with pytest.raises(KeyError):
        get_dataset("csv_regression", csv_path=path, target_col="missing")


def test_helpers():
    scaled, low, span = min_max_scale(np.array([[2.0, 1.0], [4.0, 1.0]]))
    assert np.array_equal(scaled, [[0.0, 0.0], [1.0, 0.0]])
    assert np.array_equal(low, [[2.0, 1.0]]) and np.array_equal(span, [[2.0, 0.0]])
    assert np.array_equal(one_hot(np.array([2, 0]), 3), [[0.0, 0.0, 1.0], [1.0, 0.0, 0.0]])
