import csv
import json

import numpy as np
import pytest

from mlpnet.reporting import CsvSink, JsonlSink, PlotAdapter, write_summary
from mlpnet.training.metrics import compute_metric, compute_metrics, default_metrics


def test_metric_values():
    preds = np.array([[0.9], [0.2], [0.6], [0.4]])
    targs = np.array([[1.0], [0.0], [0.0], [1.0]])
    assert compute_metric("accuracy", preds, targs) == 0.5
    assert compute_metric("mae", preds, targs) == pytest.approx(0.375)
    assert compute_metric("rmse", preds, targs) == pytest.approx(np.sqrt(np.mean((preds - targs) ** 2)))
    assert compute_metric("cost", preds, targs) == pytest.approx(np.mean(0.5 * (preds - targs) ** 2))

    multi = compute_metrics(["accuracy"], np.array([[0.1, 0.8], [0.7, 0.2]]), np.array([[0.0, 1.0], [0.0, 1.0]]))
    assert multi == {"accuracy": 0.5}


def test_metric_errors():
    with pytest.raises(ValueError):
        compute_metric("f1", np.zeros((1, 1)), np.zeros((1, 1)))
    with pytest.raises(ValueError):
        compute_metric("mae", np.zeros((2, 1)), np.zeros((2, 2)))
    with pytest.raises(ValueError):
        default_metrics("ranking")
    assert default_metrics("binary") == ["accuracy"]


def test_sinks_and_summary(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", seed=3)
    csv_sink = CsvSink(tmp_path / "m.csv")
    for epoch, cost in enumerate([0.5, 0.25, 0.3], start=1):
        jsonl.on_epoch(epoch, {"cost": cost, "flag": "skip"})
        csv_sink(epoch, {"cost": cost})

    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert [r["epoch"] for r in records] == [1, 2, 3]
    assert records[0] == {"epoch": 1, "split": "train", "seed": 3, "cost": 0.5}

    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 3 and rows[1]["cost"] == "0.25"

    summary = json.loads(open(write_summary(tmp_path / "m.jsonl", tmp_path / "s.json")).read())
    assert summary["records"] == 3
    assert summary["metrics"]["cost"] == {"min": 0.25, "max": 0.5, "mean": pytest.approx(1.05 / 3), "last": 0.3}


def test_plot_adapter(tmp_path):
    disabled = PlotAdapter(tmp_path / "off")
    disabled.on_epoch(1, {"cost": 1.0})
    assert disabled.close() is None

    assert not disabled.epochs
    assert not (tmp_path / "off").exists()

    adapter = PlotAdapter(tmp_path / "on", enable_plots=True, target_cost=0.3)
    adapter.on_epoch(1, {"cost": 1.0, "last_sample_cost": 0.9})
    adapter(2, {"cost": 0.5, "last_sample_cost": 0.7})
    adapter(3, {"cost": 0.6})
    assert adapter.epochs == [1, 2, 3]
    assert adapter.series["last_sample_cost"][:2] == [0.9, 0.7]
    assert np.isnan(adapter.series["last_sample_cost"][2])
    assert adapter.best_costs() == [1.0, 0.5, 0.5]
    path = adapter.close()
    assert path == tmp_path / "on" / "cost.png"
    assert path.exists()
