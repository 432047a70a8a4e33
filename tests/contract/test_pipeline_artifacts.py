import json
from pathlib import Path

import pytest

from mlpnet.persistence import load
from mlpnet.training import pipelines


def _config(run_dir: Path) -> dict:
    return {
        "data": {"name": "synthetic", "options": {"n_points": 16, "seed": 0}},
        "model": {"hidden": [4]},
        "train": {
            "epochs": 5,
            "learning_rate": 1.0,
            "mini_batch_size": 4,
            "seed": 21,
            "metrics": ["mae", "cost"],
            "run_dir": str(run_dir),
            "enable_plots": False,
        },
    }


def test_pipeline_produces_artifacts(tmp_path, capsys):
    result = pipelines.run_pipeline(_config(tmp_path / "run"))
    run_dir = tmp_path / "run"
    assert "=== mlpnet run ===" in capsys.readouterr().out
    assert result.epochs == 5
    assert Path(result.model_path) == run_dir / "network.xml"
    assert load(result.model_path).structure == [1, 4, 1]
    for name in ("metrics.jsonl", "metrics.csv", "summary.json", "config.json", "dataset.json"):
        assert (run_dir / name).exists()
    assert (run_dir / "checkpoints" / "best.xml").exists()

    records = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    assert [r["epoch"] for r in records] == [1, 2, 3, 4, 5]
    assert all({"cost", "mae", "split", "seed"} <= set(r) for r in records)
    config = json.loads((run_dir / "config.json").read_text())
    assert config["model"]["structure"] == [1, 4, 1]


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "a"))
    second = pipelines.run_pipeline(_config(tmp_path / "b"))
    assert Path(first.metrics_path).read_text() == Path(second.metrics_path).read_text()
    assert Path(first.model_path).read_text() == Path(second.model_path).read_text()


def test_pipeline_config_errors(tmp_path):
    config = _config(tmp_path / "bad")
    config["model"]["d_in"] = 3
    with pytest.raises(ValueError):
        pipelines.run_pipeline(config)

    config = _config(tmp_path / "bad")
    config["train"]["metrics"] = ["f1"]
    with pytest.raises(ValueError):
        pipelines.run_pipeline(config)

    with pytest.raises(KeyError):
        pipelines.run_pipeline({"data": {"name": "xor"}})


def test_presets_include_builtin_and_file_presets():
    names = set(pipelines.presets())
    assert {"xor", "xor-deep", "synthetic-sine", "xor-wide"} <= names
    assert pipelines.load_preset("xor-wide")["model"]["hidden"] == [8]
    with pytest.raises(KeyError):
        pipelines.load_preset("nope")


def test_read_config_file(tmp_path):
    yaml_path = tmp_path / "c.yaml"
    yaml_path.write_text("train:\n  epochs: 3\n")
    assert pipelines.read_config_file(yaml_path) == {"train": {"epochs": 3}}
    json_path = tmp_path / "c.json"
    json_path.write_text('{"train": {"epochs": 4}}')
    assert pipelines.read_config_file(json_path)["train"]["epochs"] == 4
    with pytest.raises(ValueError):
        pipelines.read_config_file(tmp_path / "c.toml")
    list_path = tmp_path / "l.json"
    list_path.write_text("[1, 2]")
    with pytest.raises(TypeError):
        pipelines.read_config_file(list_path)


def test_pipeline_writes_cost_plot_when_enabled(tmp_path):
    config = _config(tmp_path / "plotted")
    config["train"]["enable_plots"] = True
    config["train"]["target_cost"] = 0.001
    pipelines.run_pipeline(config)
    assert (tmp_path / "plotted" / "cost.png").exists()
