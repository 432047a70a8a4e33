"""Pipeline assembly: config -> dataset -> network -> trained run directory."""

from __future__ import annotations

import json
import logging
import os
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.network import NeuralNetwork
from ..core.types import RunResult
from ..data import registry
from ..persistence import save
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .metrics import METRICS, default_metrics
from .trainer import Trainer

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [3]},
        "train": {
            "epochs": 4000,
            "learning_rate": 2.0,
            "mini_batch_size": 1,
            "seed": 0,
            "target_cost": 0.01,
            "metrics": "default",
            "run_dir": "runs/xor",
            "enable_plots": False,
        },
    },
    "xor-deep": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [4, 4]},
        "train": {
            "epochs": 6000,
            "learning_rate": 1.5,
            "mini_batch_size": 2,
            "seed": 1,
            "target_cost": 0.01,
            "metrics": "default",
            "run_dir": "runs/xor-deep",
            "enable_plots": False,
        },
    },
    "synthetic-sine": {
        "data": {"name": "synthetic", "options": {"freq": 2.0, "n_points": 64, "seed": 0}},
        "model": {"hidden": [16]},
        "train": {
            "epochs": 300,
            "learning_rate": 1.0,
            "mini_batch_size": 8,
            "seed": 7,
            "metrics": ["mae", "rmse"],
            "run_dir": "runs/synthetic-sine",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_REQUIRED_SECTIONS = {"data", "model", "train"}


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Read a JSON or YAML mapping from ``path``."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix == ".json":
        data = json.loads(text or "{}")
    else:
        import yaml

        data = yaml.safe_load(text) or {}

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    found: Dict[str, Mapping[str, object]] = {}
    if _PRESET_DIR.exists():
        for file in sorted(_PRESET_DIR.iterdir()):
            if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                continue
            data = read_config_file(file)
            missing = _REQUIRED_SECTIONS - set(data)
            if missing:
                raise KeyError(
                    f"Preset {file.name} is missing required sections: {', '.join(sorted(missing))}"
                )
            found[file.stem] = json.loads(json.dumps(data))
    return found


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    available = presets()
    try:
        return available[name]
    except KeyError as exc:
        raise KeyError(f"Unknown preset {name!r}. Available presets: {', '.join(sorted(available))}") from exc


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dataset = registry.get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    data_spec = dataset.data_spec
    dims = _build_dims(model_cfg, data_spec)

    seed = int(train_cfg.get("seed", 0))
    epochs = int(train_cfg.get("epochs", 1))
    learning_rate = float(train_cfg.get("learning_rate", 1.0))
    mini_batch_size = int(train_cfg.get("mini_batch_size", 1))
    target_cost = train_cfg.get("target_cost")
    target_cost = float(target_cost) if target_cost is not None else None
    metric_names = _resolve_metrics(train_cfg.get("metrics", "default"), data_spec.task_type)

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=dataset.name,
        samples=dataset.training_data.sample_size,
        dims=dims,
        learning_rate=learning_rate,
        mini_batch_size=mini_batch_size,
        metrics=metric_names,
    )

    # One seeded stream drives both initialisation and shuffling.
    rng = np.random.default_rng(seed)
    network = NeuralNetwork(dims, rng=rng)

    jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", split="train")
    plots = PlotAdapter(
        run_dir,
        enable_plots=bool(train_cfg.get("enable_plots", False)),
        target_cost=target_cost,
        title=f"{dataset.name} {dims}",
    )
    trainer = Trainer(network, learning_rate, mini_batch_size, callbacks=[jsonl, csv_sink, plots])

    result = trainer.run(
        dataset.training_data,
        epochs,
        target_cost=target_cost,
        metric_names=metric_names,
        checkpoint_dir=run_dir / "checkpoints",
    )
    plots.close()

    model_path = save(network, run_dir / "network.xml")
    summary_path = write_summary(jsonl.path, run_dir / "summary.json")
    resolved = json.loads(json.dumps(config))
    resolved.setdefault("model", {})["structure"] = dims
    (run_dir / "config.json").write_text(json.dumps(resolved, indent=2))
    (run_dir / "dataset.json").write_text(json.dumps(dataset.provenance, indent=2, default=str))

    logger.info("run written to %s", run_dir)
    return RunResult(
        epochs=result.epochs,
        cost=result.cost,
        best_cost=result.best_cost,
        converged=result.converged,
        model_path=str(model_path),
        metrics_path=str(jsonl.path),
        summary_path=summary_path,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    base = Path(os.environ.get("MLPNET_RUNS_DIR", "runs"))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return base / timestamp / dataset


def _resolve_metrics(metrics_cfg: object, task_type: str) -> List[str]:
    if isinstance(metrics_cfg, str):
        if metrics_cfg.strip() in {"", "default"}:
            names = default_metrics(task_type)
        else:
            names = [m.strip() for m in metrics_cfg.split(",") if m.strip()]
    else:
        names = [str(m) for m in metrics_cfg]  # type: ignore[union-attr]
    unknown = sorted(set(names) - set(METRICS))
    if unknown:
        raise ValueError(f"Unknown metric(s): {', '.join(unknown)}")
    return names


def _build_dims(model_cfg: Mapping[str, object], data_spec: registry.DataSpec) -> List[int]:
    d_in = int(model_cfg.get("d_in", data_spec.d_in))
    d_out = int(model_cfg.get("d_out", data_spec.d_out))
    if d_in != data_spec.d_in:
        raise ValueError(f"Configured d_in={d_in} but the dataset has {data_spec.d_in}")
    if d_out != data_spec.d_out:
        raise ValueError(f"Configured d_out={d_out} but the dataset has {data_spec.d_out}")
    hidden = [int(h) for h in model_cfg.get("hidden", [])]  # type: ignore[union-attr]
    return [d_in, *hidden, d_out]


def _print_startup_summary(
    *,
    dataset_name: str,
    samples: int,
    dims: Sequence[int],
    learning_rate: float,
    mini_batch_size: int,
    metrics: Sequence[str],
) -> None:
    print("=== mlpnet run ===")
    print(f"Dataset        : {dataset_name} ({samples} samples)")
    print(f"Structure      : {list(dims)}")
    print(f"Learning rate  : {learning_rate}")
    print(f"Mini-batch size: {mini_batch_size}")
    print(f"Metrics        : {', '.join(metrics) or '-'}")
    print("==================")


__all__ = ["load_preset", "presets", "read_config_file", "run_pipeline"]
