"""Cost curve figure for a training run."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping

# Series drawn from the per-epoch metrics, with their legend labels.
_SERIES = {
    "cost": "mean cost",
    "last_sample_cost": "last sample cost",
}


class PlotAdapter:
    """Trainer callback that draws the cost history to ``cost.png``.

    Besides the recorded series, the figure shows the running best cost and,
    when ``target_cost`` is given, the stopping threshold as a dashed line.
    Nothing is recorded or written unless ``enable_plots`` is set.
    """

    def __init__(
        self,
        run_dir: str | Path,
        enable_plots: bool = False,
        *,
        target_cost: float | None = None,
        title: str = "Training cost",
    ) -> None:
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.target_cost = target_cost
        self.title = title
        self.epochs: List[int] = []
        self.series: Dict[str, List[float]] = {name: [] for name in _SERIES}

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots:
            return
        self.epochs.append(int(epoch))
        for name, values in self.series.items():
            values.append(float(metrics.get(name, float("nan"))))

    __call__ = on_epoch

    def best_costs(self) -> List[float]:
        """Running minimum of the mean cost, one value per recorded epoch."""

        best: List[float] = []
        for cost in self.series["cost"]:
            best.append(cost if not best else min(best[-1], cost))
        return best

    def close(self) -> Path | None:
        """Write the figure and return its path, or ``None`` if nothing was drawn."""

        if not self.enable_plots or not self.epochs:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots()
        for name, label in _SERIES.items():
            ax.plot(self.epochs, self.series[name], label=label)
        ax.plot(self.epochs, self.best_costs(), linestyle=":", label="best cost")
        if self.target_cost is not None:
            ax.axhline(self.target_cost, color="grey", linestyle="--", label="target cost")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Quadratic cost")
        ax.set_title(self.title)
        ax.legend()

        self.run_dir.mkdir(parents=True, exist_ok=True)
        plot_path = self.run_dir / "cost.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path


__all__ = ["PlotAdapter"]
