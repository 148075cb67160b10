"""Charts of a simulation run, rendered to PNG with matplotlib.

Example:
    >>> from scalesim.visual import plot_series, plot_components
    >>> plot_series(engine.get_series(result.simulation_id), "out/series.png", result=result)
    >>> plot_components(result, "out/components.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from scalesim.instrumentation.series import MetricSample, MetricSeries

if TYPE_CHECKING:
    from scalesim.instrumentation.summary import SimulationResult

logger = logging.getLogger(__name__)


def _pyplot():
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    return plt


def plot_series(
    samples: Sequence[MetricSample] | MetricSeries,
    path: str | Path,
    result: SimulationResult | None = None,
) -> Path:
    """Four stacked panels: latency, throughput, error rate, CPU/memory.

    Args:
        samples: Step samples of one run.
        path: Output PNG path. Parent directories are created.
        result: When given, its p95/p99 latency are drawn as reference lines.

    Returns:
        The written path.
    """
    plt = _pyplot()
    series = samples if isinstance(samples, MetricSeries) else MetricSeries(samples)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    start = series.oldest_timestamp() or 0.0
    t = [ts - start for ts in series.timestamps()]

    fig, (ax_lat, ax_tput, ax_err, ax_res) = plt.subplots(nrows=4, ncols=1, sharex=True, figsize=(10, 11))

    ax_lat.plot(t, series.values("latency_ms"), color="#3498db", label="latency")
    if result is not None:
        ax_lat.axhline(result.metrics.p95_latency_ms, color="#f39c12", linestyle="--", label="p95")
        ax_lat.axhline(result.metrics.p99_latency_ms, color="#e74c3c", linestyle="--", label="p99")
    ax_lat.set_ylabel("latency (ms)")
    ax_lat.legend()
    ax_lat.grid(True, alpha=0.3)

    ax_tput.plot(t, series.values("throughput_rps"), color="#2ecc71")
    ax_tput.set_ylabel("throughput (req/s)")
    ax_tput.grid(True, alpha=0.3)

    ax_err.plot(t, [e * 100 for e in series.values("error_rate")], color="#e74c3c")
    ax_err.set_ylabel("error rate (%)")
    ax_err.grid(True, alpha=0.3)

    ax_res.plot(t, series.values("cpu_pct"), label="cpu")
    ax_res.plot(t, series.values("memory_pct"), label="memory")
    ax_res.set_ylim(0, 100)
    ax_res.set_ylabel("utilization (%)")
    ax_res.set_xlabel("time (s)")
    ax_res.legend()
    ax_res.grid(True, alpha=0.3)

    if result is not None:
        ax_lat.set_title(f"Simulation {result.simulation_id} (score {result.performance_score})")

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Saved series chart to %s", path)
    return path


def plot_components(result: SimulationResult, path: str | Path) -> Path:
    """Grouped CPU/memory bars per component, with the 80% threshold marked."""
    plt = _pyplot()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    components = list(result.component_performance.values())
    names = [cp.name for cp in components]
    x = range(len(components))
    w = 0.35

    fig, ax = plt.subplots(figsize=(max(6, 1.5 * len(components)), 5))
    ax.bar([i - w / 2 for i in x], [cp.cpu_pct for cp in components], w, label="CPU", color="#3498db", alpha=0.8)
    ax.bar([i + w / 2 for i in x], [cp.memory_pct for cp in components], w, label="Memory", color="#2ecc71", alpha=0.8)
    ax.axhline(80, color="#e74c3c", linestyle="--", linewidth=1, label="bottleneck threshold")
    ax.set_xticks(list(x))
    ax.set_xticklabels(names, rotation=20, ha="right")
    ax.set_ylim(0, 100)
    ax.set_ylabel("utilization (%)")
    ax.set_title("Per-component utilization")
    ax.legend()
    ax.grid(True, alpha=0.3, axis="y")

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Saved component chart to %s", path)
    return path
