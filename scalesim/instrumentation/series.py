"""Per-step metric samples and the series container that aggregates them.

A run produces one ``MetricSample`` per step. ``MetricSeries`` holds them in
step order and offers the reductions the aggregator and the plots need.
Percentiles use the nearest-rank method with no interpolation.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Iterable, Iterator

if TYPE_CHECKING:
    import pandas as pd

METRIC_FIELDS = (
    "latency_ms",
    "throughput_rps",
    "error_rate",
    "cpu_pct",
    "memory_pct",
    "network_kbps",
)


@dataclass(frozen=True)
class MetricSample:
    """Metrics of one simulated step.

    Attributes:
        timestamp: Epoch seconds of the step (run start + step offset).
        latency_ms: End-to-end latency estimate.
        throughput_rps: Shaped request rate during the step.
        error_rate: Fraction of failed requests, in [0, 1].
        cpu_pct: System CPU estimate, in [0, 100].
        memory_pct: System memory estimate, in [0, 100].
        network_kbps: Network traffic in KB/s.
    """

    timestamp: float
    latency_ms: float
    throughput_rps: float
    error_rate: float
    cpu_pct: float
    memory_pct: float
    network_kbps: float

    def to_dict(self) -> dict[str, float]:
        return {
            "timestamp": self.timestamp,
            "latencyMs": self.latency_ms,
            "throughputRps": self.throughput_rps,
            "errorRate": self.error_rate,
            "cpuPct": self.cpu_pct,
            "memoryPct": self.memory_pct,
            "networkKBps": self.network_kbps,
        }


class MetricSeries:
    """Ordered collection of step samples with analysis utilities."""

    def __init__(self, samples: Iterable[MetricSample] = ()) -> None:
        self._samples: list[MetricSample] = list(samples)

    def append(self, sample: MetricSample) -> None:
        self._samples.append(sample)

    @property
    def samples(self) -> list[MetricSample]:
        return self._samples

    def values(self, metric: str) -> list[float]:
        """All values of one metric, in step order."""
        if metric not in METRIC_FIELDS:
            raise KeyError(f"unknown metric '{metric}', expected one of {METRIC_FIELDS}")
        return [getattr(s, metric) for s in self._samples]

    def timestamps(self) -> list[float]:
        return [s.timestamp for s in self._samples]

    # === Aggregations ===

    def mean(self, metric: str) -> float:
        """Arithmetic mean. Returns 0.0 if empty."""
        vals = self.values(metric)
        if not vals:
            return 0.0
        return sum(vals) / len(vals)

    def min(self, metric: str) -> float:
        vals = self.values(metric)
        return min(vals) if vals else 0.0

    def max(self, metric: str) -> float:
        vals = self.values(metric)
        return max(vals) if vals else 0.0

    def percentile(self, metric: str, p: float, fallback: float | None = None) -> float:
        """Nearest-rank percentile: ``sorted(values)[floor(p * n)]``.

        Args:
            metric: Field name, e.g. ``"latency_ms"``.
            p: Percentile in [0, 1]. E.g., 0.99 for p99.
            fallback: Returned when the rank falls outside the samples.
                Defaults to the mean.
        """
        vals = sorted(self.values(metric))
        index = int(math.floor(p * len(vals)))
        if 0 <= index < len(vals):
            return float(vals[index])
        return self.mean(metric) if fallback is None else fallback

    def oldest_timestamp(self) -> float | None:
        if not self._samples:
            return None
        return min(s.timestamp for s in self._samples)

    # === Export ===

    def to_list(self) -> list[dict[str, float]]:
        return [s.to_dict() for s in self._samples]

    def to_dataframe(self) -> pd.DataFrame:
        """Samples as a DataFrame indexed by step, with snake_case columns."""
        import pandas as pd

        columns = ["timestamp", *METRIC_FIELDS]
        return pd.DataFrame([asdict(s) for s in self._samples], columns=columns)

    def __iter__(self) -> Iterator[MetricSample]:
        return iter(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __bool__(self) -> bool:
        return len(self._samples) > 0

    def __getitem__(self, index: int) -> MetricSample:
        return self._samples[index]

    def __repr__(self) -> str:
        return f"MetricSeries(samples={len(self._samples)})"


def series_from_dicts(rows: Iterable[dict[str, Any]]) -> MetricSeries:
    """Rebuild a series from ``MetricSample.to_dict()`` output."""
    return MetricSeries(
        MetricSample(
            timestamp=float(row["timestamp"]),
            latency_ms=float(row["latencyMs"]),
            throughput_rps=float(row["throughputRps"]),
            error_rate=float(row["errorRate"]),
            cpu_pct=float(row["cpuPct"]),
            memory_pct=float(row["memoryPct"]),
            network_kbps=float(row["networkKBps"]),
        )
        for row in rows
    )
