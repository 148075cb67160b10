"""Reduce a step series to aggregate metrics."""

from __future__ import annotations

from scalesim.config import RunConfig
from scalesim.instrumentation.series import MetricSeries
from scalesim.instrumentation.summary import AggregateMetrics
from scalesim.utils.numeric import round_half_up


def total_requests(config: RunConfig) -> int:
    """Coarse request total for the run, independent of the sampled series."""
    return round_half_up(config.users * config.requests_per_second * config.duration)


def split_requests(total: int, error_rate: float) -> tuple[int, int]:
    """Split ``total`` into (successful, failed). ``failed`` is rounded half up."""
    failed = min(total, max(0, round_half_up(total * error_rate)))
    return total - failed, failed


def aggregate(series: MetricSeries, config: RunConfig) -> AggregateMetrics:
    """Means, nearest-rank p95/p99 and request totals for a run.

    An empty series (empty topology) aggregates to all zeros.
    """
    if not series:
        return AggregateMetrics()

    avg_latency = series.mean("latency_ms")
    avg_error = series.mean("error_rate")
    total = total_requests(config)
    successful, failed = split_requests(total, avg_error)

    return AggregateMetrics(
        total_requests=total,
        successful_requests=successful,
        failed_requests=failed,
        average_latency_ms=avg_latency,
        p95_latency_ms=series.percentile("latency_ms", 0.95, fallback=avg_latency),
        p99_latency_ms=series.percentile("latency_ms", 0.99, fallback=avg_latency),
        min_latency_ms=series.min("latency_ms"),
        max_latency_ms=series.max("latency_ms"),
        throughput_rps=series.mean("throughput_rps"),
        peak_throughput_rps=series.max("throughput_rps"),
        error_rate=avg_error,
    )
