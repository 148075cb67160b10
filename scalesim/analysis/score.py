"""Single 0-100 performance score."""

from __future__ import annotations

from scalesim.utils.numeric import clamp

LATENCY_SEVERE_MS = 500.0
LATENCY_WARN_MS = 200.0
ERROR_SEVERE = 0.1
ERROR_WARN = 0.05
THROUGHPUT_FLOOR = 0.8
BOTTLENECK_PENALTY = 5


def performance_score(
    average_latency_ms: float,
    error_rate: float,
    throughput_rps: float,
    expected_throughput_rps: float,
    bottleneck_count: int,
) -> int:
    """Start at 100 and deduct for latency, errors, throughput shortfall and bottlenecks.

    Args:
        average_latency_ms: Mean step latency.
        error_rate: Mean step error rate.
        throughput_rps: Mean step throughput.
        expected_throughput_rps: ``total_requests / duration``.
        bottleneck_count: Sum of per-component bottleneck counts.
    """
    score = 100
    if average_latency_ms > LATENCY_SEVERE_MS:
        score -= 20
    elif average_latency_ms > LATENCY_WARN_MS:
        score -= 10

    if error_rate > ERROR_SEVERE:
        score -= 30
    elif error_rate > ERROR_WARN:
        score -= 15

    if throughput_rps < THROUGHPUT_FLOOR * expected_throughput_rps:
        score -= 20

    score -= BOTTLENECK_PENALTY * bottleneck_count
    return int(clamp(score, 0, 100))
