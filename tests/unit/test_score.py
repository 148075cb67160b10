"""Tests for the performance score."""

import pytest

from scalesim.analysis.score import performance_score


def score(latency=100.0, error=0.01, tput=1000.0, expected=1000.0, bottlenecks=0):
    return performance_score(latency, error, tput, expected, bottlenecks)


class TestPerformanceScore:
    def test_healthy_run_scores_100(self):
        assert score() == 100

    @pytest.mark.parametrize(
        "latency, expected",
        [(200.0, 100), (250.0, 90), (500.0, 90), (501.0, 80)],
    )
    def test_latency_deductions(self, latency, expected):
        assert score(latency=latency) == expected

    @pytest.mark.parametrize(
        "error, expected",
        [(0.05, 100), (0.06, 85), (0.1, 85), (0.2, 70)],
    )
    def test_error_deductions(self, error, expected):
        assert score(error=error) == expected

    def test_throughput_shortfall(self):
        assert score(tput=800.0) == 100
        assert score(tput=799.0) == 80
        assert score(tput=10.0) == 80

    def test_bottleneck_penalty(self):
        assert score(bottlenecks=3) == 85

    def test_floor_at_zero(self):
        assert score(latency=600.0, error=0.2, tput=0.0, bottlenecks=10) == 0

    def test_zero_expected_throughput_never_short(self):
        assert score(tput=0.0, expected=0.0) == 100

    def test_monotone_in_latency_and_errors(self):
        by_latency = [score(latency=lat) for lat in (50, 200, 201, 500, 501, 5000)]
        by_error = [score(error=err) for err in (0.0, 0.05, 0.051, 0.1, 0.11, 0.5)]

        assert by_latency == sorted(by_latency, reverse=True)
        assert by_error == sorted(by_error, reverse=True)
