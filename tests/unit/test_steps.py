"""Tests for per-step metric generation."""

import random
import threading

import pytest

from scalesim.config import EngineParameters, RunConfig
from scalesim.core.steps import (
    StepMetricGenerator,
    step_count,
    step_error_rate,
    topology_base_latency,
)
from scalesim.errors import SimulationCancelledError
from scalesim.faults.scenarios import NetworkPartition, ServiceFailure
from scalesim.topology.model import Component, Connection, Topology

NO_JITTER = EngineParameters(latency_jitter_ms=0.0, cpu_jitter_pct=0.0, memory_jitter_pct=0.0)


def _generator(topology, params=NO_JITTER, seed=0, start_time=1000.0, **config):
    return StepMetricGenerator(
        RunConfig(**config),
        topology,
        rng=random.Random(seed),
        params=params,
        start_time=start_time,
    )


class TestStepCount:
    @pytest.mark.parametrize(
        "duration, expected",
        [(60, 60), (60.2, 61), (0.5, 1), (300, 300), (1000, 300)],
    )
    def test_one_step_per_second_capped(self, duration, expected):
        assert step_count(duration) == expected

    def test_custom_cap(self):
        assert step_count(100, max_steps=10) == 10


class TestBaseLatency:
    def test_sums_type_latency_and_hops(self, three_tier):
        assert topology_base_latency(three_tier) == pytest.approx(95.0)

    def test_unknown_types_use_default(self):
        topology = Topology(
            components=(Component("a", "quantum_router"), Component("b", "cdn")),
            connections=(Connection("e", "a", "b"),),
        )

        assert topology_base_latency(topology) == pytest.approx(30.0 + 30.0 + 2.0)


class TestStepErrorRate:
    @pytest.mark.parametrize(
        "rps, expected",
        [(100, 0.01), (200, 0.01), (250, 0.03), (500, 0.03), (600, 0.06)],
    )
    def test_rate_steps_up_with_traffic(self, rps, expected):
        config = RunConfig()
        assert step_error_rate(rps, 0.0, config, EngineParameters()) == pytest.approx(expected)

    def test_failures_add_while_active(self):
        config = RunConfig(failure_scenarios=(NetworkPartition(), ServiceFailure()))
        params = EngineParameters()

        assert step_error_rate(10, 0.2, config, params) == pytest.approx(0.01)
        assert step_error_rate(10, 0.4, config, params) == pytest.approx(0.11)
        assert step_error_rate(10, 0.55, config, params) == pytest.approx(0.31)

    def test_clamped_to_max_error_rate(self):
        config = RunConfig(failure_scenarios=(NetworkPartition(), ServiceFailure()))
        params = EngineParameters(max_error_rate=0.2)

        assert step_error_rate(600, 0.55, config, params) == pytest.approx(0.2)


class TestStepMetricGenerator:
    def test_step_layout(self, three_tier):
        gen = _generator(three_tier, duration=30)

        assert gen.steps == 30
        assert gen.step_duration == pytest.approx(1.0)
        assert gen.base_latency_ms == pytest.approx(95.0)

    def test_constant_low_traffic_without_jitter(self, three_tier):
        sample = _generator(three_tier, requests_per_second=10).sample(5)

        assert sample.timestamp == pytest.approx(1005.0)
        assert sample.latency_ms == pytest.approx(95.0)
        assert sample.throughput_rps == pytest.approx(10.0)
        assert sample.error_rate == pytest.approx(0.01)
        assert sample.cpu_pct == pytest.approx(1.0)
        assert sample.memory_pct == pytest.approx(30.5)
        assert sample.network_kbps == pytest.approx(15.0)

    def test_latency_scales_with_load_above_100_rps(self, three_tier):
        gen = _generator(three_tier, requests_per_second=100, traffic_pattern="spike", duration=60)

        mid = gen.sample(30)

        assert mid.throughput_rps == pytest.approx(500.0)
        assert mid.latency_ms == pytest.approx(95.0 * 5)
        assert mid.error_rate == pytest.approx(0.03)
        assert mid.cpu_pct == pytest.approx(50.0)

    def test_resource_estimates_are_clamped(self, three_tier):
        sample = _generator(three_tier, requests_per_second=5000).sample(0)

        assert sample.cpu_pct == 100.0
        assert sample.memory_pct == 100.0

    def test_jitter_stays_within_bounds(self, three_tier):
        gen = _generator(three_tier, params=EngineParameters(), seed=11, requests_per_second=10)

        for sample in gen:
            assert 85.0 <= sample.latency_ms <= 105.0
            assert 0.0 <= sample.cpu_pct <= 6.0
            assert 28.0 <= sample.memory_pct <= 33.0

    def test_same_seed_same_series(self, three_tier):
        a = _generator(three_tier, params=EngineParameters(), seed=42).generate()
        b = _generator(three_tier, params=EngineParameters(), seed=42).generate()
        c = _generator(three_tier, params=EngineParameters(), seed=43).generate()

        assert a.samples == b.samples
        assert a.samples != c.samples

    def test_generate_is_ordered(self, three_tier):
        series = _generator(three_tier, duration=10).generate()

        timestamps = series.timestamps()
        assert len(series) == 10
        assert timestamps == sorted(timestamps)

    def test_cancel_before_first_step(self, three_tier):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(SimulationCancelledError) as exc_info:
            _generator(three_tier).generate(cancel=cancel, simulation_id="sim-x")

        assert exc_info.value.completed_steps == 0
        assert exc_info.value.simulation_id == "sim-x"
