"""Tests for the per-component performance model."""

import pytest

from scalesim.analysis.components import (
    HIGH_ERROR_RATE,
    analyze_component,
    analyze_components,
    component_load_factor,
)
from scalesim.config import RunConfig
from scalesim.topology.model import Component, Connection, Topology


def _fan_in(component: Component, incoming: int) -> Topology:
    sources = [Component(f"src{i}", "microservice") for i in range(incoming)]
    return Topology(
        components=[component, *sources],
        connections=[Connection(f"e{i}", s.id, component.id) for i, s in enumerate(sources)],
    )


class TestLoadFactor:
    def test_weighted_sum(self):
        assert component_load_factor(0, 10) == pytest.approx(0.33)
        assert component_load_factor(1, 10) == pytest.approx(0.53)
        assert component_load_factor(2, 50) == pytest.approx(0.85)

    def test_saturates_at_one(self):
        assert component_load_factor(3, 0) == 1.0
        assert component_load_factor(0, 1000) == 1.0


class TestAnalyzeComponent:
    def test_entry_load_balancer(self, three_tier):
        cp = analyze_component(three_tier.component("lb"), three_tier, RunConfig(requests_per_second=10))

        assert cp.component_type == "load_balancer"
        assert cp.name == "Load Balancer"
        assert cp.load_factor == pytest.approx(0.33)
        assert cp.requests_handled == 198
        assert cp.average_latency_ms == 7
        assert cp.error_rate == pytest.approx(0.00133)
        assert cp.cpu_pct == pytest.approx(39.8)
        assert cp.memory_pct == pytest.approx(28.2)
        assert cp.network_in_kbps == 7
        assert cp.network_out_kbps == 5
        assert cp.bottlenecks == ()
        assert cp.recommendations == ()

    def test_database_with_one_upstream(self, three_tier):
        cp = analyze_component(three_tier.component("db"), three_tier, RunConfig(requests_per_second=10))

        assert cp.load_factor == pytest.approx(0.53)
        assert cp.average_latency_ms == 31
        assert cp.error_rate == pytest.approx(0.0153)
        assert cp.cpu_pct == pytest.approx(51.8)

    def test_saturated_component_stays_at_cpu_threshold(self):
        topology = _fan_in(Component("db", "database"), 4)

        cp = analyze_component(topology.component("db"), topology, RunConfig(requests_per_second=600))

        assert cp.load_factor == 1.0
        assert cp.cpu_pct == pytest.approx(80.0)
        assert cp.memory_pct == pytest.approx(55.0)
        assert cp.bottlenecks == ()

    def test_high_error_rate_diagnosis(self):
        topology = _fan_in(Component("model", "ml_model", "Ranker"), 4)

        cp = analyze_component(topology.component("model"), topology, RunConfig())

        assert cp.error_rate == pytest.approx(0.06)
        assert cp.bottlenecks == (HIGH_ERROR_RATE,)
        assert len(cp.recommendations) == 1
        assert "Ranker" in cp.recommendations[0]

    def test_error_rate_capped(self):
        assert analyze_component(
            Component("x", "mainframe"), Topology([Component("x", "mainframe")]), RunConfig()
        ).error_rate <= 0.2

    def test_unknown_type_uses_defaults(self):
        component = Component("x", "mainframe")
        topology = Topology([component])

        cp = analyze_component(component, topology, RunConfig(requests_per_second=0))

        assert cp.component_type == "mainframe"
        assert cp.load_factor == pytest.approx(0.3)
        assert cp.average_latency_ms == 39
        assert cp.error_rate == pytest.approx(0.026)


class TestAnalyzeComponents:
    def test_keyed_in_topology_order(self, three_tier):
        performance = analyze_components(three_tier, RunConfig())

        assert list(performance) == ["lb", "gw", "ms", "db", "cache"]

    def test_high_traffic_saturates_every_component(self, three_tier):
        performance = analyze_components(three_tier, RunConfig(requests_per_second=600))

        assert all(cp.load_factor == 1.0 for cp in performance.values())
        assert all(cp.cpu_pct == pytest.approx(80.0) for cp in performance.values())

    def test_empty_topology(self):
        assert analyze_components(Topology(), RunConfig()) == {}
