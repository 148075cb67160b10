"""
Shared pytest fixtures for scalesim tests.
"""

import logging
from pathlib import Path

import pytest

from scalesim.instrumentation.summary import ComponentPerformance
from scalesim.topology.model import Component, Connection, Topology


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture(autouse=True)
def reset_scalesim_logging():
    """Reset logging state before and after each test.

    - Removes all handlers except NullHandler
    - Resets level to NOTSET (inherit from parent)
    """
    logger = logging.getLogger("scalesim")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()


@pytest.fixture
def three_tier() -> Topology:
    """lb -> gw -> ms -> db, with ms -> cache.

    Base latency: 5 + 10 + 50 + 20 + 2 + 4 hops * 2 = 95ms.
    """
    return Topology(
        components=(
            Component("lb", "load_balancer", "Load Balancer"),
            Component("gw", "api_gateway", "API Gateway"),
            Component("ms", "microservice", "Orders"),
            Component("db", "database", "Orders DB"),
            Component("cache", "cache", "Redis"),
        ),
        connections=(
            Connection("c1", "lb", "gw"),
            Connection("c2", "gw", "ms"),
            Connection("c3", "ms", "db"),
            Connection("c4", "ms", "cache"),
        ),
    )


@pytest.fixture
def topology_payload() -> dict:
    """The same design as ``three_tier`` in its persisted JSON shape."""
    return {
        "components": [
            {"id": "lb", "type": "load_balancer", "name": "Load Balancer", "position": {"x": 0, "y": 0}},
            {"id": "gw", "type": "api-gateway", "name": "API Gateway", "position": {"x": 100, "y": 0}},
            {"id": "ms", "type": "microservice", "name": "Orders"},
            {"id": "db", "type": "database", "name": "Orders DB"},
            {"id": "cache", "type": "cache", "name": "Redis"},
        ],
        "connections": [
            {"id": "c1", "source": "lb", "target": "gw"},
            {"id": "c2", "source": "gw", "target": "ms"},
            {"id": "c3", "source": "ms", "target": "db"},
            {"id": "c4", "source": "ms", "target": "cache"},
        ],
    }


@pytest.fixture
def make_cp():
    """Factory for ComponentPerformance rows with neutral defaults."""

    def _make(
        component_id: str,
        cpu: float = 50.0,
        memory: float = 40.0,
        error_rate: float = 0.01,
        network_out: int = 100,
        component_type: str = "microservice",
        name: str | None = None,
    ) -> ComponentPerformance:
        return ComponentPerformance(
            component_id=component_id,
            component_type=component_type,
            name=name or component_id,
            load_factor=0.5,
            requests_handled=100,
            average_latency_ms=50,
            error_rate=error_rate,
            cpu_pct=cpu,
            memory_pct=memory,
            network_in_kbps=network_out,
            network_out_kbps=network_out,
        )

    return _make
