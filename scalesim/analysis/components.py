"""Per-component load, latency, error and resource model.

Each component's load factor is a saturating weighted sum of a base load,
its fan-in and the global request rate:

    load_factor = min(1, 0.3 + 0.2 * incoming_connections + 0.3 * rps / 100)

Everything else about the component is a linear function of that factor and
of its type's coefficients. Components are analyzed independently; the
topology is not traversed.
"""

from __future__ import annotations

import logging

from scalesim.config import RunConfig
from scalesim.instrumentation.summary import ComponentPerformance
from scalesim.topology.coefficients import base_error_rate, base_latency_ms
from scalesim.topology.model import Component, Topology
from scalesim.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

BASE_LOAD = 0.3
FAN_IN_LOAD = 0.2
TRAFFIC_LOAD = 0.3
MAX_COMPONENT_ERROR_RATE = 0.2

CPU_THRESHOLD = 80.0
MEMORY_THRESHOLD = 80.0
ERROR_RATE_THRESHOLD = 0.05

HIGH_CPU = "High CPU usage"
HIGH_MEMORY = "High memory usage"
HIGH_ERROR_RATE = "High error rate"


def component_load_factor(incoming: int, requests_per_second: float) -> float:
    return min(1.0, BASE_LOAD + FAN_IN_LOAD * incoming + TRAFFIC_LOAD * (requests_per_second / 100.0))


def _diagnose(component: Component, cpu: float, memory: float, error_rate: float) -> tuple[list[str], list[str]]:
    bottlenecks: list[str] = []
    recommendations: list[str] = []
    if cpu > CPU_THRESHOLD:
        bottlenecks.append(HIGH_CPU)
        recommendations.append(
            f"Scale {component.name} horizontally or optimize its CPU-intensive code paths"
        )
    if memory > MEMORY_THRESHOLD:
        bottlenecks.append(HIGH_MEMORY)
        recommendations.append(
            f"Increase the memory limit of {component.name} or reduce its in-memory working set"
        )
    if error_rate > ERROR_RATE_THRESHOLD:
        bottlenecks.append(HIGH_ERROR_RATE)
        recommendations.append(
            f"Add retries with backoff for calls to {component.name} and investigate the failing requests"
        )
    return bottlenecks, recommendations


def analyze_component(component: Component, topology: Topology, config: RunConfig) -> ComponentPerformance:
    rps = config.requests_per_second
    load = component_load_factor(topology.incoming_count(component.id), rps)
    component_type = component.type
    if component_type is None:
        logger.debug("Unknown type %r for component %s, using default coefficients", component.type_name, component.id)

    error_rate = min(MAX_COMPONENT_ERROR_RATE, base_error_rate(component_type) * (1.0 + load))
    cpu = min(100.0, 20.0 + 60.0 * load)
    memory = min(100.0, 15.0 + 40.0 * load)
    bottlenecks, recommendations = _diagnose(component, cpu, memory, error_rate)

    return ComponentPerformance(
        component_id=component.id,
        component_type=component_type.value if component_type is not None else component.type_name,
        name=component.name,
        load_factor=load,
        requests_handled=round_half_up(rps * config.duration * load),
        average_latency_ms=round_half_up(base_latency_ms(component_type) * (1.0 + load)),
        error_rate=error_rate,
        cpu_pct=cpu,
        memory_pct=memory,
        network_in_kbps=round_half_up(rps * load * 2.0),
        network_out_kbps=round_half_up(rps * load * 1.5),
        bottlenecks=tuple(bottlenecks),
        recommendations=tuple(recommendations),
    )


def analyze_components(topology: Topology, config: RunConfig) -> dict[str, ComponentPerformance]:
    """Performance of every component, keyed by id in topology order."""
    return {c.id: analyze_component(c, topology, config) for c in topology.components}
