"""scalesim: design-time performance forecasts for distributed system topologies.

    from scalesim import RunConfig, SimulationEngine, Topology

    topology = Topology.from_dict(design)
    engine = SimulationEngine()
    result = engine.run(RunConfig(duration=60, users=100, requests_per_second=10, seed=1), topology)
    print(result)

The library is silent by default; see ``scalesim.logging_config``.
"""

import logging

from scalesim.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)

logging.getLogger("scalesim").addHandler(logging.NullHandler())

from scalesim.config import CostRates, EngineParameters, RunConfig, RATE_CARDS
from scalesim.core import SeriesStore, SimulationEngine, run_simulation
from scalesim.errors import (
    InvalidConfigError,
    SeriesNotFoundError,
    SimulationCancelledError,
    SimulationError,
    TopologyError,
)
from scalesim.faults import FailureType, NetworkPartition, ServiceFailure
from scalesim.instrumentation import (
    AggregateMetrics,
    BottleneckCategory,
    ComponentPerformance,
    CostEstimate,
    Finding,
    MetricSample,
    MetricSeries,
    Recommendation,
    RecommendationCategory,
    ResourceUtilization,
    Severity,
    SimulationResult,
)
from scalesim.load import TrafficPattern, multiplier
from scalesim.topology import Component, ComponentType, Connection, Topology

__all__ = [
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
    # Configuration
    "CostRates",
    "EngineParameters",
    "RATE_CARDS",
    "RunConfig",
    # Engine
    "SeriesStore",
    "SimulationEngine",
    "run_simulation",
    # Errors
    "InvalidConfigError",
    "SeriesNotFoundError",
    "SimulationCancelledError",
    "SimulationError",
    "TopologyError",
    # Failures and traffic
    "FailureType",
    "NetworkPartition",
    "ServiceFailure",
    "TrafficPattern",
    "multiplier",
    # Topology
    "Component",
    "ComponentType",
    "Connection",
    "Topology",
    # Results
    "AggregateMetrics",
    "BottleneckCategory",
    "ComponentPerformance",
    "CostEstimate",
    "Finding",
    "MetricSample",
    "MetricSeries",
    "Recommendation",
    "RecommendationCategory",
    "ResourceUtilization",
    "Severity",
    "SimulationResult",
]
