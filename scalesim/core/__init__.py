"""Simulation pipeline: step generation, aggregation, storage and the engine."""

from scalesim.core.aggregator import aggregate, split_requests, total_requests
from scalesim.core.simulation import SimulationEngine, run_simulation
from scalesim.core.steps import StepMetricGenerator, step_count, topology_base_latency
from scalesim.core.store import SeriesStore, StoredSeries

__all__ = [
    "SeriesStore",
    "SimulationEngine",
    "StepMetricGenerator",
    "StoredSeries",
    "aggregate",
    "run_simulation",
    "split_requests",
    "step_count",
    "topology_base_latency",
    "total_requests",
]
