"""Simulation engine: a pure pipeline from run configuration to result.

    config + topology
        -> StepMetricGenerator (traffic profile, failures)   -> series (stored)
        -> aggregate                                          -> AggregateMetrics
        -> analyze_components / detect_bottlenecks / estimate_resources
        -> synthesize_recommendations + performance_score    -> SimulationResult

A run holds no state besides its own series, so separate runs can execute on
separate threads against one engine. The only shared object is the
``SeriesStore``, which is injected and locks internally.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import Callable, Iterable

from scalesim.analysis.bottlenecks import detect_bottlenecks
from scalesim.analysis.components import analyze_components
from scalesim.analysis.recommendations import synthesize_recommendations
from scalesim.analysis.resources import estimate_resources
from scalesim.analysis.score import performance_score
from scalesim.config import EngineParameters, RunConfig
from scalesim.core.aggregator import aggregate
from scalesim.core.steps import StepMetricGenerator
from scalesim.core.store import SeriesStore
from scalesim.instrumentation.series import MetricSample, MetricSeries
from scalesim.instrumentation.summary import SimulationResult
from scalesim.topology.model import Topology
from scalesim.utils.ids import new_simulation_id

logger = logging.getLogger(__name__)


def time_based_seed() -> int:
    return time.time_ns() % (2**32)


class SimulationEngine:
    """Runs simulations and keeps their step series for later inspection.

    Args:
        store: Where step series are kept. A private store is created if omitted.
        params: Model coefficients. Defaults reproduce the reference model.
        clock: Epoch-seconds clock used for timestamps.

    Example:
        >>> engine = SimulationEngine()
        >>> result = engine.run(RunConfig(duration=60, requests_per_second=10, seed=7), topology)
        >>> samples = engine.get_series(result.simulation_id)
    """

    def __init__(
        self,
        store: SeriesStore | None = None,
        params: EngineParameters | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self.store = store if store is not None else SeriesStore(clock=clock)
        self.params = params or EngineParameters()

    def run(
        self,
        config: RunConfig,
        topology: Topology,
        cancel: threading.Event | None = None,
    ) -> SimulationResult:
        """Simulate ``topology`` under ``config``.

        Raises:
            InvalidConfigError: The configuration is out of range.
            SimulationCancelledError: ``cancel`` was set during step generation.
        """
        config.validate()
        simulation_id = config.simulation_id or new_simulation_id()
        seed = config.seed if config.seed is not None else time_based_seed()
        started_at = self._clock()

        logger.info(
            "Simulation %s started: system=%s components=%d connections=%d duration=%gs rps=%g pattern=%s seed=%d",
            simulation_id,
            config.system_id or "-",
            len(topology.components),
            len(topology.connections),
            config.duration,
            config.requests_per_second,
            config.traffic_pattern.value,
            seed,
            extra={"simulation_id": simulation_id},
        )

        if topology.is_empty:
            logger.warning(
                "Simulation %s has an empty topology, returning zero metrics",
                simulation_id,
                extra={"simulation_id": simulation_id},
            )
            series = MetricSeries()
        else:
            generator = StepMetricGenerator(
                config,
                topology,
                rng=random.Random(seed),
                params=self.params,
                start_time=started_at,
            )
            series = generator.generate(cancel=cancel, simulation_id=simulation_id)

        self.store.put(simulation_id, series.samples)

        metrics = aggregate(series, config)
        performance = analyze_components(topology, config)
        findings = detect_bottlenecks(performance, topology)
        resources = estimate_resources(len(topology.components), config, self.params)
        recommendations = synthesize_recommendations(findings, performance, topology)
        bottleneck_count = sum(len(cp.bottlenecks) for cp in performance.values())
        score = performance_score(
            average_latency_ms=metrics.average_latency_ms,
            error_rate=metrics.error_rate,
            throughput_rps=metrics.throughput_rps,
            expected_throughput_rps=metrics.total_requests / config.duration,
            bottleneck_count=bottleneck_count,
        )

        result = SimulationResult(
            simulation_id=simulation_id,
            system_id=config.system_id,
            seed=seed,
            metrics=metrics,
            component_performance=performance,
            resource_utilization=resources,
            bottlenecks=tuple(findings),
            recommendations=tuple(recommendations),
            performance_score=score,
            executed_at=datetime.fromtimestamp(started_at, tz=UTC),
            duration=float(config.duration),
            step_count=len(series),
        )
        logger.info(
            "Simulation %s finished: score=%d avg_latency=%.1fms error_rate=%.3f bottlenecks=%d",
            simulation_id,
            score,
            metrics.average_latency_ms,
            metrics.error_rate,
            len(findings),
            extra={"simulation_id": simulation_id},
        )
        return result

    def run_batch(
        self,
        jobs: Iterable[tuple[RunConfig, Topology]],
        max_workers: int = 4,
    ) -> list[SimulationResult]:
        """Run independent simulations on a thread pool; results keep job order.

        The first failing job's exception is raised once its result is reached.
        """
        jobs = list(jobs)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="scalesim") as pool:
            return list(pool.map(lambda job: self.run(*job), jobs))

    def get_series(self, simulation_id: str) -> list[MetricSample]:
        """Stored step series of a run.

        Raises:
            SeriesNotFoundError: Unknown or purged simulation id.
        """
        return self.store.get(simulation_id)

    def purge_older_than(self, max_age_s: float | None = None) -> int:
        """Sweep stored series older than ``max_age_s`` (default: ``params.retention_s``)."""
        if max_age_s is None:
            max_age_s = self.params.retention_s
        return self.store.purge_older_than(max_age_s)


def run_simulation(
    config: RunConfig,
    topology: Topology,
    store: SeriesStore | None = None,
    params: EngineParameters | None = None,
) -> SimulationResult:
    """One-shot convenience wrapper around ``SimulationEngine.run``."""
    return SimulationEngine(store=store, params=params).run(config, topology)
