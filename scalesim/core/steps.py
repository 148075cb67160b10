"""Step metric generation.

For each of ``N = min(ceil(duration), max_steps)`` equally spaced steps the
generator shapes the request rate with the traffic profile and derives a
system-wide latency, error rate, CPU, memory and network estimate:

    rps         = requests_per_second * multiplier(pattern, s / N)
    latency     = base_latency * max(1, rps / 100) + U(-10, 10)
    error_rate  = 0.01 [+0.02 if rps > 200] [+0.03 if rps > 500] + failure penalties
    cpu         = rps / 10 + U(-5, 5)
    memory      = 30 + rps / 20 + U(-2.5, 2.5)
    network     = rps * 1.5

``base_latency`` sums the per-type latency of every component plus a fixed
hop cost per connection.
"""

from __future__ import annotations

import logging
import math
import random
import threading
from typing import Iterator

from scalesim.config import EngineParameters, RunConfig
from scalesim.errors import SimulationCancelledError
from scalesim.faults.scenarios import total_error_penalty
from scalesim.instrumentation.series import MetricSample, MetricSeries
from scalesim.load.traffic import profile_for
from scalesim.topology.coefficients import HOP_LATENCY_MS, base_latency_ms
from scalesim.topology.model import Topology
from scalesim.utils.numeric import clamp, clamp_pct

logger = logging.getLogger(__name__)

BASE_ERROR_RATE = 0.01
ELEVATED_RPS = 200.0
ELEVATED_ERROR_RATE = 0.02
HIGH_RPS = 500.0
HIGH_ERROR_RATE = 0.03
NETWORK_KB_PER_REQUEST = 1.5


def step_count(duration: float, max_steps: int = 300) -> int:
    """Number of steps simulated for ``duration`` seconds."""
    return max(1, min(int(math.ceil(duration)), max_steps))


def topology_base_latency(topology: Topology) -> float:
    """Static latency of the design: per-type latencies plus one hop per connection."""
    return (
        sum(base_latency_ms(c.type) for c in topology.components)
        + HOP_LATENCY_MS * len(topology.connections)
    )


def step_error_rate(rps: float, progress: float, config: RunConfig, params: EngineParameters) -> float:
    rate = BASE_ERROR_RATE
    if rps > ELEVATED_RPS:
        rate += ELEVATED_ERROR_RATE
    if rps > HIGH_RPS:
        rate += HIGH_ERROR_RATE
    rate += total_error_penalty(config.failure_scenarios, progress)
    return clamp(rate, 0.0, params.max_error_rate)


class StepMetricGenerator:
    """Produces the per-step series of a run.

    Args:
        config: Validated run configuration.
        topology: The design under test.
        rng: Source of jitter. Seed it for reproducible series.
        params: Model coefficients.
        start_time: Epoch seconds stamped on the first sample.
    """

    def __init__(
        self,
        config: RunConfig,
        topology: Topology,
        rng: random.Random,
        params: EngineParameters | None = None,
        start_time: float = 0.0,
    ) -> None:
        self._config = config
        self._topology = topology
        self._rng = rng
        self._params = params or EngineParameters()
        self._start_time = start_time
        self._profile = profile_for(config.traffic_pattern)
        self._base_latency = topology_base_latency(topology)
        self.steps = step_count(config.duration, self._params.max_steps)
        self.step_duration = config.duration / self.steps

    @property
    def base_latency_ms(self) -> float:
        return self._base_latency

    def _jitter(self, half_width: float) -> float:
        return self._rng.uniform(-half_width, half_width)

    def sample(self, step: int) -> MetricSample:
        """Compute the metrics of one step. Consumes three jitter draws."""
        params = self._params
        progress = step / self.steps
        rps = self._config.requests_per_second * self._profile.get_multiplier(progress)

        load_factor = max(1.0, rps / 100.0)
        latency = max(0.0, self._base_latency * load_factor + self._jitter(params.latency_jitter_ms))
        cpu = clamp_pct(rps / 10.0 + self._jitter(params.cpu_jitter_pct))
        memory = clamp_pct(30.0 + rps / 20.0 + self._jitter(params.memory_jitter_pct))

        return MetricSample(
            timestamp=self._start_time + step * self.step_duration,
            latency_ms=latency,
            throughput_rps=rps,
            error_rate=step_error_rate(rps, progress, self._config, params),
            cpu_pct=cpu,
            memory_pct=memory,
            network_kbps=rps * NETWORK_KB_PER_REQUEST,
        )

    def __iter__(self) -> Iterator[MetricSample]:
        for step in range(self.steps):
            yield self.sample(step)

    def generate(self, cancel: threading.Event | None = None, simulation_id: str = "") -> MetricSeries:
        """Run every step in order.

        Raises:
            SimulationCancelledError: ``cancel`` was set between two steps.
        """
        series = MetricSeries()
        for step in range(self.steps):
            if cancel is not None and cancel.is_set():
                raise SimulationCancelledError(simulation_id, completed_steps=step)
            series.append(self.sample(step))
        logger.debug(
            "Generated %d steps (%.3fs each, base latency %.1fms)",
            self.steps,
            self.step_duration,
            self._base_latency,
            extra={"simulation_id": simulation_id},
        )
        return series
