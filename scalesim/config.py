"""Run configuration and engine parameters.

``RunConfig`` is what a caller asks for (how long, how much traffic, which
failures). ``EngineParameters`` holds the model's tunable coefficients; the
defaults reproduce the reference behavior and are not derived from any
queueing model.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field, replace
from typing import Any

from scalesim.errors import InvalidConfigError
from scalesim.faults.scenarios import FailureScenario, scenario_from_dict
from scalesim.load.traffic import TrafficPattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostRates:
    """Hourly USD rates per resource unit.

    Attributes:
        cpu: Per 100% of aggregate CPU.
        memory_gb: Per GB of memory.
        storage_tb: Per TB of storage.
        network_mbps: Per MB/s of network bandwidth.
    """

    cpu: float = 0.05
    memory_gb: float = 0.01
    storage_tb: float = 0.001
    network_mbps: float = 0.02


RATE_CARDS: dict[str, CostRates] = {
    "aws": CostRates(cpu=0.05, memory_gb=0.01, storage_tb=0.001, network_mbps=0.02),
    "gcp": CostRates(cpu=0.048, memory_gb=0.009, storage_tb=0.0009, network_mbps=0.019),
    "azure": CostRates(cpu=0.052, memory_gb=0.011, storage_tb=0.0011, network_mbps=0.021),
}


@dataclass(frozen=True)
class EngineParameters:
    """Tunable coefficients of the simulation model."""

    max_steps: int = 300
    latency_jitter_ms: float = 10.0
    cpu_jitter_pct: float = 5.0
    memory_jitter_pct: float = 2.5
    max_error_rate: float = 0.5
    retention_s: float = 3600.0
    cloud_provider: str = "aws"

    def __post_init__(self) -> None:
        if self.max_steps < 1:
            raise InvalidConfigError(f"max_steps must be >= 1, got {self.max_steps}")
        for name in ("latency_jitter_ms", "cpu_jitter_pct", "memory_jitter_pct", "retention_s"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigError(f"{name} must be a finite value >= 0, got {value}")
        if not 0.0 <= self.max_error_rate <= 1.0:
            raise InvalidConfigError(f"max_error_rate must be in [0, 1], got {self.max_error_rate}")
        if self.cloud_provider not in RATE_CARDS:
            raise InvalidConfigError(
                f"unknown cloud provider '{self.cloud_provider}', expected one of {sorted(RATE_CARDS)}"
            )

    @property
    def cost_rates(self) -> CostRates:
        return RATE_CARDS[self.cloud_provider]

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> EngineParameters:
        """Build parameters from SCALESIM_* environment variables.

        Unset variables keep their defaults. Values that do not parse raise
        InvalidConfigError.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for name, var, cast in _ENV_VARS:
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            try:
                overrides[name] = cast(raw)
            except ValueError as exc:
                raise InvalidConfigError(f"{var}={raw!r} is not a valid {cast.__name__}") from exc
        params = cls(**overrides)
        if overrides:
            logger.debug("Engine parameters from environment: %s", overrides)
        return params


_ENV_VARS = (
    ("max_steps", "SCALESIM_MAX_STEPS", int),
    ("latency_jitter_ms", "SCALESIM_LATENCY_JITTER_MS", float),
    ("cpu_jitter_pct", "SCALESIM_CPU_JITTER_PCT", float),
    ("memory_jitter_pct", "SCALESIM_MEMORY_JITTER_PCT", float),
    ("max_error_rate", "SCALESIM_MAX_ERROR_RATE", float),
    ("retention_s", "SCALESIM_RETENTION_S", float),
    ("cloud_provider", "SCALESIM_CLOUD_PROVIDER", str),
)


@dataclass(frozen=True)
class RunConfig:
    """What a caller asks the engine to simulate.

    Attributes:
        system_id: Id of the persisted system design the topology came from.
        duration: Simulated seconds, > 0.
        users: Concurrent users, >= 0.
        requests_per_second: Base request rate, >= 0.
        traffic_pattern: Shape of the request rate over the run.
        failure_scenarios: Failures injected during the run.
        seed: Jitter RNG seed. None draws a time-based seed.
        simulation_id: Key for the stored series. None generates one.
    """

    system_id: str = ""
    duration: float = 60.0
    users: int = 100
    requests_per_second: float = 10.0
    traffic_pattern: TrafficPattern = TrafficPattern.CONSTANT
    failure_scenarios: tuple[FailureScenario, ...] = field(default_factory=tuple)
    seed: int | None = None
    simulation_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "traffic_pattern", TrafficPattern.parse(self.traffic_pattern))
        object.__setattr__(self, "failure_scenarios", tuple(self.failure_scenarios))

    def validate(self) -> RunConfig:
        """Reject configurations the model cannot evaluate. Returns self."""
        if not _is_finite_number(self.duration) or self.duration <= 0:
            raise InvalidConfigError(f"duration must be a positive number of seconds, got {self.duration!r}")
        if not _is_finite_number(self.users) or self.users < 0:
            raise InvalidConfigError(f"users must be >= 0, got {self.users!r}")
        if not _is_finite_number(self.requests_per_second) or self.requests_per_second < 0:
            raise InvalidConfigError(
                f"requestsPerSecond must be >= 0, got {self.requests_per_second!r}"
            )
        return self

    def with_simulation_id(self, simulation_id: str) -> RunConfig:
        return replace(self, simulation_id=simulation_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfig:
        """Build a config from its camelCase transit form (snake_case also accepted)."""
        if not isinstance(data, dict):
            raise InvalidConfigError(f"run config must be an object, got {type(data).__name__}")

        def pick(camel: str, snake: str, default: Any) -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        raw_scenarios = pick("failureScenarios", "failure_scenarios", []) or []
        if not isinstance(raw_scenarios, list):
            raise InvalidConfigError("failureScenarios must be a list")
        scenarios = []
        for raw in raw_scenarios:
            scenario = scenario_from_dict(raw)
            if scenario is not None:
                scenarios.append(scenario)

        seed = pick("seed", "seed", None)
        if seed is not None:
            try:
                seed = int(seed)
            except (TypeError, ValueError) as exc:
                raise InvalidConfigError(f"seed must be an integer, got {seed!r}") from exc
        return cls(
            system_id=str(pick("systemId", "system_id", "")),
            duration=pick("duration", "duration", 60.0),
            users=pick("users", "users", 100),
            requests_per_second=pick("requestsPerSecond", "requests_per_second", 10.0),
            traffic_pattern=pick("trafficPattern", "traffic_pattern", TrafficPattern.CONSTANT),
            failure_scenarios=tuple(scenarios),
            seed=seed,
            simulation_id=pick("simulationId", "simulation_id", None),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "systemId": self.system_id,
            "duration": self.duration,
            "users": self.users,
            "requestsPerSecond": self.requests_per_second,
            "trafficPattern": self.traffic_pattern.value,
            "failureScenarios": [s.to_dict() for s in self.failure_scenarios],
            "seed": self.seed,
            "simulationId": self.simulation_id,
        }


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
