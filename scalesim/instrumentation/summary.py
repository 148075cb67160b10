"""Result types produced by a simulation run.

``SimulationResult`` is returned by ``SimulationEngine.run()``. It is built
once per run and never mutated afterwards. ``to_dict()`` on every type emits
camelCase keys, the convention used in transit.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class AggregateMetrics:
    """Summary statistics over the step series.

    ``total_requests`` is ``users * requests_per_second * duration`` and is
    not integrated from the series; the sampled throughput and the request
    totals are independent approximations.
    """

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_latency_ms: float = 0.0
    p95_latency_ms: float = 0.0
    p99_latency_ms: float = 0.0
    min_latency_ms: float = 0.0
    max_latency_ms: float = 0.0
    throughput_rps: float = 0.0
    peak_throughput_rps: float = 0.0
    error_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRequests": self.total_requests,
            "successfulRequests": self.successful_requests,
            "failedRequests": self.failed_requests,
            "averageLatency": round(self.average_latency_ms, 3),
            "p95Latency": round(self.p95_latency_ms, 3),
            "p99Latency": round(self.p99_latency_ms, 3),
            "minLatency": round(self.min_latency_ms, 3),
            "maxLatency": round(self.max_latency_ms, 3),
            "throughput": round(self.throughput_rps, 3),
            "peakThroughput": round(self.peak_throughput_rps, 3),
            "errorRate": round(self.error_rate, 6),
        }


@dataclass(frozen=True)
class ComponentPerformance:
    """Modeled behavior of one component over the whole run."""

    component_id: str
    component_type: str
    name: str
    load_factor: float
    requests_handled: int
    average_latency_ms: int
    error_rate: float
    cpu_pct: float
    memory_pct: float
    network_in_kbps: int
    network_out_kbps: int
    bottlenecks: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "componentId": self.component_id,
            "type": self.component_type,
            "name": self.name,
            "loadFactor": round(self.load_factor, 6),
            "requestsHandled": self.requests_handled,
            "averageLatency": self.average_latency_ms,
            "errorRate": round(self.error_rate, 6),
            "cpu": round(self.cpu_pct, 3),
            "memory": round(self.memory_pct, 3),
            "networkIn": self.network_in_kbps,
            "networkOut": self.network_out_kbps,
            "bottlenecks": list(self.bottlenecks),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class CostEstimate:
    """Hourly and whole-run cost in USD, with the unrounded per-resource breakdown."""

    provider: str = "aws"
    cpu_cost: float = 0.0
    memory_cost: float = 0.0
    storage_cost: float = 0.0
    network_cost: float = 0.0
    hourly_rate: float = 0.0
    total_cost: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "breakdown": {
                "cpu": self.cpu_cost,
                "memory": self.memory_cost,
                "storage": self.storage_cost,
                "network": self.network_cost,
            },
            "hourlyRate": self.hourly_rate,
            "totalCost": self.total_cost,
        }


@dataclass(frozen=True)
class ResourceUtilization:
    total_cpu_pct: float = 0.0
    total_memory_mb: int = 0
    total_storage_gb: int = 0
    network_bandwidth_kbps: int = 0
    active_connections: int = 0
    cost: CostEstimate = field(default_factory=CostEstimate)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCPU": round(self.total_cpu_pct, 3),
            "totalMemory": self.total_memory_mb,
            "totalStorage": self.total_storage_gb,
            "networkBandwidth": self.network_bandwidth_kbps,
            "activeConnections": self.active_connections,
            "estimatedCost": self.cost.total_cost,
            "cost": self.cost.to_dict(),
        }


class BottleneckCategory(str, Enum):
    CPU = "cpu"
    MEMORY = "memory"
    ERROR_RATE = "error_rate"
    NETWORK = "network"


class Severity(str, Enum):
    """Finding severity as carried in the result schema.

    The detector only emits MEDIUM and HIGH, since every finding is already past
    its threshold. LOW is reserved so stored results that use it still parse.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Finding:
    """A system-level bottleneck: a metric of a component or edge over its threshold.

    Attributes:
        category: What kind of pressure was detected.
        message: Human-readable description naming the offender and value.
        component_id: The offending component (the source, for network findings).
        value: Observed metric value.
        threshold: The threshold it crossed.
        severity: How far past the threshold the value is.
        target_id: Downstream component, for network findings only.
    """

    category: BottleneckCategory
    message: str
    component_id: str
    value: float
    threshold: float
    severity: Severity = Severity.MEDIUM
    target_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "componentId": self.component_id,
            "type": self.category.value,
            "severity": self.severity.value,
            "description": self.message,
            "value": self.value,
            "threshold": self.threshold,
        }
        if self.target_id is not None:
            data["targetId"] = self.target_id
        return data

    def __str__(self) -> str:
        return self.message


class RecommendationCategory(str, Enum):
    CPU = "cpu"
    MEMORY = "memory"
    ERROR_RATE = "error_rate"
    NETWORK = "network"
    DATABASE = "database"
    CACHING = "caching"
    OBSERVABILITY = "observability"


@dataclass(frozen=True)
class Recommendation:
    category: RecommendationCategory
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category.value, "recommendation": self.message}

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class SimulationResult:
    """Terminal artifact of one run. Owned by the caller."""

    simulation_id: str
    system_id: str
    seed: int
    metrics: AggregateMetrics
    component_performance: Mapping[str, ComponentPerformance]
    resource_utilization: ResourceUtilization
    bottlenecks: tuple[Finding, ...]
    recommendations: tuple[Recommendation, ...]
    performance_score: int
    executed_at: datetime
    duration: float
    step_count: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "component_performance", MappingProxyType(dict(self.component_performance)))
        object.__setattr__(self, "bottlenecks", tuple(self.bottlenecks))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    @property
    def total_bottleneck_count(self) -> int:
        """Sum of the per-component bottleneck list lengths."""
        return sum(len(cp.bottlenecks) for cp in self.component_performance.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.simulation_id,
            "systemId": self.system_id,
            "seed": self.seed,
            "metrics": self.metrics.to_dict(),
            "componentMetrics": {
                cid: cp.to_dict() for cid, cp in self.component_performance.items()
            },
            "resourceUtilization": self.resource_utilization.to_dict(),
            "bottlenecks": [b.to_dict() for b in self.bottlenecks],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "performanceScore": self.performance_score,
            "executedAt": self.executed_at.isoformat(),
            "duration": self.duration,
            "steps": self.step_count,
        }

    def components_dataframe(self) -> pd.DataFrame:
        """One row per component, indexed by component id."""
        import pandas as pd

        rows = [
            {
                "component_id": cp.component_id,
                "type": cp.component_type,
                "name": cp.name,
                "load_factor": cp.load_factor,
                "requests_handled": cp.requests_handled,
                "average_latency_ms": cp.average_latency_ms,
                "error_rate": cp.error_rate,
                "cpu_pct": cp.cpu_pct,
                "memory_pct": cp.memory_pct,
                "network_in_kbps": cp.network_in_kbps,
                "network_out_kbps": cp.network_out_kbps,
                "bottlenecks": len(cp.bottlenecks),
            }
            for cp in self.component_performance.values()
        ]
        frame = pd.DataFrame(rows, columns=[
            "component_id", "type", "name", "load_factor", "requests_handled",
            "average_latency_ms", "error_rate", "cpu_pct", "memory_pct",
            "network_in_kbps", "network_out_kbps", "bottlenecks",
        ])
        return frame.set_index("component_id")

    def __str__(self) -> str:
        m = self.metrics
        r = self.resource_utilization
        lines = [
            f"Simulation {self.simulation_id} (system {self.system_id or '-'})",
            f"  Duration: {self.duration:g}s over {self.step_count} steps (seed {self.seed})",
            f"  Requests: {m.total_requests} total, {m.successful_requests} ok, {m.failed_requests} failed",
            f"  Latency: avg {m.average_latency_ms:.1f}ms | p95 {m.p95_latency_ms:.1f}ms | p99 {m.p99_latency_ms:.1f}ms",
            f"  Throughput: {m.throughput_rps:.1f} rps (peak {m.peak_throughput_rps:.1f})",
            f"  Error rate: {m.error_rate * 100:.2f}%",
            f"  Resources: CPU {r.total_cpu_pct:.0f}% | {r.total_memory_mb} MB | "
            f"{r.total_storage_gb} GB | {r.network_bandwidth_kbps} KB/s",
            f"  Cost ({r.cost.provider}): ${r.cost.hourly_rate:.2f}/h, ${r.cost.total_cost:.2f} for this run",
            f"  Performance score: {self.performance_score}/100",
        ]
        if self.component_performance:
            lines.append("  Components:")
            for cp in self.component_performance.values():
                line = (
                    f"    {cp.name} ({cp.component_type}): load {cp.load_factor:.2f}, "
                    f"{cp.average_latency_ms}ms, cpu {cp.cpu_pct:.0f}%, err {cp.error_rate * 100:.2f}%"
                )
                if cp.bottlenecks:
                    line += f" | {', '.join(cp.bottlenecks)}"
                lines.append(line)
        if self.bottlenecks:
            lines.append("  Bottlenecks:")
            lines.extend(f"    [{b.severity.value}] {b.message}" for b in self.bottlenecks)
        if self.recommendations:
            lines.append("  Recommendations:")
            lines.extend(f"    - {rec.message}" for rec in self.recommendations)
        return "\n".join(lines)
