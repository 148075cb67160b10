"""Map detected bottlenecks and structural smells to remediation advice.

Synthesis matches on ``Finding.category``, never on message text. Each
category contributes at most one recommendation; the first occurrence
decides its position in the output.
"""

from __future__ import annotations

from scalesim.instrumentation.summary import (
    BottleneckCategory,
    ComponentPerformance,
    Finding,
    Recommendation,
    RecommendationCategory,
)
from scalesim.topology.model import ComponentType, Topology

ADVICE: dict[RecommendationCategory, str] = {
    RecommendationCategory.CPU: (
        "Enable horizontal autoscaling for CPU-bound services and optimize hot code paths "
        "and algorithms"
    ),
    RecommendationCategory.MEMORY: (
        "Cache frequently used data outside the process and raise memory limits for "
        "memory-bound services"
    ),
    RecommendationCategory.ERROR_RATE: (
        "Add circuit breakers and retries with exponential backoff around failing dependencies"
    ),
    RecommendationCategory.NETWORK: (
        "Compress payloads, reduce response sizes and use connection pooling on busy links"
    ),
    RecommendationCategory.DATABASE: (
        "Add database read replicas and connection pooling to relieve database CPU"
    ),
    RecommendationCategory.CACHING: (
        "Add a caching layer (e.g. Redis) in front of services and databases for frequently "
        "accessed data"
    ),
    RecommendationCategory.OBSERVABILITY: (
        "Introduce a service mesh and distributed tracing to pinpoint cross-service bottlenecks"
    ),
}

_FINDING_ADVICE: dict[BottleneckCategory, RecommendationCategory] = {
    BottleneckCategory.CPU: RecommendationCategory.CPU,
    BottleneckCategory.MEMORY: RecommendationCategory.MEMORY,
    BottleneckCategory.ERROR_RATE: RecommendationCategory.ERROR_RATE,
    BottleneckCategory.NETWORK: RecommendationCategory.NETWORK,
}

DATABASE_CPU_THRESHOLD = 70.0
CACHE_MIN_COMPONENTS = 3
OBSERVABILITY_MIN_FINDINGS = 2


def synthesize_recommendations(
    findings: list[Finding],
    performance: dict[str, ComponentPerformance],
    topology: Topology,
) -> list[Recommendation]:
    categories: list[RecommendationCategory] = [_FINDING_ADVICE[f.category] for f in findings]

    if any(
        cp.cpu_pct > DATABASE_CPU_THRESHOLD
        for cp in performance.values()
        if cp.component_type == ComponentType.DATABASE.value
    ):
        categories.append(RecommendationCategory.DATABASE)

    if len(topology.components) > CACHE_MIN_COMPONENTS and topology.count_of_type(ComponentType.CACHE) == 0:
        categories.append(RecommendationCategory.CACHING)

    if len(findings) > OBSERVABILITY_MIN_FINDINGS:
        categories.append(RecommendationCategory.OBSERVABILITY)

    seen: set[RecommendationCategory] = set()
    recommendations: list[Recommendation] = []
    for category in categories:
        if category in seen:
            continue
        seen.add(category)
        recommendations.append(Recommendation(category=category, message=ADVICE[category]))
    return recommendations
