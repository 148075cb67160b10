"""Step samples, series reductions and result types."""

from scalesim.instrumentation.series import (
    METRIC_FIELDS,
    MetricSample,
    MetricSeries,
    series_from_dicts,
)
from scalesim.instrumentation.summary import (
    AggregateMetrics,
    BottleneckCategory,
    ComponentPerformance,
    CostEstimate,
    Finding,
    Recommendation,
    RecommendationCategory,
    ResourceUtilization,
    Severity,
    SimulationResult,
)

__all__ = [
    "AggregateMetrics",
    "BottleneckCategory",
    "ComponentPerformance",
    "CostEstimate",
    "Finding",
    "METRIC_FIELDS",
    "MetricSample",
    "MetricSeries",
    "Recommendation",
    "RecommendationCategory",
    "ResourceUtilization",
    "Severity",
    "SimulationResult",
    "series_from_dicts",
]
