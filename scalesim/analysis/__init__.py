"""Post-run analysis: per-component model, bottlenecks, resources, advice, score."""

from scalesim.analysis.bottlenecks import detect_bottlenecks
from scalesim.analysis.components import analyze_component, analyze_components, component_load_factor
from scalesim.analysis.recommendations import ADVICE, synthesize_recommendations
from scalesim.analysis.resources import estimate_cost, estimate_resources
from scalesim.analysis.score import performance_score

__all__ = [
    "ADVICE",
    "analyze_component",
    "analyze_components",
    "component_load_factor",
    "detect_bottlenecks",
    "estimate_cost",
    "estimate_resources",
    "performance_score",
    "synthesize_recommendations",
]
