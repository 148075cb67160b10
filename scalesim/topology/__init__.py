"""Topology model and per-type coefficient tables."""

from scalesim.topology.coefficients import (
    BASE_ERROR_RATE,
    BASE_LATENCY_MS,
    DEFAULT_ERROR_RATE,
    DEFAULT_LATENCY_MS,
    HOP_LATENCY_MS,
    base_error_rate,
    base_latency_ms,
)
from scalesim.topology.model import Component, ComponentType, Connection, Position, Topology

__all__ = [
    "BASE_ERROR_RATE",
    "BASE_LATENCY_MS",
    "Component",
    "ComponentType",
    "Connection",
    "DEFAULT_ERROR_RATE",
    "DEFAULT_LATENCY_MS",
    "HOP_LATENCY_MS",
    "Position",
    "Topology",
    "base_error_rate",
    "base_latency_ms",
]
