"""Static per-type coefficient tables.

Each table is keyed by ``ComponentType`` and paired with an explicit default
for types the table does not list (including types the model does not know).
"""

from __future__ import annotations

import logging

from scalesim.topology.model import ComponentType

logger = logging.getLogger(__name__)

# Service latency contribution per component, in milliseconds.
BASE_LATENCY_MS: dict[ComponentType, float] = {
    ComponentType.LOAD_BALANCER: 5.0,
    ComponentType.API_GATEWAY: 10.0,
    ComponentType.MICROSERVICE: 50.0,
    ComponentType.DATABASE: 20.0,
    ComponentType.CACHE: 2.0,
    ComponentType.MESSAGE_QUEUE: 5.0,
}
DEFAULT_LATENCY_MS = 30.0

# Baseline fraction of failed requests per component.
BASE_ERROR_RATE: dict[ComponentType, float] = {
    ComponentType.DATABASE: 0.01,
    ComponentType.MICROSERVICE: 0.02,
    ComponentType.ML_MODEL: 0.03,
    ComponentType.CACHE: 0.001,
    ComponentType.LOAD_BALANCER: 0.001,
    ComponentType.API_GATEWAY: 0.005,
    ComponentType.MESSAGE_QUEUE: 0.005,
}
DEFAULT_ERROR_RATE = 0.02

# Extra latency per connection edge, approximating a network hop.
HOP_LATENCY_MS = 2.0


def base_latency_ms(component_type: ComponentType | None) -> float:
    """Latency coefficient for a type; ``None`` (unknown type) gets the default."""
    if component_type is None or component_type not in BASE_LATENCY_MS:
        logger.debug("No latency coefficient for %s, using %.1fms", component_type, DEFAULT_LATENCY_MS)
        return DEFAULT_LATENCY_MS
    return BASE_LATENCY_MS[component_type]


def base_error_rate(component_type: ComponentType | None) -> float:
    """Error-rate coefficient for a type; ``None`` (unknown type) gets the default."""
    if component_type is None or component_type not in BASE_ERROR_RATE:
        return DEFAULT_ERROR_RATE
    return BASE_ERROR_RATE[component_type]
