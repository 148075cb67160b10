"""Failure scenarios injected into a run.

Each scenario is active over an open progress window and, while active,
adds a fixed amount to the step error rate:

- ``NetworkPartition``: +10% while 0.3 < progress < 0.7
- ``ServiceFailure``: +20% while 0.5 < progress < 0.6

Scenarios optionally name the component they target. The step model is
system-wide, so the target is carried for reporting only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable

from scalesim.errors import InvalidConfigError

logger = logging.getLogger(__name__)


class FailureType(str, Enum):
    NETWORK_PARTITION = "network_partition"
    SERVICE_FAILURE = "service_failure"


@runtime_checkable
class FailureScenario(Protocol):
    """Protocol implemented by every failure scenario."""

    failure_type: FailureType

    def error_penalty(self, progress: float) -> float:
        """Extra error rate contributed at ``progress`` (0 when inactive)."""
        ...

    def to_dict(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class _WindowedFailure:
    start: float
    end: float
    extra_error_rate: float
    component_id: str | None = None

    failure_type: ClassVar[FailureType]

    def is_active(self, progress: float) -> bool:
        return self.start < progress < self.end

    def error_penalty(self, progress: float) -> float:
        return self.extra_error_rate if self.is_active(progress) else 0.0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.failure_type.value,
            "start": self.start,
            "end": self.end,
            "extraErrorRate": self.extra_error_rate,
        }
        if self.component_id is not None:
            data["componentId"] = self.component_id
        return data


@dataclass(frozen=True)
class NetworkPartition(_WindowedFailure):
    """Partition between parts of the system during the middle of the run."""

    start: float = 0.3
    end: float = 0.7
    extra_error_rate: float = 0.10

    failure_type = FailureType.NETWORK_PARTITION


@dataclass(frozen=True)
class ServiceFailure(_WindowedFailure):
    """A service goes down briefly just after the midpoint of the run."""

    start: float = 0.5
    end: float = 0.6
    extra_error_rate: float = 0.20

    failure_type = FailureType.SERVICE_FAILURE


_SCENARIO_TYPES: dict[FailureType, type[_WindowedFailure]] = {
    FailureType.NETWORK_PARTITION: NetworkPartition,
    FailureType.SERVICE_FAILURE: ServiceFailure,
}


def scenario_from_dict(data: dict[str, Any] | str) -> FailureScenario | None:
    """Build a scenario from its transit form.

    Accepts a bare type string or a dict with ``type`` (or ``failureType``)
    and an optional ``componentId``. Unknown types return None so a
    forward-compatible payload still runs.
    """
    if isinstance(data, str):
        data = {"type": data}
    if not isinstance(data, dict):
        raise InvalidConfigError(f"failure scenario must be a type name or an object, got {data!r}")
    raw_type = data.get("type") or data.get("failureType")
    try:
        failure_type = FailureType(str(raw_type).strip().lower())
    except ValueError:
        logger.warning("Ignoring unknown failure scenario type %r", raw_type)
        return None
    component_id = data.get("componentId") or data.get("component_id")
    return _SCENARIO_TYPES[failure_type](component_id=component_id)


def total_error_penalty(scenarios: tuple[FailureScenario, ...], progress: float) -> float:
    return sum(s.error_penalty(progress) for s in scenarios)
