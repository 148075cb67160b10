"""Failure scenarios that raise the error rate over part of a run."""

from scalesim.faults.scenarios import (
    FailureScenario,
    FailureType,
    NetworkPartition,
    ServiceFailure,
    scenario_from_dict,
    total_error_penalty,
)

__all__ = [
    "FailureScenario",
    "FailureType",
    "NetworkPartition",
    "ServiceFailure",
    "scenario_from_dict",
    "total_error_penalty",
]
