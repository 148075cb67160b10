"""Error taxonomy for the simulation engine.

Every failure the engine surfaces derives from ``SimulationError`` so callers
can catch engine problems with a single ``except`` clause. The concrete types
also inherit from the closest builtin (``ValueError``, ``KeyError``) so code
that already handles those keeps working.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for all errors raised by scalesim."""


class InvalidConfigError(SimulationError, ValueError):
    """A run configuration or engine parameter is out of range."""


class TopologyError(SimulationError, ValueError):
    """A topology payload is malformed (missing ids, duplicate components)."""


class SeriesNotFoundError(SimulationError, KeyError):
    """No stored step series exists for the requested simulation id."""

    def __init__(self, simulation_id: str) -> None:
        super().__init__(simulation_id)
        self.simulation_id = simulation_id

    def __str__(self) -> str:
        return f"No series stored for simulation '{self.simulation_id}'"


class SimulationCancelledError(SimulationError):
    """The caller's cancellation token was set while steps were generated."""

    def __init__(self, simulation_id: str, completed_steps: int) -> None:
        super().__init__(
            f"Simulation '{simulation_id}' cancelled after {completed_steps} steps"
        )
        self.simulation_id = simulation_id
        self.completed_steps = completed_steps
