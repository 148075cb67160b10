"""Traffic shaping: request-rate multipliers over the progress of a run.

A profile maps run progress in [0, 1] to a non-negative multiplier applied
to the configured requests-per-second. Profiles carry no randomness.

    multiplier(TrafficPattern.SPIKE, 0.5)  # -> 5.0
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class TrafficPattern(str, Enum):
    CONSTANT = "constant"
    SPIKE = "spike"
    GRADUAL = "gradual"
    RAMP = "ramp"
    WAVE = "wave"

    @classmethod
    def parse(cls, raw: str | TrafficPattern | None) -> TrafficPattern:
        """Resolve a pattern name; unknown names fall back to CONSTANT."""
        if isinstance(raw, TrafficPattern):
            return raw
        if raw is None:
            return cls.CONSTANT
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Unknown traffic pattern %r, falling back to constant", raw)
            return cls.CONSTANT


class Profile(ABC):
    @abstractmethod
    def get_multiplier(self, progress: float) -> float:
        pass


@dataclass(frozen=True)
class ConstantProfile(Profile):
    level: float = 1.0

    def get_multiplier(self, progress: float) -> float:  # noqa: ARG002
        return float(self.level)


@dataclass(frozen=True)
class LinearRampProfile(Profile):
    """Linear ramp from ``start`` at progress 0 to ``end`` at progress 1."""

    start: float = 1.0
    end: float = 4.0

    def get_multiplier(self, progress: float) -> float:
        p = _clamp_progress(progress)
        return float(self.start + (self.end - self.start) * p)


@dataclass(frozen=True)
class SpikeProfile(Profile):
    """Ramp up to ``peak`` over the first ``edge`` of the run, hold, ramp down over the last ``edge``."""

    base: float = 1.0
    peak: float = 5.0
    edge: float = 0.1

    def get_multiplier(self, progress: float) -> float:
        p = _clamp_progress(progress)
        slope = (self.peak - self.base) / self.edge
        if p < self.edge:
            return self.base + slope * p
        if p > 1.0 - self.edge:
            return self.peak - slope * (p - (1.0 - self.edge))
        return self.peak


@dataclass(frozen=True)
class WaveProfile(Profile):
    """Sinusoid around ``base``; ``cycles`` full periods over the run."""

    base: float = 1.0
    amplitude: float = 0.5
    cycles: float = 3.0

    def get_multiplier(self, progress: float) -> float:
        p = _clamp_progress(progress)
        raw = self.base + self.amplitude * math.sin(2.0 * math.pi * self.cycles * p)
        return max(0.0, raw)


def _clamp_progress(progress: float) -> float:
    return min(1.0, max(0.0, float(progress)))


PROFILES: dict[TrafficPattern, Profile] = {
    TrafficPattern.CONSTANT: ConstantProfile(),
    TrafficPattern.GRADUAL: LinearRampProfile(start=1.0, end=4.0),
    TrafficPattern.SPIKE: SpikeProfile(),
    TrafficPattern.RAMP: LinearRampProfile(start=0.0, end=1.0),
    TrafficPattern.WAVE: WaveProfile(),
}


def profile_for(pattern: TrafficPattern | str | None) -> Profile:
    return PROFILES[TrafficPattern.parse(pattern)]


def multiplier(pattern: TrafficPattern | str | None, progress: float) -> float:
    """Instantaneous request-rate multiplier for ``pattern`` at ``progress``."""
    return profile_for(pattern).get_multiplier(progress)
