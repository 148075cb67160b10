"""Traffic patterns and the profiles that shape request rate over a run."""

from scalesim.load.traffic import (
    PROFILES,
    ConstantProfile,
    LinearRampProfile,
    Profile,
    SpikeProfile,
    TrafficPattern,
    WaveProfile,
    multiplier,
    profile_for,
)

__all__ = [
    "ConstantProfile",
    "LinearRampProfile",
    "PROFILES",
    "Profile",
    "SpikeProfile",
    "TrafficPattern",
    "WaveProfile",
    "multiplier",
    "profile_for",
]
