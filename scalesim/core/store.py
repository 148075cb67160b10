"""In-memory store of step series, keyed by simulation id.

Callers poll a run's series while it is fresh and sweep old entries with
``purge_older_than``. The store never schedules its own sweeps. All access
goes through one lock so concurrent runs can insert while others read.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from scalesim.errors import SeriesNotFoundError
from scalesim.instrumentation.series import MetricSample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredSeries:
    samples: tuple[MetricSample, ...]
    created_at: float

    @property
    def oldest(self) -> float:
        """Timestamp of the oldest sample, or the insert time when there are none."""
        if not self.samples:
            return self.created_at
        return min(s.timestamp for s in self.samples)


class SeriesStore:
    """Thread-safe ``simulation_id -> series`` map.

    Args:
        clock: Returns the current epoch time in seconds. Injected for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, StoredSeries] = {}
        self._lock = threading.Lock()

    def put(self, simulation_id: str, samples: list[MetricSample] | tuple[MetricSample, ...]) -> None:
        entry = StoredSeries(samples=tuple(samples), created_at=self._clock())
        with self._lock:
            replaced = simulation_id in self._entries
            self._entries[simulation_id] = entry
        if replaced:
            logger.debug("Replaced stored series for %s", simulation_id, extra={"simulation_id": simulation_id})

    def get(self, simulation_id: str) -> list[MetricSample]:
        """Samples of a stored run.

        Raises:
            SeriesNotFoundError: Nothing is stored under ``simulation_id``.
        """
        with self._lock:
            entry = self._entries.get(simulation_id)
        if entry is None:
            raise SeriesNotFoundError(simulation_id)
        return list(entry.samples)

    def delete(self, simulation_id: str) -> bool:
        with self._lock:
            return self._entries.pop(simulation_id, None) is not None

    def purge_older_than(self, max_age_s: float) -> int:
        """Drop entries whose oldest sample is more than ``max_age_s`` old.

        Returns:
            Number of entries removed.
        """
        cutoff = self._clock() - max_age_s
        with self._lock:
            expired = [sid for sid, entry in self._entries.items() if entry.oldest < cutoff]
            for sid in expired:
                del self._entries[sid]
        for sid in expired:
            logger.debug("Purged stored series %s", sid, extra={"simulation_id": sid})
        if expired:
            logger.info("Purged %d stored series older than %.0fs", len(expired), max_age_s)
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, simulation_id: object) -> bool:
        with self._lock:
            return simulation_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
