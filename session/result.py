"""Session statistics for icmpping.

Contains:
- StatsSnapshot: Immutable view of the counters at one instant
- StatsAggregate: Thread-safe counters shared by the driver and the interrupt watcher
"""

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class StatsSnapshot:
    """Consistent copy of the session counters.

    RTT values are in seconds. min_rtt_s and max_rtt_s are None until the
    first reply is recorded.
    """

    transmitted: int = 0
    received: int = 0
    dropped: int = 0
    min_rtt_s: float | None = None
    max_rtt_s: float | None = None
    sum_rtt_s: float = 0.0

    @property
    def avg_rtt_s(self) -> float | None:
        """Return the mean RTT, or None if no reply was received."""
        if self.received == 0:
            return None
        return self.sum_rtt_s / self.received

    @property
    def loss_percent(self) -> int:
        """Return dropped probes as an integer percentage of transmitted (truncated)."""
        if self.transmitted == 0:
            return 0
        return self.dropped * 100 // self.transmitted


class StatsAggregate:
    """Cumulative exchange counters.

    Written by the driver thread only, snapshotted by the interrupt watcher.
    All access goes through one lock so a snapshot never mixes two updates.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._transmitted = 0
        self._received = 0
        self._dropped = 0
        self._min_rtt_s: float | None = None
        self._max_rtt_s: float | None = None
        self._sum_rtt_s = 0.0

    def record_sent(self) -> None:
        with self._lock:
            self._transmitted += 1

    def record_answered(self, rtt_s: float) -> None:
        with self._lock:
            self._received += 1
            self._sum_rtt_s += rtt_s
            if self._min_rtt_s is None or rtt_s < self._min_rtt_s:
                self._min_rtt_s = rtt_s
            if self._max_rtt_s is None or rtt_s > self._max_rtt_s:
                self._max_rtt_s = rtt_s

    def record_dropped(self) -> None:
        with self._lock:
            self._dropped += 1

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                transmitted=self._transmitted,
                received=self._received,
                dropped=self._dropped,
                min_rtt_s=self._min_rtt_s,
                max_rtt_s=self._max_rtt_s,
                sum_rtt_s=self._sum_rtt_s,
            )
