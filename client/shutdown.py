"""Interrupt handling for icmpping."""

import logging
import signal
import threading
from types import FrameType

logger = logging.getLogger(__name__)

_POLL_INTERVAL_S = 0.2


class InterruptWatcher:
    """Blocks the main thread until SIGINT/SIGTERM or a fatal driver error.

    Signal handlers can only be installed from the main thread; the driver
    thread reports fatal errors through fail().
    """

    def __init__(self, signals: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)) -> None:
        self._signals = signals
        self._stopped = threading.Event()
        self._error: BaseException | None = None
        self._previous: dict[signal.Signals, object] = {}

    def install(self) -> None:
        for sig in self._signals:
            self._previous[sig] = signal.signal(sig, self._handle_signal)

    def restore(self) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler)  # type: ignore[arg-type]
        self._previous.clear()

    def _handle_signal(self, sig: int, _frame: FrameType | None) -> None:
        logger.debug(f"Signal {signal.Signals(sig).name} received - stopping")
        self._stopped.set()

    def stop(self) -> None:
        """Request a normal stop, as if interrupted."""
        self._stopped.set()

    def fail(self, error: BaseException) -> None:
        """Record a fatal driver error and wake the waiter."""
        if self._error is None:
            self._error = error
        self._stopped.set()

    def wait(self, timeout_s: float | None = None) -> BaseException | None:
        """Wait for a stop request. Returns the fatal error, if any."""
        if timeout_s is not None:
            self._stopped.wait(timeout_s)
            return self._error
        # Short polls so signal handlers get to run on the main thread
        while not self._stopped.wait(_POLL_INTERVAL_S):
            pass
        return self._error

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()
