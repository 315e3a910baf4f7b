"""pytest configuration and fixtures for icmpping tests.

Provides:
- FakeClock: Manually advanced monotonic clock with a recording sleep()
- FakeTransport: Scripted stand-in for the raw ICMP socket
- Markers for unit vs integration tests
"""

import struct
import threading
from collections import deque
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from common.encoding import checksum
from common.protocol import ECHO_PAYLOAD, IcmpType
from common.transport import ReceiveTimeout, TransportError

TEST_SOURCE = "192.0.2.1"


def build_icmp(msg_type: int, identifier: int, sequence: int, payload: bytes = ECHO_PAYLOAD) -> bytes:
    """Build an ICMP message with a valid checksum."""
    header = struct.pack("!BBHHH", msg_type, 0, 0, identifier, sequence)
    csum = checksum(header + payload)
    return struct.pack("!BBHHH", msg_type, 0, csum, identifier, sequence) + payload


class FakeClock:
    """Monotonic clock advanced only by the test (or by sleep())."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeTransport:
    """Scripted transport.

    Each receive() consumes one scripted event. Replies built without
    explicit data echo the most recently sent request back as an Echo Reply.

    When the script runs out, on_exhausted (if set) is called and the
    caller blocks until release(); without on_exhausted it is a test error.
    """

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.sent: list[tuple[bytes, str]] = []
        self.deadlines: list[float] = []
        self.send_error: Exception | None = None
        self.on_exhausted: Callable[[], None] | None = None
        self.closed = False
        self._script: deque[Callable[[float], tuple[bytes, str]]] = deque()
        self._lock = threading.Lock()
        self._released = threading.Event()

    # -- scripting ---------------------------------------------------------

    def reply_after(self, delay_s: float, data: bytes | None = None, source: str = TEST_SOURCE) -> None:
        def event(_deadline: float) -> tuple[bytes, str]:
            self.clock.advance(delay_s)
            return (data if data is not None else self._echo_last()), source

        self._script.append(event)

    def timeout(self) -> None:
        def event(deadline: float) -> tuple[bytes, str]:
            self.clock.now = max(self.clock.now, deadline)
            raise ReceiveTimeout("scripted timeout")

        self._script.append(event)

    def fail(self, error: Exception) -> None:
        def event(_deadline: float) -> tuple[bytes, str]:
            raise error

        self._script.append(event)

    def release(self) -> None:
        self._released.set()

    def _echo_last(self) -> bytes:
        request, _ = self.sent[-1]
        _, _, _, identifier, sequence = struct.unpack("!BBHHH", request[:8])
        return build_icmp(IcmpType.ECHO_REPLY, identifier, sequence, request[8:])

    # -- Transport protocol ------------------------------------------------

    def send(self, payload: bytes, destination: str) -> int:
        if self.send_error is not None:
            raise self.send_error
        with self._lock:
            self.sent.append((payload, destination))
        return len(payload)

    def receive(self, deadline: float) -> tuple[bytes, str]:
        with self._lock:
            self.deadlines.append(deadline)
            event = self._script.popleft() if self._script else None
        if event is None:
            if self.on_exhausted is None:
                raise AssertionError("receive() called with an empty script")
            self.on_exhausted()
            self._released.wait()
            raise TransportError("transport released")
        return event(deadline)

    def close(self) -> None:
        self.closed = True

    @property
    def sent_sequences(self) -> list[int]:
        return [struct.unpack("!H", payload[6:8])[0] for payload, _ in self.sent]


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test (runs the CLI)")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport(clock: FakeClock) -> Generator[FakeTransport, None, None]:
    fake = FakeTransport(clock)
    yield fake
    # Unblock any driver thread parked on an empty script
    fake.release()


@pytest.fixture
def make_icmp() -> Callable[..., bytes]:
    return build_icmp


@pytest.fixture
def script_path() -> Path:
    """Return path to icmpping.py."""
    return Path(__file__).parent.parent / "icmpping.py"
