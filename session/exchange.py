"""Echo exchange for icmpping.

Contains:
- SessionState: Idle / InFlight
- Answered, Dropped: Per-probe outcomes
- EchoSession: Single-in-flight request/reply state machine
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from common.encoding import DecodedMessage, decode, encode
from common.protocol import LOG_PROGRESS_INTERVAL, TRACE, EchoParams, Transport
from common.target import Target
from common.transport import ReceiveTimeout
from session.result import StatsAggregate

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of the single outstanding exchange."""

    IDLE = auto()
    IN_FLIGHT = auto()


@dataclass(frozen=True)
class Answered:
    """A probe that got its matching reply."""

    sequence: int
    rtt_s: float
    length: int  # ICMP message length in bytes
    source: str


@dataclass(frozen=True)
class Dropped:
    """A probe whose reply did not arrive before the deadline."""

    sequence: int


Sample = Answered | Dropped


@dataclass
class _PendingRequest:
    sequence: int
    sent_at: float
    deadline: float


class EchoSession:
    """Drives one probe at a time through a Transport.

    Each call to step() sends a probe if none is pending, then waits for
    one inbound message or the probe's deadline. Foreign ICMP traffic is
    discarded without touching state or counters.
    """

    def __init__(
        self,
        transport: Transport,
        target: Target,
        identifier: int,
        stats: StatsAggregate,
        params: EchoParams = EchoParams(),
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._transport = transport
        self._target = target
        self._identifier = identifier
        self._stats = stats
        self._params = params
        self._clock = clock
        self._sleep = sleep
        self._next_sequence = 1
        self._pending: _PendingRequest | None = None
        self._next_send_at = 0.0

    @property
    def state(self) -> SessionState:
        return SessionState.IDLE if self._pending is None else SessionState.IN_FLIGHT

    @property
    def identifier(self) -> int:
        return self._identifier

    @property
    def next_sequence(self) -> int:
        return self._next_sequence

    def step(self) -> Sample | None:
        """Run one send/receive cycle.

        Returns the sample produced by this cycle, or None if only
        unrelated traffic was seen.

        Raises:
            EncodingError, SendError: If the probe cannot be sent.
            TransportError, DecodingError: On any receive failure other than timeout.
        """
        if self._pending is None:
            self._send_probe()
        pending = self._pending
        assert pending is not None

        try:
            data, source = self._transport.receive(pending.deadline)
        except ReceiveTimeout:
            return self._handle_timeout(pending)

        received_at = self._clock()
        msg = decode(data)
        if not self._matches(msg, pending):
            logger.log(
                TRACE,
                f"Discarded ICMP type={msg.type} code={msg.code} id={msg.identifier} "
                f"seq={msg.sequence} from {source}",
            )
            return None

        return self._handle_reply(pending, received_at, msg, source)

    def run(self, on_sample: Callable[[Sample], None]) -> None:
        """Step forever, passing each sample to on_sample."""
        while True:
            sample = self.step()
            if sample is not None:
                on_sample(sample)

    def _send_probe(self) -> None:
        wait_s = self._next_send_at - self._clock()
        if wait_s > 0:
            self._sleep(wait_s)

        sequence = self._next_sequence
        msg = encode(self._identifier, sequence & 0xFFFF, self._params.payload)
        sent_at = self._clock()
        self._transport.send(msg, self._target.address)

        self._next_sequence += 1
        self._stats.record_sent()
        self._pending = _PendingRequest(
            sequence=sequence,
            sent_at=sent_at,
            deadline=sent_at + self._params.timeout_s,
        )
        logger.log(TRACE, f"Sent echo request seq={sequence} to {self._target.address}")

    def _matches(self, msg: DecodedMessage, pending: _PendingRequest) -> bool:
        return (
            msg.is_echo_reply
            and msg.identifier == self._identifier
            and msg.sequence == pending.sequence & 0xFFFF
        )

    def _handle_timeout(self, pending: _PendingRequest) -> Dropped:
        self._pending = None
        self._stats.record_dropped()
        logger.debug(f"No reply for seq={pending.sequence} within {self._params.timeout_s}s")
        return Dropped(sequence=pending.sequence)

    def _handle_reply(
        self,
        pending: _PendingRequest,
        received_at: float,
        msg: DecodedMessage,
        source: str,
    ) -> Answered:
        rtt_s = received_at - pending.sent_at
        self._pending = None
        self._stats.record_answered(rtt_s)
        self._next_send_at = received_at + self._params.delay_s

        logger.log(TRACE, f"Reply seq={pending.sequence} from {source} (RTT={rtt_s * 1000:.3f}ms)")
        if pending.sequence % LOG_PROGRESS_INTERVAL == 0:
            snap = self._stats.snapshot()
            logger.debug(
                f"Progress: {snap.transmitted} sent, {snap.received} received, "
                f"{snap.dropped} dropped"
            )
        return Answered(
            sequence=pending.sequence,
            rtt_s=rtt_s,
            length=msg.raw_length,
            source=source,
        )
