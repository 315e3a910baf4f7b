"""Client runner for icmpping.

Contains run_client() which resolves the target, opens the raw socket,
drives the echo session on a worker thread and prints statistics when
interrupted, returning an exit code.
"""

import logging
import threading
import time
from collections.abc import Callable
from enum import IntEnum

from client.shutdown import InterruptWatcher
from common.errors import PingError
from common.protocol import EchoParams, Transport
from common.target import ResolutionError, Target, echo_identifier, resolve_target
from common.transport import TransportOpenError, open_transport
from session.exchange import Answered, EchoSession, Sample
from session.report import SummaryReport, format_banner, format_reply, format_timeout
from session.result import StatsAggregate

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Exit codes for client operations."""

    SUCCESS = 0  # Interrupted after at least one reply
    ERROR = 1  # Resolution, transport or protocol failure
    NO_REPLY = 3  # Interrupted without any reply


def _print_sample(sample: Sample, ttl: int, watcher: InterruptWatcher) -> None:
    # Lines after the interrupt would land inside the summary block
    if watcher.stopped:
        return
    if isinstance(sample, Answered):
        print(format_reply(sample, ttl), flush=True)
    else:
        print(format_timeout(sample), flush=True)


def _drive(session: EchoSession, transport: Transport, watcher: InterruptWatcher, ttl: int) -> None:
    """Worker thread body: step the session until a fatal error."""
    try:
        session.run(lambda sample: _print_sample(sample, ttl, watcher))
    except PingError as e:
        watcher.fail(e)
    except Exception as e:
        logger.exception("Unexpected error in ping driver")
        watcher.fail(e)
    finally:
        transport.close()


def _summarize(hostname: str, stats: StatsAggregate, start: float) -> int:
    report = SummaryReport(
        hostname=hostname,
        stats=stats.snapshot(),
        elapsed_s=time.monotonic() - start,
    )
    report.print()
    return ExitCode.SUCCESS if report.success() else ExitCode.NO_REPLY


def run_client(
    hostname: str,
    params: EchoParams = EchoParams(),
    transport_factory: Callable[[int], Transport] = open_transport,
    watcher: InterruptWatcher | None = None,
) -> int:
    """Ping hostname until interrupted. Returns exit code.

    The client:
    - Installs SIGINT/SIGTERM handling before any blocking work
    - Resolves the hostname to an IPv4 address
    - Opens the raw ICMP transport (usually needs privileges)
    - Runs the echo session on a daemon thread
    - On SIGINT/SIGTERM prints the summary from a stats snapshot
    """
    start = time.monotonic()
    stats = StatsAggregate()
    if watcher is None:
        watcher = InterruptWatcher()

    watcher.install()
    try:
        try:
            target: Target = resolve_target(hostname)
        except ResolutionError as e:
            logger.error(str(e))
            return ExitCode.ERROR

        if watcher.stopped:
            logger.debug("Interrupted during resolution - no probes sent")
            return _summarize(hostname, stats, start)

        try:
            transport = transport_factory(params.ttl)
        except TransportOpenError as e:
            logger.error(f"Failed to open ICMP transport: {e}")
            return ExitCode.ERROR

        session = EchoSession(transport, target, echo_identifier(), stats, params)
        print(format_banner(target, len(params.payload)), flush=True)
        logger.debug(f"Echo identifier: {session.identifier:#06x}")

        worker = threading.Thread(
            target=_drive,
            args=(session, transport, watcher, params.ttl),
            name="icmpping-driver",
            daemon=True,
        )
        worker.start()

        # The in-flight probe, if any, is never recorded once we get here.
        error = watcher.wait()
        if error is not None:
            logger.error(f"Ping failed: {error}")
            return ExitCode.ERROR

        return _summarize(target.hostname, stats, start)
    finally:
        watcher.restore()
