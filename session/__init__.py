"""Echo session package for icmpping.

This package holds the echo exchange core:
- Single-in-flight request/reply state machine
- Timeout-based loss detection
- RTT accumulation in a thread-safe aggregate
- Reply, timeout and summary formatting
"""

from session.exchange import Answered, Dropped, EchoSession, Sample, SessionState
from session.report import SummaryReport, format_banner, format_reply, format_timeout
from session.result import StatsAggregate, StatsSnapshot

__all__ = [
    "Answered",
    "Dropped",
    "EchoSession",
    "Sample",
    "SessionState",
    "StatsAggregate",
    "StatsSnapshot",
    "SummaryReport",
    "format_banner",
    "format_reply",
    "format_timeout",
]
