"""Session reporting for icmpping.

Contains:
- format_banner, format_reply, format_timeout: Per-probe console lines
- SummaryReport: Statistics block printed on interrupt
"""

from dataclasses import dataclass

from common.report import Report
from common.target import Target
from session.exchange import Answered, Dropped
from session.result import StatsSnapshot


def format_banner(target: Target, payload_size: int) -> str:
    return f"PING {target.hostname} ({target.address}): {payload_size} data bytes"


def format_reply(sample: Answered, ttl: int) -> str:
    return (
        f"{sample.length} bytes from {sample.source}: icmp_seq={sample.sequence} "
        f"ttl={ttl} time={sample.rtt_s * 1000:.3f} ms"
    )


def format_timeout(sample: Dropped) -> str:
    return f"Request timeout for icmp_seq {sample.sequence}"


@dataclass
class SummaryReport(Report):
    """Final statistics for a ping run."""

    hostname: str
    stats: StatsSnapshot
    elapsed_s: float

    def render(self) -> str:
        s = self.stats
        lines = [
            "",
            f"--- {self.hostname} ping statistics ---",
            f"{s.transmitted} packets transmitted, {s.received} received, "
            f"{s.loss_percent}% packet loss, time {int(self.elapsed_s * 1000)}ms",
        ]

        # min/max are set together with the first reply
        avg = s.avg_rtt_s
        if avg is None or s.min_rtt_s is None or s.max_rtt_s is None:
            lines.append("rtt min/avg/max: n/a")
        else:
            lines.append(
                f"rtt min/avg/max: {s.min_rtt_s * 1000:.3f}/{avg * 1000:.3f}/"
                f"{s.max_rtt_s * 1000:.3f} ms"
            )
        return "\n".join(lines)

    def success(self) -> bool:
        """Return True if at least one reply was received."""
        return self.stats.received > 0
