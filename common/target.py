"""Ping target state for icmpping.

Contains:
- ResolutionError: Exception for unresolvable hostnames
- Target: Hostname and its resolved IPv4 address
- resolve_target: Resolve a hostname to a Target
- echo_identifier: Derive the 16-bit echo identifier from the process ID
"""

import logging
import os
import socket
from dataclasses import dataclass

from common.errors import PingError

logger = logging.getLogger(__name__)


class ResolutionError(PingError):
    """Raised when a hostname cannot be resolved to an IPv4 address."""

    pass


@dataclass(frozen=True)
class Target:
    """Resolved ping target."""

    hostname: str
    address: str  # Dotted-quad IPv4


def resolve_target(hostname: str) -> Target:
    """Resolve hostname to an IPv4 Target."""
    try:
        address = socket.gethostbyname(hostname)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(f"Cannot resolve {hostname}: {e}") from e
    logger.debug(f"Resolved {hostname} to {address}")
    return Target(hostname=hostname, address=address)


def echo_identifier(pid: int | None = None) -> int:
    """Return the low 16 bits of the process ID."""
    if pid is None:
        pid = os.getpid()
    return pid & 0xFFFF
