"""Raw ICMP socket transport for icmpping.

Contains:
- Transport exceptions (open, send, receive, timeout)
- RawSocketTransport: IPv4 raw socket implementing the Transport protocol
- open_transport: Open and configure a raw socket
"""

import logging
import socket
import time

from common.encoding import strip_ipv4_header
from common.errors import PingError
from common.protocol import DEFAULT_TTL, RECV_BUFFER_SIZE

logger = logging.getLogger(__name__)

PRIVILEGE_HINT = "try running with sudo, or grant the interpreter CAP_NET_RAW"


class TransportOpenError(PingError):
    """Raised when the raw ICMP socket cannot be opened."""

    pass


class SendError(PingError):
    """Raised when a probe cannot be transmitted."""

    pass


class TransportError(PingError):
    """Raised when reading from the socket fails."""

    pass


class ReceiveTimeout(TransportError):
    """Raised when no datagram arrives before the deadline."""

    pass


class RawSocketTransport:
    """IPv4 raw socket carrying ICMP."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def send(self, payload: bytes, destination: str) -> int:
        try:
            sent = self._sock.sendto(payload, (destination, 0))
        except OSError as e:
            raise SendError(f"Failed to send to {destination}: {e}") from e
        if sent != len(payload):
            raise SendError(f"Short write to {destination}: {sent}/{len(payload)} bytes")
        return sent

    def receive(self, deadline: float) -> tuple[bytes, str]:
        """Read one ICMP message, waiting until deadline (time.monotonic()).

        Returns (icmp_message, source_address); the IPv4 header is stripped.

        Raises:
            ReceiveTimeout: If the deadline passes first.
            TransportError: On any other socket error.
            DecodingError: If the datagram is not a valid IPv4 packet.
        """
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ReceiveTimeout("Deadline already passed")
        try:
            self._sock.settimeout(remaining)
            datagram, (source, _) = self._sock.recvfrom(RECV_BUFFER_SIZE)
        except socket.timeout as e:
            raise ReceiveTimeout(f"No reply within {remaining:.3f}s") from e
        except OSError as e:
            raise TransportError(f"Receive failed: {e}") from e
        return strip_ipv4_header(datagram), source

    def close(self) -> None:
        self._sock.close()
        logger.debug("Closed raw ICMP socket")


def open_transport(ttl: int = DEFAULT_TTL) -> RawSocketTransport:
    """Open a raw ICMP socket with the given TTL."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
    except PermissionError as e:
        raise TransportOpenError(f"Permission denied opening raw socket ({PRIVILEGE_HINT})") from e
    except OSError as e:
        raise TransportOpenError(f"Failed to open raw socket: {e} ({PRIVILEGE_HINT})") from e

    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)
    except OSError as e:
        sock.close()
        raise TransportOpenError(f"Failed to set TTL={ttl}: {e}") from e

    logger.debug(f"Raw ICMP socket open (ttl={ttl})")
    return RawSocketTransport(sock)
