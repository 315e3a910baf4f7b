"""Common modules for icmpping.

This package contains the pieces the echo session is built on:
- protocol: IcmpType enum, wire constants, EchoParams, Transport Protocol
- encoding: ICMP echo encoding/decoding
- target: Target resolution and echo identifier
- transport: Raw ICMP socket transport
- report: Reporting abstractions
"""

from common.encoding import DecodedMessage, DecodingError, EncodingError
from common.errors import PingError
from common.protocol import (
    DEFAULT_DELAY_S,
    DEFAULT_TIMEOUT_S,
    DEFAULT_TTL,
    ECHO_PAYLOAD,
    EchoParams,
    IcmpType,
    Transport,
)
from common.target import ResolutionError, Target, echo_identifier, resolve_target
from common.transport import (
    ReceiveTimeout,
    SendError,
    TransportError,
    TransportOpenError,
    open_transport,
)

__all__ = [
    # Protocol
    "IcmpType",
    "Transport",
    "EchoParams",
    "ECHO_PAYLOAD",
    "DEFAULT_TTL",
    "DEFAULT_TIMEOUT_S",
    "DEFAULT_DELAY_S",
    # Target
    "Target",
    "echo_identifier",
    "resolve_target",
    # Encoding
    "DecodedMessage",
    # Transport
    "open_transport",
    # Exceptions
    "DecodingError",
    "EncodingError",
    "PingError",
    "ReceiveTimeout",
    "ResolutionError",
    "SendError",
    "TransportError",
    "TransportOpenError",
]
