#!/usr/bin/env python3
"""ICMP echo (ping) client.

Sends one Echo Request at a time to a single IPv4 host, prints each reply
or timeout, and prints statistics on Ctrl-C.

Opening the raw socket usually needs root or CAP_NET_RAW.
"""

import argparse
import logging
import sys

from client.runner import run_client


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Send ICMP echo requests to a host until interrupted",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sudo %(prog)s example.com        Ping example.com (Ctrl-C to stop)
  sudo %(prog)s -v 192.0.2.1       Ping with debug logging
""",
    )
    parser.add_argument("host", type=str, help="Target hostname or IPv4 address")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    return run_client(args.host)


if __name__ == "__main__":
    sys.exit(main())
