"""Client package for icmpping.

Contains the driver wiring around the echo session:
- runner: run_client, ExitCode
- shutdown: InterruptWatcher
"""

from client.runner import ExitCode, run_client
from client.shutdown import InterruptWatcher

__all__ = [
    "ExitCode",
    "InterruptWatcher",
    "run_client",
]
