"""Reporting abstractions for icmpping.

Contains:
- Report ABC: Base class for all reports
"""

from abc import ABC, abstractmethod


class Report(ABC):
    """Abstract base class for ping reports."""

    @abstractmethod
    def render(self) -> str:
        """Return the report text."""
        pass

    @abstractmethod
    def success(self) -> bool:
        """Return True if the report indicates success."""
        pass

    def print(self) -> None:
        """Print the report to stdout."""
        print(self.render())
