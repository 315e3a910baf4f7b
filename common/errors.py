"""Exception hierarchy for icmpping."""


class PingError(Exception):
    """Base class for all icmpping failures."""

    pass
