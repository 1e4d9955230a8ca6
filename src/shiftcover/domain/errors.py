"""Input errors raised while building domain records."""


class InvalidTimeFormat(ValueError):
    """A wall-clock string is not HH:MM or HH:MM:SS, or is out of range."""


class InvalidWindow(ValueError):
    """A time window has zero or negative span."""


class InvalidRecord(ValueError):
    """A record is missing fields, has unknown fields, or breaks an invariant."""
