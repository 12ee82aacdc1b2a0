"""Exceptions raised by the insights engine."""


class InsightsError(Exception):
    """Base class for engine errors."""


class InvalidInputError(InsightsError, ValueError):
    """Structurally invalid call (empty rank set, non-list competitors, bad granularity)."""
