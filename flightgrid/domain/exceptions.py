"""
Domain-specific exception hierarchy for the scheduling engine.
"""


class SchedulerError(Exception):
    """Base class for all application-level errors."""


class InvalidTimelineError(SchedulerError, ValueError):
    """Raised when a timeline window is empty or inverted."""


class InvalidContainerError(SchedulerError, ValueError):
    """Raised when pointer resolution is asked to bucket into nothing."""


class TimestampParseError(SchedulerError, ValueError):
    """Raised when a stored timestamp cannot be turned into an instant."""


class DataSourceError(SchedulerError):
    """Raised when bookings, roster rules or resources cannot be fetched."""
