"""
Adapters layer - Where bookings, roster rules and resources come from.
"""

from .api_client import ApiSchedulerSource
from .fixture_source import FixtureSchedulerSource

__all__ = ["ApiSchedulerSource", "FixtureSchedulerSource"]
