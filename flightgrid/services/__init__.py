"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .scheduler_view import DayView, ResourceRow, SchedulerSourceProtocol, SchedulerViewService

__all__ = ["DayView", "ResourceRow", "SchedulerSourceProtocol", "SchedulerViewService"]
