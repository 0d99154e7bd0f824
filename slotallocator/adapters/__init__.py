"""
Adapters layer - External schedule data sources.
"""

from .schedule_source import JsonScheduleSource

__all__ = ["JsonScheduleSource"]
