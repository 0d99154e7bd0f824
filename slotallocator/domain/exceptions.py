"""
Domain-specific exception hierarchy for the slot allocator application.

The engine itself never raises for malformed scheduling input; these errors
belong to the edges (configuration and schedule data loading).
"""


class SlotAllocatorError(Exception):
    """Base class for all application-level errors."""


class ScheduleDataError(SlotAllocatorError):
    """Raised when schedule data cannot be loaded or parsed."""


class ConfigurationError(SlotAllocatorError, ValueError):
    """Raised when the configuration file is unreadable or invalid."""
