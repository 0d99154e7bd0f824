"""
slotallocator - appointment slot allocation engine for dental clinic schedules.
"""

__version__ = "1.0.0"
