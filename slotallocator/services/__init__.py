"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .slot_engine import BookingLookupProtocol, SlotEngine, SlotEngineService

__all__ = ["BookingLookupProtocol", "SlotEngine", "SlotEngineService"]
