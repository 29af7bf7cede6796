"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_availability import BookingAvailabilityService, BookingStoreProtocol

__all__ = ["BookingAvailabilityService", "BookingStoreProtocol"]
