"""
Domain-specific exception hierarchy for the salonslots application.
"""


class SalonSlotsError(Exception):
    """Base class for all application-level errors."""


class DataStoreError(SalonSlotsError):
    """Raised when booking records cannot be fetched or parsed."""


class RecordNotFoundError(SalonSlotsError):
    """Raised when a requested tenant, service or employee does not exist."""
