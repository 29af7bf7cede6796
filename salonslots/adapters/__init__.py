"""
Adapters layer - Data store integrations (local JSON catalog, hosted REST API).
"""

from .json_store import JsonBookingStore
from .rest_store import RestBookingStore

__all__ = ["JsonBookingStore", "RestBookingStore"]
