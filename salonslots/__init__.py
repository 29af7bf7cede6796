"""
salonslots - Appointment availability and commission tooling for salon tenants.
"""

__version__ = "0.1.0"
