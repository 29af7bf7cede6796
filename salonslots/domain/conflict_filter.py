"""
Conflict detection between a candidate window and existing appointments.
"""

import logging
from typing import Iterable

from .models import Appointment, Employee, SchedulingType, Tenant, TimeRange

logger = logging.getLogger(__name__)


class ConflictFilter:
    """
    Decides whether a candidate window collides with existing bookings.

    Two isolation modes exist:
    - individual: only appointments of the selected professional block a slot
    - shared: any appointment of the tenant blocks a slot, whoever the staff is
    """

    def __init__(self, tenant: Tenant, employee: Employee):
        self.tenant = tenant
        self.employee = employee

    @property
    def mode(self) -> SchedulingType:
        return SchedulingType.parse(self.tenant.scheduling_type)

    def conflicts_with(self, window: TimeRange, appointment: Appointment) -> bool:
        """Check a single appointment against the window under the tenant policy."""
        booked = appointment.window(self.tenant.timezone)

        if booked is None:
            logger.debug(
                "Ignoring appointment %s with unusable time %r / duration %r",
                appointment.id,
                appointment.time,
                appointment.duration,
            )
            return False

        if not window.overlaps(booked):
            return False

        if self.mode is SchedulingType.INDIVIDUAL:
            return appointment.staff_id == self.employee.id

        return appointment.tenant_id == self.tenant.id

    def is_free(self, window: TimeRange, appointments: Iterable[Appointment]) -> bool:
        """True if no appointment conflicts with the window."""
        return not any(
            self.conflicts_with(window, appointment) for appointment in appointments
        )
