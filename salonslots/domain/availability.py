"""
Availability resolution for the public booking flow.

Composes slot generation and conflict filtering into the list of start times
that can be offered to a customer. Everything here is a pure function of its
arguments: callers pass the tenant, the selected records and an appointment
snapshot, and the result is recomputed from scratch on every call.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from .conflict_filter import ConflictFilter
from .models import Appointment, Employee, Service, Tenant, TimeRange, at_clock, parse_clock
from .slot_generator import DEFAULT_STEP_MINUTES, generate_candidates

logger = logging.getLogger(__name__)

FOLLOW_UP_MAX_DURATION = 60


def resolve_available_slots(
    service: Optional[Service],
    employee: Optional[Employee],
    on_date: Optional[date],
    appointments: Sequence[Appointment],
    tenant: Optional[Tenant],
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> List[str]:
    """
    Compute bookable start times ("HH:MM") for a service with one professional.

    Returns an empty list when any selection is missing or the professional
    does not work on that weekday.
    """
    if service is None or employee is None or on_date is None or tenant is None:
        return []

    shifts = employee.working_hours.shifts_for(on_date)
    if not shifts:
        return []

    total_minutes = service.total_minutes
    if total_minutes <= 0:
        logger.warning("Service %s has no bookable duration (%s min)", service.id, total_minutes)
        return []

    conflict_filter = ConflictFilter(tenant=tenant, employee=employee)

    slots: List[str] = []
    for candidate in generate_candidates(
        on_date=on_date,
        shifts=shifts,
        total_minutes=total_minutes,
        step_minutes=step_minutes,
        tz=tenant.timezone,
    ):
        window = TimeRange.starting_at(candidate, total_minutes)
        if conflict_filter.is_free(window, appointments):
            slots.append(candidate.format("HH:mm"))

    return slots


@dataclass(frozen=True)
class FollowUpSuggestion:
    """A second service that can be booked right after the first one."""
    service: Service
    time: str


def suggest_follow_up(
    booked_service: Service,
    booked_time: str,
    employee: Employee,
    on_date: date,
    services: Sequence[Service],
    appointments: Sequence[Appointment],
    tenant: Tenant,
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> Optional[FollowUpSuggestion]:
    """
    Suggest another service of the tenant starting when the booked one ends.

    Quick services (up to an hour) are preferred; otherwise the first other
    service of the tenant is used. The suggestion is only made when that exact
    start time is still offered by the resolver.
    """
    clock = parse_clock(booked_time)
    if clock is None:
        return None

    others = [
        s for s in services
        if s.tenant_id == tenant.id and s.id != booked_service.id
    ]
    if not others:
        return None

    candidate = next(
        (s for s in others if s.duration <= FOLLOW_UP_MAX_DURATION),
        others[0],
    )

    start = at_clock(on_date, clock, tenant.timezone).add(minutes=booked_service.total_minutes)
    if start.date() != on_date:
        return None
    next_time = start.format("HH:mm")

    offered = resolve_available_slots(
        service=candidate,
        employee=employee,
        on_date=on_date,
        appointments=appointments,
        tenant=tenant,
        step_minutes=step_minutes,
    )

    if next_time not in offered:
        return None

    return FollowUpSuggestion(service=candidate, time=next_time)
