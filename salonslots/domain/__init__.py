"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import FollowUpSuggestion, resolve_available_slots, suggest_follow_up
from .commissions import CommissionCalculator, CommissionSettings, CommissionSummary
from .conflict_filter import ConflictFilter
from .models import (
    Appointment,
    Employee,
    PaymentMethod,
    SchedulingType,
    Service,
    Shift,
    Tenant,
    TimeRange,
    WeeklySchedule,
)
from .slot_generator import generate_candidates

__all__ = [
    "Appointment",
    "CommissionCalculator",
    "CommissionSettings",
    "CommissionSummary",
    "ConflictFilter",
    "Employee",
    "FollowUpSuggestion",
    "PaymentMethod",
    "SchedulingType",
    "Service",
    "Shift",
    "Tenant",
    "TimeRange",
    "WeeklySchedule",
    "generate_candidates",
    "resolve_available_slots",
    "suggest_follow_up",
]
