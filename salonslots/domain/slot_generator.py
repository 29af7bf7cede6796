"""
Candidate start-time generation within an employee's shifts.
"""

from datetime import date
from typing import List, Sequence

from pendulum import DateTime

from .models import DEFAULT_TIMEZONE, Shift

DEFAULT_STEP_MINUTES = 15


def generate_candidates(
    on_date: date,
    shifts: Sequence[Shift],
    total_minutes: int,
    step_minutes: int = DEFAULT_STEP_MINUTES,
    tz: str = DEFAULT_TIMEZONE,
) -> List[DateTime]:
    """
    Produce raw candidate start times for one day.

    For each shift, in the given order, a cursor starts at the shift's start
    and emits a candidate while ``cursor + total_minutes`` still fits before
    the shift's end, advancing by ``step_minutes``.

    Args:
        on_date: Calendar date the shifts apply to
        shifts: Shifts of the employee for that weekday
        total_minutes: Service duration plus buffers
        step_minutes: Granularity of candidate start times
        tz: Timezone the clock times are interpreted in

    Returns:
        Candidate start datetimes in generation order
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be greater than zero, got {step_minutes}")

    candidates: List[DateTime] = []

    for shift in shifts:
        shift_range = shift.on(on_date, tz)
        cursor = shift_range.start

        while cursor.add(minutes=total_minutes) <= shift_range.end:
            candidates.append(cursor)
            cursor = cursor.add(minutes=step_minutes)

    return candidates
