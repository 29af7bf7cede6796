"""
Conversion of raw store records (JSON objects / REST rows) into domain models.

Both camelCase keys (as exported by the web app) and snake_case column names
(as returned by the database REST API) are accepted.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

import pendulum
from pendulum import DateTime

from ..domain.models import (
    Appointment,
    Employee,
    PaymentMethod,
    SchedulingType,
    Service,
    Tenant,
    WeeklySchedule,
    DEFAULT_TIMEZONE,
)

Record = Mapping[str, Any]


def _pick(record: Record, *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _require(record: Record, *keys: str) -> Any:
    value = _pick(record, *keys)
    if value is None or value == "":
        raise ValueError(f"missing field {keys[0]!r}")
    return value


def tenant_from_record(record: Record) -> Tenant:
    settings = _pick(record, "settings", default={}) or {}
    return Tenant(
        id=str(_require(record, "id")),
        name=str(_pick(record, "name", "full_name", "fullName", default="")),
        slug=str(_pick(record, "slug", default="")),
        scheduling_type=SchedulingType.parse(
            _pick(record, "scheduling_type", "schedulingType", default=settings.get("scheduling_type"))
        ),
        timezone=str(_pick(record, "timezone", default=DEFAULT_TIMEZONE)),
    )


def service_from_record(record: Record) -> Service:
    return Service(
        id=str(_require(record, "id")),
        tenant_id=str(_require(record, "tenant_id", "tenantId")),
        name=str(_pick(record, "name", default="")),
        duration=int(_require(record, "duration", "duration_minutes", "durationMinutes")),
        buffer_before=int(_pick(record, "buffer_before", "bufferBefore", default=0)),
        buffer_after=int(_pick(record, "buffer_after", "bufferAfter", default=0)),
        price=float(_pick(record, "price", default=0)),
    )


def employee_from_record(record: Record) -> Employee:
    rate = _pick(record, "commission_rate", "commissionRate")
    return Employee(
        id=str(_require(record, "id")),
        tenant_id=str(_require(record, "tenant_id", "tenantId")),
        name=str(_pick(record, "name", "full_name", "fullName", default="")),
        working_hours=WeeklySchedule.from_mapping(
            _pick(record, "working_hours", "workingHours", default={})
        ),
        commission_rate=float(rate) if rate is not None else None,
    )


def appointment_from_record(record: Record, tz: Optional[str] = None) -> Appointment:
    """
    Build an appointment from either date/time columns or a start_at timestamp.

    When ``tz`` is given, start_at is converted to that timezone before the
    local date and time are taken from it.
    """
    day = _pick(record, "date")
    clock = _pick(record, "time")

    start_at = _pick(record, "start_at", "startAt")
    if start_at is not None and (day is None or clock is None):
        start = pendulum.parse(str(start_at))
        if not isinstance(start, DateTime):
            raise ValueError(f"start_at is not a datetime: {start_at!r}")
        if tz:
            start = start.in_timezone(tz)
        day = day or start.to_date_string()
        clock = clock or start.format("HH:mm")

    if day is None:
        raise ValueError("missing field 'date'")

    metadata: Dict[str, Any] = _pick(record, "metadata", default={}) or {}
    payment = _pick(record, "payment_method", "paymentMethod", default=metadata.get("payment_method"))

    return Appointment(
        id=str(_require(record, "id")),
        tenant_id=str(_require(record, "tenant_id", "tenantId")),
        staff_id=str(_require(record, "staff_id", "staffId", "employee_id", "employeeId")),
        date=pendulum.parse(str(day)).date(),
        time=str(clock or ""),
        duration=int(_pick(record, "duration", "duration_minutes", "durationMinutes", default=0)),
        status=str(_pick(record, "status", default="confirmed")),
        service_id=_optional_str(_pick(record, "service_id", "serviceId")),
        price=float(_pick(record, "price", default=0)),
        payment_method=PaymentMethod.parse(payment),
    )


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def schedules_from_availability_rows(rows: Iterable[Record]) -> Dict[str, WeeklySchedule]:
    """
    Group per-weekday availability rows (employee_id, weekday, start_time,
    end_time) into one weekly schedule per employee. Weekday 0 is Sunday.
    """
    grouped: Dict[str, Dict[int, List[Dict[str, Any]]]] = {}

    for row in rows:
        employee_id = _pick(row, "employee_id", "employeeId")
        weekday = _pick(row, "weekday")
        if employee_id is None or not str(weekday).isdigit():
            continue
        grouped.setdefault(str(employee_id), {}).setdefault(int(str(weekday)), []).append(
            {
                "start": _pick(row, "start_time", "startTime"),
                "end": _pick(row, "end_time", "endTime"),
            }
        )

    return {
        employee_id: WeeklySchedule.from_mapping(
            {day: sorted(entries, key=lambda e: str(e["start"])) for day, entries in days.items()}
        )
        for employee_id, days in grouped.items()
    }
