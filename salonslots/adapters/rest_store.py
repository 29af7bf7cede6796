"""
Booking store backed by the hosted database's REST API (PostgREST / Supabase).
"""

import logging
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

import requests

from ..domain.exceptions import DataStoreError
from ..domain.models import DEFAULT_TIMEZONE, Appointment, Employee, Service, Tenant
from .records import (
    appointment_from_record,
    employee_from_record,
    schedules_from_availability_rows,
    service_from_record,
    tenant_from_record,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Params = Sequence[Tuple[str, str]]


class RestBookingStore:
    """
    Read-only client for the booking tables exposed over REST.

    Filtering uses PostgREST operators (``column=eq.value``). Rows that cannot
    be converted to domain models are skipped with a warning.
    """

    TENANTS_TABLE = "tenants"
    SERVICES_TABLE = "services"
    EMPLOYEES_TABLE = "employees"
    APPOINTMENTS_TABLE = "appointments"
    AVAILABILITY_TABLE = "staff_availability"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timezone: str = DEFAULT_TIMEZONE,
        timeout: int = 30,
    ):
        """
        Initialize the REST client.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Service or anon key sent as apikey and bearer token
            timezone: Timezone used to turn start_at timestamps into local times
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timezone = timezone
        self.timeout = timeout
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }

    def _fetch(self, table: str, params: Params) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/rest/v1/{table}"

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=[("select", "*"), *params],
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise DataStoreError(f"Failed to fetch {table}: {e}") from e
        except ValueError as e:
            raise DataStoreError(f"Invalid JSON returned for {table}: {e}") from e

        if not isinstance(data, list):
            raise DataStoreError(f"Unexpected response for {table}: expected a list of rows")

        return data

    def _fetch_models(self, table: str, params: Params, parse: Callable[[Dict[str, Any]], T]) -> List[T]:
        models: List[T] = []

        for row in self._fetch(table, params):
            try:
                models.append(parse(row))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid row from %s (%r): %s", table, row.get("id"), exc)

        return models

    def _first(self, table: str, params: Params, parse: Callable[[Dict[str, Any]], T]) -> Optional[T]:
        models = self._fetch_models(table, [*params, ("limit", "1")], parse)
        return models[0] if models else None

    def list_tenants(self) -> List[Tenant]:
        return self._fetch_models(self.TENANTS_TABLE, [("order", "name.asc")], tenant_from_record)

    def get_tenant(self, tenant_ref: str) -> Optional[Tenant]:
        """Find a tenant by id or slug."""
        return self._first(
            self.TENANTS_TABLE,
            [("or", f"(id.eq.{tenant_ref},slug.eq.{tenant_ref})")],
            tenant_from_record,
        )

    def get_service(self, service_id: str) -> Optional[Service]:
        return self._first(self.SERVICES_TABLE, [("id", f"eq.{service_id}")], service_from_record)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        employee = self._first(self.EMPLOYEES_TABLE, [("id", f"eq.{employee_id}")], employee_from_record)
        if employee is None:
            return None
        return self._with_schedules([employee], [("employee_id", f"eq.{employee_id}")])[0]

    def list_services(self, tenant_id: str) -> List[Service]:
        return self._fetch_models(
            self.SERVICES_TABLE, [("tenant_id", f"eq.{tenant_id}")], service_from_record
        )

    def list_employees(self, tenant_id: str) -> List[Employee]:
        employees = self._fetch_models(
            self.EMPLOYEES_TABLE, [("tenant_id", f"eq.{tenant_id}")], employee_from_record
        )
        return self._with_schedules(employees, [("tenant_id", f"eq.{tenant_id}")])

    def list_appointments(self, tenant_id: str, on_date: Optional[date] = None) -> List[Appointment]:
        params: List[Tuple[str, str]] = [("tenant_id", f"eq.{tenant_id}")]

        if on_date is not None:
            # start_at is stored in UTC; widen by a day on each side and
            # narrow down after conversion.
            params.append(("start_at", f"gte.{(on_date - timedelta(days=1)).isoformat()}"))
            params.append(("start_at", f"lt.{(on_date + timedelta(days=2)).isoformat()}"))

        appointments = self._fetch_models(
            self.APPOINTMENTS_TABLE,
            params,
            lambda row: appointment_from_record(row, tz=self.timezone),
        )

        if on_date is None:
            return appointments
        return [apt for apt in appointments if apt.date == on_date]

    def _with_schedules(self, employees: List[Employee], params: Params) -> List[Employee]:
        """
        Fill in working hours from the availability table for employees whose
        row carries no inline schedule.
        """
        if all(emp.working_hours.shifts for emp in employees):
            return employees

        schedules = schedules_from_availability_rows(self._fetch(self.AVAILABILITY_TABLE, params))

        for emp in employees:
            if not emp.working_hours.shifts and emp.id in schedules:
                emp.working_hours = schedules[emp.id]

        return employees
