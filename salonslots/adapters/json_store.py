"""
Booking store backed by a local JSON catalog (demo and test data).
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ..domain.exceptions import DataStoreError
from ..domain.models import Appointment, Employee, Service, Tenant
from .records import (
    appointment_from_record,
    employee_from_record,
    service_from_record,
    tenant_from_record,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "sample_data.json"

T = TypeVar("T")


class JsonBookingStore:
    """
    Read-only store that loads tenants, services, employees and appointments
    from a JSON document of the form::

        {
            "tenants": [...],
            "services": [...],
            "employees": [...],
            "appointments": [...]
        }

    Malformed records are skipped so that one bad row does not hide the rest
    of the catalog.
    """

    def __init__(self, data_file: Optional[Path] = None):
        self.data_file = Path(data_file) if data_file else DEFAULT_DATA_FILE
        self._load()

    def _load(self) -> None:
        data: Any = {}

        if self.data_file.exists():
            try:
                with open(self.data_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as exc:
                raise DataStoreError(f"Invalid JSON in {self.data_file}: {exc}") from exc
        else:
            logger.warning("Data file %s not found, starting with an empty catalog", self.data_file)

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise DataStoreError(f"{self.data_file} must contain an object at the root level")

        self.tenants: List[Tenant] = _parse_all(data.get("tenants"), tenant_from_record, "tenant")
        self.services: List[Service] = _parse_all(data.get("services"), service_from_record, "service")
        self.employees: List[Employee] = _parse_all(data.get("employees"), employee_from_record, "employee")
        self.appointments: List[Appointment] = _parse_all(
            data.get("appointments"), appointment_from_record, "appointment"
        )

    def list_tenants(self) -> List[Tenant]:
        return list(self.tenants)

    def get_tenant(self, tenant_ref: str) -> Optional[Tenant]:
        """Find a tenant by id or slug."""
        for tenant in self.tenants:
            if tenant.id == tenant_ref or (tenant.slug and tenant.slug == tenant_ref):
                return tenant
        return None

    def get_service(self, service_id: str) -> Optional[Service]:
        return next((s for s in self.services if s.id == service_id), None)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.id == employee_id), None)

    def list_services(self, tenant_id: str) -> List[Service]:
        return [s for s in self.services if s.tenant_id == tenant_id]

    def list_employees(self, tenant_id: str) -> List[Employee]:
        return [e for e in self.employees if e.tenant_id == tenant_id]

    def list_appointments(self, tenant_id: str, on_date: Optional[date] = None) -> List[Appointment]:
        return [
            apt for apt in self.appointments
            if apt.tenant_id == tenant_id and (on_date is None or apt.date == on_date)
        ]


def _parse_all(records: Any, parse: Callable[[Dict[str, Any]], T], kind: str) -> List[T]:
    parsed: List[T] = []

    for record in records or []:
        try:
            parsed.append(parse(record))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping invalid %s record %r: %s", kind, record, exc)

    return parsed
