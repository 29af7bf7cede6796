"""
Application services for the booking flow and the back-office.

The service loads a point-in-time snapshot from a booking store and delegates
the actual computations to the domain layer. Depending on a protocol keeps
the CLI thin and lets tests plug in a stub store.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from ..domain.availability import FollowUpSuggestion, resolve_available_slots, suggest_follow_up
from ..domain.commissions import CommissionCalculator, CommissionSettings, CommissionSummary
from ..domain.exceptions import RecordNotFoundError
from ..domain.models import Appointment, Employee, Service, Tenant
from ..domain.slot_generator import DEFAULT_STEP_MINUTES


class BookingStoreProtocol(Protocol):
    """Read interface the services need from a booking store."""

    def list_tenants(self) -> List[Tenant]:
        """All tenants visible to the store."""

    def get_tenant(self, tenant_ref: str) -> Optional[Tenant]:
        """Find a tenant by id or slug."""

    def get_service(self, service_id: str) -> Optional[Service]:
        """Find a service by id."""

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        """Find an employee by id."""

    def list_services(self, tenant_id: str) -> List[Service]:
        """Services offered by a tenant."""

    def list_employees(self, tenant_id: str) -> List[Employee]:
        """Professionals of a tenant."""

    def list_appointments(self, tenant_id: str, on_date: Optional[date] = None) -> List[Appointment]:
        """Appointments of a tenant, optionally restricted to one date."""


class BookingAvailabilityService:
    """
    Orchestrates store lookups and domain computations.
    """

    def __init__(
        self,
        store: BookingStoreProtocol,
        step_minutes: int = DEFAULT_STEP_MINUTES,
    ) -> None:
        self._store = store
        self._step_minutes = step_minutes

    def require_tenant(self, tenant_ref: str) -> Tenant:
        tenant = self._store.get_tenant(tenant_ref)
        if tenant is None:
            raise RecordNotFoundError(f"Unknown tenant: '{tenant_ref}'")
        return tenant

    def tenants(self) -> List[Tenant]:
        return self._store.list_tenants()

    def services(self, tenant_ref: str) -> List[Service]:
        return self._store.list_services(self.require_tenant(tenant_ref).id)

    def staff(self, tenant_ref: str) -> List[Employee]:
        return self._store.list_employees(self.require_tenant(tenant_ref).id)

    def available_slots(
        self,
        *,
        tenant_ref: str,
        service_id: Optional[str],
        employee_id: Optional[str],
        on_date: Optional[date],
    ) -> List[str]:
        """
        Bookable start times for a service with one professional on a date.

        Unknown records, or records belonging to another tenant, yield an
        empty list.
        """
        tenant = self._store.get_tenant(tenant_ref)
        if tenant is None or not service_id or not employee_id or on_date is None:
            return []

        service = self._owned(self._store.get_service(service_id), tenant)
        employee = self._owned(self._store.get_employee(employee_id), tenant)

        return resolve_available_slots(
            service=service,
            employee=employee,
            on_date=on_date,
            appointments=self._store.list_appointments(tenant.id, on_date),
            tenant=tenant,
            step_minutes=self._step_minutes,
        )

    def follow_up(
        self,
        *,
        tenant_ref: str,
        service_id: str,
        employee_id: str,
        on_date: date,
        booked_time: str,
    ) -> Optional[FollowUpSuggestion]:
        """Suggest a second service right after a booking that was just made."""
        tenant = self.require_tenant(tenant_ref)
        service = self._owned(self._store.get_service(service_id), tenant)
        employee = self._owned(self._store.get_employee(employee_id), tenant)

        if service is None or employee is None:
            return None

        return suggest_follow_up(
            booked_service=service,
            booked_time=booked_time,
            employee=employee,
            on_date=on_date,
            services=self._store.list_services(tenant.id),
            appointments=self._store.list_appointments(tenant.id, on_date),
            tenant=tenant,
            step_minutes=self._step_minutes,
        )

    def commissions(
        self,
        *,
        tenant_ref: str,
        settings: Optional[CommissionSettings] = None,
    ) -> List[CommissionSummary]:
        """Commission summary for every professional of a tenant."""
        tenant = self.require_tenant(tenant_ref)
        calculator = CommissionCalculator(settings)

        return calculator.summarize(
            employees=self._store.list_employees(tenant.id),
            appointments=self._store.list_appointments(tenant.id),
        )

    @staticmethod
    def _owned(record, tenant: Tenant):
        """Drop records that belong to another tenant."""
        if record is None or record.tenant_id != tenant.id:
            return None
        return record
