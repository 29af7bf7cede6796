"""
Commission calculation for professionals, based on completed appointments.
"""

from dataclasses import dataclass
from typing import List, Sequence

from .models import Appointment, Employee, PaymentMethod

COMPLETED_STATUS = "completed"


@dataclass(frozen=True)
class CommissionSettings:
    """
    Tenant commission rules. Fees and rates are percentages.

    When ``deduct_fees_from_commission`` is set, card fees are removed from
    the service price before the commission rate is applied.
    """
    card_fee_credit: float = 3.5
    card_fee_debit: float = 1.5
    default_commission: float = 40.0
    deduct_fees_from_commission: bool = True

    def fee_percent(self, method: PaymentMethod) -> float:
        if method is PaymentMethod.CARD:
            return self.card_fee_credit
        if method is PaymentMethod.DEBIT:
            return self.card_fee_debit
        return 0.0


@dataclass(frozen=True)
class CommissionSummary:
    """Commission breakdown for one professional."""
    employee_id: str
    employee_name: str
    appointment_count: int
    total_service_value: float
    total_deductions: float
    base_value: float
    commission_rate: float  # percent
    commission: float


class CommissionCalculator:
    """Aggregates completed appointments into per-professional commissions."""

    def __init__(self, settings: CommissionSettings | None = None):
        self.settings = settings or CommissionSettings()

    def summarize(
        self,
        employees: Sequence[Employee],
        appointments: Sequence[Appointment],
    ) -> List[CommissionSummary]:
        """Return one summary per employee, in the order given."""
        return [self.summarize_employee(emp, appointments) for emp in employees]

    def summarize_employee(
        self,
        employee: Employee,
        appointments: Sequence[Appointment],
    ) -> CommissionSummary:
        completed = [
            apt for apt in appointments
            if apt.staff_id == employee.id and apt.status == COMPLETED_STATUS
        ]

        total_service_value = 0.0
        total_deductions = 0.0
        base_value = 0.0

        for apt in completed:
            price = apt.price or 0.0
            fee = price * (self.settings.fee_percent(apt.payment_method) / 100)

            total_service_value += price
            total_deductions += fee
            base_value += price - fee if self.settings.deduct_fees_from_commission else price

        rate = self.rate_for(employee)

        return CommissionSummary(
            employee_id=employee.id,
            employee_name=employee.name,
            appointment_count=len(completed),
            total_service_value=round(total_service_value, 2),
            total_deductions=round(total_deductions, 2),
            base_value=round(base_value, 2),
            commission_rate=rate,
            commission=round(base_value * rate / 100, 2),
        )

    def rate_for(self, employee: Employee) -> float:
        """Employee-specific rate, or the tenant default when unset."""
        if employee.commission_rate is None:
            return self.settings.default_commission
        return employee.commission_rate
