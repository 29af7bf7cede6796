"""
Tests for the REST-backed booking store with the HTTP layer stubbed out.
"""

from datetime import date
from typing import Any, Dict, List

import pytest
import requests

from salonslots.adapters import rest_store
from salonslots.adapters.rest_store import RestBookingStore
from salonslots.domain.exceptions import DataStoreError
from salonslots.domain.models import SchedulingType


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self._payload


class FakeRequests:
    """Records calls and serves canned rows per table."""

    def __init__(self, tables: Dict[str, List[Dict[str, Any]]]):
        self.tables = tables
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, headers=None, params=None, timeout=None):
        table = url.rsplit("/", 1)[-1]
        self.calls.append({"table": table, "headers": headers, "params": list(params or [])})
        return FakeResponse(self.tables.get(table, []))


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeRequests({
        "tenants": [{"id": "t1", "slug": "studio", "name": "Studio", "settings": {"scheduling_type": "shared"}}],
        "services": [{"id": "s1", "tenant_id": "t1", "name": "Corte", "duration_minutes": 60, "buffer_after": 15}],
        "employees": [
            {"id": "e1", "tenant_id": "t1", "full_name": "Ana", "commission_rate": 45},
            {"id": "e2", "tenant_id": "t1", "full_name": "Bia",
             "working_hours": {"friday": [{"start": "10:00", "end": "14:00"}]}},
        ],
        "staff_availability": [
            {"employee_id": "e1", "weekday": 1, "start_time": "13:00", "end_time": "18:00"},
            {"employee_id": "e1", "weekday": 1, "start_time": "09:00", "end_time": "12:00"},
        ],
        "appointments": [
            {"id": "a1", "tenant_id": "t1", "employee_id": "e1", "start_at": "2025-03-10T13:00:00+00:00",
             "duration_minutes": 60, "status": "confirmed", "metadata": {"payment_method": "pix"}},
            {"id": "a2", "tenant_id": "t1", "employee_id": "e1", "start_at": "2025-03-11T02:00:00+00:00",
             "duration_minutes": 30, "status": "confirmed"},
            {"id": "bad", "tenant_id": "t1"},
        ],
    })
    monkeypatch.setattr(rest_store.requests, "get", fake.get)
    return fake


def _store() -> RestBookingStore:
    return RestBookingStore(base_url="https://example.supabase.co/", api_key="secret", timezone="America/Sao_Paulo")


def test_sends_api_key_headers(fake_http):
    _store().list_services("t1")

    call = fake_http.calls[0]
    assert call["table"] == "services"
    assert call["headers"]["apikey"] == "secret"
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert ("tenant_id", "eq.t1") in call["params"]


def test_get_tenant_reads_scheduling_type_from_settings(fake_http):
    tenant = _store().get_tenant("studio")

    assert tenant is not None
    assert tenant.scheduling_type is SchedulingType.SHARED
    assert ("or", "(id.eq.studio,slug.eq.studio)") in fake_http.calls[0]["params"]


def test_employees_get_schedule_from_availability_table(fake_http):
    employees = {e.id: e for e in _store().list_employees("t1")}

    monday = employees["e1"].working_hours.shifts_for(date(2025, 3, 10))
    assert [f"{s.start:%H:%M}" for s in monday] == ["09:00", "13:00"]
    assert employees["e1"].commission_rate == 45.0
    # Inline working hours are kept
    assert len(employees["e2"].working_hours.shifts_for(date(2025, 3, 14))) == 1


def test_appointments_are_converted_to_local_time(fake_http):
    appointments = _store().list_appointments("t1", date(2025, 3, 10))

    # a2 is 23:00 local on the 10th; the malformed row is skipped
    assert [(a.id, a.time) for a in appointments] == [("a1", "10:00"), ("a2", "23:00")]
    assert appointments[0].payment_method.value == "pix"
    assert appointments[0].date == date(2025, 3, 10)


def test_http_error_raises_data_store_error(monkeypatch):
    monkeypatch.setattr(
        rest_store.requests, "get", lambda *args, **kwargs: FakeResponse({"message": "nope"}, status_code=500)
    )

    with pytest.raises(DataStoreError, match="Failed to fetch services"):
        _store().list_services("t1")


def test_unexpected_payload_raises_data_store_error(monkeypatch):
    monkeypatch.setattr(rest_store.requests, "get", lambda *args, **kwargs: FakeResponse({"rows": []}))

    with pytest.raises(DataStoreError, match="expected a list"):
        _store().list_tenants()
