"""
Pluggable key/value lookups.

Booking and coverage checks need reference data (which slots a doctor
offers, which plans a provider sells).  The implementation is chosen by
a dotted path in settings so tests and deployments can swap the source
without touching the services.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from django.conf import settings
from django.utils.module_loading import import_string

from clinic.models import DoctorProfile


class Lookup(Protocol):
    def lookup(self, key: str) -> Optional[Any]:
        ...


class DoctorSlotLookup:
    """Doctor code -> list of bookable slot labels."""

    def lookup(self, key: str) -> Optional[list[str]]:
        doctor = DoctorProfile.objects.filter(code=key, is_active=True).only('available_time_slots').first()
        if doctor is None:
            return None
        return list(doctor.available_time_slots or [])


class CoveragePlanLookup:
    """Provider name -> list of coverage types it offers."""

    def lookup(self, key: str) -> Optional[list[str]]:
        plans = getattr(settings, 'COVERAGE_PLANS', {}) or {}
        types = plans.get(key)
        return list(types) if types is not None else None


class MappingLookup:
    def __init__(self, data: Mapping[str, Any]):
        self.data = dict(data)

    def lookup(self, key: str) -> Optional[Any]:
        return self.data.get(key)


def get_lookup(setting_name: str) -> Lookup:
    return import_string(getattr(settings, setting_name))()


def doctor_availability() -> Lookup:
    return get_lookup('DOCTOR_AVAILABILITY_LOOKUP')


def coverage_plans() -> Lookup:
    return get_lookup('COVERAGE_PLAN_LOOKUP')
