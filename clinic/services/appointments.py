import logging
from datetime import date
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction

from clinic.exceptions import SlotAlreadyBooked, SlotUnavailable, StorageUnavailable
from clinic.models import Appointment, DoctorProfile
from clinic.services.lookups import doctor_availability

logger = logging.getLogger(__name__)


def find_booked_slot(doctor_code: str, day: date, time_slot: str) -> Optional[Appointment]:
    """Exact match on (doctor, date, slot); slots are labels, not ranges."""
    try:
        return Appointment.objects.filter(doctor_id=doctor_code, date=day, time_slot=time_slot).first()
    except DatabaseError as exc:
        logger.error('Slot lookup failed for %s %s %s: %s', doctor_code, day, time_slot, exc)
        raise StorageUnavailable() from exc


def booked_slots(doctor_code: str, day: date) -> list[str]:
    return list(
        Appointment.objects.filter(doctor_id=doctor_code, date=day)
        .order_by('time_slot')
        .values_list('time_slot', flat=True)
    )


def slot_overview(doctor: DoctorProfile, day: date) -> dict:
    all_slots = doctor_availability().lookup(doctor.code) or []
    taken = set(booked_slots(doctor.code, day))
    return {
        'doctorId': doctor.code,
        'date': day.isoformat(),
        'allSlots': all_slots,
        'bookedSlots': sorted(taken),
        'availableSlots': [s for s in all_slots if s not in taken],
    }


def book_appointment(*, patient_ref: str, doctor: DoctorProfile, department: str, day: date,
                     time_slot: str, details: dict) -> Appointment:
    published = doctor_availability().lookup(doctor.code)
    if published is not None and time_slot not in published:
        logger.info('Rejected booking of unpublished slot %s for %s', time_slot, doctor.code)
        raise SlotUnavailable()

    existing = find_booked_slot(doctor.code, day, time_slot)
    if existing is not None:
        logger.info('Slot %s %s %s already booked (appointment %s)', doctor.code, day, time_slot, existing.id)
        raise SlotAlreadyBooked()

    try:
        with transaction.atomic():
            appointment = Appointment.objects.create(
                patient_ref=patient_ref,
                doctor=doctor,
                department=department,
                date=day,
                time_slot=time_slot,
                full_name=details['fullName'],
                email=details['email'],
                phone=details['phone'],
                address=details.get('address', ''),
                reason_for_visit=details.get('reasonForVisit', ''),
                preferred_language=details.get('preferredLanguage') or 'English',
            )
    except IntegrityError:
        # lost the race against a concurrent booking of the same slot
        logger.info('Slot %s %s %s taken concurrently', doctor.code, day, time_slot)
        raise SlotAlreadyBooked()
    except DatabaseError as exc:
        logger.error('Could not store appointment for %s: %s', doctor.code, exc)
        raise StorageUnavailable() from exc
    logger.info('Appointment %s booked: %s %s %s', appointment.id, doctor.code, day, time_slot)
    return appointment
