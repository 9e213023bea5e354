"""
Appointment booking and agenda views.

A booking is accepted only if the doctor publishes the requested slot
and nobody holds the same (doctor, date, slot) yet; a taken slot is
answered with 409.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Appointment, User
from clinic.permissions import ADMIN_ROLES, CLINICIAN_ROLES, has_role
from clinic.serializers.appointments import AppointmentCreateSerializer
from clinic.services.appointments import book_appointment
from clinic.services.audit import log_action


def serialize_appointment(a: Appointment) -> dict:
    return {
        'id': a.id,
        'patientId': a.patient_ref,
        'doctorId': a.doctor_id,
        'department': a.department,
        'date': a.date.isoformat(),
        'timeSlot': a.time_slot,
        'status': a.status,
        'patientDetails': {
            'fullName': a.full_name,
            'email': a.email,
            'phone': a.phone,
            'address': a.address,
            'reasonForVisit': a.reason_for_visit,
            'preferredLanguage': a.preferred_language,
        },
        'createdAt': a.created_at.isoformat() if a.created_at else None,
    }


def _ordered(qs):
    return qs.order_by('date', 'time_slot', 'id')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointments(request):
    """``POST`` books a slot; ``GET`` lists every appointment (admin only)."""
    user = request.user
    if request.method == 'GET':
        if not has_role(user, ADMIN_ROLES):
            raise PermissionDenied('Only administrators can list all appointments')
        data = [serialize_appointment(a) for a in _ordered(Appointment.objects.all())]
        return Response({'ok': True, 'count': len(data), 'data': data})

    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    if user.role == User.ROLE_PATIENT and v['patient_ref'] != str(user.pk):
        raise PermissionDenied('Patients can only book appointments for themselves')
    appointment = book_appointment(**v)
    log_action(user=user, action='appointment_book', object_type='appointment', object_id=appointment.id,
               detail={'doctorId': appointment.doctor_id, 'date': appointment.date.isoformat(),
                       'timeSlot': appointment.time_slot})
    return Response(
        {'ok': True, 'message': 'Appointment booked successfully', 'appointment': serialize_appointment(appointment)},
        status=status.HTTP_201_CREATED,
    )

appointments.cls.throttle_scope = 'booking'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_appointments(request, patient_id: str):
    user = request.user
    if str(user.pk) != patient_id and not has_role(user, CLINICIAN_ROLES):
        raise PermissionDenied('You can only view your own appointments')
    qs = _ordered(Appointment.objects.filter(patient_ref=patient_id))
    return Response({'ok': True, 'data': [serialize_appointment(a) for a in qs]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_appointments(request, code: str):
    user = request.user
    own_code = getattr(getattr(user, 'doctor_profile', None), 'code', None)
    if own_code != code and not has_role(user, ADMIN_ROLES):
        raise PermissionDenied('You can only view your own agenda')
    qs = _ordered(Appointment.objects.filter(doctor_id=code))
    return Response({'ok': True, 'data': [serialize_appointment(a) for a in qs]})
