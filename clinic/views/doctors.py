from django.conf import settings
from django.core.cache import cache
from django.shortcuts import get_object_or_404
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import DoctorProfile
from clinic.serializers.appointments import SlotQuerySerializer
from clinic.services.appointments import slot_overview

CACHE_KEY = 'doctors:active'


def serialize_doctor(d: DoctorProfile) -> dict:
    return {
        'doctorId': d.code,
        'firstName': d.first_name,
        'lastName': d.last_name,
        'fullName': d.full_name,
        'email': d.email,
        'phoneNumber': d.phone_number,
        'gender': d.gender,
        'department': d.department.name if d.department_id else None,
        'departmentId': d.department_id,
        'specialization': d.specialization,
        'availableTimeSlots': d.available_time_slots or [],
        'workingDays': d.working_days or [],
    }


def _doctors():
    return DoctorProfile.objects.filter(is_active=True).select_related('department').order_by('code')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_list(request):
    data = cache.get(CACHE_KEY)
    if data is None:
        data = [serialize_doctor(d) for d in _doctors()]
        cache.set(CACHE_KEY, data, settings.CACHE_TTL)
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctors_by_department(request, department: str):
    doctors = _doctors().filter(department__name__iexact=department)
    return Response({'ok': True, 'data': [serialize_doctor(d) for d in doctors]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_detail(request, code: str):
    doctor = get_object_or_404(_doctors(), code=code)
    return Response({'ok': True, 'data': serialize_doctor(doctor)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_slots(request, code: str):
    """Published, booked and still free slots of a doctor on ``?date=YYYY-MM-DD``."""
    doctor = get_object_or_404(_doctors(), code=code)
    q = SlotQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response({'ok': True, 'data': slot_overview(doctor, q.validated_data['date'])})
