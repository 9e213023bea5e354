"""
Staff shift schedule endpoints.

Reads are open to any authenticated user; writes need the ``admin`` or
``staff`` role.  Overlap detection and the status state machine live in
:mod:`clinic.services.scheduling`; these views only validate input and
shape responses.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Shift
from clinic.permissions import IsScheduler
from clinic.serializers.scheduling import (
    AvailableStaffQuerySerializer,
    ShiftCreateSerializer,
    ShiftListQuerySerializer,
    ShiftStatusSerializer,
    ShiftUpdateSerializer,
)
from clinic.services import scheduling
from clinic.views.staff import serialize_staff


def serialize_shift(shift: Shift) -> dict:
    staff = shift.staff
    creator = shift.created_by
    return {
        'id': shift.id,
        'staffId': staff.id,
        'staff': {
            'id': staff.id,
            'firstName': staff.first_name,
            'lastName': staff.last_name,
            'role': staff.role,
            'email': staff.email,
        },
        'departmentId': shift.department_id,
        'department': {'id': shift.department.id, 'name': shift.department.name},
        'shiftDate': shift.shift_date.isoformat(),
        'startTime': shift.start_time,
        'endTime': shift.end_time,
        'overnight': shift.is_overnight,
        'shiftType': shift.shift_type,
        'status': shift.status,
        'notes': shift.notes,
        'createdBy': {'id': creator.id, 'username': creator.username} if creator else None,
        'createdAt': shift.created_at.isoformat() if shift.created_at else None,
        'updatedAt': shift.updated_at.isoformat() if shift.updated_at else None,
    }


def _shifts():
    return Shift.objects.select_related('staff', 'department', 'created_by')


def _get_shift(shift_id) -> Shift:
    return get_object_or_404(_shifts(), pk=shift_id)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsScheduler])
def schedules(request):
    """List shifts (filters: startDate, endDate, departmentId, staffId) or create one.

    A create that overlaps a non-cancelled shift of the same staff member
    is rejected with 400 ``shift_conflict`` naming the existing shift.
    """
    if request.method == 'GET':
        q = ShiftListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        f = q.validated_data
        qs = _shifts()
        if f.get('startDate'):
            qs = qs.filter(shift_date__gte=f['startDate'])
        if f.get('endDate'):
            qs = qs.filter(shift_date__lte=f['endDate'])
        if f.get('departmentId'):
            qs = qs.filter(department_id=f['departmentId'])
        if f.get('staffId'):
            qs = qs.filter(staff_id=f['staffId'])
        data = [serialize_shift(s) for s in qs.order_by('shift_date', 'start_time', 'id')]
        return Response({'ok': True, 'count': len(data), 'data': data})

    s = ShiftCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    shift = scheduling.create_shift(actor=request.user, **s.validated_data)
    return Response({'ok': True, 'data': serialize_shift(_get_shift(shift.pk))}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def schedules_by_range(request, start_date: str, end_date: str):
    q = ShiftListQuerySerializer(data={'startDate': start_date, 'endDate': end_date})
    q.is_valid(raise_exception=True)
    qs = _shifts().filter(
        shift_date__range=(q.validated_data['startDate'], q.validated_data['endDate'])
    ).order_by('shift_date', 'start_time', 'id')
    data = [serialize_shift(s) for s in qs]
    return Response({'ok': True, 'count': len(data), 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def available_staff(request):
    q = AvailableStaffQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    members = scheduling.available_staff(v['date'], v['startTime'], v['endTime'], v.get('departmentId'))
    return Response({'ok': True, 'data': [serialize_staff(m) for m in members]})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsScheduler])
def schedule_detail(request, shift_id: int):
    shift = _get_shift(shift_id)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_shift(shift)})
    if request.method == 'DELETE':
        scheduling.delete_shift(shift, actor=request.user)
        return Response({'ok': True, 'message': 'Schedule deleted successfully'})

    s = ShiftUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    scheduling.update_shift(shift, s.validated_data, actor=request.user)
    return Response({'ok': True, 'data': serialize_shift(_get_shift(shift.pk))})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsScheduler])
def schedule_status(request, shift_id: int):
    shift = _get_shift(shift_id)
    s = ShiftStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    new_status = s.validated_data['status']
    if new_status == shift.status:
        raise ValidationError({'status': [f'Shift is already {shift.status}']})
    scheduling.transition_shift(shift, new_status, actor=request.user)
    return Response({'ok': True, 'data': serialize_shift(shift)})
