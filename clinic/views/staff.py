from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import StaffMember
from clinic.permissions import IsScheduler
from clinic.serializers.records import StaffSerializer
from clinic.services.audit import log_action
from clinic.services.scheduling import deactivate_staff


def serialize_staff(m: StaffMember) -> dict:
    return {
        'id': m.id,
        'firstName': m.first_name,
        'lastName': m.last_name,
        'fullName': m.full_name,
        'email': m.email,
        'phoneNumber': m.phone_number,
        'role': m.role,
        'departmentId': m.department_id,
        'department': m.department.name if m.department_id else None,
        'isActive': m.is_active,
        'availability': m.availability or [],
    }


def _active_staff():
    return StaffMember.objects.filter(is_active=True).select_related('department').order_by('first_name', 'last_name')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsScheduler])
def staff_list(request):
    if request.method == 'GET':
        return Response({'ok': True, 'data': [serialize_staff(m) for m in _active_staff()]})
    s = StaffSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    member = StaffMember.objects.create(**s.validated_data)
    log_action(user=request.user, action='staff_create', object_type='staff', object_id=member.id)
    return Response({'ok': True, 'data': serialize_staff(member)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def staff_by_department(request, department_id: int):
    members = _active_staff().filter(department_id=department_id)
    return Response({'ok': True, 'data': [serialize_staff(m) for m in members]})


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsScheduler])
def staff_detail(request, staff_id: int):
    member = get_object_or_404(StaffMember.objects.select_related('department'), pk=staff_id)
    if request.method == 'DELETE':
        # shifts keep pointing at the row, so staff are deactivated rather than removed
        cancelled = deactivate_staff(member, actor=request.user)
        return Response({'ok': True, 'message': 'Staff member deactivated', 'cancelledShifts': cancelled})

    s = StaffSerializer(member, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    for field, value in s.validated_data.items():
        setattr(member, field, value)
    member.save()
    log_action(user=request.user, action='staff_update', object_type='staff', object_id=member.id,
               detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': serialize_staff(member)})
