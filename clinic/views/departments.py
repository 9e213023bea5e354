from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Department
from clinic.permissions import ADMIN_ROLES, has_role
from clinic.serializers.records import DepartmentSerializer
from clinic.services.audit import log_action

CACHE_KEY = 'departments:active'


def serialize_department(d: Department) -> dict:
    return {
        'id': d.id,
        'name': d.name,
        'description': d.description,
        'isActive': d.is_active,
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def departments(request):
    """``GET`` lists active departments; ``POST`` (admin only) creates one."""
    if request.method == 'GET':
        data = cache.get(CACHE_KEY)
        if data is None:
            data = [serialize_department(d) for d in Department.objects.filter(is_active=True).order_by('name')]
            cache.set(CACHE_KEY, data, settings.CACHE_TTL)
        return Response({'ok': True, 'data': data})

    if not has_role(request.user, ADMIN_ROLES):
        raise PermissionDenied('Only administrators can create departments')
    s = DepartmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    dept = Department.objects.create(**s.validated_data)
    cache.delete(CACHE_KEY)
    log_action(user=request.user, action='department_create', object_type='department', object_id=dept.id)
    return Response({'ok': True, 'data': serialize_department(dept)}, status=status.HTTP_201_CREATED)
