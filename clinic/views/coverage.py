from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import CoverageApplication
from clinic.permissions import ADMIN_ROLES, IsAdminRole, has_role
from clinic.serializers.coverage import CoverageApplySerializer, CoverageReviewSerializer
from clinic.services import coverage as coverage_service


def serialize_application(a: CoverageApplication) -> dict:
    return {
        'id': a.id,
        'userId': a.user_id,
        'patientName': a.patient_name,
        'patientEmail': a.patient_email,
        'policyId': a.policy_id,
        'provider': a.provider,
        'coverageType': a.coverage_type,
        'status': a.status,
        'adminNotes': a.admin_notes,
        'reviewedBy': a.reviewed_by.username if a.reviewed_by_id else None,
        'reviewedAt': a.reviewed_at.isoformat() if a.reviewed_at else None,
        'applicationDate': a.created_at.isoformat() if a.created_at else None,
    }


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def apply_for_coverage(request):
    s = CoverageApplySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user = request.user
    application = coverage_service.apply(
        user,
        patient_name=user.get_full_name() or user.username,
        patient_email=user.email or 'Not provided',
        policy_id=v['policyId'],
        provider=v['provider'],
        coverage_type=v['coverageType'],
    )
    return Response({
        'ok': True,
        'message': 'Coverage application submitted successfully',
        'data': serialize_application(application),
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def coverage_status(request, user_id: int):
    if request.user.pk != user_id and not has_role(request.user, ADMIN_ROLES):
        raise PermissionDenied('You can only view your own coverage status')
    application = coverage_service.latest_for(user_id)
    if application is None:
        return Response({'ok': True, 'hasApplication': False, 'data': None})
    return Response({'ok': True, 'hasApplication': True, 'data': serialize_application(application)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_applications(request):
    qs = CoverageApplication.objects.select_related('reviewed_by').order_by('-created_at', '-id')
    status_filter = request.query_params.get('status')
    if status_filter:
        qs = qs.filter(status=status_filter)
    return Response({'ok': True, 'data': [serialize_application(a) for a in qs]})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_review(request):
    s = CoverageReviewSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    application = get_object_or_404(CoverageApplication, pk=v['applicationId'])
    coverage_service.review(application, v['status'], actor=request.user, admin_notes=v['adminNotes'])
    return Response({'ok': True, 'data': serialize_application(application)})
