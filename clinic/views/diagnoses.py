from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Diagnosis
from clinic.permissions import IsClinician
from clinic.serializers.records import DiagnosisSerializer
from clinic.services.audit import log_action


def serialize_diagnosis(d: Diagnosis) -> dict:
    return {
        'id': d.id,
        'patientId': d.patient_ref,
        'patientName': d.patient_name,
        'symptoms': d.symptoms,
        'diagnosis': d.diagnosis,
        'remarks': d.remarks,
        'diagnosisDate': d.diagnosis_date.isoformat(),
        'severity': d.severity,
        'recordedBy': d.recorded_by.username if d.recorded_by_id else None,
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinician])
def diagnoses(request):
    if request.method == 'GET':
        qs = Diagnosis.objects.select_related('recorded_by').order_by('-diagnosis_date', '-id')
        patient_id = request.query_params.get('patientId')
        if patient_id:
            qs = qs.filter(patient_ref=patient_id)
        return Response({'ok': True, 'data': [serialize_diagnosis(d) for d in qs]})

    s = DiagnosisSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = Diagnosis.objects.create(recorded_by=request.user, **s.validated_data)
    log_action(user=request.user, action='diagnosis_create', object_type='diagnosis', object_id=record.id,
               detail={'patientId': record.patient_ref})
    return Response({'ok': True, 'data': serialize_diagnosis(record)}, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinician])
def diagnosis_detail(request, diagnosis_id: int):
    record = get_object_or_404(Diagnosis.objects.select_related('recorded_by'), pk=diagnosis_id)
    if request.method == 'DELETE':
        record.delete()
        log_action(user=request.user, action='diagnosis_delete', object_type='diagnosis', object_id=diagnosis_id)
        return Response({'ok': True, 'message': 'Diagnosis deleted successfully'})

    s = DiagnosisSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    for field, value in s.validated_data.items():
        setattr(record, field, value)
    record.save()
    log_action(user=request.user, action='diagnosis_update', object_type='diagnosis', object_id=record.id,
               detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': serialize_diagnosis(record)})
