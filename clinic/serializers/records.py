"""Request schemas for the plain registries: departments, staff, diagnoses."""
from rest_framework import serializers

from clinic.models import Department, Diagnosis, StaffMember
from .fields import CleanCharField, ClockTimeField

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


class DepartmentSerializer(serializers.Serializer):
    name = CleanCharField(max_length=120)
    description = CleanCharField(required=False, allow_blank=True, default='')

    def validate_name(self, v):
        v = v.strip()
        if not v:
            raise serializers.ValidationError('Name is required')
        if Department.objects.filter(name__iexact=v).exists():
            raise serializers.ValidationError('Department already exists')
        return v


class AvailabilitySerializer(serializers.Serializer):
    dayOfWeek = serializers.ChoiceField(choices=WEEKDAYS)
    startTime = ClockTimeField()
    endTime = ClockTimeField()
    isAvailable = serializers.BooleanField(default=True)


class StaffSerializer(serializers.Serializer):
    firstName = CleanCharField(max_length=150, source='first_name')
    lastName = CleanCharField(max_length=150, source='last_name')
    email = serializers.EmailField()
    phoneNumber = CleanCharField(max_length=32, source='phone_number')
    role = serializers.ChoiceField(choices=StaffMember.ROLE_CHOICES)
    departmentId = serializers.PrimaryKeyRelatedField(queryset=Department.objects.all(), source='department')
    availability = AvailabilitySerializer(many=True, required=False)
    isActive = serializers.BooleanField(required=False, source='is_active')

    def validate_email(self, v):
        v = v.lower()
        qs = StaffMember.objects.filter(email__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A staff member with this email already exists')
        return v


class DiagnosisSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64, source='patient_ref')
    patientName = CleanCharField(max_length=255, source='patient_name')
    symptoms = CleanCharField()
    diagnosis = CleanCharField()
    remarks = CleanCharField(required=False, allow_blank=True, default='')
    diagnosisDate = serializers.DateField(source='diagnosis_date')
    severity = serializers.ChoiceField(choices=Diagnosis.SEVERITY_CHOICES)
