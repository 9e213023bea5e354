from rest_framework import serializers

from clinic.models import DoctorProfile
from .fields import CleanCharField, ClockTimeField


class PatientDetailsSerializer(serializers.Serializer):
    fullName = CleanCharField(max_length=255)
    email = serializers.EmailField()
    phone = CleanCharField(max_length=32)
    address = CleanCharField(max_length=255, required=False, allow_blank=True, default='')
    reasonForVisit = CleanCharField(required=False, allow_blank=True, default='')
    preferredLanguage = CleanCharField(max_length=32, required=False, allow_blank=True, default='English')


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64, source='patient_ref')
    doctorId = serializers.SlugRelatedField(
        slug_field='code', queryset=DoctorProfile.objects.filter(is_active=True), source='doctor'
    )
    department = CleanCharField(max_length=120)
    date = serializers.DateField(source='day')
    timeSlot = ClockTimeField(source='time_slot')
    patientDetails = PatientDetailsSerializer(source='details')


class SlotQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
