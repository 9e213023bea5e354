from django.contrib.auth import get_user_model
from rest_framework import serializers

from clinic.models import Department, DoctorProfile
from .fields import CleanCharField, ClockTimeField

User = get_user_model()

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v


class RegisterPatientSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    email = serializers.EmailField()
    firstName = CleanCharField(max_length=150, source='first_name')
    lastName = CleanCharField(max_length=150, source='last_name')
    gender = CleanCharField(max_length=16, required=False, allow_blank=True, default='')
    phone = CleanCharField(max_length=32, required=False, allow_blank=True, default='')
    dateOfBirth = serializers.DateField(required=False, allow_null=True, source='date_of_birth')

    def validate_username(self, v):
        v = v.strip()
        if User.objects.filter(username__iexact=v).exists():
            raise serializers.ValidationError('Username is already taken')
        return v


class RegisterDoctorSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    email = serializers.EmailField()
    firstName = CleanCharField(max_length=150, source='first_name')
    lastName = CleanCharField(max_length=150, source='last_name')
    doctorId = serializers.RegexField(r'^[A-Z]\d{3,}$', max_length=20, source='code')
    departmentId = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.filter(is_active=True), source='department', required=False, allow_null=True
    )
    specialization = CleanCharField(max_length=255, required=False, allow_blank=True, default='')
    gender = CleanCharField(max_length=16, required=False, allow_blank=True, default='')
    phoneNumber = CleanCharField(max_length=32, required=False, allow_blank=True, default='', source='phone_number')
    availableTimeSlots = serializers.ListField(
        child=ClockTimeField(), required=False, default=list, source='available_time_slots'
    )
    workingDays = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS), required=False, default=list, source='working_days'
    )

    def validate_username(self, v):
        v = v.strip()
        if User.objects.filter(username__iexact=v).exists():
            raise serializers.ValidationError('Username is already taken')
        return v

    def validate_doctorId(self, v):
        if DoctorProfile.objects.filter(code=v).exists():
            raise serializers.ValidationError('Doctor id is already in use')
        return v

    def validate_availableTimeSlots(self, v):
        return sorted(set(v))
