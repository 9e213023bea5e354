from django.contrib.auth import get_user_model
from rest_framework import serializers

from clinic.models import Department, Shift, StaffMember
from .fields import CleanCharField, ClockTimeField

User = get_user_model()

CREATABLE_STATUSES = [Shift.STATUS_SCHEDULED, Shift.STATUS_CONFIRMED]


def _check_not_empty(attrs):
    start, end = attrs.get('start_time'), attrs.get('end_time')
    if start is not None and start == end:
        raise serializers.ValidationError({'endTime': ['endTime must differ from startTime']})


class ShiftCreateSerializer(serializers.Serializer):
    staffId = serializers.PrimaryKeyRelatedField(queryset=StaffMember.objects.filter(is_active=True), source='staff')
    departmentId = serializers.PrimaryKeyRelatedField(queryset=Department.objects.all(), source='department')
    shiftDate = serializers.DateField(source='shift_date')
    startTime = ClockTimeField(source='start_time')
    endTime = ClockTimeField(source='end_time')
    shiftType = serializers.ChoiceField(choices=Shift.TYPE_CHOICES, source='shift_type')
    createdBy = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), source='created_by')
    notes = CleanCharField(required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=CREATABLE_STATUSES, required=False, default=Shift.STATUS_SCHEDULED)

    def validate(self, attrs):
        _check_not_empty(attrs)
        return attrs


class ShiftUpdateSerializer(serializers.Serializer):
    staffId = serializers.PrimaryKeyRelatedField(
        queryset=StaffMember.objects.filter(is_active=True), source='staff', required=False
    )
    departmentId = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(), source='department', required=False
    )
    shiftDate = serializers.DateField(source='shift_date', required=False)
    startTime = ClockTimeField(source='start_time', required=False)
    endTime = ClockTimeField(source='end_time', required=False)
    shiftType = serializers.ChoiceField(choices=Shift.TYPE_CHOICES, source='shift_type', required=False)
    notes = CleanCharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Shift.STATUS_CHOICES, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Nothing to update')
        _check_not_empty(attrs)
        return attrs


class ShiftStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Shift.STATUS_CHOICES)


class ShiftListQuerySerializer(serializers.Serializer):
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
    departmentId = serializers.IntegerField(required=False, min_value=1)
    staffId = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': ['endDate must not be before startDate']})
        return attrs


class AvailableStaffQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    startTime = ClockTimeField()
    endTime = ClockTimeField()
    departmentId = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        if attrs['startTime'] == attrs['endTime']:
            raise serializers.ValidationError({'endTime': ['endTime must differ from startTime']})
        return attrs
