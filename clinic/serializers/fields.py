import bleach
from rest_framework import serializers

from clinic.services.intervals import is_valid_time


class CleanCharField(serializers.CharField):
    """CharField that strips markup from user supplied text."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return bleach.clean(value, tags=set(), strip=True)


class ClockTimeField(serializers.CharField):
    default_error_messages = {
        'format': 'Time must be in HH:MM 24-hour format.',
    }

    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 5)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if not is_valid_time(value):
            self.fail('format')
        return value
