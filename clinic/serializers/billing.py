import re

from rest_framework import serializers

from clinic.models import Payment
from .fields import CleanCharField

REQUIRED_DETAILS = {
    Payment.METHOD_CARD: ('cardNumber', 'expiryDate', 'cvv'),
    Payment.METHOD_COVERAGE: ('policyId', 'serviceReference'),
    Payment.METHOD_CASH: ('depositReference',),
}


class PaymentDetailsSerializer(serializers.Serializer):
    cardNumber = serializers.RegexField(r'^\d{12,19}$', required=False)
    expiryDate = serializers.RegexField(r'^(0[1-9]|1[0-2])/\d{2}$', required=False)
    cvv = serializers.RegexField(r'^\d{3,4}$', required=False, write_only=True)
    cardType = CleanCharField(max_length=32, required=False, allow_blank=True)
    policyId = CleanCharField(max_length=64, required=False)
    serviceReference = CleanCharField(max_length=64, required=False)
    depositReference = CleanCharField(max_length=64, required=False)
    depositSlipUrl = serializers.URLField(required=False, allow_blank=True)

    def to_internal_value(self, data):
        if isinstance(data, dict) and isinstance(data.get('cardNumber'), str):
            data = {**data, 'cardNumber': re.sub(r'[\s-]', '', data['cardNumber'])}
        return super().to_internal_value(data)


class PaymentCreateSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES)
    details = PaymentDetailsSerializer()

    def validate(self, attrs):
        missing = [f for f in REQUIRED_DETAILS[attrs['method']] if not attrs['details'].get(f)]
        if missing:
            raise serializers.ValidationError(
                {'details': {f: ['This field is required.'] for f in missing}}
            )
        return attrs


class PaymentVerifySerializer(serializers.Serializer):
    transactionId = serializers.UUIDField()
    finalStatus = serializers.ChoiceField(choices=[Payment.STATUS_PROCESSED, Payment.STATUS_FAILED])
