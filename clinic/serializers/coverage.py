from rest_framework import serializers

from clinic.models import CoverageApplication
from .fields import CleanCharField


class CoverageApplySerializer(serializers.Serializer):
    policyId = CleanCharField(max_length=64)
    provider = CleanCharField(max_length=120)
    coverageType = CleanCharField(max_length=64)


class CoverageReviewSerializer(serializers.Serializer):
    applicationId = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(
        choices=[CoverageApplication.STATUS_APPROVED, CoverageApplication.STATUS_DECLINED]
    )
    adminNotes = CleanCharField(required=False, allow_blank=True, default='')
