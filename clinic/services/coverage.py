import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from clinic.exceptions import InvalidTransition
from clinic.models import CoverageApplication
from clinic.services.audit import log_action
from clinic.services.lookups import coverage_plans

logger = logging.getLogger(__name__)


def check_plan(provider: str, coverage_type: str) -> None:
    offered = coverage_plans().lookup(provider)
    if offered is None:
        raise ValidationError({'provider': [f'Unknown coverage provider "{provider}"']})
    if coverage_type not in offered:
        raise ValidationError({'coverageType': [f'{provider} does not offer "{coverage_type}" coverage']})


def apply(user, *, patient_name: str, patient_email: str, policy_id: str, provider: str,
          coverage_type: str) -> CoverageApplication:
    check_plan(provider, coverage_type)
    with transaction.atomic():
        pending = (
            CoverageApplication.objects.select_for_update()
            .filter(user=user, status=CoverageApplication.STATUS_PENDING)
            .exists()
        )
        if pending:
            raise ValidationError({'detail': 'You already have a pending coverage application.'})
        application = CoverageApplication.objects.create(
            user=user,
            patient_name=patient_name,
            patient_email=patient_email,
            policy_id=policy_id,
            provider=provider,
            coverage_type=coverage_type,
        )
        log_action(user=user, action='coverage_apply', object_type='coverage', object_id=application.id,
                   detail={'provider': provider, 'coverageType': coverage_type})
    logger.info('Coverage application %s submitted by user %s', application.id, user.pk)
    return application


def latest_for(user_id):
    return CoverageApplication.objects.filter(user_id=user_id).order_by('-created_at', '-id').first()


def review(application: CoverageApplication, new_status: str, *, actor, admin_notes: str = '') -> CoverageApplication:
    if application.status != CoverageApplication.STATUS_PENDING:
        raise InvalidTransition(f'Application is already {application.status}')
    application.status = new_status
    application.admin_notes = admin_notes
    application.reviewed_by = actor
    application.reviewed_at = timezone.now()
    with transaction.atomic():
        application.save()
        log_action(user=actor, action='coverage_review', object_type='coverage', object_id=application.id,
                   detail={'status': new_status})
    return application
