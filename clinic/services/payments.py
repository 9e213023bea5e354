"""
Consultation payment simulation.

No real processor is contacted.  Card and coverage payments succeed with
the probabilities configured in ``PAYMENT_SUCCESS_RATES``; cash payments
wait for an administrator to verify the deposit.
"""
import logging
import random

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from clinic.exceptions import InvalidTransition
from clinic.models import Payment
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)


def roll() -> float:
    """Random draw in [0, 1); replaced in tests."""
    return random.random()


def _succeeds(method: str) -> bool:
    rate = settings.PAYMENT_SUCCESS_RATES.get(method, 0)
    return roll() < rate


def process_payment(user, method: str, data: dict) -> Payment:
    if method == Payment.METHOD_CARD:
        details = {
            'lastFourDigits': data['cardNumber'][-4:],
            'cardType': data.get('cardType') or 'Visa',
            'expiryDate': data['expiryDate'],
        }
        status = Payment.STATUS_PROCESSED if _succeeds(method) else Payment.STATUS_FAILED
    elif method == Payment.METHOD_COVERAGE:
        details = {
            'policyId': data['policyId'],
            'serviceReference': data['serviceReference'],
        }
        status = Payment.STATUS_PROCESSED if _succeeds(method) else Payment.STATUS_COVERAGE_REJECTED
    else:
        details = {
            'depositReference': data['depositReference'],
            'depositSlipUrl': data.get('depositSlipUrl', ''),
        }
        status = Payment.STATUS_PENDING

    with transaction.atomic():
        payment = Payment.objects.create(
            user=user,
            amount=settings.CONSULTATION_FEE,
            method=method,
            status=status,
            details=details,
        )
        log_action(user=user, action='payment', object_type='payment', object_id=payment.transaction_id,
                   detail={'method': method, 'status': status})
    logger.info('Payment %s by user %s: %s -> %s', payment.transaction_id, user.pk, method, status)
    return payment


def verify_cash_payment(payment: Payment, final_status: str, *, actor) -> Payment:
    if payment.method != Payment.METHOD_CASH:
        raise InvalidTransition('Only cash payments need manual verification')
    if payment.status != Payment.STATUS_PENDING:
        raise InvalidTransition(f'Payment is already {payment.status}')
    payment.status = final_status
    payment.details = {
        **(payment.details or {}),
        'verifiedBy': actor.username,
        'verifiedAt': timezone.now().isoformat(),
    }
    with transaction.atomic():
        payment.save(update_fields=['status', 'details', 'updated_at'])
        log_action(user=actor, action='payment_verify', object_type='payment',
                   object_id=payment.transaction_id, detail={'status': final_status})
    return payment
