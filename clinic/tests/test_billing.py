from decimal import Decimal

import pytest

from clinic.models import Payment
from clinic.services import payments as payment_service

pytestmark = pytest.mark.django_db

CARD = {'cardNumber': '4111 1111 1111 1234', 'expiryDate': '12/27', 'cvv': '123'}


def pay(client, method, details):
    return client.post('/api/payments', {'method': method, 'details': details}, format='json')


def test_card_payment_success_keeps_only_last_four(patient_client, patient_user, monkeypatch):
    monkeypatch.setattr(payment_service, 'roll', lambda: 0.1)
    r = pay(patient_client, 'CreditCard', CARD)
    assert r.status_code == 201
    assert r.data['data']['status'] == 'Processed'
    payment = Payment.objects.get()
    assert payment.user == patient_user
    assert payment.amount == Decimal('55.00')
    assert payment.details['lastFourDigits'] == '1234'
    assert 'cvv' not in payment.details and 'cardNumber' not in payment.details


def test_card_payment_can_fail(patient_client, monkeypatch):
    monkeypatch.setattr(payment_service, 'roll', lambda: 0.95)
    assert pay(patient_client, 'CreditCard', CARD).data['data']['status'] == 'Failed'


def test_coverage_payment_rejection(patient_client, monkeypatch):
    monkeypatch.setattr(payment_service, 'roll', lambda: 0.9)
    r = pay(patient_client, 'Coverage', {'policyId': 'POL-1', 'serviceReference': 'SRV-9'})
    assert r.data['data']['status'] == 'CoverageRejected'


def test_missing_method_details(patient_client):
    r = pay(patient_client, 'CreditCard', {'cardNumber': '4111111111111234'})
    assert r.status_code == 400
    assert pay(patient_client, 'Bitcoin', {}).status_code == 400
    assert pay(patient_client, 'Cash', {}).status_code == 400
    assert not Payment.objects.exists()


def test_cash_payment_waits_for_admin(patient_client, admin_client, monkeypatch):
    monkeypatch.setattr(payment_service, 'roll', lambda: 0.1)
    tx = pay(patient_client, 'Cash', {'depositReference': 'DEP-77'}).data['data']['transactionId']
    assert Payment.objects.get().status == 'PendingVerification'

    body = {'transactionId': tx, 'finalStatus': 'Processed'}
    assert patient_client.put('/api/payments/verify', body, format='json').status_code == 403
    r = admin_client.put('/api/payments/verify', body, format='json')
    assert r.status_code == 200
    assert r.data['data']['status'] == 'Processed'
    assert r.data['data']['details']['verifiedBy'] == 'admin1'

    again = admin_client.put('/api/payments/verify', body, format='json')
    assert again.status_code == 400


def test_card_payment_cannot_be_verified(patient_client, admin_client, monkeypatch):
    monkeypatch.setattr(payment_service, 'roll', lambda: 0.1)
    tx = pay(patient_client, 'CreditCard', CARD).data['data']['transactionId']
    r = admin_client.put('/api/payments/verify', {'transactionId': tx, 'finalStatus': 'Failed'}, format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'invalid_transition'


def test_user_sees_own_payments_newest_first(patient_client, admin_client, monkeypatch):
    monkeypatch.setattr(payment_service, 'roll', lambda: 0.1)
    pay(patient_client, 'Cash', {'depositReference': 'A'})
    pay(patient_client, 'Cash', {'depositReference': 'B'})
    pay(admin_client, 'Cash', {'depositReference': 'C'})
    refs = [p['details']['depositReference'] for p in patient_client.get('/api/payments/user').data['data']]
    assert refs == ['B', 'A']
