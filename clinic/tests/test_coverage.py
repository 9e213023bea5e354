import pytest
from django.test import override_settings

from clinic.models import CoverageApplication

pytestmark = pytest.mark.django_db

APPLICATION = {'policyId': 'MS-00017', 'provider': 'MediShield', 'coverageType': 'Standard'}


def test_apply_once_while_pending(patient_client, patient_user):
    r = patient_client.post('/api/coverage/apply', APPLICATION, format='json')
    assert r.status_code == 201
    assert r.data['data']['status'] == 'Pending'
    assert r.data['data']['patientName'] == 'Pat Jones'
    assert r.data['data']['patientEmail'] == 'pat@example.com'

    again = patient_client.post('/api/coverage/apply', APPLICATION, format='json')
    assert again.status_code == 400
    assert CoverageApplication.objects.filter(user=patient_user).count() == 1


def test_provider_and_type_are_checked_against_plans(patient_client):
    r = patient_client.post('/api/coverage/apply', {**APPLICATION, 'provider': 'Nobody'}, format='json')
    assert r.status_code == 400
    assert 'provider' in r.data['error']['message']
    r = patient_client.post('/api/coverage/apply', {**APPLICATION, 'coverageType': 'Family'}, format='json')
    assert r.status_code == 400
    assert 'coverageType' in r.data['error']['message']


@override_settings(COVERAGE_PLANS={'LocalMutual': ['Family']})
def test_plan_catalogue_comes_from_settings(patient_client):
    body = {'policyId': 'LM-1', 'provider': 'LocalMutual', 'coverageType': 'Family'}
    assert patient_client.post('/api/coverage/apply', body, format='json').status_code == 201
    assert patient_client.post('/api/coverage/apply', APPLICATION, format='json').status_code == 400


def test_admin_review_flow(patient_client, patient_user, admin_client, admin_user):
    app_id = patient_client.post('/api/coverage/apply', APPLICATION, format='json').data['data']['id']

    listing = admin_client.get('/api/coverage/admin/applications', {'status': 'Pending'})
    assert [a['id'] for a in listing.data['data']] == [app_id]
    assert patient_client.get('/api/coverage/admin/applications').status_code == 403

    body = {'applicationId': app_id, 'status': 'Approved', 'adminNotes': 'verified with insurer'}
    r = admin_client.put('/api/coverage/admin/status', body, format='json')
    assert r.status_code == 200
    assert r.data['data']['reviewedBy'] == 'admin1'
    assert r.data['data']['reviewedAt']

    status = patient_client.get(f'/api/coverage/status/{patient_user.pk}')
    assert status.data['hasApplication'] is True
    assert status.data['data']['status'] == 'Approved'

    # reviewed applications are final; a new application may now be filed
    assert admin_client.put('/api/coverage/admin/status', {**body, 'status': 'Declined'},
                            format='json').status_code == 400
    assert patient_client.post('/api/coverage/apply', APPLICATION, format='json').status_code == 201


def test_status_is_private(patient_client, admin_user, admin_client, patient_user):
    assert patient_client.get(f'/api/coverage/status/{admin_user.pk}').status_code == 403
    r = admin_client.get(f'/api/coverage/status/{patient_user.pk}')
    assert r.status_code == 200 and r.data['hasApplication'] is False
