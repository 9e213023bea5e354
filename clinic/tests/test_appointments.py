import pytest
from django.db import IntegrityError
from django.test import override_settings

from clinic.models import Appointment
from clinic.services import appointments as appointment_service


class EveryDoctorUnlisted:
    def lookup(self, key):
        return None


def booking(patient_user, **overrides):
    body = {
        'patientId': str(patient_user.pk),
        'doctorId': 'D001',
        'department': 'Cardiology',
        'date': '2024-06-01',
        'timeSlot': '09:00',
        'patientDetails': {
            'fullName': 'Pat Jones',
            'email': 'pat@example.com',
            'phone': '+1-555-0199',
        },
    }
    body.update(overrides)
    return body


@pytest.mark.django_db
def test_same_slot_twice_gives_201_then_409(patient_client, patient_user, doctor):
    first = patient_client.post('/api/appointments', booking(patient_user), format='json')
    assert first.status_code == 201
    assert first.data['message'] == 'Appointment booked successfully'
    assert first.data['appointment']['status'] == 'Confirmed'
    assert first.data['appointment']['patientDetails']['preferredLanguage'] == 'English'

    second = patient_client.post('/api/appointments', booking(patient_user), format='json')
    assert second.status_code == 409
    assert second.data['error']['code'] == 'slot_already_booked'
    assert Appointment.objects.count() == 1


@pytest.mark.django_db
def test_other_slot_or_date_is_free(patient_client, patient_user, doctor):
    assert patient_client.post('/api/appointments', booking(patient_user), format='json').status_code == 201
    assert patient_client.post('/api/appointments', booking(patient_user, timeSlot='10:00'),
                               format='json').status_code == 201
    assert patient_client.post('/api/appointments', booking(patient_user, date='2024-06-02'),
                               format='json').status_code == 201


@pytest.mark.django_db
def test_missing_fields_and_bad_email_are_rejected(patient_client, patient_user, doctor):
    body = booking(patient_user)
    del body['patientDetails']
    r = patient_client.post('/api/appointments', body, format='json')
    assert r.status_code == 400
    assert 'patientDetails' in r.data['error']['message']

    bad_email = booking(patient_user)
    bad_email['patientDetails']['email'] = 'not-an-email'
    r = patient_client.post('/api/appointments', bad_email, format='json')
    assert r.status_code == 400

    r = patient_client.post('/api/appointments', booking(patient_user, doctorId='D999'), format='json')
    assert r.status_code == 400
    assert not Appointment.objects.exists()


@pytest.mark.django_db
def test_unpublished_slot_is_rejected(patient_client, patient_user, doctor):
    r = patient_client.post('/api/appointments', booking(patient_user, timeSlot='12:00'), format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'slot_unavailable'


@pytest.mark.django_db
@override_settings(DOCTOR_AVAILABILITY_LOOKUP='clinic.tests.test_appointments.EveryDoctorUnlisted')
def test_doctor_without_published_slots_accepts_any_label(patient_client, patient_user, doctor):
    r = patient_client.post('/api/appointments', booking(patient_user, timeSlot='12:00'), format='json')
    assert r.status_code == 201


@pytest.mark.django_db
def test_concurrent_insert_is_reported_as_taken(patient_client, patient_user, doctor, monkeypatch):
    patient_client.post('/api/appointments', booking(patient_user), format='json')
    # simulate a request that passed the check before the other insert landed
    monkeypatch.setattr(appointment_service, 'find_booked_slot', lambda *args: None)
    r = patient_client.post('/api/appointments', booking(patient_user), format='json')
    assert r.status_code == 409
    assert Appointment.objects.count() == 1


@pytest.mark.django_db
def test_unique_constraint_backs_the_check(doctor):
    Appointment.objects.create(patient_ref='1', doctor=doctor, department='Cardiology', date='2024-06-01',
                               time_slot='09:00', full_name='A', email='a@example.com', phone='1')
    with pytest.raises(IntegrityError):
        Appointment.objects.create(patient_ref='2', doctor=doctor, department='Cardiology', date='2024-06-01',
                                   time_slot='09:00', full_name='B', email='b@example.com', phone='2')


@pytest.mark.django_db
def test_patient_cannot_book_for_someone_else(patient_client, patient_user, doctor):
    r = patient_client.post('/api/appointments', booking(patient_user, patientId='424242'), format='json')
    assert r.status_code == 403


@pytest.mark.django_db
def test_slot_overview(patient_client, patient_user, doctor):
    patient_client.post('/api/appointments', booking(patient_user, timeSlot='10:00'), format='json')
    r = patient_client.get('/api/doctors/D001/slots', {'date': '2024-06-01'})
    assert r.status_code == 200
    assert r.data['data']['allSlots'] == ['09:00', '10:00', '11:00']
    assert r.data['data']['bookedSlots'] == ['10:00']
    assert r.data['data']['availableSlots'] == ['09:00', '11:00']
    assert patient_client.get('/api/doctors/D001/slots').status_code == 400


@pytest.mark.django_db
def test_agenda_visibility(patient_client, patient_user, admin_client, doctor):
    patient_client.post('/api/appointments', booking(patient_user), format='json')

    mine = patient_client.get(f'/api/appointments/patient/{patient_user.pk}')
    assert mine.status_code == 200 and len(mine.data['data']) == 1
    assert patient_client.get('/api/appointments/patient/999').status_code == 403
    assert patient_client.get('/api/appointments').status_code == 403
    assert patient_client.get('/api/appointments/doctor/D001').status_code == 403

    everything = admin_client.get('/api/appointments')
    assert everything.status_code == 200 and everything.data['count'] == 1
    assert len(admin_client.get('/api/appointments/doctor/D001').data['data']) == 1
