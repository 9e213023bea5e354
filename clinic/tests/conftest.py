import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from clinic.models import Department, DoctorProfile, StaffMember, User

PASSWORD = 'P@ssw0rd-2024'


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def department(db):
    return Department.objects.create(name='Cardiology', description='Heart and circulation')


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin1', password=PASSWORD, role=User.ROLE_ADMIN)


@pytest.fixture
def patient_user(db):
    return User.objects.create_user(username='patient1', password=PASSWORD, role=User.ROLE_PATIENT,
                                    first_name='Pat', last_name='Jones', email='pat@example.com')


@pytest.fixture
def doctor(department):
    return DoctorProfile.objects.create(
        code='D001', first_name='John', last_name='Smith', department=department,
        specialization='Heart Surgery', available_time_slots=['09:00', '10:00', '11:00'],
        working_days=['Monday', 'Saturday'],
    )


@pytest.fixture
def staff_member(department):
    return StaffMember.objects.create(
        first_name='Nina', last_name='Park', email='nina@carepoint.example',
        phone_number='+1-555-0200', role='Nurse', department=department,
    )


def client_for(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def patient_client(patient_user):
    return client_for(patient_user)
