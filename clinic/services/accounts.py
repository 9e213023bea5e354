from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.db import transaction
from rest_framework.exceptions import ValidationError as DRFValidation

from clinic.models import DoctorProfile, PatientProfile
from clinic.services.audit import log_action

User = get_user_model()


def _check_password(password, user=None):
    try:
        validate_password(password, user=user)
    except ValidationError as e:
        raise DRFValidation({'password': e.messages})


def register_patient(*, username, password, email, first_name, last_name, gender='', phone='', date_of_birth=None):
    candidate = User(username=username, email=email, first_name=first_name, last_name=last_name)
    _check_password(password, candidate)
    with transaction.atomic():
        user = User.objects.create_user(
            username=username, password=password, email=email,
            first_name=first_name, last_name=last_name,
            role=User.ROLE_PATIENT, phone=phone,
        )
        profile = PatientProfile.objects.create(user=user, gender=gender, phone=phone, date_of_birth=date_of_birth)
        log_action(user=user, action='register', object_type='user', object_id=user.id, detail={'role': user.role})
    return user, profile


def register_doctor(current_user, *, username, password, email, first_name, last_name, code,
                    department=None, specialization='', gender='', phone_number='',
                    available_time_slots=None, working_days=None):
    candidate = User(username=username, email=email, first_name=first_name, last_name=last_name)
    _check_password(password, candidate)
    with transaction.atomic():
        user = User.objects.create_user(
            username=username, password=password, email=email,
            first_name=first_name, last_name=last_name,
            role=User.ROLE_DOCTOR, phone=phone_number,
        )
        profile = DoctorProfile.objects.create(
            user=user,
            code=code,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            gender=gender,
            department=department,
            specialization=specialization,
            available_time_slots=available_time_slots or [],
            working_days=working_days or [],
        )
        log_action(user=current_user, action='register_doctor', object_type='doctor', object_id=profile.code,
                   detail={'username': username})
    cache.delete('doctors:active')
    return user, profile
