"""
URL mappings for the clinic API.

Trailing slashes are omitted on every API path (``APPEND_SLASH`` is off).
"""
from django.urls import path, include

from .views import appointments, coverage, dashboard, departments, diagnoses, doctors, health, payments, schedules, staff
from .views.auth import jwt_logout_view, jwt_refresh_view, login_view, me, register_doctor, register_patient

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # auth
    path('api/auth/login', login_view, name='login'),
    path('api/auth/refresh', jwt_refresh_view, name='token-refresh'),
    path('api/auth/logout', jwt_logout_view, name='logout'),
    path('api/auth/register/patient', register_patient, name='register-patient'),
    path('api/auth/register/doctor', register_doctor, name='register-doctor'),
    path('api/auth/me', me, name='me'),

    # registries
    path('api/departments', departments.departments, name='departments'),
    path('api/staff', staff.staff_list, name='staff'),
    path('api/staff/department/<int:department_id>', staff.staff_by_department, name='staff-by-department'),
    path('api/staff/<int:staff_id>', staff.staff_detail, name='staff-detail'),

    # shift roster
    path('api/schedules', schedules.schedules, name='schedules'),
    path('api/schedules/date-range/<str:start_date>/<str:end_date>', schedules.schedules_by_range,
         name='schedules-range'),
    path('api/schedules/available-staff', schedules.available_staff, name='available-staff'),
    path('api/schedules/<int:shift_id>', schedules.schedule_detail, name='schedule-detail'),
    path('api/schedules/<int:shift_id>/status', schedules.schedule_status, name='schedule-status'),

    # doctors and appointments
    path('api/doctors', doctors.doctor_list, name='doctors'),
    path('api/doctors/department/<str:department>', doctors.doctors_by_department, name='doctors-by-department'),
    path('api/doctors/<str:code>', doctors.doctor_detail, name='doctor-detail'),
    path('api/doctors/<str:code>/slots', doctors.doctor_slots, name='doctor-slots'),
    path('api/appointments', appointments.appointments, name='appointments'),
    path('api/appointments/patient/<str:patient_id>', appointments.patient_appointments,
         name='patient-appointments'),
    path('api/appointments/doctor/<str:code>', appointments.doctor_appointments, name='doctor-appointments'),

    # billing and coverage
    path('api/payments', payments.create_payment, name='payments'),
    path('api/payments/user', payments.my_payments, name='my-payments'),
    path('api/payments/verify', payments.verify_payment, name='verify-payment'),
    path('api/coverage/apply', coverage.apply_for_coverage, name='coverage-apply'),
    path('api/coverage/status/<int:user_id>', coverage.coverage_status, name='coverage-status'),
    path('api/coverage/admin/applications', coverage.admin_applications, name='coverage-applications'),
    path('api/coverage/admin/status', coverage.admin_review, name='coverage-review'),

    # clinical records
    path('api/diagnoses', diagnoses.diagnoses, name='diagnoses'),
    path('api/diagnoses/<int:diagnosis_id>', diagnoses.diagnosis_detail, name='diagnosis-detail'),

    path('api/admin/dashboard', dashboard.admin_dashboard, name='admin-dashboard'),
]
