"""
Database models for the CarePoint backend.

The models cover the identities of the clinic (users and their patient
or doctor profiles, staff members and departments), the two kinds of
time commitments (staff shifts and doctor appointments) and the
administrative records around them: payments, coverage applications,
diagnoses and an audit trail.

Shift times are stored as zero padded ``"HH:MM"`` strings and compared
as strings.  Appointment time slots are discrete labels matched by
equality, never by range.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class Department(models.Model):
    """A clinical department (Cardiology, Neurology, ...)."""
    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    """Account used to log in.

    The role decides which endpoints a user may reach.  Patients and
    doctors carry extra information in :class:`PatientProfile` and
    :class:`DoctorProfile`.
    """
    ROLE_PATIENT = 'patient'
    ROLE_DOCTOR = 'doctor'
    ROLE_ADMIN = 'admin'
    ROLE_STAFF = 'staff'
    ROLE_CHOICES = [
        (ROLE_PATIENT, 'Patient'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_STAFF, 'Staff'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    phone = models.CharField(max_length=32, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class PatientProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='patient_profile')
    gender = models.CharField(max_length=16, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)

    def __str__(self) -> str:
        return f"patient {self.user.username}"


class DoctorProfile(models.Model):
    """Bookable doctor.

    ``code`` is the public identifier used by the booking API (``"D001"``).
    ``available_time_slots`` lists the discrete slot labels a patient may
    book; seeded doctors may exist without a login account.
    """
    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_profile'
    )
    code = models.CharField(max_length=20, unique=True)
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField(blank=True)
    phone_number = models.CharField(max_length=32, blank=True)
    gender = models.CharField(max_length=16, blank=True)
    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctors'
    )
    specialization = models.CharField(max_length=255, blank=True)
    available_time_slots = models.JSONField(default=list, blank=True)
    working_days = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"Dr. {self.full_name} ({self.code})"


class StaffMember(models.Model):
    """Schedulable member of staff; the subject of :class:`Shift` rows."""
    ROLE_CHOICES = [
        ('Manager', 'Manager'),
        ('Nurse', 'Nurse'),
        ('Receptionist', 'Receptionist'),
        ('Technician', 'Technician'),
        ('Administrator', 'Administrator'),
        ('Doctor', 'Doctor'),
    ]
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    phone_number = models.CharField(max_length=32)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name='staff')
    is_active = models.BooleanField(default=True, db_index=True)
    # [{"dayOfWeek": "Monday", "startTime": "09:00", "endTime": "17:00", "isAvailable": true}, ...]
    availability = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.full_name} ({self.role})"


class Shift(models.Model):
    """A staff member's working interval on one date.

    ``end_time`` earlier than ``start_time`` marks an overnight shift that
    runs past midnight into the next day.
    """
    TYPE_CHOICES = [
        ('Morning', 'Morning'),
        ('Afternoon', 'Afternoon'),
        ('Evening', 'Evening'),
        ('Night', 'Night'),
        ('Full Day', 'Full Day'),
    ]

    STATUS_SCHEDULED = 'Scheduled'
    STATUS_CONFIRMED = 'Confirmed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_COMPLETED, 'Completed'),
    ]
    CLOSED_STATUSES = (STATUS_CANCELLED, STATUS_COMPLETED)

    staff = models.ForeignKey(StaffMember, on_delete=models.CASCADE, related_name='shifts')
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='shifts')
    shift_date = models.DateField()
    shift_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    start_time = models.CharField(max_length=5)
    end_time = models.CharField(max_length=5)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED)
    notes = models.TextField(blank=True, default='')
    created_by = models.ForeignKey(
        User, null=True, on_delete=models.SET_NULL, related_name='shifts_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['staff', 'shift_date'], name='shift_staff_date_idx'),
            models.Index(fields=['department', 'shift_date'], name='shift_dept_date_idx'),
            models.Index(fields=['shift_date', 'status'], name='shift_date_status_idx'),
        ]

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time

    def __str__(self) -> str:
        return f"Shift(staff={self.staff_id}, {self.shift_date:%F} {self.start_time}-{self.end_time}, {self.status})"


class Appointment(models.Model):
    """A confirmed booking of one doctor time slot.

    Appointments have no cancellation state; the unique constraint on
    ``(doctor, date, time_slot)`` backs the booking-time collision check.
    """
    STATUS_CONFIRMED = 'Confirmed'
    STATUS_CHOICES = [(STATUS_CONFIRMED, 'Confirmed')]

    patient_ref = models.CharField(max_length=64, db_index=True)
    doctor = models.ForeignKey(
        DoctorProfile, to_field='code', on_delete=models.PROTECT, related_name='appointments'
    )
    department = models.CharField(max_length=120)
    date = models.DateField()
    time_slot = models.CharField(max_length=5)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_CONFIRMED)

    full_name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=32)
    address = models.CharField(max_length=255, blank=True)
    reason_for_visit = models.TextField(blank=True)
    preferred_language = models.CharField(max_length=32, default='English')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['doctor', 'date', 'time_slot'], name='uniq_appointment_doctor_slot'),
        ]
        indexes = [
            models.Index(fields=['patient_ref', 'date'], name='appt_patient_date_idx'),
        ]

    def __str__(self) -> str:
        return f"Appointment({self.doctor_id} {self.date:%F} {self.time_slot})"


class Payment(models.Model):
    METHOD_COVERAGE = 'Coverage'
    METHOD_CARD = 'CreditCard'
    METHOD_CASH = 'Cash'
    METHOD_CHOICES = [
        (METHOD_COVERAGE, 'Coverage'),
        (METHOD_CARD, 'Credit card'),
        (METHOD_CASH, 'Cash'),
    ]

    STATUS_PROCESSED = 'Processed'
    STATUS_PENDING = 'PendingVerification'
    STATUS_FAILED = 'Failed'
    STATUS_COVERAGE_REJECTED = 'CoverageRejected'
    STATUS_CHOICES = [
        (STATUS_PROCESSED, 'Processed'),
        (STATUS_PENDING, 'Pending verification'),
        (STATUS_FAILED, 'Failed'),
        (STATUS_COVERAGE_REJECTED, 'Coverage rejected'),
    ]

    transaction_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    method = models.CharField(max_length=16, choices=METHOD_CHOICES)
    status = models.CharField(max_length=24, choices=STATUS_CHOICES, default=STATUS_PENDING)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=['user', 'created_at'], name='payment_user_created_idx')]

    def __str__(self) -> str:
        return f"Payment({self.transaction_id}, {self.method}, {self.status})"


class CoverageApplication(models.Model):
    STATUS_PENDING = 'Pending'
    STATUS_APPROVED = 'Approved'
    STATUS_DECLINED = 'Declined'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_DECLINED, 'Declined'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='coverage_applications')
    patient_name = models.CharField(max_length=255)
    patient_email = models.CharField(max_length=254)
    policy_id = models.CharField(max_length=64)
    provider = models.CharField(max_length=120)
    coverage_type = models.CharField(max_length=64)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    admin_notes = models.TextField(blank=True, default='')
    reviewed_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='coverage_reviews'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Coverage({self.user_id}, {self.provider}, {self.status})"


class Diagnosis(models.Model):
    SEVERITY_CHOICES = [
        ('Mild', 'Mild'),
        ('Moderate', 'Moderate'),
        ('Severe', 'Severe'),
    ]
    patient_ref = models.CharField(max_length=64, db_index=True)
    patient_name = models.CharField(max_length=255)
    symptoms = models.TextField()
    diagnosis = models.TextField()
    remarks = models.TextField(blank=True, default='')
    diagnosis_date = models.DateField()
    severity = models.CharField(max_length=16, choices=SEVERITY_CHOICES)
    recorded_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='diagnoses_recorded'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'diagnoses'

    def __str__(self) -> str:
        return f"{self.patient_name}: {self.diagnosis[:30]}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.object_type}#{self.object_id}"
