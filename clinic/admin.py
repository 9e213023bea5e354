"""
Django admin registrations for the clinic models.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import (
    AuditEvent,
    Appointment,
    CoverageApplication,
    Department,
    Diagnosis,
    DoctorProfile,
    PatientProfile,
    Payment,
    Shift,
    StaffMember,
    User,
)


@admin.register(User)
class ClinicUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'is_active')
    list_filter = ('role', 'is_active')
    fieldsets = UserAdmin.fieldsets + (('Clinic', {'fields': ('role', 'phone')}),)


@admin.register(Shift)
class ShiftAdmin(admin.ModelAdmin):
    list_display = ('id', 'staff', 'department', 'shift_date', 'start_time', 'end_time', 'status')
    list_filter = ('status', 'shift_type', 'department')
    date_hierarchy = 'shift_date'


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'doctor', 'date', 'time_slot', 'full_name', 'status')
    list_filter = ('doctor',)
    search_fields = ('full_name', 'email', 'patient_ref')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('transaction_id', 'user', 'method', 'status', 'amount', 'created_at')
    list_filter = ('method', 'status')


admin.site.register(Department)
admin.site.register(PatientProfile)
admin.site.register(DoctorProfile)
admin.site.register(StaffMember)
admin.site.register(CoverageApplication)
admin.site.register(Diagnosis)
admin.site.register(AuditEvent)
