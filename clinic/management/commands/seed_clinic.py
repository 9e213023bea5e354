from django.contrib.auth.hashers import make_password
from django.core.cache import cache
from django.core.management.base import BaseCommand
from django.db import transaction

from clinic.models import Department, DoctorProfile, User

DEPARTMENTS = [
    ("Cardiology", "Heart and circulation"),
    ("Neurology", "Brain and nervous system"),
    ("Orthopedics", "Bones and joints"),
]

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

DOCTORS = [
    {
        "code": "D001", "first_name": "John", "last_name": "Smith", "gender": "Male",
        "phone_number": "+1-555-0101", "department": "Cardiology", "specialization": "Heart Surgery",
        "available_time_slots": ["09:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00"],
        "working_days": WEEKDAYS,
    },
    {
        "code": "D002", "first_name": "Emily", "last_name": "Johnson", "gender": "Female",
        "phone_number": "+1-555-0102", "department": "Cardiology", "specialization": "Interventional Cardiology",
        "available_time_slots": ["09:00", "10:00", "11:00", "14:00", "15:00", "16:00"],
        "working_days": ["Monday", "Wednesday", "Friday"],
    },
    {
        "code": "D003", "first_name": "Michael", "last_name": "Williams", "gender": "Male",
        "phone_number": "+1-555-0103", "department": "Neurology", "specialization": "Brain Surgery",
        "available_time_slots": ["08:00", "09:00", "10:00", "11:00", "13:00", "14:00", "15:00"],
        "working_days": ["Tuesday", "Thursday", "Friday"],
    },
    {
        "code": "D004", "first_name": "Sarah", "last_name": "Brown", "gender": "Female",
        "phone_number": "+1-555-0104", "department": "Orthopedics", "specialization": "Joint Replacement",
        "available_time_slots": ["09:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00", "17:00"],
        "working_days": WEEKDAYS,
    },
]


class Command(BaseCommand):
    help = "Create departments, the four demo doctors and an admin account (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--admin-password", default="admin12345")

    @transaction.atomic
    def handle(self, *args, **opts):
        depts = {}
        for name, description in DEPARTMENTS:
            depts[name], created = Department.objects.get_or_create(name=name, defaults={"description": description})
            self.stdout.write(f"{'created' if created else 'exists'}: department {name}")

        for row in DOCTORS:
            data = dict(row)
            code = data.pop("code")
            data["department"] = depts[data["department"]]
            data["email"] = f"{data['first_name']}.{data['last_name']}@carepoint.example".lower()
            _, created = DoctorProfile.objects.update_or_create(code=code, defaults=data)
            self.stdout.write(f"{'created' if created else 'updated'}: doctor {code}")

        admin, created = User.objects.get_or_create(
            username="admin",
            defaults={"role": User.ROLE_ADMIN, "is_staff": True,
                      "password": make_password(opts["admin_password"])},
        )
        if not created and admin.role != User.ROLE_ADMIN:
            admin.role = User.ROLE_ADMIN
            admin.save(update_fields=["role"])

        cache.delete_many(["departments:active", "doctors:active"])
        self.stdout.write(self.style.SUCCESS("Clinic data seeded."))
