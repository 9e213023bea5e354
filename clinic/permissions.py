"""
Role based permission classes.
"""
from rest_framework.permissions import BasePermission

ADMIN_ROLES = {"admin"}
CLINICIAN_ROLES = {"doctor", "admin"}
SCHEDULER_ROLES = {"admin", "staff"}


def has_role(user, roles) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "role", None) in roles)


class IsAdminRole(BasePermission):
    """Allow access only to administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return has_role(getattr(request, "user", None), ADMIN_ROLES)


class IsPatientRole(BasePermission):
    """Allow access only to users with the patient role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return has_role(getattr(request, "user", None), {"patient"})


class IsClinician(BasePermission):
    """Doctors and administrators (diagnosis records, doctor agendas)."""
    def has_permission(self, request, view) -> bool:
        return has_role(getattr(request, "user", None), CLINICIAN_ROLES)


class IsScheduler(BasePermission):
    """Administrators and staff may write the shift roster; everyone signed in may read it."""
    def has_permission(self, request, view) -> bool:
        if request.method in ("GET", "HEAD", "OPTIONS"):
            user = getattr(request, "user", None)
            return bool(user and user.is_authenticated)
        return has_role(getattr(request, "user", None), SCHEDULER_ROLES)
