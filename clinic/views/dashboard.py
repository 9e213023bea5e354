"""
Administrative dashboard endpoint.

Gives administrators a one-call overview of today's roster and the
queues that need their attention.
"""
from __future__ import annotations

from django.db.models import Count
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Appointment, CoverageApplication, Payment, Shift
from ..permissions import IsAdminRole


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_dashboard(request):
    """Return today's shift counts by status plus pending work items."""
    today = timezone.localdate()
    by_status = {value: 0 for value, _ in Shift.STATUS_CHOICES}
    rows = Shift.objects.filter(shift_date=today).values('status').annotate(n=Count('id'))
    for row in rows:
        by_status[row['status']] = row['n']
    return Response({
        'ok': True,
        'date': today.isoformat(),
        'shiftsToday': by_status,
        'upcomingAppointments': Appointment.objects.filter(date__gte=today).count(),
        'pendingCoverage': CoverageApplication.objects.filter(status=CoverageApplication.STATUS_PENDING).count(),
        'cashAwaitingVerification': Payment.objects.filter(
            method=Payment.METHOD_CASH, status=Payment.STATUS_PENDING
        ).count(),
    })
