"""
Staff shift roster: conflict detection, writes and status changes.

Every write that can change who works when (create, reschedule) runs the
conflict scan and the insert/update in one transaction after locking the
staff member's row, so two concurrent requests for the same person are
serialised on databases that support ``SELECT ... FOR UPDATE``.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import DatabaseError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from clinic.exceptions import InvalidTransition, ShiftConflict, StorageUnavailable
from clinic.models import Shift, StaffMember, User
from clinic.services import intervals
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)

UPDATES_GROUP = 'schedules'

TRANSITIONS = {
    Shift.STATUS_SCHEDULED: {Shift.STATUS_CONFIRMED, Shift.STATUS_CANCELLED},
    Shift.STATUS_CONFIRMED: {Shift.STATUS_COMPLETED, Shift.STATUS_CANCELLED},
    Shift.STATUS_COMPLETED: set(),
    Shift.STATUS_CANCELLED: set(),
}

TIMING_FIELDS = ('staff', 'shift_date', 'start_time', 'end_time')


def can_transition(current: str, new: str) -> bool:
    return new in TRANSITIONS.get(current, set())


def _active_shifts_near(staff_id, shift_date: date, exclude_id=None):
    # an overnight shift from the previous day can spill into shift_date,
    # and an overnight candidate spills into the next day
    qs = (
        Shift.objects
        .filter(
            staff_id=staff_id,
            shift_date__range=(shift_date - timedelta(days=1), shift_date + timedelta(days=1)),
        )
        .exclude(status=Shift.STATUS_CANCELLED)
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.order_by('shift_date', 'start_time', 'id')


def find_shift_conflict(staff_id, shift_date: date, start_time: str, end_time: str, *,
                        exclude_id=None) -> Optional[Shift]:
    """Return the first non-cancelled shift of ``staff_id`` overlapping the range, or None.

    A zero-length range never conflicts.  Storage failures raise
    :class:`StorageUnavailable`; they are never reported as "no conflict".
    """
    candidate = intervals.segments(shift_date, start_time, end_time)
    if not candidate:
        return None
    try:
        existing = list(_active_shifts_near(staff_id, shift_date, exclude_id))
    except DatabaseError as exc:
        logger.error('Conflict lookup failed for staff %s on %s: %s', staff_id, shift_date, exc)
        raise StorageUnavailable() from exc
    for shift in existing:
        if intervals.segments_conflict(candidate, intervals.segments(shift.shift_date, shift.start_time, shift.end_time)):
            return shift
    return None


def _lock_staff(staff_id) -> None:
    list(StaffMember.objects.select_for_update().filter(pk=staff_id).values_list('pk', flat=True))


def _ensure_free(staff_id, shift_date, start_time, end_time, exclude_id=None) -> None:
    conflict = find_shift_conflict(staff_id, shift_date, start_time, end_time, exclude_id=exclude_id)
    if conflict is not None:
        logger.info(
            'Shift conflict: staff %s %s %s-%s overlaps shift %s',
            staff_id, shift_date, start_time, end_time, conflict.id,
        )
        raise ShiftConflict(conflict)


def create_shift(*, staff: StaffMember, department, shift_date: date, start_time: str, end_time: str,
                 shift_type: str, created_by: User, notes: str = '',
                 status: str = Shift.STATUS_SCHEDULED, actor: Optional[User] = None) -> Shift:
    if intervals.is_empty(start_time, end_time):
        raise ValidationError({'endTime': ['endTime must differ from startTime']})
    try:
        with transaction.atomic():
            _lock_staff(staff.pk)
            _ensure_free(staff.pk, shift_date, start_time, end_time)
            shift = Shift.objects.create(
                staff=staff,
                department=department,
                shift_date=shift_date,
                start_time=start_time,
                end_time=end_time,
                shift_type=shift_type,
                status=status,
                notes=notes,
                created_by=created_by,
            )
            log_action(user=actor, action='shift_create', object_type='shift', object_id=shift.id,
                       detail={'staffId': staff.pk, 'shiftDate': shift_date.isoformat(),
                               'startTime': start_time, 'endTime': end_time})
            _broadcast_on_commit('created', shift)
    except DatabaseError as exc:
        logger.error('Could not create shift for staff %s: %s', staff.pk, exc)
        raise StorageUnavailable() from exc
    logger.info('Shift %s created for staff %s on %s', shift.id, staff.pk, shift_date)
    return shift


def update_shift(shift: Shift, changes: dict, *, actor: Optional[User] = None) -> Shift:
    """Apply a partial update.

    Changing staff, date or times re-runs the conflict scan against every
    other shift of the (possibly new) staff member, excluding this one.
    A status in ``changes`` must be a legal transition.
    """
    changes = dict(changes)
    new_status = changes.pop('status', None)
    retimed = any(f in changes for f in TIMING_FIELDS)

    if retimed and shift.status in Shift.CLOSED_STATUSES:
        raise InvalidTransition(f'A {shift.status.lower()} shift cannot be rescheduled')
    if new_status is not None and new_status != shift.status and not can_transition(shift.status, new_status):
        raise InvalidTransition(f'Cannot change shift status from {shift.status} to {new_status}')

    for field, value in changes.items():
        setattr(shift, field, value)
    if new_status is not None:
        shift.status = new_status

    if retimed and intervals.is_empty(shift.start_time, shift.end_time):
        raise ValidationError({'endTime': ['endTime must differ from startTime']})

    try:
        with transaction.atomic():
            if retimed and shift.status != Shift.STATUS_CANCELLED:
                _lock_staff(shift.staff_id)
                _ensure_free(shift.staff_id, shift.shift_date, shift.start_time, shift.end_time, exclude_id=shift.pk)
            shift.save()
            log_action(user=actor, action='shift_update', object_type='shift', object_id=shift.id,
                       detail={'fields': sorted(changes) + (['status'] if new_status else [])})
            _broadcast_on_commit('updated', shift)
    except DatabaseError as exc:
        logger.error('Could not update shift %s: %s', shift.pk, exc)
        raise StorageUnavailable() from exc
    return shift


def transition_shift(shift: Shift, new_status: str, *, actor: Optional[User] = None) -> Shift:
    if not can_transition(shift.status, new_status):
        raise InvalidTransition(f'Cannot change shift status from {shift.status} to {new_status}')
    previous = shift.status
    shift.status = new_status
    try:
        with transaction.atomic():
            shift.save(update_fields=['status', 'updated_at'])
            log_action(user=actor, action='shift_status', object_type='shift', object_id=shift.id,
                       detail={'from': previous, 'to': new_status})
            _broadcast_on_commit('status', shift)
    except DatabaseError as exc:
        shift.status = previous
        logger.error('Could not change status of shift %s: %s', shift.pk, exc)
        raise StorageUnavailable() from exc
    logger.info('Shift %s: %s -> %s', shift.id, previous, new_status)
    return shift


def delete_shift(shift: Shift, *, actor: Optional[User] = None) -> None:
    shift_id = shift.id
    payload = shift_event_payload(shift)
    try:
        with transaction.atomic():
            shift.delete()
            log_action(user=actor, action='shift_delete', object_type='shift', object_id=shift_id, detail=payload)
            transaction.on_commit(lambda: broadcast('deleted', payload), robust=True)
    except DatabaseError as exc:
        logger.error('Could not delete shift %s: %s', shift_id, exc)
        raise StorageUnavailable() from exc


def deactivate_staff(member: StaffMember, *, actor: Optional[User] = None) -> list:
    """Soft-delete a staff member and cancel their open shifts from today on.

    Returns the ids of the cancelled shifts.
    """
    today = timezone.localdate()
    try:
        with transaction.atomic():
            _lock_staff(member.pk)
            open_shifts = list(
                Shift.objects
                .select_for_update()
                .filter(staff_id=member.pk, shift_date__gte=today)
                .exclude(status__in=Shift.CLOSED_STATUSES)
                .order_by('shift_date', 'start_time')
            )
            for shift in open_shifts:
                shift.status = Shift.STATUS_CANCELLED
                shift.save(update_fields=['status', 'updated_at'])
                _broadcast_on_commit('status', shift)
            member.is_active = False
            member.save(update_fields=['is_active'])
            cancelled = [s.id for s in open_shifts]
            log_action(user=actor, action='staff_deactivate', object_type='staff', object_id=member.id,
                       detail={'cancelledShifts': cancelled})
    except DatabaseError as exc:
        logger.error('Could not deactivate staff %s: %s', member.pk, exc)
        raise StorageUnavailable() from exc
    logger.info('Staff %s deactivated, %d shift(s) cancelled', member.pk, len(cancelled))
    return cancelled


def available_staff(shift_date: date, start_time: str, end_time: str, department_id=None):
    """Active staff with no non-cancelled shift overlapping the range."""
    busy = set()
    nearby = (
        Shift.objects
        .filter(shift_date__range=(shift_date - timedelta(days=1), shift_date + timedelta(days=1)))
        .exclude(status=Shift.STATUS_CANCELLED)
        .only('staff_id', 'shift_date', 'start_time', 'end_time')
    )
    for shift in nearby:
        if intervals.ranges_conflict(shift_date, start_time, end_time,
                                     shift.shift_date, shift.start_time, shift.end_time):
            busy.add(shift.staff_id)
    qs = StaffMember.objects.filter(is_active=True).select_related('department')
    if department_id:
        qs = qs.filter(department_id=department_id)
    if busy:
        qs = qs.exclude(pk__in=busy)
    return qs.order_by('first_name', 'last_name')


# ---------------------------------------------------------------------------
# WebSocket notifications
# ---------------------------------------------------------------------------

def shift_event_payload(shift: Shift) -> dict:
    return {
        'id': shift.id,
        'staffId': shift.staff_id,
        'departmentId': shift.department_id,
        'shiftDate': shift.shift_date.isoformat(),
        'startTime': shift.start_time,
        'endTime': shift.end_time,
        'status': shift.status,
    }


def broadcast(action: str, payload: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(
        UPDATES_GROUP, {'type': 'schedule.changed', 'action': action, 'shift': payload}
    )


def _broadcast_on_commit(action: str, shift: Shift) -> None:
    payload = shift_event_payload(shift)
    transaction.on_commit(lambda: broadcast(action, payload), robust=True)
