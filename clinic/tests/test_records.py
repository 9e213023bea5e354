"""
Departments, staff registry, diagnoses, dashboard, health check and the
management commands.
"""
from datetime import date, timedelta

from django.core.management import call_command
from django.utils import timezone
from rest_framework.test import APIClient, APITestCase

from clinic.models import Department, Diagnosis, DoctorProfile, Shift, StaffMember, User


class RegistryTests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username='reg_admin', password='P@ssw0rd-2024', role='admin')
        self.doctor = User.objects.create_user(username='reg_doc', password='P@ssw0rd-2024', role='doctor')
        self.patient = User.objects.create_user(username='reg_pt', password='P@ssw0rd-2024', role='patient')
        self.dept = Department.objects.create(name='Neurology')

    def as_user(self, user) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def test_departments_list_and_create(self):
        admin = self.as_user(self.admin)
        self.assertEqual([d['name'] for d in admin.get('/api/departments').data['data']], ['Neurology'])
        r = admin.post('/api/departments', {'name': 'Orthopedics'}, format='json')
        self.assertEqual(r.status_code, 201)
        # cached list is invalidated on create
        self.assertEqual(len(admin.get('/api/departments').data['data']), 2)
        self.assertEqual(admin.post('/api/departments', {'name': 'orthopedics'}, format='json').status_code, 400)
        self.assertEqual(self.as_user(self.patient).post('/api/departments', {'name': 'X'}, format='json')
                         .status_code, 403)

    def test_staff_crud_and_soft_delete(self):
        admin = self.as_user(self.admin)
        body = {
            'firstName': 'Eve', 'lastName': 'Stone', 'email': 'Eve@Carepoint.example',
            'phoneNumber': '+1-555-0500', 'role': 'Nurse', 'departmentId': self.dept.id,
            'availability': [{'dayOfWeek': 'Monday', 'startTime': '08:00', 'endTime': '16:00'}],
        }
        r = admin.post('/api/staff', body, format='json')
        self.assertEqual(r.status_code, 201)
        staff_id = r.data['data']['id']
        self.assertEqual(r.data['data']['email'], 'eve@carepoint.example')
        self.assertTrue(r.data['data']['availability'][0]['isAvailable'])
        self.assertEqual(admin.post('/api/staff', body, format='json').status_code, 400)
        self.assertEqual(admin.post('/api/staff', {**body, 'email': 'x@carepoint.example', 'role': 'Janitor'},
                                    format='json').status_code, 400)

        r = admin.put(f'/api/staff/{staff_id}', {'role': 'Manager'}, format='json')
        self.assertEqual(r.data['data']['role'], 'Manager')
        self.assertEqual(len(admin.get(f'/api/staff/department/{self.dept.id}').data['data']), 1)

        self.assertEqual(admin.delete(f'/api/staff/{staff_id}').status_code, 200)
        self.assertFalse(StaffMember.objects.get(pk=staff_id).is_active)
        self.assertEqual(admin.get('/api/staff').data['data'], [])
        self.assertEqual(self.as_user(self.patient).post('/api/staff', body, format='json').status_code, 403)

    def test_diagnoses_are_clinician_only_and_sanitised(self):
        doc = self.as_user(self.doctor)
        body = {
            'patientId': str(self.patient.pk), 'patientName': 'Reg Patient',
            'symptoms': '<script>alert(1)</script>headache', 'diagnosis': 'Migraine',
            'diagnosisDate': '2024-06-05', 'severity': 'Moderate',
        }
        r = doc.post('/api/diagnoses', body, format='json')
        self.assertEqual(r.status_code, 201)
        self.assertNotIn('<script>', r.data['data']['symptoms'])
        self.assertEqual(r.data['data']['recordedBy'], 'reg_doc')
        diag_id = r.data['data']['id']

        self.assertEqual(doc.post('/api/diagnoses', {**body, 'severity': 'Deadly'}, format='json').status_code, 400)
        r = doc.put(f'/api/diagnoses/{diag_id}', {'severity': 'Severe'}, format='json')
        self.assertEqual(r.data['data']['severity'], 'Severe')
        listing = doc.get('/api/diagnoses', {'patientId': str(self.patient.pk)})
        self.assertEqual(len(listing.data['data']), 1)

        self.assertEqual(self.as_user(self.patient).get('/api/diagnoses').status_code, 403)
        self.assertEqual(self.as_user(self.admin).delete(f'/api/diagnoses/{diag_id}').status_code, 200)
        self.assertFalse(Diagnosis.objects.exists())

    def test_free_text_keeps_no_markup_at_all(self):
        r = self.as_user(self.doctor).post('/api/diagnoses', {
            'patientId': str(self.patient.pk), 'patientName': 'Reg Patient',
            'symptoms': '<strong>sharp</strong> <a href="http://x.example">pain</a>',
            'diagnosis': '<b>Migraine</b>', 'diagnosisDate': '2024-06-05', 'severity': 'Mild',
        }, format='json')
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.data['data']['symptoms'], 'sharp pain')
        self.assertEqual(r.data['data']['diagnosis'], 'Migraine')

    def test_deactivating_staff_cancels_open_future_shifts(self):
        member = StaffMember.objects.create(
            first_name='Lu', last_name='Ma', email='lu@carepoint.example', phone_number='1',
            role='Nurse', department=self.dept,
        )
        today = timezone.localdate()

        def shift(day, **extra):
            return Shift.objects.create(staff=member, department=self.dept, shift_date=day,
                                        start_time='08:00', end_time='12:00', shift_type='Morning', **extra)

        past = shift(today - timedelta(days=2))
        upcoming = shift(today + timedelta(days=1))
        confirmed = shift(today + timedelta(days=3), status='Confirmed')
        done = shift(today + timedelta(days=4), status='Completed')

        r = self.as_user(self.admin).delete(f'/api/staff/{member.id}')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['cancelledShifts'], [upcoming.id, confirmed.id])
        statuses = dict(Shift.objects.values_list('id', 'status'))
        self.assertEqual(statuses[upcoming.id], 'Cancelled')
        self.assertEqual(statuses[confirmed.id], 'Cancelled')
        self.assertEqual(statuses[past.id], 'Scheduled')
        self.assertEqual(statuses[done.id], 'Completed')
        self.assertFalse(StaffMember.objects.get(pk=member.id).is_active)

    def test_dashboard_counts(self):
        member = StaffMember.objects.create(
            first_name='Al', last_name='Bo', email='al@carepoint.example', phone_number='1',
            role='Nurse', department=self.dept,
        )
        today = timezone.localdate()
        Shift.objects.create(staff=member, department=self.dept, shift_date=today,
                             start_time='08:00', end_time='12:00', shift_type='Morning')
        Shift.objects.create(staff=member, department=self.dept, shift_date=today,
                             start_time='13:00', end_time='17:00', shift_type='Afternoon', status='Confirmed')
        r = self.as_user(self.admin).get('/api/admin/dashboard')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['shiftsToday']['Scheduled'], 1)
        self.assertEqual(r.data['shiftsToday']['Confirmed'], 1)
        self.assertEqual(r.data['shiftsToday']['Cancelled'], 0)
        self.assertEqual(r.data['pendingCoverage'], 0)
        self.assertEqual(self.as_user(self.doctor).get('/api/admin/dashboard').status_code, 403)

    def test_healthz(self):
        r = self.client.get('/healthz')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'ok': True, 'db': True})


class CommandTests(APITestCase):
    def test_seed_clinic_is_idempotent(self):
        call_command('seed_clinic')
        call_command('seed_clinic')
        self.assertEqual(Department.objects.count(), 3)
        self.assertEqual(list(DoctorProfile.objects.order_by('code').values_list('code', flat=True)),
                         ['D001', 'D002', 'D003', 'D004'])
        self.assertEqual(DoctorProfile.objects.get(code='D003').department.name, 'Neurology')
        self.assertEqual(User.objects.get(username='admin').role, 'admin')

    def test_clear_schedules_before_date(self):
        dept = Department.objects.create(name='Lab')
        member = StaffMember.objects.create(first_name='Q', last_name='R', email='q@carepoint.example',
                                            phone_number='1', role='Technician', department=dept)
        for day in ('2024-01-01', '2024-03-01'):
            Shift.objects.create(staff=member, department=dept, shift_date=day,
                                 start_time='08:00', end_time='12:00', shift_type='Morning')
        call_command('clear_schedules', before='2024-02-01')
        self.assertEqual(list(Shift.objects.values_list('shift_date', flat=True)),
                         [date(2024, 3, 1)])
