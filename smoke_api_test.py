#!/usr/bin/env python3
"""
End-to-end smoke test against a running CarePoint server.

Run ``python manage.py migrate && python manage.py seed_clinic`` and
start the server first, then::

    python smoke_api_test.py [BASE_URL]

Exits non-zero when any check fails.
"""
import sys
import time
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import requests

BASE_URL = "http://127.0.0.1:8000"

ADMIN = {"username": "admin", "password": "admin12345"}
PATIENT_PASSWORD = "Smoke-Test-2024!"


@dataclass
class CheckResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    description: str = ""


class SmokeTester:
    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.headers: Dict[str, str] = {"Content-Type": "application/json"}
        self.results: List[CheckResult] = []

    def login(self, username: str, password: str) -> Optional[dict]:
        r = self.session.post(f"{self.base_url}/api/auth/login",
                              json={"username": username, "password": password})
        if r.status_code != 200:
            print(f"login failed for {username}: {r.status_code} {r.text[:200]}")
            return None
        data = r.json()
        self.headers["Authorization"] = f"Token {data['token']}"
        print(f"logged in as {username} ({data['role']})")
        return data

    def check(self, method: str, endpoint: str, data: Any = None, expected_status: int = 200,
              description: str = "", params: Optional[dict] = None) -> Optional[dict]:
        url = f"{self.base_url}{endpoint}"
        start = time.time()
        try:
            response = self.session.request(method, url, json=data, params=params, headers=self.headers)
        except requests.RequestException as e:
            result = CheckResult(False, endpoint, method, 0, time.time() - start, str(e), description)
            self.results.append(result)
            print(f"ERROR {method} {endpoint}: {e}")
            return None
        elapsed = time.time() - start
        ok = response.status_code == expected_status
        result = CheckResult(ok, endpoint, method, response.status_code, elapsed,
                             "" if ok else response.text[:200], description)
        self.results.append(result)
        print(f"{'ok  ' if ok else 'FAIL'} {method} {endpoint} -> {response.status_code} "
              f"({elapsed:.2f}s) {description}")
        try:
            return response.json()
        except ValueError:
            return None

    def run(self) -> bool:
        self.check("GET", "/healthz", description="health check")
        if not self.login(ADMIN["username"], ADMIN["password"]):
            return False

        depts = self.check("GET", "/api/departments", description="departments") or {}
        dept_id = depts["data"][0]["id"] if depts.get("data") else None
        suffix = uuid.uuid4().hex[:8]
        staff = self.check("POST", "/api/staff", {
            "firstName": "Smoke", "lastName": suffix, "email": f"smoke-{suffix}@carepoint.example",
            "phoneNumber": "+1-555-0000", "role": "Nurse", "departmentId": dept_id,
        }, 201, "create staff member") or {}
        staff_id = staff.get("data", {}).get("id")
        me = self.check("GET", "/api/auth/me", description="current user") or {}
        day = (date.today() + timedelta(days=30)).isoformat()
        shift = {
            "staffId": staff_id, "departmentId": dept_id, "shiftDate": day, "startTime": "09:00",
            "endTime": "10:00", "shiftType": "Morning", "createdBy": me.get("user", {}).get("id"),
        }
        self.check("POST", "/api/schedules", shift, 201, "create shift")
        self.check("POST", "/api/schedules", {**shift, "startTime": "10:00", "endTime": "11:00"}, 201,
                   "touching shift is allowed")
        self.check("POST", "/api/schedules", {**shift, "startTime": "09:30", "endTime": "10:30"}, 400,
                   "overlapping shift is rejected")
        self.check("GET", "/api/schedules", params={"staffId": staff_id}, description="list shifts")
        self.check("GET", "/api/admin/dashboard", description="dashboard")

        username = f"smoke{suffix}"
        self.check("POST", "/api/auth/register/patient", {
            "username": username, "password": PATIENT_PASSWORD, "email": f"{username}@example.com",
            "firstName": "Smoke", "lastName": "Patient",
        }, 201, "register patient")
        patient = self.login(username, PATIENT_PASSWORD)
        if not patient:
            return False
        slots = self.check("GET", "/api/doctors/D001/slots", params={"date": day}, description="doctor slots") or {}
        free = slots.get("data", {}).get("availableSlots") or []
        if free:
            booking = {
                "patientId": str(patient["user"]["id"]), "doctorId": "D001", "department": "Cardiology",
                "date": day, "timeSlot": free[0],
                "patientDetails": {"fullName": "Smoke Patient", "email": f"{username}@example.com",
                                   "phone": "+1-555-0001"},
            }
            self.check("POST", "/api/appointments", booking, 201, "book appointment")
            self.check("POST", "/api/appointments", booking, 409, "double booking is rejected")
        self.check("POST", "/api/payments", {"method": "Cash", "details": {"depositReference": suffix}}, 201,
                   "cash payment")
        return all(r.success for r in self.results)

    def summary(self) -> None:
        failed = [r for r in self.results if not r.success]
        print(f"\n{len(self.results) - len(failed)}/{len(self.results)} checks passed")
        for r in failed:
            print(f"  {r.method} {r.endpoint} [{r.status_code}] {r.description}: {r.error_message}")


def main() -> int:
    tester = SmokeTester(sys.argv[1] if len(sys.argv) > 1 else BASE_URL)
    ok = tester.run()
    tester.summary()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
