"""
API tests: role checks, JSON error rendering and the request → service wiring.
"""

import json
from datetime import date

from django.test import TestCase
from django.urls import reverse

from apps.scheduling.models import LeaveRequest, Shift, ShiftAssignment

from .factories import future_date, make_assignment, make_head_nurse, make_leave_request, make_shift, make_user


class ApiTestCase(TestCase):

    def setUp(self):
        self.head = make_head_nurse()
        self.nurse = make_user()

    def send(self, method, url, payload=None, user=None):
        if user is not None:
            self.client.force_login(user)
        kwargs = {}
        if payload is not None:
            kwargs = {"data": json.dumps(payload), "content_type": "application/json"}
        return getattr(self.client, method)(url, **kwargs)


class ShiftApiTests(ApiTestCase):

    def test_head_nurse_creates_shift(self):
        response = self.send("post", reverse("scheduling:shifts"), {
            "date": future_date().isoformat(),
            "start_time": "07:00",
            "end_time": "15:00",
            "shift_type": "morning",
            "required_nurses": 2,
        }, user=self.head)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["remaining_slots"], 2)

    def test_nurse_cannot_create_shift(self):
        response = self.send("post", reverse("scheduling:shifts"), {"date": "2030-01-01"}, user=self.nurse)
        self.assertEqual(response.status_code, 403)
        self.assertFalse(Shift.objects.exists())

    def test_conflicting_shift_is_409(self):
        shift = make_shift()
        response = self.send("post", reverse("scheduling:shifts"), {
            "date": shift.date.isoformat(),
            "start_time": "09:00",
            "end_time": "12:00",
            "shift_type": "afternoon",
            "department": shift.department,
        }, user=self.head)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "shift_conflict")

    def test_list_with_filters(self):
        make_shift(on=date(2030, 1, 1))
        make_shift(on=date(2030, 1, 2), department="ICU")
        response = self.send("get", reverse("scheduling:shifts") + "?department=ICU", user=self.nurse)
        shifts = response.json()["shifts"]
        self.assertEqual(len(shifts), 1)
        self.assertEqual(shifts[0]["date"], "2030-01-02")

    def test_bad_date_filter(self):
        response = self.send("get", reverse("scheduling:shifts") + "?start_date=soon", user=self.nurse)
        self.assertEqual(response.status_code, 400)

    def test_detail_update_delete(self):
        shift = make_shift(required_nurses=2)
        make_assignment(self.nurse, shift)
        url = reverse("scheduling:shift_detail", args=[shift.pk])

        detail = self.send("get", url, user=self.nurse).json()
        self.assertEqual(detail["assigned_count"], 1)
        self.assertEqual(detail["assignments"][0]["user_id"], self.nurse.pk)

        updated = self.send("put", url, {"required_nurses": 3}, user=self.head)
        self.assertEqual(updated.json()["remaining_slots"], 2)

        self.assertEqual(self.send("delete", url, user=self.head).status_code, 204)
        self.assertEqual(self.send("get", url).status_code, 404)

    def test_unauthenticated(self):
        response = self.client.get(reverse("scheduling:shifts"))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "unauthenticated")


class AssignmentApiTests(ApiTestCase):

    def test_propose_and_full(self):
        shift = make_shift(required_nurses=1)
        url = reverse("scheduling:assignments")

        created = self.send("post", url, {"user_id": self.nurse.pk, "shift_id": shift.pk}, user=self.head)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["status"], "assigned")

        full = self.send("post", url, {"user_id": make_user().pk, "shift_id": shift.pk})
        self.assertEqual(full.status_code, 409)
        self.assertEqual(full.json()["error"], "shift_full")

    def test_inactive_nurse_is_400(self):
        inactive = make_user(is_active=False)
        response = self.send(
            "post", reverse("scheduling:assignments"), {"user_id": inactive.pk, "shift_id": make_shift().pk}, user=self.head
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "inactive_nurse")

    def test_unknown_shift_is_404(self):
        response = self.send(
            "post", reverse("scheduling:assignments"), {"user_id": self.nurse.pk, "shift_id": 9999}, user=self.head
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "not_found", "message": "Shift not found."})

    def test_nurse_sees_only_own_assignments(self):
        make_assignment(self.nurse, make_shift(on=date(2030, 1, 1)))
        make_assignment(make_user(), make_shift(on=date(2030, 1, 2)))
        response = self.send("get", reverse("scheduling:assignments"), user=self.nurse)
        self.assertEqual([a["user_id"] for a in response.json()["assignments"]], [self.nurse.pk])

    def test_patch_status(self):
        assignment = make_assignment(self.nurse, make_shift())
        url = reverse("scheduling:assignment_detail", args=[assignment.pk])

        on_leave = self.send("patch", url, {"status": "on_leave"}, user=self.head)
        self.assertEqual(on_leave.status_code, 400)

        completed = self.send("patch", url, {"status": "completed"})
        self.assertEqual(completed.json()["status"], "completed")

        back = self.send("patch", url, {"status": "assigned"})
        self.assertEqual(back.status_code, 400)
        self.assertEqual(back.json()["error"], "invalid_transition")

    def test_nurse_cannot_patch_or_delete(self):
        assignment = make_assignment(self.nurse, make_shift())
        url = reverse("scheduling:assignment_detail", args=[assignment.pk])
        self.assertEqual(self.send("patch", url, {"status": "completed"}, user=self.nurse).status_code, 403)
        self.assertEqual(self.send("delete", url).status_code, 403)

    def test_delete(self):
        assignment = make_assignment(self.nurse, make_shift())
        url = reverse("scheduling:assignment_detail", args=[assignment.pk])
        self.assertEqual(self.send("delete", url, user=self.head).status_code, 204)
        self.assertFalse(ShiftAssignment.objects.exists())


class LeaveRequestApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.assignment = make_assignment(self.nurse, make_shift(on=future_date(5)))

    def submit(self, reason="Family emergency"):
        return self.send(
            "post",
            reverse("scheduling:leave_requests"),
            {"shift_assignment_id": self.assignment.pk, "reason": reason},
            user=self.nurse,
        )

    def test_submit_then_duplicate(self):
        first = self.submit()
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["status"], "pending")

        second = self.submit("Again")
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.json()["error"], "duplicate_active_request")

    def test_not_owner_is_403(self):
        response = self.send(
            "post",
            reverse("scheduling:leave_requests"),
            {"shift_assignment_id": self.assignment.pk, "reason": "Mine now"},
            user=make_user(),
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "not_owner")

    def test_head_nurse_cannot_submit(self):
        response = self.send(
            "post",
            reverse("scheduling:leave_requests"),
            {"shift_assignment_id": self.assignment.pk, "reason": "x"},
            user=self.head,
        )
        self.assertEqual(response.status_code, 403)

    def test_approve_flow(self):
        request_id = self.submit().json()["id"]
        url = reverse("scheduling:leave_request_resolve", args=[request_id])

        approved = self.send("patch", url, {"status": "approved", "admin_notes": "Covered"}, user=self.head)
        self.assertEqual(approved.status_code, 200)
        self.assertEqual(approved.json()["approved_by"]["id"], self.head.pk)
        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.status, ShiftAssignment.Status.ON_LEAVE)

        again = self.send("patch", url, {"status": "rejected"})
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.json()["error"], "already_processed")

    def test_invalid_json(self):
        self.client.force_login(self.nurse)
        response = self.client.post(
            reverse("scheduling:leave_requests"), data="{not json", content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "validation_error")

    def test_list_filters(self):
        make_leave_request(self.assignment, status=LeaveRequest.Status.REJECTED)
        other = make_assignment(make_user(), make_shift(on=future_date(6)))
        make_leave_request(other)

        pending = self.send("get", reverse("scheduling:leave_requests") + "?status=pending", user=self.head)
        self.assertEqual([r["shift_assignment_id"] for r in pending.json()["leave_requests"]], [other.pk])

        by_nurse = self.send("get", reverse("scheduling:leave_requests") + f"?requested_by={self.nurse.pk}")
        self.assertEqual(len(by_nurse.json()["leave_requests"]), 1)

        bad = self.send("get", reverse("scheduling:leave_requests") + "?status=done")
        self.assertEqual(bad.status_code, 400)

    def test_pending_queue(self):
        self.submit()
        response = self.send("get", reverse("scheduling:pending_leave_requests"), user=self.head)
        self.assertEqual(len(response.json()["leave_requests"]), 1)

    def test_mine_edit_and_cancel(self):
        request_id = self.submit().json()["id"]

        mine = self.send("get", reverse("scheduling:my_leave_requests"))
        self.assertEqual([r["id"] for r in mine.json()["leave_requests"]], [request_id])

        detail_url = reverse("scheduling:leave_request_detail", args=[request_id])
        edited = self.send("put", detail_url, {"reason": "Updated"})
        self.assertEqual(edited.json()["reason"], "Updated")

        self.assertEqual(self.send("get", detail_url, user=make_user()).status_code, 403)

        self.assertEqual(self.send("delete", detail_url, user=self.nurse).status_code, 204)
        self.assertFalse(LeaveRequest.objects.exists())


class MyScheduleApiTests(ApiTestCase):

    def test_schedule_range_and_summary(self):
        make_assignment(self.nurse, make_shift(on=date(2024, 1, 15)))
        make_assignment(
            self.nurse, make_shift(on=date(2024, 1, 16)), status=ShiftAssignment.Status.COMPLETED
        )
        response = self.send(
            "get", reverse("scheduling:my_schedule") + "?start_date=2024-01-01&end_date=2024-01-31", user=self.nurse
        )
        payload = response.json()
        self.assertEqual(payload["summary"]["total"], 2)
        self.assertEqual(payload["summary"]["completed"], 1)
        self.assertEqual(payload["summary"]["date_range"], {"start": "2024-01-01", "end": "2024-01-31"})
        self.assertEqual(list(payload["grouped_by_date"]), ["2024-01-15", "2024-01-16"])

    def test_status_filter_validation(self):
        response = self.send("get", reverse("scheduling:my_schedule") + "?status=late", user=self.nurse)
        self.assertEqual(response.status_code, 400)

    def test_head_nurse_has_no_personal_schedule(self):
        self.assertEqual(self.send("get", reverse("scheduling:my_schedule"), user=self.head).status_code, 403)

    def test_upcoming_today_and_week(self):
        make_assignment(self.nurse, make_shift(on=future_date(1)))
        upcoming = self.send("get", reverse("scheduling:my_upcoming") + "?limit=5", user=self.nurse)
        self.assertEqual(len(upcoming.json()["upcoming"]), 1)

        today = self.send("get", reverse("scheduling:my_today"))
        self.assertEqual(today.json()["total"], 0)

        week = self.send("get", reverse("scheduling:my_week")).json()
        self.assertEqual(len(week["grouped_by_date"]), 7)


class MalformedInputTests(ApiTestCase):

    def assert_validation_error(self, response):
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "validation_error")

    def test_non_numeric_ids_in_body(self):
        shift = make_shift()
        url = reverse("scheduling:assignments")
        self.assert_validation_error(self.send("post", url, {"user_id": "abc", "shift_id": shift.pk}, user=self.head))
        self.assert_validation_error(self.send("post", url, {"user_id": self.nurse.pk, "shift_id": {"id": 1}}))
        self.assertFalse(ShiftAssignment.objects.exists())

    def test_non_numeric_ids_in_query(self):
        self.client.force_login(self.head)
        self.assert_validation_error(self.client.get(reverse("scheduling:assignments"), {"user_id": "abc"}))
        self.assert_validation_error(self.client.get(reverse("scheduling:assignments"), {"shift_id": "1.5"}))
        self.assert_validation_error(self.client.get(reverse("scheduling:leave_requests"), {"requested_by": "me"}))

    def test_non_text_reason_and_notes(self):
        assignment = make_assignment(self.nurse, make_shift(on=future_date(5)))
        submitted = self.send(
            "post",
            reverse("scheduling:leave_requests"),
            {"shift_assignment_id": assignment.pk, "reason": 5},
            user=self.nurse,
        )
        self.assert_validation_error(submitted)
        self.assertFalse(LeaveRequest.objects.exists())

        patched = self.send(
            "patch", reverse("scheduling:assignment_detail", args=[assignment.pk]), {"notes": 7}, user=self.head
        )
        self.assert_validation_error(patched)


class HealthCheckTests(TestCase):

    def test_health(self):
        response = self.client.get("/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
