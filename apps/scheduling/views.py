"""
Scheduling API views for WardRoster.

JSON in, JSON out. Each view checks the caller's role through a mixin, hands
an authorised actor to the service layer and serialises the result. Domain
errors propagate to core.middleware.SchedulingErrorMiddleware.

View inventory:
  ShiftCollectionView          → GET list (staff), POST create (head nurse)
  ShiftDetailView              → GET (staff), PUT / DELETE (head nurse)
  AssignmentCollectionView     → GET list (staff; nurses see their own), POST propose (head nurse)
  AssignmentDetailView         → PATCH status/notes, DELETE (head nurse)
  LeaveRequestCollectionView   → POST submit (nurse), GET filtered list (head nurse)
  MyLeaveRequestsView          → GET own requests (nurse)
  PendingLeaveRequestsView     → GET the review queue (head nurse)
  LeaveRequestDetailView       → GET, PUT edit reason, DELETE cancel (owner or head nurse)
  LeaveRequestResolveView      → PATCH approve/reject (head nurse)
  MyScheduleView               → GET schedule for a date range (nurse)
  MyTodayView                  → GET today's active shifts (nurse)
  MyWeekView                   → GET this Sunday-to-Saturday week, day by day (nurse)
  MyUpcomingShiftsView         → GET next assigned shifts (nurse)
"""

import logging

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.dateparse import parse_date
from django.views import View

from apps.accounts.models import User
from apps.scheduling.models import LeaveRequest, Shift, ShiftAssignment
from apps.scheduling.schedule import by_day
from apps.scheduling.serializers import (
    serialize_assignment,
    serialize_leave_request,
    serialize_schedule,
    serialize_shift,
)
from apps.scheduling.services import (
    LeaveRequestService,
    ScheduleService,
    ShiftAssignmentService,
    ShiftService,
)
from core.exceptions import NotFoundError, NotOwner, ValidationError
from core.http import get_text, parse_id, parse_json_body
from core.permissions import HeadNurseRequiredMixin, NurseRequiredMixin, StaffRequiredMixin

logger = logging.getLogger(__name__)

HEAD_NURSE_ONLY = [User.Role.HEAD_NURSE]


def _parse_date_param(request: HttpRequest, name: str):
    raw = request.GET.get(name)
    if not raw:
        return None
    try:
        parsed = parse_date(raw)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{name} must be a date in YYYY-MM-DD format.")
    return parsed


# ---------------------------------------------------------------------------
# Shifts
# ---------------------------------------------------------------------------


class ShiftCollectionView(StaffRequiredMixin, View):
    method_roles = {"POST": HEAD_NURSE_ONLY}

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        List shifts with their fill level.

        Query params: date, start_date, end_date, department, shift_type.
        """
        shifts = Shift.objects.prefetch_related("assignments").order_by("date", "start_time")

        on_date = _parse_date_param(request, "date")
        start = _parse_date_param(request, "start_date")
        end = _parse_date_param(request, "end_date")
        if on_date:
            shifts = shifts.filter(date=on_date)
        if start:
            shifts = shifts.filter(date__gte=start)
        if end:
            shifts = shifts.filter(date__lte=end)
        if request.GET.get("department"):
            shifts = shifts.filter(department=request.GET["department"])
        if request.GET.get("shift_type"):
            shifts = shifts.filter(shift_type=request.GET["shift_type"])

        return JsonResponse({
            "shifts": [serialize_shift(s, s.assignments.all()) for s in shifts],
        })

    def post(self, request: HttpRequest) -> JsonResponse:
        shift = ShiftService.create(request.user, parse_json_body(request))
        return JsonResponse(serialize_shift(shift, []), status=201)


class ShiftDetailView(StaffRequiredMixin, View):
    method_roles = {"PUT": HEAD_NURSE_ONLY, "DELETE": HEAD_NURSE_ONLY}

    def get(self, request: HttpRequest, pk: int) -> JsonResponse:
        shift = Shift.objects.filter(pk=pk).first()
        if shift is None:
            raise NotFoundError("Shift not found.")
        assignments = list(shift.assignments.select_related("shift"))
        data = serialize_shift(shift, assignments)
        data["assignments"] = [serialize_assignment(a, include_shift=False) for a in assignments]
        return JsonResponse(data)

    def put(self, request: HttpRequest, pk: int) -> JsonResponse:
        shift = ShiftService.update(request.user, pk, parse_json_body(request))
        return JsonResponse(serialize_shift(shift, shift.assignments.all()))

    def delete(self, request: HttpRequest, pk: int) -> HttpResponse:
        ShiftService.delete(request.user, pk)
        return HttpResponse(status=204)


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


class AssignmentCollectionView(StaffRequiredMixin, View):
    method_roles = {"POST": HEAD_NURSE_ONLY}

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        List assignments. Head nurses may filter by shift_id, user_id and
        status; nurses only ever see their own.
        """
        qs = ShiftAssignment.objects.select_related("shift").order_by("shift__date", "shift__start_time")
        if request.user.is_head_nurse:
            if request.GET.get("user_id"):
                qs = qs.filter(user_id=parse_id(request.GET["user_id"], "user_id"))
        else:
            qs = qs.filter(user=request.user)
        if request.GET.get("shift_id"):
            qs = qs.filter(shift_id=parse_id(request.GET["shift_id"], "shift_id"))
        if request.GET.get("status"):
            qs = qs.filter(status=request.GET["status"])

        return JsonResponse({"assignments": [serialize_assignment(a) for a in qs]})

    def post(self, request: HttpRequest) -> JsonResponse:
        data = parse_json_body(request)
        assignment = ShiftAssignmentService.propose(
            request.user,
            nurse_id=data.get("user_id"),
            shift_id=data.get("shift_id"),
            notes=get_text(data, "notes"),
        )
        return JsonResponse(serialize_assignment(assignment), status=201)


class AssignmentDetailView(HeadNurseRequiredMixin, View):

    def patch(self, request: HttpRequest, pk: int) -> JsonResponse:
        data = parse_json_body(request)
        if "status" not in data and "notes" not in data:
            raise ValidationError("Provide a status or notes to update.")
        assignment = ShiftAssignmentService.update_status(
            request.user, pk, status=data.get("status"), notes=get_text(data, "notes", default=None)
        )
        return JsonResponse(serialize_assignment(assignment))

    def delete(self, request: HttpRequest, pk: int) -> HttpResponse:
        ShiftAssignmentService.remove(request.user, pk)
        return HttpResponse(status=204)


# ---------------------------------------------------------------------------
# Leave requests
# ---------------------------------------------------------------------------


def _leave_queryset():
    return LeaveRequest.objects.select_related(
        "requested_by", "approved_by", "assignment__shift"
    ).order_by("-created_at")


class LeaveRequestCollectionView(StaffRequiredMixin, View):
    method_roles = {"POST": [User.Role.NURSE], "GET": HEAD_NURSE_ONLY}

    def post(self, request: HttpRequest) -> JsonResponse:
        data = parse_json_body(request)
        leave_request = LeaveRequestService.submit(
            request.user,
            assignment_id=data.get("shift_assignment_id"),
            reason=get_text(data, "reason"),
        )
        return JsonResponse(serialize_leave_request(leave_request), status=201)

    def get(self, request: HttpRequest) -> JsonResponse:
        """Query params: status, requested_by."""
        qs = _leave_queryset()
        status = request.GET.get("status")
        if status:
            if status not in LeaveRequest.Status.values:
                raise ValidationError("Status must be pending, approved, or rejected.")
            qs = qs.filter(status=status)
        if request.GET.get("requested_by"):
            qs = qs.filter(requested_by_id=parse_id(request.GET["requested_by"], "requested_by"))

        return JsonResponse({"leave_requests": [serialize_leave_request(r) for r in qs]})


class MyLeaveRequestsView(NurseRequiredMixin, View):

    def get(self, request: HttpRequest) -> JsonResponse:
        qs = _leave_queryset().filter(requested_by=request.user)
        return JsonResponse({"leave_requests": [serialize_leave_request(r) for r in qs]})


class PendingLeaveRequestsView(HeadNurseRequiredMixin, View):

    def get(self, request: HttpRequest) -> JsonResponse:
        qs = _leave_queryset().filter(status=LeaveRequest.Status.PENDING).order_by("created_at")
        return JsonResponse({"leave_requests": [serialize_leave_request(r) for r in qs]})


class LeaveRequestDetailView(StaffRequiredMixin, View):

    def get(self, request: HttpRequest, pk: int) -> JsonResponse:
        leave_request = _leave_queryset().filter(pk=pk).first()
        if leave_request is None:
            raise NotFoundError("Leave request not found.")
        if leave_request.requested_by_id != request.user.pk and not request.user.is_head_nurse:
            raise NotOwner("You can only view your own leave requests.")
        return JsonResponse(serialize_leave_request(leave_request))

    def put(self, request: HttpRequest, pk: int) -> JsonResponse:
        data = parse_json_body(request)
        LeaveRequestService.edit(request.user, pk, reason=get_text(data, "reason"))
        return JsonResponse(serialize_leave_request(_leave_queryset().get(pk=pk)))

    def delete(self, request: HttpRequest, pk: int) -> HttpResponse:
        LeaveRequestService.cancel(request.user, pk)
        return HttpResponse(status=204)


class LeaveRequestResolveView(HeadNurseRequiredMixin, View):

    def patch(self, request: HttpRequest, pk: int) -> JsonResponse:
        """Body: {"status": "approved" | "rejected", "admin_notes": str (optional)}."""
        data = parse_json_body(request)
        LeaveRequestService.resolve(
            request.user,
            pk,
            decision=data.get("status"),
            admin_notes=get_text(data, "admin_notes", default=None),
        )
        return JsonResponse(serialize_leave_request(_leave_queryset().get(pk=pk)))


# ---------------------------------------------------------------------------
# My schedule
# ---------------------------------------------------------------------------


class MyScheduleView(NurseRequiredMixin, View):

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params: start_date, end_date (both or neither; defaults to the
        current month), status.
        """
        view = ScheduleService.get_nurse_schedule(
            request.user.pk,
            start_date=request.GET.get("start_date"),
            end_date=request.GET.get("end_date"),
            status=request.GET.get("status"),
        )
        return JsonResponse(serialize_schedule(view))


class MyTodayView(NurseRequiredMixin, View):

    def get(self, request: HttpRequest) -> JsonResponse:
        view = ScheduleService.get_today(request.user.pk)
        return JsonResponse({
            "date": view.summary["date_range"]["start"].isoformat(),
            "shifts": [serialize_assignment(a) for a in view.items],
            "total": view.summary["total"],
        })


class MyWeekView(NurseRequiredMixin, View):

    def get(self, request: HttpRequest) -> JsonResponse:
        """Every day of the current week, including days without shifts."""
        view = ScheduleService.get_week(request.user.pk)
        data = serialize_schedule(view)
        data["grouped_by_date"] = {
            day.isoformat(): [serialize_assignment(a) for a in items]
            for day, items in by_day(view).items()
        }
        return JsonResponse(data)


class MyUpcomingShiftsView(NurseRequiredMixin, View):

    def get(self, request: HttpRequest) -> JsonResponse:
        assignments = ScheduleService.get_upcoming(request.user.pk, limit=request.GET.get("limit"))
        return JsonResponse({"upcoming": [serialize_assignment(a) for a in assignments]})
