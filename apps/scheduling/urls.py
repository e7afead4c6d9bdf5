"""URL patterns for the scheduling API."""
from django.urls import path
from . import views

app_name = "scheduling"

urlpatterns = [
    path("shifts/", views.ShiftCollectionView.as_view(), name="shifts"),
    path("shifts/<int:pk>/", views.ShiftDetailView.as_view(), name="shift_detail"),
    path("shift-assignments/", views.AssignmentCollectionView.as_view(), name="assignments"),
    path("shift-assignments/<int:pk>/", views.AssignmentDetailView.as_view(), name="assignment_detail"),
    path("leave-requests/", views.LeaveRequestCollectionView.as_view(), name="leave_requests"),
    path("leave-requests/mine/", views.MyLeaveRequestsView.as_view(), name="my_leave_requests"),
    path("leave-requests/pending/", views.PendingLeaveRequestsView.as_view(), name="pending_leave_requests"),
    path("leave-requests/<int:pk>/", views.LeaveRequestDetailView.as_view(), name="leave_request_detail"),
    path("leave-requests/<int:pk>/resolve/", views.LeaveRequestResolveView.as_view(), name="leave_request_resolve"),
    path("my-schedule/", views.MyScheduleView.as_view(), name="my_schedule"),
    path("my-schedule/upcoming/", views.MyUpcomingShiftsView.as_view(), name="my_upcoming"),
    path("my-schedule/today/", views.MyTodayView.as_view(), name="my_today"),
    path("my-schedule/week/", views.MyWeekView.as_view(), name="my_week"),
]
