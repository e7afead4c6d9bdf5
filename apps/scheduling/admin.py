from django.contrib import admin
from .models import LeaveRequest, Shift, ShiftAssignment


class ShiftAssignmentInline(admin.TabularInline):
    model = ShiftAssignment
    fk_name = "shift"
    extra = 0
    fields = ("user", "status", "assigned_by", "notes")
    readonly_fields = ("assigned_by",)


@admin.register(Shift)
class ShiftAdmin(admin.ModelAdmin):
    list_display = ("date", "shift_type", "start_time", "end_time", "department", "required_nurses")
    list_filter = ("shift_type", "department")
    date_hierarchy = "date"
    ordering = ("date", "start_time")
    inlines = [ShiftAssignmentInline]


@admin.register(ShiftAssignment)
class ShiftAssignmentAdmin(admin.ModelAdmin):
    list_display = ("shift", "user", "status", "assigned_by", "assigned_at", "updated_at")
    list_filter = ("status",)
    search_fields = ("user__email", "user__name")
    ordering = ("shift__date", "shift__start_time")


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ("assignment", "requested_by", "status", "approved_by", "approved_at", "created_at")
    list_filter = ("status",)
    search_fields = ("requested_by__email", "requested_by__name", "reason")
    ordering = ("-created_at",)
