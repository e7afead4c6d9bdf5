from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("actor", "action", "content_type", "object_id", "created_at")
    list_filter = ("action",)
    search_fields = ("actor__email", "actor__name", "action", "note")
    ordering = ("-created_at",)
    readonly_fields = ("actor", "action", "content_type", "object_id", "before", "after", "note", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
