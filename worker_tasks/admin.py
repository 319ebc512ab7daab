from django.contrib import admin

from .models import TaskAssignment, LocationLog, TaskProgressRecord


@admin.register(TaskAssignment)
class TaskAssignmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'employee_id', 'project_id', 'date', 'sequence', 'status', 'progress_percent')
    list_filter = ('status', 'date', 'geofence_required')
    search_fields = ('employee_id', 'project_id')
    ordering = ('date', 'sequence', 'id')


@admin.register(LocationLog)
class LocationLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'employee_id', 'project_id', 'log_type', 'inside_geofence', 'timestamp')
    list_filter = ('log_type', 'inside_geofence')

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(TaskProgressRecord)
class TaskProgressRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'task_assignment_id', 'employee_id', 'progress_percent', 'status', 'submitted_at')
    list_filter = ('status',)
