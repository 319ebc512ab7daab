from django.contrib import admin

from .models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('name', 'project_code', 'status', 'geofence_radius', 'geofence_strict_mode')
    list_filter = ('status', 'geofence_strict_mode')
    search_fields = ('name', 'project_code')
    fieldsets = (
        (None, {
            'fields': ('name', 'project_code', 'status', 'address', 'supervisor_id')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude')
        }),
        ('Geofence', {
            'fields': (
                'geofence_latitude', 'geofence_longitude', 'geofence_radius',
                'geofence_strict_mode', 'geofence_allowed_variance'
            )
        }),
    )
