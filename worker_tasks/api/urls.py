"""
URL configuration for the worker task API.
"""
from django.urls import path
from worker_tasks.api.views import (
    GeofenceValidateView,
    StartTaskView,
    TaskAssignmentListView,
    TaskProgressView,
    health_check,
)

app_name = 'worker_tasks'

urlpatterns = [
    # Health check endpoint
    path('health/', health_check, name='health_check_get'),

    # Task lifecycle endpoints
    path('task/start/', StartTaskView.as_view(), name='task_start'),
    path('task/progress/', TaskProgressView.as_view(), name='task_progress'),
    path('geofence/validate/', GeofenceValidateView.as_view(), name='geofence_validate'),
    path('tasks/', TaskAssignmentListView.as_view(), name='task_list'),
]
