"""
Serializers for the worker task API.

Request serializers accept the camelCase keys used by the mobile client and
expose snake_case names in ``validated_data``. Range and content checks that
carry a business meaning are left to the state machine, so serializer errors
are limited to missing or malformed fields.
"""
import logging
from typing import Any, Dict

from rest_framework import serializers

from worker_tasks.core import constants
from worker_tasks.core.types import Position
from worker_tasks.models import TaskAssignment

logger = logging.getLogger(__name__)

# Result code reported when a field fails validation
FIELD_ERROR_CODES = {
    'assignmentId': constants.INVALID_ASSIGNMENT_ID,
    'position': constants.MISSING_COORDINATES,
    'latitude': constants.INVALID_LATITUDE,
    'longitude': constants.INVALID_LONGITUDE,
    'accuracy': constants.INVALID_GPS_ACCURACY,
    'progressPercent': constants.INVALID_PROGRESS_VALUE,
    'description': constants.MISSING_DESCRIPTION,
}
COORDINATE_FIELDS = ('latitude', 'longitude')
MISSING_DETAIL_CODES = ('required', 'null')


def error_code_from(errors: Dict[str, Any], default: str = constants.VALIDATION_ERROR) -> str:
    """
    Map DRF serializer errors to a single result code.

    Errors are visited in field declaration order, so the first failing
    field decides. Nested serializers are searched recursively; their
    non-field errors take the code of the enclosing field.
    """
    for field_name, details in errors.items():
        if isinstance(details, dict):
            return error_code_from(details, FIELD_ERROR_CODES.get(field_name, default))
        if field_name == 'non_field_errors':
            return default
        if field_name in COORDINATE_FIELDS and any(
            getattr(detail, 'code', None) in MISSING_DETAIL_CODES for detail in details
        ):
            return constants.MISSING_COORDINATES
        return FIELD_ERROR_CODES.get(field_name, constants.VALIDATION_ERROR)
    return default


class PositionSerializer(serializers.Serializer):
    """Serializer for a GPS fix reported by the device."""
    latitude = serializers.FloatField(
        min_value=constants.MIN_LATITUDE, max_value=constants.MAX_LATITUDE,
        help_text="Latitude in decimal degrees, between -90 and 90."
    )
    longitude = serializers.FloatField(
        min_value=constants.MIN_LONGITUDE, max_value=constants.MAX_LONGITUDE,
        help_text="Longitude in decimal degrees, between -180 and 180."
    )
    accuracy = serializers.FloatField(
        min_value=0, required=False, allow_null=True,
        help_text="Reported GPS accuracy radius in meters (optional)."
    )
    timestamp = serializers.DateTimeField(
        required=False, allow_null=True,
        help_text="Device time of the fix, ISO 8601 (optional)."
    )

    @staticmethod
    def to_position(data):
        if data is None:
            return None
        return Position(
            latitude=data['latitude'],
            longitude=data['longitude'],
            accuracy=data.get('accuracy'),
            timestamp=data.get('timestamp'),
        )


class StartTaskRequestSerializer(serializers.Serializer):
    """Serializer for task start requests."""
    assignmentId = serializers.IntegerField(
        source='assignment_id', min_value=1,
        help_text="Id of the queued task assignment to start."
    )
    position = PositionSerializer(
        required=False, allow_null=True,
        help_text="Current GPS fix. Required when the assignment needs geofence validation."
    )


class ProgressRequestSerializer(serializers.Serializer):
    """Serializer for progress submissions."""
    assignmentId = serializers.IntegerField(
        source='assignment_id', min_value=1,
        help_text="Id of the in-progress task assignment."
    )
    progressPercent = serializers.IntegerField(
        source='progress_percent',
        help_text="New progress percentage, an integer from 0 to 100. Must not be lower than the current value."
    )
    description = serializers.CharField(
        allow_blank=True, trim_whitespace=False,
        help_text="Description of the work done (required, up to 1000 characters)."
    )
    notes = serializers.CharField(
        required=False, allow_blank=True, default='', max_length=constants.MAX_NOTES_LENGTH,
        help_text="Additional notes (optional, up to 500 characters)."
    )
    completedQuantity = serializers.FloatField(
        source='completed_quantity', required=False, allow_null=True, min_value=0,
        help_text="Quantity of work completed so far (optional)."
    )
    issuesEncountered = serializers.ListField(
        source='issues', child=serializers.CharField(allow_blank=True), required=False, default=list,
        help_text="Issues met while working; at most 10 are kept, each trimmed to 200 characters."
    )
    position = PositionSerializer(
        required=False, allow_null=True,
        help_text="Current GPS fix (optional). Recorded in the location audit log."
    )


class GeofenceValidateQuerySerializer(serializers.Serializer):
    """Query parameters of the geofence validation endpoint."""
    latitude = serializers.FloatField(
        min_value=constants.MIN_LATITUDE, max_value=constants.MAX_LATITUDE,
        help_text="Latitude in decimal degrees."
    )
    longitude = serializers.FloatField(
        min_value=constants.MIN_LONGITUDE, max_value=constants.MAX_LONGITUDE,
        help_text="Longitude in decimal degrees."
    )
    accuracy = serializers.FloatField(
        min_value=0, required=False, allow_null=True,
        help_text="Reported GPS accuracy radius in meters (optional)."
    )
    projectId = serializers.IntegerField(
        source='project_id', min_value=1, required=False,
        help_text="Project to validate against. Defaults to the project of today's first assignment."
    )


class TransitionResponseSerializer(serializers.Serializer):
    """Envelope returned by every worker task endpoint."""
    success = serializers.BooleanField(help_text="True when the operation was performed.")
    code = serializers.CharField(help_text="Result code, e.g. TASK_STARTED or GEOFENCE_VALIDATION_FAILED.")
    message = serializers.CharField(help_text="Human-readable explanation.")
    data = serializers.JSONField(help_text="Operation specific detail.")


class TaskAssignmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = TaskAssignment
        fields = [
            'id', 'employee_id', 'project_id', 'task_id', 'date', 'status', 'progress_percent',
            'sequence', 'dependencies', 'priority', 'work_area', 'floor', 'zone',
            'estimated_minutes', 'elapsed_minutes', 'remaining_minutes', 'geofence_required',
            'assigned_at', 'start_time', 'completed_at',
        ]
        read_only_fields = fields
