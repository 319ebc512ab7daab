"""
API views for worker task admission.

Each endpoint validates the request shape, resolves the acting employee and
hands off to AssignmentStateMachine. Results are returned in a
``{success, code, message, data}`` envelope.
"""
import logging

from django.db import DatabaseError
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics, status
from rest_framework.decorators import api_view
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from worker_tasks import settings as app_settings
from worker_tasks.api.filters import TaskAssignmentFilter
from worker_tasks.api.serializers import (
    GeofenceValidateQuerySerializer,
    PositionSerializer,
    ProgressRequestSerializer,
    StartTaskRequestSerializer,
    TaskAssignmentSerializer,
    TransitionResponseSerializer,
    error_code_from,
)
from worker_tasks.clients.assignment_client import AssignmentClient
from worker_tasks.core import constants
from worker_tasks.core.types import TransitionResult
from worker_tasks.services.state_machine import AssignmentStateMachine

# Set up logging
logger = logging.getLogger(__name__)

HTTP_STATUS_BY_CODE = {
    constants.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    constants.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    constants.PROJECT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    constants.NO_ACTIVE_ASSIGNMENT: status.HTTP_404_NOT_FOUND,
    constants.ALREADY_STARTED: status.HTTP_409_CONFLICT,
    constants.TASK_ALREADY_COMPLETED: status.HTTP_409_CONFLICT,
    constants.INVALID_PROGRESS_DECREASE: status.HTTP_409_CONFLICT,
    constants.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

ERROR_RESPONSES = {
    400: "Bad Request - invalid input or admission check failed",
    401: "Unauthorized - acting employee could not be identified",
    403: "Forbidden - task is assigned to another employee",
    404: "Not Found - assignment or project does not exist",
    409: "Conflict - task already started, already completed, or progress would decrease",
    503: "Service Unavailable - storage error",
}


def get_acting_employee_id(request):
    """
    Employee id of the caller: the authenticated user's ``employee_id`` or the
    gateway header named by WORKER_TASKS_EMPLOYEE_HEADER. None when absent or malformed.
    """
    employee_id = getattr(request.user, 'employee_id', None)
    if employee_id is None:
        employee_id = request.META.get(app_settings.EMPLOYEE_HEADER)
    try:
        employee_id = int(employee_id)
    except (TypeError, ValueError):
        return None
    return employee_id if employee_id > 0 else None


def result_response(result: TransitionResult) -> Response:
    if result.success:
        http_status = status.HTTP_200_OK
    else:
        http_status = HTTP_STATUS_BY_CODE.get(result.code, status.HTTP_400_BAD_REQUEST)
    return Response(result.to_dict(), status=http_status)


def unauthenticated_response() -> Response:
    result = TransitionResult.reject(constants.UNAUTHORIZED, "Employee identity is required")
    return Response(result.to_dict(), status=status.HTTP_401_UNAUTHORIZED)


def invalid_request_response(view_name, serializer) -> Response:
    logger.error(f"{view_name} validation error: {serializer.errors}")
    result = TransitionResult.reject(
        error_code_from(serializer.errors), "Invalid request data", errors=dict(serializer.errors)
    )
    return Response(result.to_dict(), status=status.HTTP_400_BAD_REQUEST)


def storage_error_response(view_name) -> Response:
    logger.error(f"{view_name} storage error", exc_info=True)
    result = TransitionResult.reject(
        constants.STORAGE_UNAVAILABLE, "The service is temporarily unavailable. Please try again."
    )
    return Response(result.to_dict(), status=status.HTTP_503_SERVICE_UNAVAILABLE)


class StartTaskView(APIView):
    """
    API view for starting a queued task assignment.
    """

    @swagger_auto_schema(
        request_body=StartTaskRequestSerializer,
        responses={200: TransitionResponseSerializer, **ERROR_RESPONSES},
        operation_id="worker_task_start",
        operation_description="""Starts a queued task assignment. The worker must be inside the project geofence
        (when required), every dependency must be completed and every earlier task of the same day must be completed.""",
        tags=['Worker Tasks']
    )
    def post(self, request, format=None):
        employee_id = get_acting_employee_id(request)
        if employee_id is None:
            return unauthenticated_response()

        serializer = StartTaskRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response("StartTaskView", serializer)

        data = serializer.validated_data
        try:
            result = AssignmentStateMachine().start(
                data['assignment_id'],
                employee_id,
                PositionSerializer.to_position(data.get('position')),
            )
        except DatabaseError:
            return storage_error_response("StartTaskView")
        return result_response(result)


class TaskProgressView(APIView):
    """
    API view for submitting progress on a started task assignment.
    """

    @swagger_auto_schema(
        request_body=ProgressRequestSerializer,
        responses={200: TransitionResponseSerializer, **ERROR_RESPONSES},
        operation_id="worker_task_progress",
        operation_description="""Records progress on an in-progress task assignment. Progress never decreases;
        reaching 100 completes the task.""",
        tags=['Worker Tasks']
    )
    def post(self, request, format=None):
        employee_id = get_acting_employee_id(request)
        if employee_id is None:
            return unauthenticated_response()

        serializer = ProgressRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response("TaskProgressView", serializer)

        data = serializer.validated_data
        try:
            result = AssignmentStateMachine().progress(
                data['assignment_id'],
                employee_id,
                data['progress_percent'],
                data['description'],
                position=PositionSerializer.to_position(data.get('position')),
                notes=data.get('notes', ''),
                completed_quantity=data.get('completed_quantity'),
                issues=data.get('issues'),
            )
        except DatabaseError:
            return storage_error_response("TaskProgressView")
        return result_response(result)


class GeofenceValidateView(APIView):
    """
    API view for checking a position against a project geofence.
    """

    @swagger_auto_schema(
        query_serializer=GeofenceValidateQuerySerializer,
        responses={200: TransitionResponseSerializer, **ERROR_RESPONSES},
        operation_id="worker_geofence_validate",
        operation_description="""Evaluates the given position against the project geofence and records the check
        in the location audit log. Being outside the geofence is reported in the data, not as an error.""",
        tags=['Worker Tasks']
    )
    def get(self, request, format=None):
        employee_id = get_acting_employee_id(request)
        if employee_id is None:
            return unauthenticated_response()

        serializer = GeofenceValidateQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return invalid_request_response("GeofenceValidateView", serializer)

        data = serializer.validated_data
        try:
            result = AssignmentStateMachine().validate_location(
                employee_id,
                PositionSerializer.to_position(data),
                project_id=data.get('project_id'),
            )
        except DatabaseError:
            return storage_error_response("GeofenceValidateView")
        return result_response(result)


class TaskAssignmentListView(generics.ListAPIView):
    """
    Lists the acting employee's task assignments, ordered by sequence.
    """
    serializer_class = TaskAssignmentSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = TaskAssignmentFilter

    def get_queryset(self):
        return AssignmentClient.get_for_employee(get_acting_employee_id(self.request))

    @swagger_auto_schema(
        responses={200: TaskAssignmentSerializer(many=True), 400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401]},
        operation_id="worker_tasks_list",
        tags=['Worker Tasks']
    )
    def get(self, request, *args, **kwargs):
        if get_acting_employee_id(request) is None:
            return unauthenticated_response()
        try:
            return super().get(request, *args, **kwargs)
        except ValidationError as e:
            logger.error(f"TaskAssignmentListView filter error: {e.detail}")
            result = TransitionResult.reject(
                constants.VALIDATION_ERROR, "Invalid filter parameters", errors=dict(e.detail)
            )
            return Response(result.to_dict(), status=status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            return storage_error_response("TaskAssignmentListView")


@swagger_auto_schema(
    method='get',
    operation_id="worker_tasks_health_check",
    operation_description="Checks if the worker task API is operational.",
    responses={
        200: openapi.Response(
            description="API is healthy and operational.",
            examples={"application/json": {"status": "healthy"}}
        ),
    },
    tags=['Health Check']
)
@api_view(['GET'])
def health_check(request):
    """
    Health check endpoint to verify the API is running.
    """
    return Response({"status": "healthy"}, status=status.HTTP_200_OK)
