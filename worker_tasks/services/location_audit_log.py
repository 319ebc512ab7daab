import logging
from typing import Optional

from django.utils import timezone

from worker_tasks.core import constants
from worker_tasks.core.types import FieldValidationError, Position
from worker_tasks.core.validators import is_positive_int, validate_position
from worker_tasks.models import LocationLog

logger = logging.getLogger(__name__)

LOG_TYPES = {choice for choice, _ in LocationLog.LOG_TYPE_CHOICES}


class LocationAuditLog:
    """
    Append-only record of validated worker positions.
    """

    def append(self, employee_id: int, project_id: int, position: Position, log_type: str,
               inside_geofence: bool = False, task_assignment_id: Optional[int] = None,
               progress_percent: Optional[int] = None) -> LocationLog:
        """
        Persist one audit entry.

        Args:
            employee_id: Worker the position belongs to.
            project_id: Project the position was checked against.
            position: Validated or raw position; validated again here.
            log_type: One of the LocationLog log types.
            inside_geofence: Inside verdict of the geofence evaluation.
            task_assignment_id: Related assignment, if any.
            progress_percent: Progress reported alongside the position.

        Returns:
            The stored LocationLog; its id is allocated by the database.

        Raises:
            FieldValidationError: If the entry is malformed.
        """
        if not is_positive_int(employee_id):
            raise FieldValidationError(constants.VALIDATION_ERROR, "Employee id must be a positive integer")
        if not is_positive_int(project_id):
            raise FieldValidationError(constants.VALIDATION_ERROR, "Project id must be a positive integer")
        if log_type not in LOG_TYPES:
            raise FieldValidationError(constants.VALIDATION_ERROR, f"Unknown location log type: {log_type}")
        position = validate_position(position)

        entry = LocationLog.objects.create(
            employee_id=employee_id,
            project_id=project_id,
            latitude=position.latitude,
            longitude=position.longitude,
            accuracy=position.accuracy,
            inside_geofence=bool(inside_geofence),
            log_type=log_type,
            task_assignment_id=task_assignment_id,
            progress_percent=progress_percent,
            timestamp=timezone.now(),
        )
        logger.info(
            f"Location log {entry.id} ({log_type}) for employee {employee_id}, "
            f"project {project_id}, inside={entry.inside_geofence}"
        )
        return entry
