"""
Task assignment lifecycle: queued -> in_progress -> completed.

AssignmentStateMachine runs the admission checks for starting a task and for
reporting progress, and performs the transition with a conditional UPDATE so
that concurrent requests cannot move an assignment backwards. Every outcome
is returned as a TransitionResult; database errors propagate to the caller.
"""
import logging
from datetime import timedelta
from typing import Any, Iterable, Optional

from django.db import transaction
from django.utils import timezone

from worker_tasks import settings as app_settings
from worker_tasks.clients.assignment_client import AssignmentClient
from worker_tasks.clients.project_client import ProjectClient
from worker_tasks.core import constants
from worker_tasks.core.geofence import GeofenceEvaluator, gps_accuracy_quality, check_boundary_approach
from worker_tasks.core.types import FieldValidationError, Position, TransitionResult
from worker_tasks.core.validators import (
    clean_issues,
    validate_assignment_id,
    validate_description,
    validate_position,
    validate_progress_percent,
)
from worker_tasks.models import TaskProgressRecord
from worker_tasks.services.dependency_resolver import DependencyResolver
from worker_tasks.services.location_audit_log import LocationAuditLog
from worker_tasks.services.sequence_resolver import SequenceResolver

logger = logging.getLogger(__name__)


class AssignmentStateMachine:
    def __init__(self, evaluator: Optional[GeofenceEvaluator] = None,
                 dependency_resolver: Optional[DependencyResolver] = None,
                 sequence_resolver: Optional[SequenceResolver] = None,
                 audit_log: Optional[LocationAuditLog] = None,
                 assignment_client=None, project_client=None):
        self.assignments = assignment_client or AssignmentClient
        self.projects = project_client or ProjectClient
        self.evaluator = evaluator or GeofenceEvaluator()
        self.dependency_resolver = dependency_resolver or DependencyResolver(self.assignments)
        self.sequence_resolver = sequence_resolver or SequenceResolver(self.assignments)
        self.audit_log = audit_log or LocationAuditLog()

    def _load_owned(self, assignment_id: Any, acting_employee_id: int):
        """Returns (assignment, None) or (None, rejection)."""
        try:
            validate_assignment_id(assignment_id)
        except FieldValidationError as e:
            return None, TransitionResult.reject(e.code, e.message)

        assignment = self.assignments.get_by_id(assignment_id)
        if assignment is None:
            logger.info(f"Assignment {assignment_id} not found")
            return None, TransitionResult.reject(constants.NOT_FOUND, "Task assignment not found")
        if assignment.employee_id != acting_employee_id:
            logger.warning(
                f"Employee {acting_employee_id} tried to act on assignment {assignment_id} "
                f"owned by employee {assignment.employee_id}"
            )
            return None, TransitionResult.reject(
                constants.UNAUTHORIZED, "This task is not assigned to you"
            )
        return assignment, None

    def _project_geofence(self, project_id):
        """Returns (project, geofence, rejection)."""
        project = self.projects.get_project(project_id)
        if project is None:
            return None, None, TransitionResult.reject(constants.PROJECT_NOT_FOUND, "Project not found")
        geofence = self.projects.geofence_for(project)
        if geofence is None:
            return project, None, TransitionResult.reject(
                constants.GEOFENCE_NOT_CONFIGURED, "Project geofence is not configured"
            )
        return project, geofence, None

    def start(self, assignment_id: Any, acting_employee_id: int,
              position: Optional[Position] = None) -> TransitionResult:
        """
        Move a queued assignment to in_progress.

        Checks run in order: ownership, current status, geofence (when the
        assignment requires it), dependencies, same-day sequence. The first
        failing check decides the result code.

        Args:
            assignment_id: Assignment to start.
            acting_employee_id: Authenticated worker.
            position: Current GPS fix of the worker.

        Returns:
            TransitionResult with code TASK_STARTED on success.
        """
        assignment, rejection = self._load_owned(assignment_id, acting_employee_id)
        if rejection:
            return rejection

        if assignment.has_started:
            logger.info(f"Assignment {assignment.id} already {assignment.status}")
            return TransitionResult.reject(
                constants.ALREADY_STARTED,
                "Task is already in progress" if assignment.status == constants.STATUS_IN_PROGRESS
                else "Task is already completed",
                status=assignment.status,
            )

        evaluation = None
        if assignment.geofence_required:
            if position is None:
                return TransitionResult.reject(
                    constants.MISSING_COORDINATES, "Location is required to start this task"
                )
            try:
                validate_position(position)
            except FieldValidationError as e:
                return TransitionResult.reject(e.code, e.message)

            _, geofence, rejection = self._project_geofence(assignment.project_id)
            if rejection:
                return rejection

            evaluation = self.evaluator.evaluate(position, geofence)
            if not evaluation.admissible:
                logger.info(
                    f"Start of assignment {assignment.id} rejected: {round(evaluation.distance_meters)}m "
                    f"from project {assignment.project_id} (radius {geofence.radius}m)"
                )
                return TransitionResult.reject(
                    constants.GEOFENCE_VALIDATION_FAILED,
                    evaluation.reason,
                    distance=round(evaluation.distance_meters),
                    allowed_radius=evaluation.allowed_radius,
                    inside_geofence=evaluation.inside_radius,
                    strict_mode=evaluation.strict_mode,
                    allowed_variance=evaluation.allowed_variance,
                    gps_accuracy=evaluation.accuracy,
                    accuracy_warning=evaluation.accuracy_warning,
                )
        elif position is not None:
            try:
                validate_position(position)
            except FieldValidationError as e:
                return TransitionResult.reject(e.code, e.message)
            project = self.projects.get_project(assignment.project_id)
            geofence = self.projects.geofence_for(project) if project else None
            if geofence is not None:
                evaluation = self.evaluator.evaluate(position, geofence)

        dependencies = self.dependency_resolver.resolve(assignment.dependencies)
        if not dependencies.can_proceed:
            logger.info(f"Start of assignment {assignment.id} blocked by dependencies: {dependencies.message}")
            return TransitionResult.reject(
                constants.DEPENDENCIES_NOT_MET,
                dependencies.message,
                missing_dependencies=dependencies.missing_ids,
                incomplete_dependencies=dependencies.incomplete,
            )

        sequence = self.sequence_resolver.resolve_for_assignment(assignment)
        if not sequence.can_proceed:
            logger.info(f"Start of assignment {assignment.id} blocked by sequence: {sequence.message}")
            return TransitionResult.reject(
                constants.SEQUENCE_VALIDATION_FAILED,
                sequence.message,
                incomplete_earlier_tasks=sequence.blocking_tasks,
            )

        now = timezone.now()
        with transaction.atomic():
            started = self.assignments.mark_started(
                assignment.id, now,
                latitude=position.latitude if position else None,
                longitude=position.longitude if position else None,
            )
            if not started:
                logger.warning(f"Assignment {assignment.id} was started by a concurrent request")
                return TransitionResult.reject(constants.ALREADY_STARTED, "Task is already in progress")

            if position is not None:
                rejection = self._append_or_roll_back(
                    employee_id=assignment.employee_id,
                    project_id=assignment.project_id,
                    position=position,
                    log_type=constants.LOG_TASK_START,
                    inside_geofence=evaluation.inside_radius if evaluation else False,
                    task_assignment_id=assignment.id,
                )
                if rejection:
                    return rejection

        estimated_end_time = None
        if assignment.remaining_minutes:
            estimated_end_time = (now + timedelta(minutes=assignment.remaining_minutes)).isoformat()

        logger.info(f"Assignment {assignment.id} started by employee {acting_employee_id}")
        return TransitionResult.ok(
            constants.TASK_STARTED,
            "Task started successfully",
            assignment_id=assignment.id,
            status=constants.STATUS_IN_PROGRESS,
            start_time=now.isoformat(),
            estimated_end_time=estimated_end_time,
            geofence_validation=evaluation.to_dict() if evaluation else None,
        )

    def progress(self, assignment_id: Any, acting_employee_id: int, new_percent: Any,
                 description: Any, position: Optional[Position] = None, notes: str = '',
                 completed_quantity: Optional[float] = None,
                 issues: Optional[Iterable[str]] = None) -> TransitionResult:
        """
        Record progress on an in_progress assignment. Reaching 100 completes it.

        Returns:
            TransitionResult with code PROGRESS_UPDATED or TASK_COMPLETED.
        """
        assignment, rejection = self._load_owned(assignment_id, acting_employee_id)
        if rejection:
            return rejection

        if assignment.is_completed:
            return TransitionResult.reject(constants.TASK_ALREADY_COMPLETED, "Task is already completed")
        if assignment.status == constants.STATUS_QUEUED:
            return TransitionResult.reject(
                constants.TASK_NOT_STARTED, "Task must be started before reporting progress"
            )

        try:
            new_percent = validate_progress_percent(new_percent)
            description = validate_description(description)
            if position is not None:
                validate_position(position)
        except FieldValidationError as e:
            return TransitionResult.reject(e.code, e.message)

        notes = (notes or '').strip()
        if len(notes) > constants.MAX_NOTES_LENGTH:
            return TransitionResult.reject(
                constants.VALIDATION_ERROR, f"Notes must be at most {constants.MAX_NOTES_LENGTH} characters"
            )
        if completed_quantity is not None and completed_quantity < 0:
            return TransitionResult.reject(constants.VALIDATION_ERROR, "Completed quantity cannot be negative")
        issues = clean_issues(issues)

        previous = assignment.progress_percent or 0
        if new_percent < previous:
            return self._decrease(previous, new_percent)

        elapsed, remaining = self._time_estimate(assignment, previous, new_percent)
        now = timezone.now()
        completed = new_percent == constants.MAX_PROGRESS

        with transaction.atomic():
            updated = self.assignments.record_progress(
                assignment.id, new_percent,
                completed_at=now if completed else None,
                elapsed_minutes=elapsed,
                remaining_minutes=remaining,
            )
            if not updated:
                return self._lost_progress_race(assignment.id, new_percent)

            record = TaskProgressRecord.objects.create(
                task_assignment_id=assignment.id,
                employee_id=assignment.employee_id,
                progress_percent=new_percent,
                description=description,
                notes=notes,
                latitude=position.latitude if position else None,
                longitude=position.longitude if position else None,
                location_timestamp=(position.timestamp or now) if position else None,
                completed_quantity=completed_quantity,
                issues_encountered=issues,
                submitted_at=now,
            )

            if position is not None:
                rejection = self._append_or_roll_back(
                    employee_id=assignment.employee_id,
                    project_id=assignment.project_id,
                    position=position,
                    log_type=constants.LOG_PROGRESS_UPDATE,
                    inside_geofence=self._inside_verdict(assignment.project_id, position),
                    task_assignment_id=assignment.id,
                    progress_percent=new_percent,
                )
                if rejection:
                    return rejection

        if completed:
            next_action = constants.NEXT_ACTION_COMPLETED
        elif issues:
            next_action = constants.NEXT_ACTION_RESOLVE_ISSUES
        else:
            next_action = constants.NEXT_ACTION_CONTINUE

        logger.info(f"Assignment {assignment.id} progress {previous}% -> {new_percent}%")
        return TransitionResult.ok(
            constants.TASK_COMPLETED if completed else constants.PROGRESS_UPDATED,
            "Task completed" if completed else "Progress updated successfully",
            progress_id=record.id,
            assignment_id=assignment.id,
            progress_percent=new_percent,
            previous_progress=previous,
            progress_delta=new_percent - previous,
            submitted_at=now.isoformat(),
            status=record.status,
            task_status=constants.STATUS_COMPLETED if completed else constants.STATUS_IN_PROGRESS,
            next_action=next_action,
        )

    def _append_or_roll_back(self, **entry) -> Optional[TransitionResult]:
        """
        Append an audit entry inside the enclosing atomic block.

        A malformed entry marks that block for rollback, so the transition
        written before it is undone, and comes back as a rejection.
        """
        try:
            self.audit_log.append(**entry)
        except FieldValidationError as e:
            logger.error(
                f"Audit entry for assignment {entry.get('task_assignment_id')} rejected, "
                f"rolling back transition: {e.message}"
            )
            transaction.set_rollback(True)
            return TransitionResult.reject(e.code, e.message)
        return None

    @staticmethod
    def _decrease(current, attempted):
        return TransitionResult.reject(
            constants.INVALID_PROGRESS_DECREASE,
            f"Progress cannot decrease from {current}% to {attempted}%",
            current=current,
            attempted=attempted,
        )

    def _lost_progress_race(self, assignment_id, attempted):
        current = self.assignments.get_by_id(assignment_id)
        logger.warning(f"Progress update on assignment {assignment_id} lost a concurrent update")
        if current is None:
            return TransitionResult.reject(constants.NOT_FOUND, "Task assignment not found")
        if current.is_completed:
            return TransitionResult.reject(constants.TASK_ALREADY_COMPLETED, "Task is already completed")
        return self._decrease(current.progress_percent, attempted)

    @staticmethod
    def _time_estimate(assignment, previous, new_percent):
        """(elapsed, remaining) minutes derived from progress, or (None, None) without an estimate."""
        estimated = assignment.estimated_minutes
        if not estimated or new_percent <= previous:
            return None, None
        elapsed = min(round(new_percent / 100 * estimated), estimated)
        return elapsed, max(0, estimated - elapsed)

    def _inside_verdict(self, project_id, position) -> bool:
        project = self.projects.get_project(project_id)
        geofence = self.projects.geofence_for(project) if project else None
        if geofence is None:
            return False
        return self.evaluator.evaluate(position, geofence).inside_radius

    def validate_location(self, acting_employee_id: int, position: Optional[Position],
                          project_id: Optional[int] = None) -> TransitionResult:
        """
        Check a position against a project geofence without changing any assignment.

        When no project is given, the project of the worker's first assignment
        today is used. The check is recorded as a GEOFENCE_VALIDATION entry.
        """
        try:
            validate_position(position)
        except FieldValidationError as e:
            return TransitionResult.reject(e.code, e.message)

        if project_id is None:
            today = timezone.localdate().isoformat()
            assignment = self.assignments.first_for_employee_on(acting_employee_id, today)
            if assignment is None:
                return TransitionResult.reject(
                    constants.NO_ACTIVE_ASSIGNMENT, "No active project assignment found for today"
                )
            project_id = assignment.project_id

        project, geofence, rejection = self._project_geofence(project_id)
        if rejection:
            return rejection

        evaluation = self.evaluator.evaluate(position, geofence)
        try:
            entry = self.audit_log.append(
                employee_id=acting_employee_id,
                project_id=project.id,
                position=position,
                log_type=constants.LOG_GEOFENCE_VALIDATION,
                inside_geofence=evaluation.inside_radius,
            )
        except FieldValidationError as e:
            return TransitionResult.reject(e.code, e.message)

        return TransitionResult.ok(
            constants.LOCATION_VALIDATED,
            evaluation.reason,
            project_id=project.id,
            project_name=project.name,
            location_log_id=entry.id,
            can_start_tasks=evaluation.admissible,
            geofence=geofence.to_dict(),
            evaluation=evaluation.to_dict(),
            gps_quality=gps_accuracy_quality(evaluation.accuracy),
            boundary=check_boundary_approach(evaluation, app_settings.BOUNDARY_WARNING_M),
        )
