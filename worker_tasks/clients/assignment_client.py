from django.utils import timezone

from worker_tasks.core import constants
from worker_tasks.models import TaskAssignment


class AssignmentClient:
    @staticmethod
    def get_by_id(assignment_id):
        return TaskAssignment.objects.filter(id=assignment_id).first()

    @staticmethod
    def get_many(assignment_ids):
        """
        fetch several assignments in one query.

        Args:
            assignment_ids (list[int]): Assignment ids to look up.

        Returns:
            dict mapping id to TaskAssignment for the ids that exist
        """
        return TaskAssignment.objects.in_bulk(list(assignment_ids))

    @staticmethod
    def get_peers(employee_id, project_id, date):
        """All assignments of one worker on one project for one day."""
        return list(
            TaskAssignment.objects.filter(employee_id=employee_id, project_id=project_id, date=date)
        )

    @staticmethod
    def get_for_employee(employee_id, date=None):
        qs = TaskAssignment.objects.filter(employee_id=employee_id)
        if date is not None:
            qs = qs.filter(date=date)
        return qs.order_by('sequence', 'id')

    @staticmethod
    def first_for_employee_on(employee_id, date):
        return AssignmentClient.get_for_employee(employee_id, date).first()

    @staticmethod
    def mark_started(assignment_id, started_at, latitude=None, longitude=None):
        """
        Move a queued assignment to in_progress.

        The UPDATE only matches while the row is still queued, so of two
        concurrent starts exactly one gets a row count of 1.

        Returns:
            True when this call performed the transition
        """
        updated = TaskAssignment.objects.filter(
            id=assignment_id, status=constants.STATUS_QUEUED
        ).update(
            status=constants.STATUS_IN_PROGRESS,
            start_time=started_at,
            geofence_last_validated=started_at if latitude is not None else None,
            validation_latitude=latitude,
            validation_longitude=longitude,
            updated_at=timezone.now(),
        )
        return updated == 1

    @staticmethod
    def record_progress(assignment_id, new_percent, completed_at=None, elapsed_minutes=None, remaining_minutes=None):
        """
        Raise progress on an in_progress assignment, completing it at 100.

        Matches only when the stored percent is not above ``new_percent``.

        Returns:
            True when the row was updated
        """
        values = {
            'progress_percent': new_percent,
            'updated_at': timezone.now(),
        }
        if elapsed_minutes is not None:
            values['elapsed_minutes'] = elapsed_minutes
        if remaining_minutes is not None:
            values['remaining_minutes'] = remaining_minutes
        if new_percent == constants.MAX_PROGRESS:
            values['status'] = constants.STATUS_COMPLETED
            values['completed_at'] = completed_at or timezone.now()

        updated = TaskAssignment.objects.filter(
            id=assignment_id,
            status=constants.STATUS_IN_PROGRESS,
            progress_percent__lte=new_percent,
        ).update(**values)
        return updated == 1
