from django.db import models
from django.utils import timezone

from worker_tasks.core import constants


class TaskAssignment(models.Model):
    """
    A task given to one worker on one project for one calendar day.

    Status only moves forward (queued -> in_progress -> completed) and
    progress_percent never decreases. Both rules are enforced by the
    conditional updates in AssignmentStateMachine.
    """
    STATUS_CHOICES = [
        (constants.STATUS_QUEUED, 'Queued'),
        (constants.STATUS_IN_PROGRESS, 'In Progress'),
        (constants.STATUS_COMPLETED, 'Completed'),
    ]

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('critical', 'Critical'),
    ]

    employee_id = models.PositiveIntegerField()
    project_id = models.PositiveIntegerField()
    task_id = models.PositiveIntegerField(null=True, blank=True)
    supervisor_id = models.PositiveIntegerField(null=True, blank=True)

    date = models.CharField(max_length=10, help_text="Work day, YYYY-MM-DD")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=constants.STATUS_QUEUED)
    progress_percent = models.PositiveSmallIntegerField(default=0)

    sequence = models.PositiveIntegerField(null=True, blank=True)
    dependencies = models.JSONField(default=list, blank=True)  # Ordered list of TaskAssignment ids
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')

    work_area = models.CharField(max_length=100, blank=True)
    floor = models.CharField(max_length=50, blank=True)
    zone = models.CharField(max_length=50, blank=True)

    # Time estimate in minutes
    estimated_minutes = models.PositiveIntegerField(null=True, blank=True)
    elapsed_minutes = models.PositiveIntegerField(null=True, blank=True)
    remaining_minutes = models.PositiveIntegerField(null=True, blank=True)

    # Geofence validation
    geofence_required = models.BooleanField(default=True)
    geofence_last_validated = models.DateTimeField(null=True, blank=True)
    validation_latitude = models.FloatField(null=True, blank=True)
    validation_longitude = models.FloatField(null=True, blank=True)

    assigned_at = models.DateTimeField(default=timezone.now)
    start_time = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date', 'sequence', 'id']
        indexes = [
            models.Index(fields=['employee_id', 'project_id', 'date']),
            models.Index(fields=['employee_id', 'date']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"Assignment #{self.id} for employee {self.employee_id} on {self.date} ({self.status})"

    @property
    def is_completed(self):
        return self.status == constants.STATUS_COMPLETED

    @property
    def has_started(self):
        return self.status in (constants.STATUS_IN_PROGRESS, constants.STATUS_COMPLETED)

    def summary(self):
        """Compact view used in blocking-task and dependency detail."""
        return {
            'id': self.id,
            'sequence': self.sequence,
            'status': self.status,
            'progress_percent': self.progress_percent or 0,
        }
