from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from worker_tasks.core import constants


class AppendOnlyQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ValidationError("Location log entries cannot be updated.")

    def delete(self):
        raise ValidationError("Location log entries cannot be deleted.")


class LocationLog(models.Model):
    """
    Audit trail of validated worker positions. Rows are only ever inserted;
    ids come from the database sequence.
    """
    LOG_TYPE_CHOICES = [
        (constants.LOG_CHECK_IN, 'Check In'),
        (constants.LOG_CHECK_OUT, 'Check Out'),
        (constants.LOG_TASK_START, 'Task Start'),
        (constants.LOG_PROGRESS_UPDATE, 'Progress Update'),
        (constants.LOG_TASK_COMPLETE, 'Task Complete'),
        (constants.LOG_PERIODIC, 'Periodic'),
        (constants.LOG_MANUAL, 'Manual'),
        (constants.LOG_GEOFENCE_VALIDATION, 'Geofence Validation'),
    ]

    employee_id = models.PositiveIntegerField()
    project_id = models.PositiveIntegerField()
    latitude = models.FloatField()
    longitude = models.FloatField()
    accuracy = models.FloatField(null=True, blank=True, help_text="GPS accuracy in meters")
    inside_geofence = models.BooleanField(default=False)
    log_type = models.CharField(max_length=32, choices=LOG_TYPE_CHOICES, default=constants.LOG_PERIODIC)
    task_assignment_id = models.PositiveIntegerField(null=True, blank=True)
    progress_percent = models.PositiveSmallIntegerField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    objects = AppendOnlyQuerySet.as_manager()

    class Meta:
        ordering = ['-timestamp', '-id']
        verbose_name_plural = "Location Logs"
        indexes = [
            models.Index(fields=['employee_id', 'timestamp']),
            models.Index(fields=['task_assignment_id']),
        ]

    def __str__(self):
        return f"{self.log_type} employee {self.employee_id} - {self.timestamp.strftime('%Y-%m-%d %H:%M:%S')}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Location log entries cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Location log entries cannot be deleted.")
