from django.db import models
from django.utils import timezone


class TaskProgressRecord(models.Model):
    """One accepted progress submission for a task assignment."""
    STATUS_CHOICES = [
        ('SUBMITTED', 'Submitted'),
        ('REVIEWED', 'Reviewed'),
        ('APPROVED', 'Approved'),
        ('REJECTED', 'Rejected'),
    ]

    task_assignment_id = models.PositiveIntegerField()
    employee_id = models.PositiveIntegerField()
    progress_percent = models.PositiveSmallIntegerField()
    description = models.TextField()
    notes = models.TextField(blank=True)

    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    location_timestamp = models.DateTimeField(null=True, blank=True)

    completed_quantity = models.FloatField(null=True, blank=True)
    issues_encountered = models.JSONField(default=list, blank=True)

    submitted_at = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='SUBMITTED')

    class Meta:
        ordering = ['-submitted_at']
        indexes = [
            models.Index(fields=['task_assignment_id', 'submitted_at']),
            models.Index(fields=['employee_id', 'submitted_at']),
        ]

    def __str__(self):
        return f"Progress {self.progress_percent}% for assignment {self.task_assignment_id}"
