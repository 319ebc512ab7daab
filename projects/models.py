from django.db import models


class Project(models.Model):
    """
    Construction project. Only the location and geofence columns are read by
    the worker task admission checks; the rest of the project lifecycle is
    managed elsewhere.
    """
    STATUS_CHOICES = [
        ('planned', 'Planned'),
        ('active', 'Active'),
        ('on_hold', 'On Hold'),
        ('completed', 'Completed'),
    ]

    name = models.CharField(max_length=200)
    project_code = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    address = models.CharField(max_length=255, blank=True)

    # Site location
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    # Geofence; the center falls back to the site location when unset
    geofence_latitude = models.FloatField(null=True, blank=True)
    geofence_longitude = models.FloatField(null=True, blank=True)
    geofence_radius = models.FloatField(default=100, help_text="Radius in meters")
    geofence_strict_mode = models.BooleanField(default=True)
    geofence_allowed_variance = models.FloatField(
        default=10,
        help_text="Extra tolerance in meters, applied only when strict mode is off"
    )

    supervisor_id = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.status})"

    @property
    def geofence_center(self):
        """(latitude, longitude) of the geofence center, or None when the project has no location."""
        if self.geofence_latitude is not None and self.geofence_longitude is not None:
            return self.geofence_latitude, self.geofence_longitude
        if self.latitude is not None and self.longitude is not None:
            return self.latitude, self.longitude
        return None

    @property
    def has_geofence(self):
        return self.geofence_center is not None

    class Meta:
        indexes = [
            models.Index(fields=['status']),
        ]
