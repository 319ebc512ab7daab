from projects.models import Project

from worker_tasks import settings as app_settings
from worker_tasks.core.types import Geofence


class ProjectClient:
    @staticmethod
    def get_project(project_id):
        return Project.objects.filter(id=project_id).first()

    @staticmethod
    def geofence_for(project):
        """
        Build the Geofence of a project.

        Args:
            project (Project): Project row.

        Returns:
            Geofence, or None when the project has no location at all
        """
        center = project.geofence_center
        if center is None:
            return None
        radius = project.geofence_radius
        variance = project.geofence_allowed_variance
        return Geofence(
            center_latitude=center[0],
            center_longitude=center[1],
            radius=float(radius if radius is not None else app_settings.DEFAULT_GEOFENCE_RADIUS_M),
            strict_mode=project.geofence_strict_mode is not False,
            allowed_variance=float(variance if variance is not None else app_settings.DEFAULT_ALLOWED_VARIANCE_M),
        )
