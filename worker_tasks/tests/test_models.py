from django.test import TestCase

from projects.models import Project
from worker_tasks.clients.project_client import ProjectClient
from worker_tasks.core import constants
from worker_tasks.models import TaskAssignment
from worker_tasks.tests.factories import make_assignment, make_project


class TaskAssignmentModelTest(TestCase):
    def setUp(self):
        self.project = make_project()

    def test_defaults(self):
        assignment = TaskAssignment.objects.create(employee_id=1, project_id=self.project.id, date='2024-05-14')

        self.assertEqual(assignment.status, constants.STATUS_QUEUED)
        self.assertEqual(assignment.progress_percent, 0)
        self.assertEqual(assignment.dependencies, [])
        self.assertTrue(assignment.geofence_required)
        self.assertIsNotNone(assignment.assigned_at)
        self.assertFalse(assignment.has_started)

    def test_summary(self):
        assignment = make_assignment(self.project, sequence=3, status=constants.STATUS_IN_PROGRESS, progress_percent=25)
        self.assertEqual(
            assignment.summary(),
            {'id': assignment.id, 'sequence': 3, 'status': constants.STATUS_IN_PROGRESS, 'progress_percent': 25}
        )
        self.assertTrue(assignment.has_started)
        self.assertFalse(assignment.is_completed)

    def test_default_ordering(self):
        third = make_assignment(self.project, sequence=3)
        first = make_assignment(self.project, sequence=1)
        second = make_assignment(self.project, sequence=2)
        self.assertEqual(list(TaskAssignment.objects.all()), [first, second, third])


class ProjectGeofenceTest(TestCase):
    def test_explicit_center_preferred(self):
        project = make_project(latitude=1.0, longitude=2.0)
        self.assertEqual(project.geofence_center, (40.7128, -74.0060))

    def test_site_location_fallback(self):
        project = Project.objects.create(name='Depot', latitude=1.0, longitude=2.0)
        self.assertEqual(project.geofence_center, (1.0, 2.0))
        self.assertTrue(project.has_geofence)

    def test_no_location(self):
        project = Project.objects.create(name='Unknown')
        self.assertFalse(project.has_geofence)
        self.assertIsNone(ProjectClient.geofence_for(project))

    def test_geofence_for(self):
        project = make_project(geofence_radius=150, geofence_strict_mode=False, geofence_allowed_variance=25)
        geofence = ProjectClient.geofence_for(project)

        self.assertEqual(geofence.radius, 150.0)
        self.assertFalse(geofence.strict_mode)
        self.assertEqual(geofence.max_admissible_distance, 175.0)
