from projects.models import Project

from worker_tasks.core import constants
from worker_tasks.models import TaskAssignment

WORK_DATE = '2024-05-14'

# New York site used across the tests
SITE_LATITUDE = 40.7128
SITE_LONGITUDE = -74.0060


def make_project(**overrides):
    fields = {
        'name': 'Harbor Tower',
        'project_code': 'HT-01',
        'geofence_latitude': SITE_LATITUDE,
        'geofence_longitude': SITE_LONGITUDE,
        'geofence_radius': 100,
        'geofence_strict_mode': True,
    }
    fields.update(overrides)
    return Project.objects.create(**fields)


def make_assignment(project, employee_id=7, **overrides):
    fields = {
        'employee_id': employee_id,
        'project_id': project.id,
        'date': WORK_DATE,
        'status': constants.STATUS_QUEUED,
        'progress_percent': 0,
    }
    fields.update(overrides)
    return TaskAssignment.objects.create(**fields)
