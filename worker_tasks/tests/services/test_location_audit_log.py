from django.core.exceptions import ValidationError
from django.test import TestCase

from worker_tasks.core import constants
from worker_tasks.core.types import FieldValidationError, InvalidPositionError, Position
from worker_tasks.models import LocationLog
from worker_tasks.services.location_audit_log import LocationAuditLog


class LocationAuditLogTest(TestCase):
    def setUp(self):
        self.audit_log = LocationAuditLog()

    def append(self, **overrides):
        fields = {
            'employee_id': 7,
            'project_id': 3,
            'position': Position(40.7130, -74.0058, accuracy=12),
            'log_type': constants.LOG_GEOFENCE_VALIDATION,
            'inside_geofence': True,
        }
        fields.update(overrides)
        return self.audit_log.append(**fields)

    def test_append_persists_entry(self):
        entry = self.append(task_assignment_id=11, progress_percent=40, log_type=constants.LOG_PROGRESS_UPDATE)

        stored = LocationLog.objects.get(pk=entry.id)
        self.assertEqual(stored.employee_id, 7)
        self.assertEqual(stored.accuracy, 12)
        self.assertEqual(stored.task_assignment_id, 11)
        self.assertEqual(stored.progress_percent, 40)
        self.assertTrue(stored.inside_geofence)

    def test_ids_are_unique_and_increasing(self):
        ids = [self.append().id for _ in range(5)]
        self.assertEqual(len(set(ids)), 5)
        self.assertEqual(ids, sorted(ids))

    def test_invalid_position_rejected(self):
        with self.assertRaises(InvalidPositionError):
            self.append(position=Position(-91.0, 0.0))
        self.assertEqual(LocationLog.objects.count(), 0)

    def test_invalid_employee_rejected(self):
        with self.assertRaises(FieldValidationError):
            self.append(employee_id=0)

    def test_unknown_log_type_rejected(self):
        with self.assertRaises(FieldValidationError):
            self.append(log_type='TELEPORT')

    def test_entries_cannot_be_updated(self):
        entry = self.append()
        entry.inside_geofence = False
        with self.assertRaises(ValidationError):
            entry.save()
        with self.assertRaises(ValidationError):
            LocationLog.objects.filter(pk=entry.pk).update(inside_geofence=False)
        self.assertTrue(LocationLog.objects.get(pk=entry.pk).inside_geofence)

    def test_entries_cannot_be_deleted(self):
        entry = self.append()
        with self.assertRaises(ValidationError):
            entry.delete()
        with self.assertRaises(ValidationError):
            LocationLog.objects.all().delete()
        self.assertEqual(LocationLog.objects.count(), 1)
