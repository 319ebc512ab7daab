from django.test import SimpleTestCase

from worker_tasks.api.serializers import (
    GeofenceValidateQuerySerializer,
    PositionSerializer,
    ProgressRequestSerializer,
    StartTaskRequestSerializer,
    error_code_from,
)
from worker_tasks.core import constants


class StartTaskRequestSerializerTests(SimpleTestCase):

    def test_camel_case_keys_map_to_snake_case(self):
        serializer = StartTaskRequestSerializer(data={
            'assignmentId': 12,
            'position': {'latitude': 1.5, 'longitude': 2.5, 'accuracy': 4},
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data['assignment_id'], 12)

        position = PositionSerializer.to_position(serializer.validated_data['position'])
        self.assertEqual((position.latitude, position.longitude, position.accuracy), (1.5, 2.5, 4.0))
        self.assertIsNone(position.timestamp)

    def test_position_is_optional_at_the_boundary(self):
        serializer = StartTaskRequestSerializer(data={'assignmentId': 12})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertIsNone(PositionSerializer.to_position(serializer.validated_data.get('position')))

    def test_first_failing_field_decides_code(self):
        serializer = StartTaskRequestSerializer(data={'assignmentId': 0, 'position': {'latitude': 100}})
        self.assertFalse(serializer.is_valid())
        self.assertEqual(error_code_from(serializer.errors), constants.INVALID_ASSIGNMENT_ID)

    def test_position_errors(self):
        cases = [
            ({'latitude': 'north', 'longitude': 0}, constants.INVALID_LATITUDE),
            ({'latitude': 0, 'longitude': 181}, constants.INVALID_LONGITUDE),
            ({'longitude': 0}, constants.MISSING_COORDINATES),
            ({'latitude': None, 'longitude': 0}, constants.MISSING_COORDINATES),
            ({'latitude': 0, 'longitude': 0, 'accuracy': -3}, constants.INVALID_GPS_ACCURACY),
            ('here', constants.MISSING_COORDINATES),
        ]
        for position, expected in cases:
            serializer = StartTaskRequestSerializer(data={'assignmentId': 3, 'position': position})
            self.assertFalse(serializer.is_valid())
            self.assertEqual(error_code_from(serializer.errors), expected, position)


class ProgressRequestSerializerTests(SimpleTestCase):

    def test_valid_payload(self):
        serializer = ProgressRequestSerializer(data={
            'assignmentId': 4,
            'progressPercent': 55,
            'description': 'Framed two walls',
            'completedQuantity': 2,
            'issuesEncountered': ['Missing studs'],
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        data = serializer.validated_data
        self.assertEqual(data['progress_percent'], 55)
        self.assertEqual(data['completed_quantity'], 2.0)
        self.assertEqual(data['issues'], ['Missing studs'])
        self.assertEqual(data['notes'], '')

    def test_notes_too_long(self):
        serializer = ProgressRequestSerializer(data={
            'assignmentId': 4, 'progressPercent': 55, 'description': 'x', 'notes': 'n' * 501,
        })
        self.assertFalse(serializer.is_valid())
        self.assertEqual(error_code_from(serializer.errors), constants.VALIDATION_ERROR)

    def test_missing_description(self):
        serializer = ProgressRequestSerializer(data={'assignmentId': 4, 'progressPercent': 55})
        self.assertFalse(serializer.is_valid())
        self.assertEqual(error_code_from(serializer.errors), constants.MISSING_DESCRIPTION)


class GeofenceValidateQuerySerializerTests(SimpleTestCase):

    def test_query_strings_are_parsed(self):
        serializer = GeofenceValidateQuerySerializer(data={'latitude': '40.7', 'longitude': '-74.0', 'projectId': '9'})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data['project_id'], 9)
        self.assertEqual(serializer.validated_data['latitude'], 40.7)

    def test_invalid_project_id(self):
        serializer = GeofenceValidateQuerySerializer(data={'latitude': 1, 'longitude': 1, 'projectId': 0})
        self.assertFalse(serializer.is_valid())
        self.assertEqual(error_code_from(serializer.errors), constants.VALIDATION_ERROR)
