"""
Geofence evaluation for task admission.

This module computes great-circle distances between an observed position and
a project's geofence center and decides whether the position is admissible
under the project's strict or variance-tolerant policy, optionally relaxed
for weak GPS fixes by an AccuracyPolicy.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Any
import logging

import numpy as np

from worker_tasks import settings as app_settings
from worker_tasks.core.constants import EARTH_RADIUS_M
from worker_tasks.core.types import Position, Geofence, GeofenceEvaluation
from worker_tasks.core.validators import validate_coordinates, validate_accuracy

logger = logging.getLogger(__name__)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points
    on the earth (specified in decimal degrees).

    Args:
        lat1, lon1: Coordinates of first point
        lat2, lon2: Coordinates of second point

    Returns:
        Distance in meters
    """
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    # Convert decimal degrees to radians
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])

    # Haversine formula
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    c = 2 * np.arcsin(np.minimum(1.0, np.sqrt(a)))

    return float(c * EARTH_RADIUS_M)


@dataclass(frozen=True)
class AccuracyPolicy:
    """
    Tunable leniency for positions reported with a large GPS accuracy radius.

    Above ``poor_threshold`` the evaluation carries a warning. Above
    ``very_poor_threshold`` a position that failed the base check is admitted
    when ``distance - min(accuracy, max_buffer) <= radius``.
    """
    poor_threshold: float = 50.0
    very_poor_threshold: float = 100.0
    max_buffer: float = 200.0
    leniency_enabled: bool = True

    @classmethod
    def from_settings(cls) -> 'AccuracyPolicy':
        return cls(
            poor_threshold=app_settings.GPS_POOR_ACCURACY_M,
            very_poor_threshold=app_settings.GPS_VERY_POOR_ACCURACY_M,
            max_buffer=app_settings.GPS_MAX_BUFFER_M,
            leniency_enabled=app_settings.GPS_LENIENCY_ENABLED,
        )

    @classmethod
    def strict(cls) -> 'AccuracyPolicy':
        """Policy that never relaxes the geofence."""
        return cls(leniency_enabled=False)

    def warning_for(self, accuracy: Optional[float]) -> Optional[str]:
        if accuracy is None or accuracy <= self.poor_threshold:
            return None
        return f"GPS accuracy is poor ({round(accuracy)}m). Location validation may be unreliable."

    def buffer_for(self, accuracy: Optional[float]) -> float:
        """Distance that may be discounted for this accuracy; 0 when no leniency applies."""
        if not self.leniency_enabled or accuracy is None or accuracy <= self.very_poor_threshold:
            return 0.0
        return min(accuracy, self.max_buffer)


class GeofenceEvaluator:
    """
    Checks observed positions against project geofences.
    """

    def __init__(self, accuracy_policy: Optional[AccuracyPolicy] = None):
        self.accuracy_policy = accuracy_policy or AccuracyPolicy.from_settings()

    def evaluate(self, position: Position, geofence: Geofence,
                 policy: Optional[AccuracyPolicy] = None) -> GeofenceEvaluation:
        """
        Evaluate a position against a geofence.

        Args:
            position: Observed position, with optional GPS accuracy in meters.
            geofence: Project geofence.
            policy: Overrides the evaluator's accuracy policy for this call.

        Returns:
            GeofenceEvaluation with the distance, inside verdict and admissibility.

        Raises:
            InvalidPositionError: If the position coordinates are missing or out of range.
        """
        policy = policy or self.accuracy_policy
        latitude, longitude = validate_coordinates(position.latitude, position.longitude)
        accuracy = validate_accuracy(position.accuracy)

        distance = haversine_distance(
            latitude, longitude,
            geofence.center_latitude, geofence.center_longitude
        )
        inside = distance <= geofence.radius
        admissible = inside if geofence.strict_mode else distance <= geofence.max_admissible_distance

        accuracy_adjusted = False
        if not admissible:
            buffer = policy.buffer_for(accuracy)
            if buffer > 0 and distance - buffer <= geofence.radius:
                admissible = True
                accuracy_adjusted = True
                logger.info(
                    f"Position {distance:.1f}m from center admitted with GPS accuracy {accuracy}m "
                    f"(radius {geofence.radius}m)"
                )

        return GeofenceEvaluation(
            distance_meters=distance,
            inside_radius=inside,
            admissible=admissible,
            reason=self._reason(distance, geofence, admissible, accuracy_adjusted, accuracy),
            strict_mode=geofence.strict_mode,
            allowed_radius=geofence.radius,
            allowed_variance=geofence.allowed_variance,
            accuracy=accuracy,
            accuracy_warning=policy.warning_for(accuracy),
            accuracy_adjusted=accuracy_adjusted,
        )

    @staticmethod
    def _reason(distance, geofence, admissible, accuracy_adjusted, accuracy) -> str:
        if accuracy_adjusted:
            return f"Location validated with GPS accuracy consideration ({round(accuracy)}m accuracy)"
        if admissible:
            return "Location validated successfully"
        message = (
            f"You are {round(distance)}m from the project site. "
            f"Maximum allowed distance is {round(geofence.radius)}m"
        )
        if not geofence.strict_mode:
            message += f" (with {round(geofence.allowed_variance)}m variance)"
        return message + "."


def gps_accuracy_quality(accuracy: Optional[float]) -> Dict[str, Any]:
    """
    Grade a reported GPS accuracy radius.

    Args:
        accuracy: Accuracy in meters, or None.

    Returns:
        Dict with ``quality``, ``description`` and ``reliable``.
    """
    if accuracy is None or accuracy <= 0:
        return {'quality': 'unknown', 'description': 'GPS accuracy not available', 'reliable': False}
    if accuracy <= 5:
        return {'quality': 'excellent', 'description': 'Very high accuracy GPS signal', 'reliable': True}
    if accuracy <= 15:
        return {'quality': 'good', 'description': 'Good accuracy GPS signal', 'reliable': True}
    if accuracy <= 50:
        return {'quality': 'fair', 'description': 'Fair accuracy GPS signal', 'reliable': True}
    if accuracy <= 100:
        return {
            'quality': 'poor',
            'description': 'Poor accuracy GPS signal - validation may be unreliable',
            'reliable': False,
        }
    return {
        'quality': 'very_poor',
        'description': 'Very poor accuracy GPS signal - validation unreliable',
        'reliable': False,
    }


def check_boundary_approach(evaluation: GeofenceEvaluation, warning_distance: float = 20.0) -> Dict[str, Any]:
    """
    Report whether an admissible position is close to the geofence edge.

    Args:
        evaluation: Result of GeofenceEvaluator.evaluate.
        warning_distance: Distance from the edge, in meters, that triggers a warning.
    """
    if not evaluation.admissible:
        return {
            'is_approaching': False,
            'is_inside': False,
            'distance': round(evaluation.distance_meters),
            'message': 'Outside geofence',
        }

    distance_from_boundary = evaluation.allowed_radius - evaluation.distance_meters
    is_approaching = distance_from_boundary <= warning_distance
    return {
        'is_approaching': is_approaching,
        'is_inside': evaluation.inside_radius,
        'distance': round(evaluation.distance_meters),
        'distance_from_boundary': round(distance_from_boundary),
        'warning_distance': warning_distance,
        'message': (
            f"Approaching geofence boundary ({round(distance_from_boundary)}m remaining)"
            if is_approaching else 'Within safe distance from boundary'
        ),
    }
