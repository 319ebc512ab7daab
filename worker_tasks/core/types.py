"""
Core data types for worker task admission.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)


class FieldValidationError(ValueError):
    """Raised by the input validators; carries the rejection code."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidPositionError(FieldValidationError):
    """A malformed coordinate. This is a client bug, not GPS noise."""


@dataclass
class Position:
    """
    An observed GPS fix, in decimal degrees.
    """
    latitude: float
    longitude: float
    accuracy: Optional[float] = None  # Reported GPS accuracy radius in meters
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'latitude': self.latitude,
            'longitude': self.longitude,
            'accuracy': self.accuracy,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class Geofence:
    """
    Circular boundary around a project site.
    """
    center_latitude: float
    center_longitude: float
    radius: float  # meters
    strict_mode: bool = True
    allowed_variance: float = 10.0  # meters, only used when strict_mode is False

    @property
    def max_admissible_distance(self) -> float:
        if self.strict_mode:
            return self.radius
        return self.radius + self.allowed_variance

    def to_dict(self) -> Dict[str, Any]:
        return {
            'center': {'latitude': self.center_latitude, 'longitude': self.center_longitude},
            'radius': self.radius,
            'strict_mode': self.strict_mode,
            'allowed_variance': self.allowed_variance,
        }


@dataclass
class GeofenceEvaluation:
    """Result of checking one position against one geofence."""
    distance_meters: float
    inside_radius: bool
    admissible: bool
    reason: str
    strict_mode: bool = True
    allowed_radius: float = 0.0
    allowed_variance: float = 0.0
    accuracy: Optional[float] = None
    accuracy_warning: Optional[str] = None
    accuracy_adjusted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'distance': round(self.distance_meters),
            'inside_geofence': self.inside_radius,
            'admissible': self.admissible,
            'allowed_radius': self.allowed_radius,
            'strict_mode': self.strict_mode,
            'allowed_variance': self.allowed_variance,
            'gps_accuracy': self.accuracy,
            'accuracy_warning': self.accuracy_warning,
            'accuracy_adjusted': self.accuracy_adjusted,
            'message': self.reason,
        }


@dataclass
class DependencyResolution:
    can_proceed: bool
    missing_ids: List[int] = field(default_factory=list)
    incomplete: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def message(self) -> Optional[str]:
        if self.can_proceed:
            return None
        parts = []
        if self.missing_ids:
            parts.append(f"Missing dependency assignments: {', '.join(str(i) for i in self.missing_ids)}")
        if self.incomplete:
            pending = ', '.join(f"Task {d['id']} ({d['status']})" for d in self.incomplete)
            parts.append(f"Dependent tasks must be completed first: {pending}")
        return '. '.join(parts)


@dataclass
class SequenceResolution:
    can_proceed: bool
    blocking_tasks: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def message(self) -> Optional[str]:
        if self.can_proceed:
            return None
        earlier = ', '.join(f"Sequence {t['sequence']} (Task {t['id']})" for t in self.blocking_tasks)
        return f"Tasks must be completed in sequence. Complete earlier tasks first: {earlier}"


@dataclass
class TransitionResult:
    """
    Outcome of a state machine operation. Rejections are returned, never
    raised, so callers always get a stable code and the decision detail.
    """
    success: bool
    code: str
    message: str = ''
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, code: str, message: str = '', **data) -> 'TransitionResult':
        return cls(success=True, code=code, message=message, data=data)

    @classmethod
    def reject(cls, code: str, message: str = '', **data) -> 'TransitionResult':
        return cls(success=False, code=code, message=message, data=data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
