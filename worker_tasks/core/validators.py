"""
Input validation helpers.

Every helper either returns the normalized value or raises a
FieldValidationError carrying one of the result codes from
worker_tasks.core.constants. Nothing is clamped or silently corrected.
"""
import math
import re
from datetime import date
from typing import Any, Iterable, List, Optional

from worker_tasks.core import constants
from worker_tasks.core.types import FieldValidationError, InvalidPositionError, Position

DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_coordinates(latitude: Any, longitude: Any):
    """
    Check a latitude/longitude pair.

    Args:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.

    Returns:
        (latitude, longitude) as floats.

    Raises:
        InvalidPositionError: MISSING_COORDINATES, INVALID_LATITUDE or INVALID_LONGITUDE.
    """
    if latitude is None or longitude is None:
        raise InvalidPositionError(constants.MISSING_COORDINATES, "Missing latitude or longitude")

    if not _is_number(latitude) or math.isnan(latitude) or math.isinf(latitude):
        raise InvalidPositionError(constants.INVALID_LATITUDE, "Latitude must be a number between -90 and 90")
    if not _is_number(longitude) or math.isnan(longitude) or math.isinf(longitude):
        raise InvalidPositionError(constants.INVALID_LONGITUDE, "Longitude must be a number between -180 and 180")

    if not constants.MIN_LATITUDE <= latitude <= constants.MAX_LATITUDE:
        raise InvalidPositionError(constants.INVALID_LATITUDE, "Latitude must be between -90 and 90")
    if not constants.MIN_LONGITUDE <= longitude <= constants.MAX_LONGITUDE:
        raise InvalidPositionError(constants.INVALID_LONGITUDE, "Longitude must be between -180 and 180")

    return float(latitude), float(longitude)


def validate_accuracy(accuracy: Any) -> Optional[float]:
    if accuracy is None:
        return None
    if not _is_number(accuracy) or math.isnan(accuracy) or accuracy < 0:
        raise FieldValidationError(constants.INVALID_GPS_ACCURACY, "Invalid GPS accuracy value")
    return float(accuracy)


def validate_position(position: Optional[Position]) -> Position:
    """Validate a Position in place and return it."""
    if position is None:
        raise InvalidPositionError(constants.MISSING_COORDINATES, "Location data is required")
    position.latitude, position.longitude = validate_coordinates(position.latitude, position.longitude)
    position.accuracy = validate_accuracy(position.accuracy)
    return position


def validate_assignment_id(value: Any) -> int:
    if not is_positive_int(value):
        raise FieldValidationError(constants.INVALID_ASSIGNMENT_ID, "Assignment id must be a positive integer")
    return value


def validate_progress_percent(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise FieldValidationError(constants.INVALID_PROGRESS_VALUE, "Progress percentage must be an integer")
    if not constants.MIN_PROGRESS <= value <= constants.MAX_PROGRESS:
        raise FieldValidationError(
            constants.INVALID_PROGRESS_VALUE,
            f"Progress percentage must be between {constants.MIN_PROGRESS} and {constants.MAX_PROGRESS}"
        )
    return value


def validate_description(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise FieldValidationError(constants.MISSING_DESCRIPTION, "Description is required")
    if len(value) > constants.MAX_DESCRIPTION_LENGTH:
        raise FieldValidationError(
            constants.VALIDATION_ERROR,
            f"Description must be at most {constants.MAX_DESCRIPTION_LENGTH} characters"
        )
    return value.strip()


def clean_issues(issues: Optional[Iterable[Any]]) -> List[str]:
    """Keep at most MAX_ISSUES non-empty strings, each trimmed to MAX_ISSUE_LENGTH."""
    if not issues:
        return []
    cleaned = []
    for issue in issues:
        if not isinstance(issue, str):
            continue
        issue = issue.strip()[:constants.MAX_ISSUE_LENGTH]
        if issue:
            cleaned.append(issue)
        if len(cleaned) == constants.MAX_ISSUES:
            break
    return cleaned


def filter_dependency_ids(dependency_ids: Optional[Iterable[Any]]) -> List[int]:
    """
    Drop malformed references (non-integers, bools, non-positive values), keeping order.

    A value that is not a list or tuple holds no usable references.
    """
    if not isinstance(dependency_ids, (list, tuple)):
        return []
    return [dep_id for dep_id in dependency_ids if is_positive_int(dep_id)]


def is_valid_work_date(value: Any) -> bool:
    """True for a real calendar day written as YYYY-MM-DD."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
