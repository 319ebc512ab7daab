# --- Assignment statuses ---
STATUS_QUEUED = 'queued'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_COMPLETED = 'completed'

# --- Location log types ---
LOG_CHECK_IN = 'CHECK_IN'
LOG_CHECK_OUT = 'CHECK_OUT'
LOG_TASK_START = 'TASK_START'
LOG_PROGRESS_UPDATE = 'PROGRESS_UPDATE'
LOG_TASK_COMPLETE = 'TASK_COMPLETE'
LOG_PERIODIC = 'PERIODIC'
LOG_MANUAL = 'MANUAL'
LOG_GEOFENCE_VALIDATION = 'GEOFENCE_VALIDATION'

# --- Earth model ---
EARTH_RADIUS_M = 6371000.0

# --- Coordinate bounds ---
MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0

# --- Progress ---
MIN_PROGRESS = 0
MAX_PROGRESS = 100
MAX_DESCRIPTION_LENGTH = 1000
MAX_NOTES_LENGTH = 500
MAX_ISSUES = 10
MAX_ISSUE_LENGTH = 200

# --- Result codes: rejections ---
INVALID_LATITUDE = 'INVALID_LATITUDE'
INVALID_LONGITUDE = 'INVALID_LONGITUDE'
MISSING_COORDINATES = 'MISSING_COORDINATES'
INVALID_GPS_ACCURACY = 'INVALID_GPS_ACCURACY'
GEOFENCE_VALIDATION_FAILED = 'GEOFENCE_VALIDATION_FAILED'
GEOFENCE_NOT_CONFIGURED = 'GEOFENCE_NOT_CONFIGURED'
DEPENDENCIES_NOT_MET = 'DEPENDENCIES_NOT_MET'
SEQUENCE_VALIDATION_FAILED = 'SEQUENCE_VALIDATION_FAILED'
ALREADY_STARTED = 'ALREADY_STARTED'
TASK_ALREADY_COMPLETED = 'TASK_ALREADY_COMPLETED'
TASK_NOT_STARTED = 'TASK_NOT_STARTED'
INVALID_PROGRESS_DECREASE = 'INVALID_PROGRESS_DECREASE'
INVALID_PROGRESS_VALUE = 'INVALID_PROGRESS_VALUE'
MISSING_DESCRIPTION = 'MISSING_DESCRIPTION'
INVALID_ASSIGNMENT_ID = 'INVALID_ASSIGNMENT_ID'
UNAUTHORIZED = 'UNAUTHORIZED'
NOT_FOUND = 'NOT_FOUND'
PROJECT_NOT_FOUND = 'PROJECT_NOT_FOUND'
NO_ACTIVE_ASSIGNMENT = 'NO_ACTIVE_ASSIGNMENT'
VALIDATION_ERROR = 'VALIDATION_ERROR'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'

# --- Result codes: success ---
TASK_STARTED = 'TASK_STARTED'
PROGRESS_UPDATED = 'PROGRESS_UPDATED'
TASK_COMPLETED = 'TASK_COMPLETED'
LOCATION_VALIDATED = 'LOCATION_VALIDATED'

# --- Next actions returned after a progress update ---
NEXT_ACTION_CONTINUE = 'continue_work'
NEXT_ACTION_RESOLVE_ISSUES = 'resolve_issues'
NEXT_ACTION_COMPLETED = 'task_completed'
