import os
import logging

from worker_tasks.utils.env_loader import load_env_from_file, env_bool, env_float

logger = logging.getLogger(__name__)

# Try different possible locations for the env file
env_paths = [
    os.path.join(os.path.dirname(__file__), 'env_var.env'),  # App directory
    os.path.join(os.path.dirname(os.path.dirname(__file__)), 'env_var.env'),  # Root directory
]

for path in env_paths:
    if load_env_from_file(path):
        break

# GPS accuracy thresholds in meters
GPS_POOR_ACCURACY_M = env_float('WORKER_TASKS_GPS_POOR_ACCURACY_M', 50.0)
GPS_VERY_POOR_ACCURACY_M = env_float('WORKER_TASKS_GPS_VERY_POOR_ACCURACY_M', 100.0)
GPS_MAX_BUFFER_M = env_float('WORKER_TASKS_GPS_MAX_BUFFER_M', 200.0)
# Admitting positions that only pass after subtracting the reported accuracy
# is a product decision; see DESIGN.md.
GPS_LENIENCY_ENABLED = env_bool('WORKER_TASKS_GPS_LENIENCY_ENABLED', True)

# Geofence defaults for projects that leave the values unset
DEFAULT_GEOFENCE_RADIUS_M = env_float('WORKER_TASKS_DEFAULT_GEOFENCE_RADIUS_M', 100.0)
DEFAULT_ALLOWED_VARIANCE_M = env_float('WORKER_TASKS_DEFAULT_ALLOWED_VARIANCE_M', 10.0)
BOUNDARY_WARNING_M = env_float('WORKER_TASKS_BOUNDARY_WARNING_M', 20.0)

# Request META key the authentication gateway fills with the acting employee id.
# The API trusts this header as is: the gateway must strip or overwrite any
# client-supplied value, otherwise a caller can act as any employee.
EMPLOYEE_HEADER = os.getenv('WORKER_TASKS_EMPLOYEE_HEADER', 'HTTP_X_EMPLOYEE_ID')

if GPS_VERY_POOR_ACCURACY_M < GPS_POOR_ACCURACY_M:
    logger.warning(
        f"WORKER_TASKS_GPS_VERY_POOR_ACCURACY_M ({GPS_VERY_POOR_ACCURACY_M}) is below "
        f"WORKER_TASKS_GPS_POOR_ACCURACY_M ({GPS_POOR_ACCURACY_M})."
    )
