from .task_assignment import TaskAssignment
from .location_log import LocationLog
from .task_progress import TaskProgressRecord
