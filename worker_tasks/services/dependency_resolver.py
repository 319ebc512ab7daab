import logging
from typing import Iterable, Optional, Any

from worker_tasks.clients.assignment_client import AssignmentClient
from worker_tasks.core import constants
from worker_tasks.core.types import DependencyResolution
from worker_tasks.core.validators import filter_dependency_ids

logger = logging.getLogger(__name__)


class DependencyResolver:
    """
    Decides whether every prerequisite assignment of a task is completed.
    """

    def __init__(self, client=None):
        self.client = client or AssignmentClient

    def resolve(self, dependency_ids: Optional[Iterable[Any]]) -> DependencyResolution:
        """
        Check a list of prerequisite assignment ids.

        Args:
            dependency_ids: Ordered prerequisite ids; malformed entries are ignored.

        Returns:
            DependencyResolution. Ids with no row are reported in ``missing_ids``,
            found but unfinished assignments in ``incomplete``.
        """
        if dependency_ids is not None and not isinstance(dependency_ids, (list, tuple)):
            logger.warning(f"Ignoring dependency value that is not a list: {dependency_ids!r}")
        ids = filter_dependency_ids(dependency_ids)
        if not ids:
            return DependencyResolution(can_proceed=True)

        found = self.client.get_many(set(ids))
        missing = sorted(set(ids) - set(found))

        incomplete = []
        seen = set()
        for dep_id in ids:
            assignment = found.get(dep_id)
            if assignment is None or dep_id in seen:
                continue
            seen.add(dep_id)
            if assignment.status != constants.STATUS_COMPLETED:
                incomplete.append({
                    'id': assignment.id,
                    'status': assignment.status,
                    'progress_percent': assignment.progress_percent or 0,
                })

        if missing:
            logger.warning(f"Dependency references to unknown assignments: {missing}")

        can_proceed = not missing and not incomplete
        return DependencyResolution(can_proceed=can_proceed, missing_ids=missing, incomplete=incomplete)
