import logging
from typing import Iterable

from worker_tasks.clients.assignment_client import AssignmentClient
from worker_tasks.core import constants
from worker_tasks.core.types import SequenceResolution

logger = logging.getLogger(__name__)


class SequenceResolver:
    """
    Enforces same-day ordering: a task may start only when every task of the
    same worker, project and date with a lower sequence is completed.
    """

    def __init__(self, client=None):
        self.client = client or AssignmentClient

    def resolve(self, target, peers: Iterable) -> SequenceResolution:
        """
        Args:
            target: Assignment about to start.
            peers: Assignments sharing the target's (employee, project, date).
                The target itself may be included.

        Returns:
            SequenceResolution listing unfinished earlier tasks, ordered by
            sequence then id.
        """
        sequence = getattr(target, 'sequence', None)
        if sequence is None or sequence <= 1:
            return SequenceResolution(can_proceed=True)

        earlier = [
            peer for peer in peers
            if peer.id != target.id and peer.sequence is not None and peer.sequence < sequence
        ]
        if not earlier:
            return SequenceResolution(can_proceed=True)

        blocking = sorted(
            (peer for peer in earlier if peer.status != constants.STATUS_COMPLETED),
            key=lambda peer: (peer.sequence, peer.id)
        )
        if not blocking:
            return SequenceResolution(can_proceed=True)

        return SequenceResolution(
            can_proceed=False,
            blocking_tasks=[peer.summary() for peer in blocking],
        )

    def resolve_for_assignment(self, target) -> SequenceResolution:
        """Load the target's peers for its (employee, project, date) and resolve."""
        if target.sequence is None or target.sequence <= 1:
            return SequenceResolution(can_proceed=True)
        peers = self.client.get_peers(target.employee_id, target.project_id, target.date)
        return self.resolve(target, peers)
