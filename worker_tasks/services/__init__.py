from .dependency_resolver import DependencyResolver
from .sequence_resolver import SequenceResolver
from .location_audit_log import LocationAuditLog
from .state_machine import AssignmentStateMachine
