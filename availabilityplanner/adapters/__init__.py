"""
Adapters layer - External integrations (schedule store, job assignments, credentials).
"""

from .assignment_client import AssignmentClient
from .credentials import CredentialStore
from .mock_clients import InMemoryScheduleStore, StaticAssignmentSource
from .persistence import SchedulePersistenceAdapter, ScheduleStoreProtocol
from .schedule_client import ScheduleClient

__all__ = [
    "AssignmentClient",
    "CredentialStore",
    "InMemoryScheduleStore",
    "SchedulePersistenceAdapter",
    "ScheduleClient",
    "ScheduleStoreProtocol",
    "StaticAssignmentSource",
]
