"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_engine import AssignmentSourceProtocol, AvailabilityEngine
from .availability_store import AvailabilityStore, BatchResult

__all__ = ["AssignmentSourceProtocol", "AvailabilityEngine", "AvailabilityStore", "BatchResult"]
