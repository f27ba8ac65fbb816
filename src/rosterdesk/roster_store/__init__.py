"""Roster Store - Durable whole-roster storage for student records."""

from rosterdesk.roster_store.exceptions import (
    DuplicateStudentIdError,
    RosterConflictError,
    RosterStoreError,
    StorageUnavailableError,
)
from rosterdesk.roster_store.models import (
    MASTER_FIELDS,
    SLOT_COUNT,
    RosterSnapshot,
    Student,
    StudentField,
)
from rosterdesk.roster_store.repository import RosterRepository

__all__ = [
    "MASTER_FIELDS",
    "SLOT_COUNT",
    "DuplicateStudentIdError",
    "RosterConflictError",
    "RosterRepository",
    "RosterSnapshot",
    "RosterStoreError",
    "StorageUnavailableError",
    "Student",
    "StudentField",
]
