"""Custom exceptions for the Roster Store."""

from rosterdesk.exceptions import RosterDeskError


class RosterStoreError(RosterDeskError):
    """Base exception for Roster Store errors."""


class StorageUnavailableError(RosterStoreError):
    """Backing store could not be read or written."""


class RosterConflictError(RosterStoreError):
    """Roster was written by someone else since it was read."""

    def __init__(self, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Roster version is {actual_version}, expected {expected_version}"
        )
        self.expected_version = expected_version
        self.actual_version = actual_version


class DuplicateStudentIdError(RosterStoreError):
    """Two records in one roster share an id."""
