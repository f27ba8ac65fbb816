"""RosterDesk - Course roster with role-scoped student records."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the installed RosterDesk version."""
    return __version__
