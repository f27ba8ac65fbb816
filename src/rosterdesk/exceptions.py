"""Base exception shared by all RosterDesk components."""


class RosterDeskError(Exception):
    """Base exception for RosterDesk errors."""


class ConfigError(RosterDeskError):
    """Configuration value is missing or invalid."""
