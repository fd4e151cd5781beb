from __future__ import annotations


class LeagueError(Exception):
    """Base class for engine errors."""


class InvalidArgumentError(LeagueError, ValueError):
    pass


class NotFoundError(LeagueError, LookupError):
    pass


class DegenerateStateError(LeagueError):
    """Raised when both sides of a match have zero strength."""
