"""Errors raised by game commands.

Every error is recoverable: a command that raises leaves the session untouched
and the chat layer reports `str(error)` back to the group.
"""

from __future__ import annotations


class RouletteError(Exception):
    """Base class for all rejected commands."""


class ValidationError(RouletteError):
    """Malformed command, e.g. a shot without a target."""


class OutOfTurnError(RouletteError):
    """The actor does not hold the current turn."""


class InvalidTargetError(RouletteError):
    """Target is not in the roster or is already eliminated."""


class StateConflictError(RouletteError):
    """Command is not accepted in the current lobby status."""


class ItemError(RouletteError):
    """Item not owned, already used, or its precondition is not met."""


class NotFoundError(RouletteError):
    """Unknown room, player or item id."""


class AuthorizationError(RouletteError):
    """Actor is not a participant, or not allowed to run the command."""
