"""
Custom exceptions shared by all layers.

Every exception carries a stable `code` so the service layer can hand a typed error back to the caller
without leaking Python class names into responses.
"""

from typing import ClassVar


class GameError(Exception):
    """Top-level exception of the application. Catch this one at layer boundaries."""

    code: ClassVar[str] = "GameError"


# --- DOMAIN ---
class GameStateError(GameError):
    """The game document breaks one of the lifecycle invariants."""

    code = "GameState"


class GameNotActiveError(GameStateError):
    """Move submitted after the game was completed or abandoned."""

    code = "GameNotActive"


class NotYourTurnError(GameError):
    code = "NotYourTurn"


class IllegalMoveError(GameError):
    """The move is well-formed, but the rules of the game do not allow it."""

    code = "IllegalMove"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MalformedMoveError(GameError):
    """The move payload does not have the shape the game expects."""

    code = "MalformedMove"


# --- PERSISTENCE ---
class GameNotFoundError(GameError):
    code = "GameNotFound"


class RepositoryError(GameError):
    code = "Repository"


class StaleWriteError(RepositoryError):
    """Conditional write rejected: the stored version moved on since it was read."""

    code = "StaleWrite"


class WriteConflictError(GameError):
    """The coordinator kept losing the conditional write and gave up."""

    code = "WriteConflict"


# --- REQUESTS ---
class InvalidRequestError(GameError):
    code = "InvalidRequest"


class InviteError(GameError):
    code = "Invite"
