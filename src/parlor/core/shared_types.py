"""
Type definitions used across layers
"""

from enum import StrEnum

# Type aliases to make signatures easier to read
PlayerId = str
Players = tuple[PlayerId, PlayerId]

# Stored in `winner` when a game ends without a winner
DRAW = "draw"


class GameType(StrEnum):
    TICTACTOE = "tictactoe"
    RPS = "rps"
    WORDLE = "wordle"
    HANGMAN = "hangman"
    CHESS = "chess"
    MEMORY = "memory"


class Status(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class InviteStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"
