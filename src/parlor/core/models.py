"""
Boundary layer data model(s).

These objects can be used to communicate with the Services.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

# Type aliases to make the models easier to read
PlayerName = str
KernelFields = dict[str, Any]


@dataclass
class GameModel:
    """Transport-safe representation of a game document used between API, Service, DB, and Game layers."""

    game_type: str
    players: list[PlayerName]
    status: str
    current_turn: PlayerName
    winner: Optional[str]
    state: KernelFields
    created_at: datetime
    last_updated: datetime
    version: int = 0


@dataclass
class GameUpdate:
    """
    Partial game document.

    `None` leaves the stored value untouched. `state` is merged key-by-key into the stored kernel fields.
    """

    status: Optional[str] = None
    current_turn: Optional[PlayerName] = None
    winner: Optional[str] = None
    state: KernelFields = field(default_factory=dict)
    last_updated: Optional[datetime] = None


@dataclass
class InviteModel:
    sender: PlayerName
    receiver: PlayerName
    game_type: str
    status: str
    created_at: datetime
    game_id: Optional[UUID] = None
