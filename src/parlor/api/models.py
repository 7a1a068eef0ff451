"""Requests and Response models"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ValidationInfo, field_validator

from parlor.core.exceptions import InvalidRequestError
from parlor.core.models import GameModel, InviteModel
from parlor.core.shared_types import GameType

PlayerId = str


def _require_player_id(value: str) -> str:
    if not value.strip():
        raise InvalidRequestError("Player id cannot be empty.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    game_type: GameType
    # first party moves first (and plays white in chess)
    players: list[PlayerId]

    @field_validator("players")
    @classmethod
    def validate_players(cls, value: list[PlayerId]) -> list[PlayerId]:
        if len(value) != 2:
            raise InvalidRequestError(
                f"A game needs exactly two players, got {len(value)}."
            )
        for player in value:
            _require_player_id(player)
        if value[0] == value[1]:
            raise InvalidRequestError("You cannot start a game against yourself.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class PlayerActionRequest(BaseModel):
    game_id: UUID
    player_id: PlayerId

    @field_validator("player_id")
    @classmethod
    def validate_player_id(cls, value: PlayerId) -> PlayerId:
        return _require_player_id(value)


class MoveRequest(PlayerActionRequest):
    """
    The move payload depends on the game type:

    * tictactoe / memory: board index (int)
    * rps: "poop" | "toilet_paper" | "plunger"
    * wordle: 5 letter guess, hangman: single letter
    * chess: {"from": "e2", "to": "e4", "promotion": "q"} (squares may also be [row, col])

    The rule kernels own the validation of the payload itself.
    """

    move: Any


class LegalMovesRequest(PlayerActionRequest):
    pass


class AbandonGameRequest(PlayerActionRequest):
    pass


class ClaimTimeoutRequest(PlayerActionRequest):
    pass


class WatchGameRequest(BaseModel):
    game_id: UUID


class SendInviteRequest(BaseModel):
    sender: PlayerId
    receiver: PlayerId
    game_type: GameType

    @field_validator("sender")
    @classmethod
    def validate_sender(cls, value: PlayerId) -> PlayerId:
        return _require_player_id(value)

    @field_validator("receiver")
    @classmethod
    def validate_receiver(cls, value: PlayerId, info: ValidationInfo) -> PlayerId:
        _require_player_id(value)
        if value == info.data.get("sender"):
            raise InvalidRequestError("You cannot invite yourself.")
        return value


class InviteActionRequest(BaseModel):
    invite_id: UUID
    player_id: PlayerId

    @field_validator("player_id")
    @classmethod
    def validate_player_id(cls, value: PlayerId) -> PlayerId:
        return _require_player_id(value)


class ListInvitesRequest(BaseModel):
    player_id: PlayerId


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    game_type: GameType
    players: list[PlayerId]
    status: str
    current_turn: PlayerId
    winner: Optional[str]
    state: dict[str, Any]
    version: int
    created_at: datetime
    last_updated: datetime

    @classmethod
    def from_model(cls, game_id: UUID, model: GameModel) -> "GameResponse":
        return cls(
            game_id=game_id,
            game_type=GameType(model.game_type),
            players=list(model.players),
            status=model.status,
            current_turn=model.current_turn,
            winner=model.winner,
            state=model.state,
            version=model.version,
            created_at=model.created_at,
            last_updated=model.last_updated,
        )


class MoveErrorResponse(BaseModel):
    code: str
    message: str


class MoveResponse(BaseModel):
    """Typed outcome of a move (or abandon / timeout claim): `game` when accepted, `error` when rejected."""

    accepted: bool
    game: Optional[GameResponse] = None
    error: Optional[MoveErrorResponse] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_id: PlayerId
    legal_moves: list[str]


class InviteResponse(BaseModel):
    invite_id: UUID
    sender: PlayerId
    receiver: PlayerId
    game_type: GameType
    status: str
    created_at: datetime
    game_id: Optional[UUID] = None

    @classmethod
    def from_model(cls, invite_id: UUID, model: InviteModel) -> "InviteResponse":
        return cls(
            invite_id=invite_id,
            sender=model.sender,
            receiver=model.receiver,
            game_type=GameType(model.game_type),
            status=model.status,
            created_at=model.created_at,
            game_id=model.game_id,
        )
