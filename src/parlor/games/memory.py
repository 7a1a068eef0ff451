"""
Memory match on a 4x4 grid (8 pairs).

The game opens with every card visible for a short memorize phase (`locked`). After that a turn is two flips:
a matching pair scores and the same player goes again, a mismatch flips both cards back and passes the turn.
"""

import random
from datetime import datetime, timedelta
from typing import Any, Mapping

from parlor.core.config import Config
from parlor.core.exceptions import IllegalMoveError
from parlor.core.shared_types import DRAW, GameType, PlayerId, Players
from parlor.games.kernel import Fields, RuleKernel, Transition, require_int

CARD_SYMBOLS: tuple[str, ...] = (
    "💩",
    "🧻",
    "🚽",
    "🧼",
    "🧴",
    "🚿",
    "🛁",
    "🪠",
)
BOARD_SIZE = 2 * len(CARD_SYMBOLS)


def deal_cards(rng: random.Random) -> list[str]:
    cards = [symbol for symbol in CARD_SYMBOLS for _ in range(2)]
    rng.shuffle(cards)
    return cards


def leading_player(scores: Mapping[PlayerId, int], players: Players) -> str:
    first, second = players
    if scores[first] == scores[second]:
        return DRAW
    return first if scores[first] > scores[second] else second


class MemoryKernel(RuleKernel):
    game_type = GameType.MEMORY

    def __init__(self, preview_seconds: int = Config.MEMORY_PREVIEW_SECONDS) -> None:
        self.preview_seconds = preview_seconds

    def initial_fields(
        self, players: Players, now: datetime, rng: random.Random
    ) -> Fields:
        unlock_at = now + timedelta(seconds=self.preview_seconds)
        return {
            "cards": deal_cards(rng),
            "flippedCards": [],
            "matchedPairs": [],
            "scores": {p: 0 for p in players},
            "locked": self.preview_seconds > 0,
            "unlockAt": unlock_at.timestamp(),
            "lastPair": [],
        }

    def apply_move(
        self,
        fields: Mapping[str, Any],
        players: Players,
        player: PlayerId,
        raw_move: Any,
        now: datetime,
    ) -> Transition:
        index = require_int(raw_move, "card index")
        cards: list[str] = fields["cards"]
        flipped: list[int] = list(fields["flippedCards"])
        matched: list[int] = list(fields["matchedPairs"])

        changed: Fields = {}
        if fields.get("locked", False):
            if now.timestamp() < fields.get("unlockAt", 0):
                raise IllegalMoveError("The board is locked while the cards are memorized.")
            changed["locked"] = False

        if not 0 <= index < len(cards):
            raise IllegalMoveError(f"Card {index} is off the board.")
        if index in matched:
            raise IllegalMoveError(f"Card {index} is already matched.")
        if index in flipped:
            raise IllegalMoveError(f"Card {index} is already flipped.")

        flipped.append(index)
        if len(flipped) < 2:
            changed["flippedCards"] = flipped
            return Transition(fields=changed, keep_turn=True)

        first, second = flipped
        changed["flippedCards"] = []
        changed["lastPair"] = [first, second]
        if cards[first] != cards[second]:
            return Transition(fields=changed)

        scores = dict(fields["scores"])
        scores[player] += 1
        matched.extend([first, second])
        changed["matchedPairs"] = matched
        changed["scores"] = scores
        winner = leading_player(scores, players) if len(matched) == len(cards) else None
        return Transition(fields=changed, winner=winner, keep_turn=True)
