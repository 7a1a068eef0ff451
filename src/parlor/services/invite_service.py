"""Invites: how two players agree to start a game."""

import logging
from enum import StrEnum
from typing import Callable
from uuid import UUID

from parlor.api.models import (
    CreateGameRequest,
    InviteActionRequest,
    InviteResponse,
    ListInvitesRequest,
    SendInviteRequest,
)
from parlor.core.exceptions import InviteError
from parlor.core.models import InviteModel
from parlor.core.shared_types import InviteStatus
from parlor.db.repository import InviteRepository
from parlor.db.subscriptions import ChangeNotifier, SubscriptionRegistry
from parlor.games.game import utc_now
from parlor.services.game_service import GameService

logger = logging.getLogger(__name__)

OnInvitesChange = Callable[[list[InviteResponse]], None]


class InviteFeed(StrEnum):
    RECEIVED = "received"
    SENT = "sent"


class InviteService:
    def __init__(self, invites: InviteRepository, games: GameService) -> None:
        self.invites = invites
        self.games = games
        # live feeds keyed by (InviteFeed, player id)
        self.feeds = ChangeNotifier()
        self.subscriptions = SubscriptionRegistry(self.feeds.subscribe)

    def send_invite(self, request: SendInviteRequest) -> InviteResponse:
        already_pending = [
            invite
            for _, invite in self.invites.list_invites(
                sender=request.sender,
                receiver=request.receiver,
                status=InviteStatus.PENDING,
            )
            if invite.game_type == request.game_type
        ]
        if already_pending:
            raise InviteError(
                f"{request.receiver!r} already has a pending {request.game_type.value} invite from {request.sender!r}."
            )

        invite, invite_id = self.invites.create_invite(
            InviteModel(
                sender=request.sender,
                receiver=request.receiver,
                game_type=request.game_type.value,
                status=InviteStatus.PENDING.value,
                created_at=utc_now(),
            )
        )
        logger.info(
            "%s invited %s to %s (invite %s)",
            request.sender, request.receiver, request.game_type.value, invite_id,
        )
        self._publish(invite)
        return InviteResponse.from_model(invite_id, invite)

    def accept_invite(self, request: InviteActionRequest) -> InviteResponse:
        """The receiver accepts: the game starts with the sender as first party."""
        invite = self._fetch_pending(request.invite_id)
        if request.player_id != invite.receiver:
            raise InviteError("Only the invited player can accept an invite.")

        game = self.games.create_game(
            CreateGameRequest(
                game_type=invite.game_type, players=[invite.sender, invite.receiver]
            )
        )
        return self._close(request.invite_id, InviteStatus.ACCEPTED, game.game_id)

    def decline_invite(self, request: InviteActionRequest) -> InviteResponse:
        invite = self._fetch_pending(request.invite_id)
        if request.player_id != invite.receiver:
            raise InviteError("Only the invited player can decline an invite.")
        return self._close(request.invite_id, InviteStatus.DECLINED)

    def cancel_invite(self, request: InviteActionRequest) -> InviteResponse:
        invite = self._fetch_pending(request.invite_id)
        if request.player_id != invite.sender:
            raise InviteError("Only the sender can cancel an invite.")
        return self._close(request.invite_id, InviteStatus.CANCELLED)

    def received_invites(self, request: ListInvitesRequest) -> list[InviteResponse]:
        """Pending invites waiting for an answer from the player."""
        return [
            InviteResponse.from_model(invite_id, invite)
            for invite_id, invite in self.invites.list_invites(
                receiver=request.player_id, status=InviteStatus.PENDING
            )
        ]

    def sent_invites(self, request: ListInvitesRequest) -> list[InviteResponse]:
        return [
            InviteResponse.from_model(invite_id, invite)
            for invite_id, invite in self.invites.list_invites(
                sender=request.player_id, status=InviteStatus.PENDING
            )
        ]

    # -- Live feeds --
    def watch_received_invites(
        self, request: ListInvitesRequest, on_change: OnInvitesChange
    ) -> bool:
        """Deliver the pending invites of the player now and again after every change. Watching twice keeps the first listener."""
        return self._watch(InviteFeed.RECEIVED, request.player_id, on_change)

    def watch_sent_invites(
        self, request: ListInvitesRequest, on_change: OnInvitesChange
    ) -> bool:
        """Sent invites still pending or accepted: the sender learns the id of the game an accepted invite started."""
        return self._watch(InviteFeed.SENT, request.player_id, on_change)

    def stop_watching_invites(self, request: ListInvitesRequest) -> None:
        for feed in InviteFeed:
            self.subscriptions.dispose((feed, request.player_id))

    def stop_watching_all(self) -> None:
        self.subscriptions.dispose_all()

    # -- Internal helpers --
    def _watch(self, feed: InviteFeed, player_id: str, on_change: OnInvitesChange) -> bool:
        def forward(key: tuple[InviteFeed, str], invites: list[InviteResponse]) -> None:
            on_change(invites)

        subscribed = self.subscriptions.ensure((feed, player_id), forward)
        if subscribed:
            on_change(self._snapshot(feed, player_id))
        return subscribed

    def _snapshot(self, feed: InviteFeed, player_id: str) -> list[InviteResponse]:
        if feed == InviteFeed.RECEIVED:
            matches = self.invites.list_invites(receiver=player_id, status=InviteStatus.PENDING)
        else:
            matches = [
                (invite_id, invite)
                for invite_id, invite in self.invites.list_invites(sender=player_id)
                if invite.status in (InviteStatus.PENDING, InviteStatus.ACCEPTED)
            ]
        return [InviteResponse.from_model(invite_id, invite) for invite_id, invite in matches]

    def _publish(self, invite: InviteModel) -> None:
        for key in ((InviteFeed.RECEIVED, invite.receiver), (InviteFeed.SENT, invite.sender)):
            if self.feeds.listener_count(key):
                self.feeds.notify(key, self._snapshot(*key))

    def _fetch_pending(self, invite_id: UUID) -> InviteModel:
        invite = self.invites.get_invite(invite_id)
        if invite is None:
            raise InviteError(f"Invite with {invite_id=} not found.")
        if invite.status != InviteStatus.PENDING:
            raise InviteError(f"Invite was already {invite.status}.")
        return invite

    def _close(
        self, invite_id: UUID, status: InviteStatus, game_id: UUID | None = None
    ) -> InviteResponse:
        invite = self.invites.update_invite(invite_id, status.value, game_id=game_id)
        if invite is None:
            raise InviteError(f"Invite with {invite_id=} not found.")
        logger.info("Invite %s %s", invite_id, status.value)
        self._publish(invite)
        return InviteResponse.from_model(invite_id, invite)
