"""GameSession: the authoritative state machine of one lobby.

Lifecycle is one-way: `waiting` -> `playing` -> `finished`.

Every command either commits all of its state changes together with the
announcements it produced, or raises a `RouletteError` and leaves the session
exactly as it was.
"""

from __future__ import annotations

import copy
import logging
import random
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

from .chamber import Chamber
from .effects import ItemEffects, allocate_items
from .errors import (
    AuthorizationError,
    OutOfTurnError,
    StateConflictError,
    ValidationError,
)
from .item_base import ItemBase
from .outcome import CUE_COCK, CUE_SUCCESS, CommandResult, chamber_summary
from .player import Player
from .resolver import TurnResolver
from .roster import Roster
from .rules import GameRules
from .state import GameState

_logger = logging.getLogger(__name__)

WAITING = "waiting"
PLAYING = "playing"
FINISHED = "finished"


class GameSession:
    """One lobby: roster, chamber, items and the commands that mutate them."""

    def __init__(
        self,
        lobby_id: str,
        rules: GameRules | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.lobby_id = str(lobby_id)
        self.rules = rules or GameRules()
        self.rng = rng or random.Random()
        self.status: str = WAITING
        self.host_user_id: str | None = None
        self.roster = Roster(max_lives=self.rules.max_lives)
        self.state: GameState | None = None
        self._item_seq: int = 0

    # === accessors ===

    @property
    def players(self) -> list[Player]:
        return list(self.roster.player_list)

    @property
    def current_turn_player_id(self) -> str | None:
        return self.state.current_turn_player_id if self.state else None

    @property
    def winner_id(self) -> str | None:
        return self.state.winner_id if self.state else None

    @property
    def chamber(self) -> Chamber | None:
        return self.state.chamber if self.state else None

    def current_turn_player(self) -> Player | None:
        player_id = self.current_turn_player_id
        return self.roster.get(player_id) if player_id else None

    def player_for(self, user_id: str) -> Player | None:
        return self.roster.by_user(str(user_id))

    def items_of(self, user_id: str, include_used: bool = False) -> list[ItemBase]:
        player = self._participant(user_id)
        return list(player.items) if include_used else player.unused_items()

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of everything the broadcast layer persists."""
        state = None
        if self.state is not None:
            state = {
                "lobby_id": self.lobby_id,
                "shells": list(self.state.chamber.shells),
                "current_shell_index": self.state.chamber.cursor,
                "current_turn_player_id": self.state.current_turn_player_id,
                "winner_id": self.state.winner_id,
            }
        return {
            "lobby": {
                "id": self.lobby_id,
                "host_id": self.host_user_id,
                "status": self.status,
                "max_players": self.rules.max_players,
            },
            "players": [
                {
                    "id": p.player_id,
                    "lobby_id": self.lobby_id,
                    "player_name": p.name,
                    "session_id": p.user_id,
                    "lives": p.lives,
                    "is_alive": p.alive,
                    "turn_order": p.order,
                }
                for p in self.roster
            ],
            "items": [
                {
                    "id": item.item_id,
                    "player_id": p.player_id,
                    "item_type": item.item_type,
                    "is_used": item.used,
                }
                for p in self.roster
                for item in p.items
            ],
            "state": state,
        }

    # === lobby commands ===

    def join(self, user_id: str, name: str) -> CommandResult:
        """Add a player in join order; the first player becomes the host."""
        user_id = str(user_id)
        if not user_id or not name:
            raise ValidationError("A player needs an id and a name.")
        result = CommandResult()
        if self.roster.by_user(user_id) is not None:
            return result
        if self.status != WAITING:
            raise StateConflictError("Game has already started.")
        if len(self.roster) >= self.rules.max_players:
            raise StateConflictError("Lobby is full.")

        with self._transaction():
            player = Player(
                uuid.uuid4().hex, user_id, name, len(self.roster), self.rules.max_lives
            )
            self.roster.add(player)
            if self.host_user_id is None:
                self.host_user_id = user_id
                result.system(f"{name} created the lobby. Waiting for players...")
            else:
                result.system(f"{name} joined the game.")
            result.cue(CUE_SUCCESS)
        return result

    def leave(self, user_id: str) -> CommandResult:
        """Leave the lobby; during a match this is a forfeit."""
        player = self._participant(user_id)
        if self.status == FINISHED:
            raise StateConflictError("The game is already over.")

        result = CommandResult()
        with self._transaction():
            result.system(f"{player.name} left the game.")
            if self.status == WAITING:
                self.roster.remove(player.player_id)
                if self.host_user_id == player.user_id:
                    nxt = self.roster.by_seat(1)
                    self.host_user_id = nxt.user_id if nxt else None
                    if nxt:
                        result.system(f"{nxt.name} is now the host.")
            else:
                self._forfeit(player.player_id, result)
        return result

    def start_game(self, user_id: str) -> CommandResult:
        player = self._participant(user_id)
        if self.status != WAITING:
            raise StateConflictError("The game has already started.")
        if player.user_id != self.host_user_id:
            raise AuthorizationError("Only the host can start the game.")
        if len(self.roster) < self.rules.min_players:
            raise StateConflictError(
                f"Need at least {self.rules.min_players} players to start "
                f"(currently {len(self.roster)})."
            )

        result = CommandResult()
        with self._transaction():
            self.roster.assign_turn_order()
            for p in self.roster:
                p.lives = self.rules.max_lives
                p.alive = True
                p.items = []
                allocate_items(
                    p,
                    self.rng,
                    self.rules.min_items,
                    self.rules.max_items,
                    next_id=self._next_item_id,
                )
            first = self.roster.alive_in_turn_order()[0]
            self.state = GameState(self._load_chamber(), first.player_id)
            self.status = PLAYING

            chamber = self.state.chamber
            result.system(
                f"Game started! {len(self.roster)} players. The shells have been loaded..."
            )
            result.system(
                "Chamber loaded: "
                + chamber_summary(chamber.loaded_count(), chamber.blank_count())
            )
            result.system(f"{first.name}'s turn.")
            result.cue(CUE_COCK)
        _logger.info("Lobby %s started with %d players", self.lobby_id, len(self.roster))
        return result

    # === match commands ===

    def fire_shot(self, user_id: str, target_id: str | None) -> CommandResult:
        self._require_playing()
        shooter = self._participant(user_id)

        result = CommandResult()
        with self._transaction():
            result.shot = self._resolver().resolve_shot(
                self.state, shooter.player_id, target_id, result
            )
            if result.shot.winner_id is not None:
                self._finish()
        return result

    def use_item(self, user_id: str, item_id: str) -> CommandResult:
        """Consume an item. Items are used on your own turn and never pass it."""
        self._require_playing()
        actor = self._participant(user_id)
        if not actor.alive:
            raise OutOfTurnError(f"{actor.name} has been eliminated.")
        if actor.player_id != self.state.current_turn_player_id:
            raise OutOfTurnError(f"It is not {actor.name}'s turn.")

        result = CommandResult()
        with self._transaction():
            result.item = ItemEffects(self.roster, self.rng).resolve(
                self.state, actor, item_id, result
            )
        return result

    def forfeit(self, player_id: str) -> CommandResult:
        """Instant elimination, e.g. when a client disconnects mid-match."""
        self._require_playing()
        result = CommandResult()
        with self._transaction():
            self._forfeit(player_id, result)
        return result

    # === internals ===

    def _forfeit(self, player_id: str, result: CommandResult) -> None:
        self._resolver().resolve_forfeit(self.state, player_id, result)
        if self.state.winner_id is not None:
            self._finish()

    def _finish(self) -> None:
        self.status = FINISHED
        _logger.info("Lobby %s finished, winner %s", self.lobby_id, self.state.winner_id)

    def _resolver(self) -> TurnResolver:
        return TurnResolver(self.roster, self._load_chamber)

    def _load_chamber(self) -> Chamber:
        return Chamber.generate(
            self.rules.chamber_size,
            self.rules.min_loaded,
            self.rules.max_loaded,
            rng=self.rng,
        )

    def _next_item_id(self) -> str:
        self._item_seq += 1
        return f"{self.lobby_id}-{self._item_seq}"

    def _participant(self, user_id: str) -> Player:
        player = self.roster.by_user(str(user_id))
        if player is None:
            raise AuthorizationError("You are not in this game.")
        return player

    def _require_playing(self) -> None:
        if self.status == WAITING:
            raise StateConflictError("The game has not started yet.")
        if self.status == FINISHED:
            raise StateConflictError("The game is already over.")

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Restore roster, state, status and host if the block raises."""
        saved = copy.deepcopy(
            (self.roster, self.state, self.status, self.host_user_id, self._item_seq)
        )
        try:
            yield
        except Exception:
            (
                self.roster,
                self.state,
                self.status,
                self.host_user_id,
                self._item_seq,
            ) = saved
            _logger.debug("Rolled back command on lobby %s", self.lobby_id)
            raise
