"""Roster: the players of one room, their lives and the turn rotation."""

from __future__ import annotations

import logging

from .errors import NotFoundError
from .player import Player

_logger = logging.getLogger(__name__)


class Roster:
    """Players in join order, looked up by player id or by user id."""

    def __init__(self, max_lives: int = 5) -> None:
        self.max_lives = max_lives
        self.player_list: list[Player] = []
        self.id_2_player: dict[str, Player] = {}

    def __len__(self) -> int:
        return len(self.player_list)

    def __iter__(self):
        return iter(self.player_list)

    def add(self, player: Player) -> None:
        """Append a player; `order` follows join order."""
        player.order = len(self.player_list)
        self.player_list.append(player)
        self.id_2_player[player.player_id] = player

    def remove(self, player_id: str) -> Player:
        """Remove a player and keep the remaining order contiguous."""
        player = self.get(player_id)
        self.player_list.pop(player.order)
        for p in self.player_list[player.order :]:
            p.order -= 1
        del self.id_2_player[player_id]
        return player

    def get(self, player_id: str) -> Player:
        try:
            return self.id_2_player[player_id]
        except KeyError:
            raise NotFoundError(f"Player {player_id} not found.") from None

    def by_user(self, user_id: str) -> Player | None:
        for p in self.player_list:
            if p.user_id == user_id:
                return p
        return None

    def by_seat(self, seat: int) -> Player | None:
        """Look up a player by 1-based seat."""
        if seat < 1 or seat > len(self.player_list):
            return None
        return self.player_list[seat - 1]

    def assign_turn_order(self) -> None:
        """Fix turn order 0..N-1 from join order; called once at game start."""
        for i, p in enumerate(self.player_list):
            p.order = i

    def alive_in_turn_order(self) -> list[Player]:
        return sorted((p for p in self.player_list if p.alive), key=lambda p: p.order)

    def next_alive_after(self, player_id: str) -> Player | None:
        """First alive player after `player_id` in turn order, wrapping around.

        The reference player itself may already be eliminated; it is only used
        as a position in the rotation. Returns None when nobody else is alive.
        """
        ref = self.get(player_id)
        alive = [p for p in self.alive_in_turn_order() if p.player_id != player_id]
        if not alive:
            return None
        for p in alive:
            if p.order > ref.order:
                return p
        return alive[0]

    def apply_hit(self, player_id: str) -> bool:
        """Take one life; return True if this hit eliminated the player."""
        player = self.get(player_id)
        was_alive = player.alive
        player.lives = max(player.lives - 1, 0)
        player.alive = player.lives > 0
        _logger.debug("%s hit, %d lives left", player.name, player.lives)
        return was_alive and not player.alive

    def apply_heal(self, player_id: str) -> int:
        """Restore one life, capped at `max_lives`; return the new total."""
        player = self.get(player_id)
        player.lives = min(player.lives + 1, self.max_lives)
        player.alive = player.lives > 0
        return player.lives

    def eliminate(self, player_id: str) -> bool:
        """Drop a player to zero lives at once; return True if they were alive."""
        player = self.get(player_id)
        was_alive = player.alive
        player.lives = 0
        player.alive = False
        return was_alive
