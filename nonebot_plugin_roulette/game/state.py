"""Per-match aggregate: current chamber, whose turn it is, and the winner."""

from __future__ import annotations

from .chamber import Chamber


class GameState:
    """Mutable match state owned by a `GameSession`.

    `current_turn_player_id` always names an alive player while the match is
    running. `winner_id` is set once, when a single player is left alive.
    """

    def __init__(self, chamber: Chamber, current_turn_player_id: str | None) -> None:
        self.chamber = chamber
        self.current_turn_player_id = current_turn_player_id
        self.winner_id: str | None = None
        self.reload_count: int = 0
