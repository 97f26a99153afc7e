"""Tunable game rules (lives, chamber size, item counts, lobby size)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GameRules:
    max_lives: int = 5
    chamber_size: int = 6
    min_loaded: int = 1
    max_loaded: int = 3
    min_items: int = 1
    max_items: int = 4
    min_players: int = 2
    max_players: int = 4

    def __post_init__(self) -> None:
        if self.max_lives < 1:
            raise ValueError("max_lives must be at least 1")
        if self.chamber_size < 1:
            raise ValueError("chamber_size must be at least 1")
        if not 0 <= self.min_loaded <= self.max_loaded <= self.chamber_size:
            raise ValueError(
                "loaded range must satisfy 0 <= min_loaded <= max_loaded <= chamber_size"
            )
        if not 0 <= self.min_items <= self.max_items:
            raise ValueError("item range must satisfy 0 <= min_items <= max_items")
        if not 2 <= self.min_players <= self.max_players:
            raise ValueError("player range must satisfy 2 <= min_players <= max_players")
