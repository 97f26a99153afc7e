from pydantic import BaseModel

from .game.rules import GameRules


class Config(BaseModel):
    """Plugin config, read from NoneBot's global config (`ROULETTE_*` in `.env`)."""

    roulette_enabled_groups: list[str] = []
    roulette_max_lives: int = 5
    roulette_chamber_size: int = 6
    roulette_min_loaded: int = 1
    roulette_max_loaded: int = 3
    roulette_min_items: int = 1
    roulette_max_items: int = 4
    roulette_min_players: int = 2
    roulette_max_players: int = 4

    def rules(self) -> GameRules:
        return GameRules(
            max_lives=self.roulette_max_lives,
            chamber_size=self.roulette_chamber_size,
            min_loaded=self.roulette_min_loaded,
            max_loaded=self.roulette_max_loaded,
            min_items=self.roulette_min_items,
            max_items=self.roulette_max_items,
            min_players=self.roulette_min_players,
            max_players=self.roulette_max_players,
        )
