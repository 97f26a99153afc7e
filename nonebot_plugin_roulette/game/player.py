"""Player model for a Room (turn order + lives + alive state + owned items)."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .item_base import ItemBase


class Player:
    """A participant in a Room.

    `order` is the 0-based turn order, equal to join order. The UI uses `seat` (1-based).
    `alive` is stored alongside `lives` and only changed together with it.
    """

    def __init__(
        self, player_id: str, user_id: str, name: str, order: int, lives: int = 5
    ) -> None:
        self.player_id = player_id
        self.user_id = user_id
        self.name = name
        self.order = order
        self.lives: int = lives
        self.alive: bool = lives > 0
        self.items: list[ItemBase] = []

    @property
    def seat(self) -> int:
        return self.order + 1

    def unused_items(self) -> list[ItemBase]:
        return [item for item in self.items if not item.used]

    def __repr__(self) -> str:
        return (
            f"Player({self.name!r}, seat={self.seat}, lives={self.lives}, "
            f"alive={self.alive})"
        )
