"""Magnifying glass: look at the shell under the cursor."""

from __future__ import annotations

from .errors import ItemError
from .item_base import ItemBase
from .outcome import ItemOutcome


class ItemMagnifyingGlass(ItemBase):
    """Reveals the current shell without firing it."""

    item_type = "magnifying_glass"
    name = "Magnifying Glass"
    description = "Reveals if the current shell is loaded or empty"
    emoji = "🔍"
    aliases = ["magnifying_glass", "glass", "magnifier", "放大镜", "镜"]
    ordinal = 0

    def check(self, state) -> None:
        if state.chamber.is_exhausted():
            raise ItemError("The chamber is empty; there is no shell to inspect.")

    def apply(self, state, roster, rng, result) -> ItemOutcome:
        index = state.chamber.cursor
        loaded = state.chamber.peek(index)
        result.action(
            f"{self.owner.name} used {self.name}: "
            f"Current shell is {'LOADED' if loaded else 'EMPTY'}"
        )
        return ItemOutcome(
            item_id=self.item_id,
            item_type=self.item_type,
            player_id=self.owner.player_id,
            revealed_index=index,
            revealed_loaded=loaded,
        )
