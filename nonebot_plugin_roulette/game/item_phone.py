"""Phone: a tip about one random shell further down the chamber."""

from __future__ import annotations

from .item_base import ItemBase
from .outcome import ItemOutcome


class ItemPhone(ItemBase):
    """Reveals a random shell strictly after the cursor, by 1-based position.

    With nothing left after the cursor the call still goes through: the item is
    spent and only an announcement is produced.
    """

    item_type = "phone"
    name = "Phone"
    description = "Reveals a random shell position in the chamber"
    emoji = "📱"
    aliases = ["phone", "call", "手机", "电话"]
    ordinal = 1

    def apply(self, state, roster, rng, result) -> ItemOutcome:
        positions = state.chamber.positions_after_cursor()
        if not positions:
            result.action(f"{self.owner.name} used {self.name}: No more shells to reveal.")
            return ItemOutcome(
                item_id=self.item_id,
                item_type=self.item_type,
                player_id=self.owner.player_id,
            )

        index = rng.choice(positions)
        loaded = state.chamber.peek(index)
        result.action(
            f"{self.owner.name} used {self.name}: "
            f"Shell #{index + 1} is {'LOADED' if loaded else 'EMPTY'}"
        )
        return ItemOutcome(
            item_id=self.item_id,
            item_type=self.item_type,
            player_id=self.owner.player_id,
            revealed_index=index,
            revealed_loaded=loaded,
        )
