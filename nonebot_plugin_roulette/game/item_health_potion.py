"""Health potion: +1 life, capped at the maximum."""

from __future__ import annotations

from .item_base import ItemBase
from .outcome import ItemOutcome


class ItemHealthPotion(ItemBase):
    """Restores one life. Drinking at full health still spends the potion."""

    item_type = "health_potion"
    name = "Health Potion"
    description = "Restores 1 life point"
    emoji = "🧪"
    aliases = ["health_potion", "potion", "heal", "药水", "血瓶", "药"]
    ordinal = 2

    def apply(self, state, roster, rng, result) -> ItemOutcome:
        lives = roster.apply_heal(self.owner.player_id)
        result.action(f"{self.owner.name} used {self.name}: +1 life ({lives} total)")
        return ItemOutcome(
            item_id=self.item_id,
            item_type=self.item_type,
            player_id=self.owner.player_id,
            lives=lives,
        )
