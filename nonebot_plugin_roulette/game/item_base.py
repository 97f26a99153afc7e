"""消耗型道具的基类实现。

道具以类的形式实现，位于 `game/item_*.py` 中。游戏开始时会为每个玩家发放一批道具实例；
实例使用后标记为已用，仍保留在持有者的背包中。
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, ClassVar

from .errors import ItemError

if TYPE_CHECKING:
    from .outcome import CommandResult, ItemOutcome
    from .player import Player
    from .roster import Roster
    from .state import GameState


class ItemBase:
    """道具基类（每个实例属于一名玩家）。"""

    item_type: ClassVar[str] = "base"
    name: ClassVar[str] = "Unknown Item"
    description: ClassVar[str] = ""
    emoji: ClassVar[str] = "❓"
    aliases: ClassVar[list[str]] = []
    # 发放时的抽取顺序；各类型按此顺序等概率抽取。
    ordinal: ClassVar[int] = 0

    def __init__(self, item_id: str, owner: Player) -> None:
        self.item_id = item_id
        self.owner = owner
        self.used: bool = False

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}"

    def check(self, state: GameState) -> None:
        """当前无法使用时抛出 `ItemError`。"""

    def apply(
        self,
        state: GameState,
        roster: Roster,
        rng: random.Random,
        result: CommandResult,
    ) -> ItemOutcome:
        """执行道具效果，并将播报追加到 `result`。"""
        raise NotImplementedError

    def mark_used(self) -> None:
        if self.used:
            raise ItemError(f"{self.name} has already been used.")
        self.used = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.item_id!r}, used={self.used})"
