"""道具注册表、开局道具发放与道具结算。

通过导入本包下的 `item_*.py` 模块发现所有道具类；`item_type` 与别名必须全局唯一。
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from .errors import ItemError, NotFoundError
from .item_base import ItemBase
from .outcome import CUE_ITEM_USE, CommandResult, ItemOutcome
from .player import Player
from .roster import Roster
from .state import GameState
from .utils import get_classes_in_module, get_modules_in_package_by_prefix

_logger = logging.getLogger(__name__)


def _load_item_classes() -> list[type[ItemBase]]:
    """通过导入本包下的 `item_*.py` 模块加载所有道具类。"""
    item_modules = get_modules_in_package_by_prefix(__package__, "item_")
    classes: list[type[ItemBase]] = []
    for module in item_modules:
        for cls in get_classes_in_module(module):
            if getattr(cls, "__module__", None) != getattr(module, "__name__", None):
                continue
            if issubclass(cls, ItemBase) and cls is not ItemBase:
                classes.append(cls)
    return classes


def _build_item_registry(
    classes: list[type[ItemBase]],
) -> tuple[
    list[type[ItemBase]],
    dict[str, type[ItemBase]],
    dict[str, type[ItemBase]],
]:
    """从扫描到的道具类构建 `item_type` / `aliases` 查找表。

    - `item_type` 必须唯一（重复项记录日志后忽略）
    - 别名必须唯一（冲突项记录日志后忽略）
    """
    type_2_cls: dict[str, type[ItemBase]] = {}
    alias_2_cls: dict[str, type[ItemBase]] = {}

    for cls in sorted(classes, key=lambda c: c.ordinal):
        item_type = getattr(cls, "item_type", None)
        if not isinstance(item_type, str) or not item_type:
            _logger.warning("Ignore item class without item_type: %s", cls)
            continue
        if item_type in type_2_cls and type_2_cls[item_type] is not cls:
            _logger.error(
                "Duplicate item_type %r: %s vs %s (ignored: %s)",
                item_type,
                type_2_cls[item_type],
                cls,
                cls,
            )
            continue
        type_2_cls[item_type] = cls

        for alias in cls.aliases:
            if not alias:
                continue
            alias = alias.lower()
            if alias in alias_2_cls and alias_2_cls[alias] is not cls:
                _logger.error(
                    "Alias conflict %r: %s vs %s (ignored: %s)",
                    alias,
                    alias_2_cls[alias],
                    cls,
                    cls,
                )
                continue
            alias_2_cls[alias] = cls

    return list(type_2_cls.values()), type_2_cls, alias_2_cls


item_classes, item_type_2_cls, alias_2_item_cls = _build_item_registry(
    _load_item_classes()
)


def get_item_class(item_type: str) -> type[ItemBase] | None:
    """按 `item_type` 查找道具类（例如：`phone`）。"""
    return item_type_2_cls.get(item_type)


def get_item_class_by_alias(alias: str) -> type[ItemBase] | None:
    """按别名文本查找道具类（例如：`放大镜`、`potion`）。"""
    return alias_2_item_cls.get(alias.strip().lower())


def allocate_items(
    player: Player,
    rng: random.Random,
    min_items: int = 1,
    max_items: int = 4,
    next_id: Callable[[], str] | None = None,
) -> list[ItemBase]:
    """Give a player a random batch of items.

    The count is uniform in [min_items, max_items]; every slot draws its type
    independently, so duplicates are expected.
    """
    count = rng.randint(min_items, max_items)
    items: list[ItemBase] = []
    for i in range(count):
        cls = item_classes[rng.randrange(len(item_classes))]
        item_id = next_id() if next_id else f"{player.player_id}-{len(player.items) + i}"
        items.append(cls(item_id, player))
    player.items.extend(items)
    _logger.debug(
        "Allocated items to %s: %s", player.name, [item.item_type for item in items]
    )
    return items


class ItemEffects:
    """Resolves item use against a room's roster and game state."""

    def __init__(self, roster: Roster, rng: random.Random) -> None:
        self.roster = roster
        self.rng = rng

    def find(self, item_id: str) -> ItemBase:
        for player in self.roster:
            for item in player.items:
                if item.item_id == item_id:
                    return item
        raise NotFoundError(f"Item {item_id} not found.")

    def resolve(
        self, state: GameState, actor: Player, item_id: str, result: CommandResult
    ) -> ItemOutcome:
        item = self.find(item_id)
        if item.owner is not actor:
            raise ItemError(f"{item.name} does not belong to {actor.name}.")
        if item.used:
            raise ItemError(f"{item.name} has already been used.")
        item.check(state)

        result.cue(CUE_ITEM_USE)
        outcome = item.apply(state, self.roster, self.rng, result)
        item.mark_used()
        _logger.info("%s used %s (%s)", actor.name, item.name, item.item_id)
        return outcome
