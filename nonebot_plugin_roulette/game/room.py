"""房间对象：把一个群的 `GameSession` 绑定到群聊。

对局会话是同步的，本身不与聊天交互。房间负责把聊天参数（座位号、道具名）转换为会话命令，
并在每条命令提交后通过 `EventSystem` 发布结果：

- `announcement`：该命令的全部播报文本，合并后发送到群里
- `audio_cue`：每个音效提示一次事件（群聊没有音频，仅记录日志）
- `game_end`：对局结束时触发一次，参数为胜者的 player id

失败的命令会在发布任何内容之前抛出 `RouletteError`。
"""

from __future__ import annotations

import logging
import random

from .errors import InvalidTargetError, ItemError, ValidationError
from .event_system import EventSystem
from .effects import get_item_class_by_alias
from .item_base import ItemBase
from .outcome import CommandResult
from .player import Player
from .rules import GameRules
from .session import FINISHED, GameSession

_logger = logging.getLogger(__name__)

SELF_TARGETS = {"me", "self", "myself", "我", "自己"}


class Room:
    """按群划分的游戏房间（同一 `group_id` 同时仅允许一局）。"""

    def __init__(
        self,
        group_id: str,
        func_send_group_message,
        func_send_private_message,
        rules: GameRules | None = None,
        rng: random.Random | None = None,
    ) -> None:
        # OneBot APIs expect numeric ids, but we store them as str internally.
        self.group_id: str = str(group_id)
        self.func_send_group_message = func_send_group_message
        self.func_send_private_message = func_send_private_message
        self.session = GameSession(self.group_id, rules, rng)
        self.events_system: EventSystem = EventSystem()
        self._register_core_event_listeners()

    @property
    def state(self) -> str:
        return self.session.status

    @property
    def finished(self) -> bool:
        return self.session.status == FINISHED

    async def broadcast(self, message: str) -> None:
        """向房间所在群发送消息。"""
        await self.func_send_group_message(group_id=int(self.group_id), message=message)

    async def post_to_player(self, user_id: str, message: str) -> None:
        """给玩家发送私聊消息。"""
        await self.func_send_private_message(user_id=int(user_id), message=message)

    # === commands ===

    async def add_player(self, user_id: str, name: str) -> CommandResult:
        return await self.publish(self.session.join(user_id, name), user_id)

    async def remove_player(self, user_id: str) -> CommandResult:
        return await self.publish(self.session.leave(user_id), user_id)

    async def start_game(self, user_id: str) -> CommandResult:
        return await self.publish(self.session.start_game(user_id), user_id)

    async def shoot(self, user_id: str, target: str | None) -> CommandResult:
        """按座位号开枪，或用 `me` 向自己开枪。"""
        target_id = self.resolve_target(user_id, target)
        return await self.publish(self.session.fire_shot(user_id, target_id), user_id)

    async def use_item(self, user_id: str, choice: str | None) -> CommandResult:
        """使用第 n 个未用道具（从 1 开始），或按名称使用第一个同类未用道具。"""
        item = self.resolve_item(user_id, choice)
        return await self.publish(self.session.use_item(user_id, item.item_id), user_id)

    async def send_items(self, user_id: str) -> None:
        await self.post_to_player(user_id, self.items_text(user_id))

    # === argument parsing ===

    def resolve_target(self, user_id: str, target: str | None) -> str:
        if not target or not target.strip():
            raise ValidationError("Usage: `/roulette shoot <seat>` or `/roulette shoot me`")
        target = target.strip().lower()
        if target in SELF_TARGETS:
            player = self.session.player_for(user_id)
            if player is None:
                raise InvalidTargetError("You are not in this game.")
            return player.player_id
        if not target.isdecimal():
            raise ValidationError("The seat must be a number.")
        player = self.session.roster.by_seat(int(target))
        if player is None:
            raise InvalidTargetError(f"There is no seat {target}.")
        return player.player_id

    def resolve_item(self, user_id: str, choice: str | None) -> ItemBase:
        if not choice or not choice.strip():
            raise ValidationError("Usage: `/roulette use <number|item name>`")
        items = self.session.items_of(user_id)
        choice = choice.strip()
        if choice.isdecimal():
            index = int(choice)
            if index < 1 or index > len(items):
                raise ItemError(f"You have no item #{index}.")
            return items[index - 1]
        item_cls = get_item_class_by_alias(choice)
        if item_cls is None:
            raise ValidationError(f"Unknown item: {choice}")
        for item in items:
            if isinstance(item, item_cls):
                return item
        raise ItemError(f"You have no unused {item_cls.name}.")

    # === views ===

    def status_text(self) -> str:
        session = self.session
        lines = [f"Status: {session.status}"]
        current = session.current_turn_player()
        for p in session.players:
            marker = "👉 " if current is p and session.status != FINISHED else ""
            lines.append(f"{marker}{p.seat}. {p.name} {self._lives_text(p)}")
        if session.chamber is not None and session.status != FINISHED:
            lines.append(f"Shells left in chamber: {session.chamber.remaining_count()}")
        if session.winner_id:
            lines.append(f"Winner: {session.roster.get(session.winner_id).name}")
        return "\n".join(lines)

    def items_text(self, user_id: str) -> str:
        items = self.session.items_of(user_id)
        if not items:
            return "You have no items left."
        lines = ["Your items:"]
        for i, item in enumerate(items, start=1):
            lines.append(f"{i}. {item.label} - {item.description}")
        lines.append("Use one on your turn with `/roulette use <number>`.")
        return "\n".join(lines)

    @staticmethod
    def _lives_text(player: Player) -> str:
        if not player.alive:
            return "💀"
        return "❤" * player.lives

    # === publishing ===

    async def publish(self, result: CommandResult, user_id: str | None) -> CommandResult:
        """把已提交命令的输出分发给房间的监听器。"""
        es = self.events_system
        if result.announcements:
            await es.event_announcement.active(self, user_id, result.texts)
        for cue in result.cues:
            await es.event_audio_cue.active(self, user_id, [cue])
        if result.winner_id:
            await es.event_game_end.active(self, None, [result.winner_id])
        return result

    def _register_core_event_listeners(self) -> None:
        es = self.events_system
        es.event_announcement.add_listener(self._on_announcement, priority=0)
        es.event_audio_cue.add_listener(self._on_audio_cue, priority=0)
        es.event_game_end.add_listener(self._on_game_end, priority=-10)

    async def _on_announcement(
        self, room: object, user_id: str | None, args: list[str]
    ) -> None:
        await self.broadcast("\n".join(args))

    async def _on_audio_cue(
        self, room: object, user_id: str | None, args: list[str]
    ) -> None:
        _logger.debug("Room %s audio cue: %s", self.group_id, args[0])

    async def _on_game_end(
        self, room: object, user_id: str | None, args: list[str]
    ) -> None:
        _logger.info("Room %s game over, winner %s", self.group_id, args[0])
