"""单个 `Room` 实例的事件容器。

约定：
- 事件只携带已提交命令的输出，监听器不会修改对局状态。
- 大厅管理（init/join/exit/...）的结果与其他命令一样通过 `announcement` 播报。
"""

from __future__ import annotations

from .event_base import EventBase


class EventSystem:
    """房间发布命令输出所用的一组事件通道。"""

    def __init__(self) -> None:
        self.events: dict[str, EventBase] = {}

        # args: 一条命令的全部播报文本（按顺序）
        self.event_announcement = self._new_event("announcement")
        # args: [cue_name]
        self.event_audio_cue = self._new_event("audio_cue")
        # args: [winner_player_id]
        self.event_game_end = self._new_event("game_end")

    def _new_event(self, name: str) -> EventBase:
        event = EventBase(name)
        self.events[name] = event
        return event

    def get_event(self, name: str) -> EventBase | None:
        """按名称获取事件；不存在时返回 None。"""
        return self.events.get(name)
