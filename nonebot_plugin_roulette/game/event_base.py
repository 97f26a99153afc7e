"""事件分发器：支持优先级的异步监听器。

房间在每条命令提交后，通过这些事件通道发布结果（播报、音效提示、对局结束）。
事件触发（`active`）时按优先级从高到低依次执行监听器。
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

_logger = logging.getLogger(__name__)


class Listener(Protocol):
    async def __call__(self, room: Any, user_id: str | None, args: list[str]) -> Any: ...


class EventBase:
    """单个事件：监听器 + 优先级。"""

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[tuple[int, Listener]] = []

    def add_listener(self, listener: Listener, priority: int = 0) -> None:
        """添加监听器。

        约束：
        - 优先级范围为 [-10, 10]
        - 触发时按优先级从大到小依次调用
        - 同一优先级下的调用顺序不保证
        """
        if not isinstance(priority, int):
            raise TypeError("priority 必须为 int")
        if priority < -10 or priority > 10:
            raise ValueError("priority 必须在 [-10, 10] 范围内")
        self._listeners.append((priority, listener))

    def remove_listener(self, listener: Listener) -> None:
        """移除监听器（按对象身份匹配）。"""
        self._listeners = [(p, l) for (p, l) in self._listeners if l is not listener]

    async def active(self, room: Any, user_id: str | None, args: list[str]) -> None:
        """触发事件：立即执行所有监听器。"""
        _logger.debug("事件已触发 %s, 开始执行监听器", self.name)
        for _, listener in sorted(self._listeners, key=lambda x: x[0], reverse=True):
            await listener(room, user_id, args)
        _logger.debug("事件 %s 监听器执行完毕", self.name)
