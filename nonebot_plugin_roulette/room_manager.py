"""RoomManager: maintain per-group rooms and serialize operations.

NoneBot handlers are concurrent; without serialization, multiple commands from the same
group can interleave and corrupt room state. This manager provides:

- a `rooms` mapping (group_id -> Room)
- a per-group `asyncio.Lock` to ensure operations are executed sequentially

A group's lock is dropped once its room is gone and nobody holds or waits on it.

Different groups never share a lock, so their games run independently.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from .game.errors import NotFoundError, StateConflictError
from .game.room import Room


class RoomManager:
    """Manage rooms and provide per-room locks."""

    def __init__(self) -> None:
        self.rooms: dict[str, Room] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        # holders + waiters per group
        self._users: dict[str, int] = {}

    def lock(self, group_id: str) -> asyncio.Lock:
        """Return the per-group lock (created lazily)."""
        group_id = str(group_id)
        if group_id not in self._locks:
            self._locks[group_id] = asyncio.Lock()
        return self._locks[group_id]

    @asynccontextmanager
    async def locked(self, group_id: str) -> AsyncIterator[None]:
        """Hold the per-group lock; prune it afterwards if the group has no room."""
        group_id = str(group_id)
        lock = self.lock(group_id)
        self._users[group_id] = self._users.get(group_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[group_id] -= 1
            if self._users[group_id] == 0:
                del self._users[group_id]
                if group_id not in self.rooms:
                    self._locks.pop(group_id, None)

    def get(self, group_id: str) -> Room:
        try:
            return self.rooms[str(group_id)]
        except KeyError:
            raise NotFoundError(
                "There is no game in this group. Use `/roulette init` first."
            ) from None

    def create(self, group_id: str, factory: Callable[[str], Room]) -> Room:
        """Open a room; an existing room is only replaced once its game is finished."""
        group_id = str(group_id)
        existing = self.rooms.get(group_id)
        if existing is not None and not existing.finished:
            raise StateConflictError("Please end the current game first.")
        room = factory(group_id)
        self.rooms[group_id] = room
        return room

    def remove(self, group_id: str) -> Room:
        room = self.get(group_id)
        del self.rooms[str(group_id)]
        return room
