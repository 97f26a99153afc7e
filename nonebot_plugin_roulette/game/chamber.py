"""The shared shotgun: an ordered shell sequence plus a read cursor.

`True` is a live round, `False` a blank. A chamber is never refilled in place;
once exhausted (`cursor == length`) the session swaps in a freshly generated one.
"""

from __future__ import annotations

import logging
import random

from .errors import StateConflictError

_logger = logging.getLogger(__name__)


class Chamber:
    """Shell sequence of one load and the index of the next shell to fire."""

    def __init__(self, shells: list[bool], cursor: int = 0) -> None:
        if not 0 <= cursor <= len(shells):
            raise ValueError(f"cursor {cursor} out of range for {len(shells)} shells")
        self._shells: tuple[bool, ...] = tuple(bool(s) for s in shells)
        self._cursor: int = cursor

    @classmethod
    def generate(
        cls,
        count: int = 6,
        min_loaded: int = 1,
        max_loaded: int | None = None,
        rng: random.Random | None = None,
    ) -> Chamber:
        """Load `count` shells with a uniform number of live rounds, then shuffle.

        `max_loaded` defaults to half the chamber (3 of 6), so a default load is
        never all-live or all-blank.
        """
        rng = rng or random.Random()
        if max_loaded is None:
            max_loaded = max(min_loaded, count // 2)
        if not 0 <= min_loaded <= max_loaded <= count:
            raise ValueError(
                f"invalid loaded range [{min_loaded}, {max_loaded}] for {count} shells"
            )
        loaded = rng.randint(min_loaded, max_loaded)
        shells = [i < loaded for i in range(count)]
        # Fisher-Yates
        for i in range(count - 1, 0, -1):
            j = rng.randint(0, i)
            shells[i], shells[j] = shells[j], shells[i]
        _logger.debug("Generated chamber: %d live / %d shells", loaded, count)
        return cls(shells)

    @property
    def shells(self) -> tuple[bool, ...]:
        return self._shells

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def length(self) -> int:
        return len(self._shells)

    def peek(self, index: int) -> bool:
        """Inspect a shell without advancing the cursor."""
        if not 0 <= index < len(self._shells):
            raise IndexError(f"shell index {index} out of range")
        return self._shells[index]

    def fire_current(self) -> bool:
        """Return the shell under the cursor and advance past it."""
        if self.is_exhausted():
            raise StateConflictError("The chamber is empty and must be reloaded.")
        shell = self._shells[self._cursor]
        self._cursor += 1
        return shell

    def is_exhausted(self) -> bool:
        return self._cursor >= len(self._shells)

    def remaining_count(self) -> int:
        return len(self._shells) - self._cursor

    def loaded_count(self) -> int:
        return sum(self._shells)

    def blank_count(self) -> int:
        return len(self._shells) - self.loaded_count()

    def positions_after_cursor(self) -> list[int]:
        """Indexes strictly after the cursor in this load."""
        return list(range(self._cursor + 1, len(self._shells)))

    def __repr__(self) -> str:
        return f"Chamber(shells={list(self._shells)!r}, cursor={self._cursor})"
