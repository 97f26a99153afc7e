"""Command results handed to the chat layer: structured outcome, announcements, audio cues."""

from __future__ import annotations

from dataclasses import dataclass, field

SYSTEM = "system"
ACTION = "action"

# Audio cue names. Advisory only; nothing in the game reacts to them.
CUE_COCK = "cock"
CUE_GUNSHOT = "gunshot"
CUE_HIT = "hit"
CUE_EMPTY_CLICK = "empty_click"
CUE_DEATH = "death"
CUE_VICTORY = "victory"
CUE_ITEM_USE = "item_use"
CUE_SUCCESS = "success"


@dataclass(frozen=True)
class Announcement:
    text: str
    kind: str = SYSTEM


@dataclass(frozen=True)
class ShotOutcome:
    """What happened on one trigger pull.

    `next_turn_player_id` is None when the shot ended the game.
    """

    hit: bool
    shooter_id: str
    shooter_name: str
    target_id: str
    target_name: str
    self_shot: bool
    lives_remaining: int
    eliminated: bool
    next_turn_player_id: str | None
    winner_id: str | None = None
    reloaded: bool = False


@dataclass(frozen=True)
class ItemOutcome:
    item_id: str
    item_type: str
    player_id: str
    revealed_index: int | None = None
    revealed_loaded: bool | None = None
    lives: int | None = None


@dataclass
class CommandResult:
    """Everything a command produced, committed together with the state change."""

    announcements: list[Announcement] = field(default_factory=list)
    cues: list[str] = field(default_factory=list)
    shot: ShotOutcome | None = None
    item: ItemOutcome | None = None
    winner_id: str | None = None

    def system(self, text: str) -> None:
        self.announcements.append(Announcement(text, SYSTEM))

    def action(self, text: str) -> None:
        self.announcements.append(Announcement(text, ACTION))

    def cue(self, name: str) -> None:
        self.cues.append(name)

    @property
    def texts(self) -> list[str]:
        return [a.text for a in self.announcements]


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def chamber_summary(loaded: int, blank: int) -> str:
    return f"{plural(loaded, 'live round')}, {plural(blank, 'blank')}"
