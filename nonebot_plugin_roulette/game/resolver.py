"""Shot resolution, win detection and the next-turn rule.

Turn rule after a shot, when at least two players are still alive:

    self-shot + blank   -> shooter goes again
    other-shot + live   -> shooter goes again
    anything else       -> next alive player after the shooter (wrapping)

A reload happens lazily: an exhausted chamber is replaced right before the
next trigger pull, never right after the last shell.
"""

from __future__ import annotations

import logging
from typing import Callable

from .chamber import Chamber
from .errors import InvalidTargetError, OutOfTurnError, ValidationError
from .outcome import (
    CUE_COCK,
    CUE_DEATH,
    CUE_EMPTY_CLICK,
    CUE_GUNSHOT,
    CUE_HIT,
    CUE_VICTORY,
    CommandResult,
    ShotOutcome,
    chamber_summary,
)
from .player import Player
from .roster import Roster
from .state import GameState

_logger = logging.getLogger(__name__)


class TurnResolver:
    """Applies one shot (or forfeit) to a roster and game state."""

    def __init__(self, roster: Roster, load_chamber: Callable[[], Chamber]) -> None:
        self.roster = roster
        self.load_chamber = load_chamber

    def validate_shot(
        self, state: GameState, shooter_id: str, target_id: str | None
    ) -> tuple[Player, Player]:
        """Check every precondition of a shot without touching any state."""
        if not target_id:
            raise ValidationError("A shot needs a target.")
        shooter = self.roster.get(shooter_id)
        if shooter_id != state.current_turn_player_id:
            raise OutOfTurnError(f"It is not {shooter.name}'s turn.")
        if not shooter.alive:
            raise OutOfTurnError(f"{shooter.name} has been eliminated.")
        target = self.roster.id_2_player.get(target_id)
        if target is None:
            raise InvalidTargetError("That target is not in this game.")
        if not target.alive:
            raise InvalidTargetError(f"{target.name} has already been eliminated.")
        return shooter, target

    def reload(self, state: GameState, result: CommandResult) -> None:
        state.chamber = self.load_chamber()
        state.reload_count += 1
        result.system("Chamber reloaded with new shells...")
        result.system(
            "New chamber: "
            + chamber_summary(state.chamber.loaded_count(), state.chamber.blank_count())
        )
        result.cue(CUE_COCK)
        _logger.info("Chamber reloaded (%d)", state.reload_count)

    def resolve_shot(
        self,
        state: GameState,
        shooter_id: str,
        target_id: str | None,
        result: CommandResult,
    ) -> ShotOutcome:
        shooter, target = self.validate_shot(state, shooter_id, target_id)
        self_shot = shooter is target

        reloaded = False
        if state.chamber.is_exhausted():
            self.reload(state, result)
            reloaded = True

        result.cue(CUE_COCK)
        hit = state.chamber.fire_current()

        eliminated = False
        if hit:
            result.cue(CUE_GUNSHOT)
            result.cue(CUE_HIT)
            eliminated = self.roster.apply_hit(target.player_id)
            if eliminated:
                result.cue(CUE_DEATH)
                result.action(f"{target.name} has been eliminated!")
            else:
                result.action(f"{target.name} was hit! {target.lives} lives remaining.")
        else:
            result.cue(CUE_EMPTY_CLICK)
            if self_shot:
                result.action(f"{shooter.name} shot themselves... Click! Empty chamber.")
            else:
                result.action(
                    f"{shooter.name} shot at {target.name}... Click! Empty chamber."
                )

        winner = self.check_winner(state, result)
        next_turn_player_id = None
        if winner is None:
            next_turn_player_id = self.next_turn(state, shooter, self_shot, hit, result)

        return ShotOutcome(
            hit=hit,
            shooter_id=shooter.player_id,
            shooter_name=shooter.name,
            target_id=target.player_id,
            target_name=target.name,
            self_shot=self_shot,
            lives_remaining=target.lives,
            eliminated=eliminated,
            next_turn_player_id=next_turn_player_id,
            winner_id=winner.player_id if winner else None,
            reloaded=reloaded,
        )

    def resolve_forfeit(
        self, state: GameState, player_id: str, result: CommandResult
    ) -> str | None:
        """Eliminate a player outright, then run the win check and turn rule.

        Returns the next turn player id, or None if the forfeit ended the game.
        """
        player = self.roster.get(player_id)
        if not self.roster.eliminate(player_id):
            return state.current_turn_player_id
        result.cue(CUE_DEATH)
        result.action(f"{player.name} has been eliminated!")

        if self.check_winner(state, result) is not None:
            return None
        if state.current_turn_player_id != player_id:
            return state.current_turn_player_id
        nxt = self.roster.next_alive_after(player_id)
        state.current_turn_player_id = nxt.player_id
        result.system(f"{nxt.name}'s turn.")
        return nxt.player_id

    def check_winner(self, state: GameState, result: CommandResult) -> Player | None:
        """Set the winner once exactly one player is left alive."""
        alive = self.roster.alive_in_turn_order()
        if len(alive) != 1:
            return None
        winner = alive[0]
        state.winner_id = winner.player_id
        result.winner_id = winner.player_id
        result.cue(CUE_VICTORY)
        result.system(f"{winner.name} wins the game!")
        _logger.info("%s wins the game", winner.name)
        return winner

    def next_turn(
        self,
        state: GameState,
        shooter: Player,
        self_shot: bool,
        hit: bool,
        result: CommandResult,
    ) -> str:
        if (self_shot and not hit) or (not self_shot and hit):
            state.current_turn_player_id = shooter.player_id
            result.system(f"{shooter.name} gets another turn!")
            return shooter.player_id

        nxt = self.roster.next_alive_after(shooter.player_id)
        state.current_turn_player_id = nxt.player_id
        result.system(f"{nxt.name}'s turn.")
        return nxt.player_id
