import pytest

from conftest import pid
from nonebot_plugin_roulette.game.errors import (
    InvalidTargetError,
    OutOfTurnError,
    StateConflictError,
    ValidationError,
)
from nonebot_plugin_roulette.game.session import FINISHED

LIVE = [True] * 6
BLANK = [False] * 6


def test_self_shot_blank_keeps_turn(make_session):
    session = make_session(shells=BLANK)
    result = session.fire_shot("u1", pid(session, "u1"))
    assert result.shot.hit is False
    assert result.shot.self_shot is True
    assert result.shot.next_turn_player_id == pid(session, "u1")
    assert result.texts == [
        "Alice shot themselves... Click! Empty chamber.",
        "Alice gets another turn!",
    ]
    assert result.cues == ["cock", "empty_click"]


def test_hitting_another_player_keeps_turn(make_session):
    session = make_session(shells=LIVE)
    result = session.fire_shot("u1", pid(session, "u2"))
    assert result.shot.hit is True
    assert result.shot.lives_remaining == 4
    assert session.current_turn_player_id == pid(session, "u1")
    assert result.texts == ["Bob was hit! 4 lives remaining.", "Alice gets another turn!"]
    assert result.cues == ["cock", "gunshot", "hit"]


def test_missing_another_player_passes_turn(make_session):
    session = make_session(shells=BLANK)
    result = session.fire_shot("u1", pid(session, "u2"))
    assert session.current_turn_player_id == pid(session, "u2")
    assert result.texts == [
        "Alice shot at Bob... Click! Empty chamber.",
        "Bob's turn.",
    ]


def test_self_hit_passes_turn(make_session):
    session = make_session(shells=LIVE)
    result = session.fire_shot("u1", pid(session, "u1"))
    assert session.player_for("u1").lives == 4
    assert result.shot.next_turn_player_id == pid(session, "u2")
    assert session.current_turn_player_id == pid(session, "u2")


def test_two_player_self_hit_scenario(make_session):
    session = make_session(n=2, shells=[True, False, False, False, False, False])
    result = session.fire_shot("u1", pid(session, "u1"))
    assert result.shot.hit is True
    assert session.player_for("u1").lives == 4
    assert session.chamber.cursor == 1
    assert session.current_turn_player_id == pid(session, "u2")


def test_turn_wraps_around(make_session):
    session = make_session(shells=BLANK)
    session.state.current_turn_player_id = pid(session, "u3")
    session.fire_shot("u3", pid(session, "u2"))
    assert session.current_turn_player_id == pid(session, "u1")


def test_turn_skips_eliminated_players(make_session):
    session = make_session(shells=BLANK)
    session.roster.eliminate(pid(session, "u2"))
    session.fire_shot("u1", pid(session, "u3"))
    assert session.current_turn_player_id == pid(session, "u3")


def test_self_elimination_passes_to_next_in_order(make_session):
    session = make_session(n=4, shells=LIVE)
    session.state.current_turn_player_id = pid(session, "u2")
    session.player_for("u2").lives = 1
    result = session.fire_shot("u2", pid(session, "u2"))
    assert result.shot.eliminated is True
    assert session.player_for("u2").alive is False
    assert session.current_turn_player_id == pid(session, "u3")
    assert result.texts[0] == "Bob has been eliminated!"
    assert "death" in result.cues


def test_last_hit_ends_the_game(make_session):
    session = make_session(n=2, shells=LIVE)
    session.player_for("u2").lives = 1
    result = session.fire_shot("u1", pid(session, "u2"))

    assert result.shot.eliminated is True
    assert result.shot.next_turn_player_id is None
    assert result.shot.winner_id == pid(session, "u1")
    assert session.winner_id == pid(session, "u1")
    assert session.status == FINISHED
    # the turn pointer is left where it was
    assert session.current_turn_player_id == pid(session, "u1")
    assert result.texts == ["Bob has been eliminated!", "Alice wins the game!"]
    assert result.cues[-1] == "victory"

    with pytest.raises(StateConflictError):
        session.fire_shot("u1", pid(session, "u1"))


def test_elimination_with_survivors_left_does_not_end_the_game(make_session):
    session = make_session(shells=LIVE)
    session.player_for("u2").lives = 1
    result = session.fire_shot("u1", pid(session, "u2"))
    assert result.shot.winner_id is None
    assert session.winner_id is None
    assert session.current_turn_player_id == pid(session, "u1")


def test_exhausted_chamber_reloads_before_firing(make_session):
    session = make_session(shells=[False, False], cursor=2)
    result = session.fire_shot("u1", pid(session, "u2"))

    chamber = session.chamber
    assert result.shot.reloaded is True
    assert session.state.reload_count == 1
    assert chamber.length == 6
    assert chamber.cursor == 1
    assert result.shot.hit == chamber.shells[0]
    assert result.texts[0] == "Chamber reloaded with new shells..."
    assert result.texts[1].startswith("New chamber: ")
    assert result.cues[:2] == ["cock", "cock"]


def test_last_shell_does_not_reload_eagerly(make_session):
    session = make_session(shells=[False, False], cursor=1)
    result = session.fire_shot("u1", pid(session, "u1"))
    assert result.shot.reloaded is False
    assert session.chamber.is_exhausted()


def test_out_of_turn_shot_is_rejected(make_session):
    session = make_session(shells=LIVE)
    with pytest.raises(OutOfTurnError):
        session.fire_shot("u2", pid(session, "u1"))
    assert session.chamber.cursor == 0
    assert session.player_for("u1").lives == 5


def test_invalid_targets(make_session):
    session = make_session(shells=LIVE)
    session.roster.eliminate(pid(session, "u3"))
    with pytest.raises(InvalidTargetError):
        session.fire_shot("u1", pid(session, "u3"))
    with pytest.raises(InvalidTargetError):
        session.fire_shot("u1", "nobody")
    with pytest.raises(ValidationError):
        session.fire_shot("u1", None)
    assert session.chamber.cursor == 0


def test_self_elimination_hands_the_win_to_the_other_player(make_session):
    session = make_session(n=2, shells=LIVE)
    session.player_for("u1").lives = 1
    result = session.fire_shot("u1", pid(session, "u1"))

    assert result.shot.self_shot is True
    assert result.shot.eliminated is True
    assert result.shot.next_turn_player_id is None
    assert session.status == FINISHED
    assert session.winner_id == pid(session, "u2")
    assert result.winner_id == pid(session, "u2")
    assert result.texts == ["Alice has been eliminated!", "Bob wins the game!"]
    assert not any(text.endswith("'s turn.") for text in result.texts)
