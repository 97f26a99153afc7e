import pytest

from nonebot_plugin_roulette.game.errors import NotFoundError
from nonebot_plugin_roulette.game.player import Player
from nonebot_plugin_roulette.game.roster import Roster


@pytest.fixture()
def roster():
    r = Roster(max_lives=5)
    for i, name in enumerate(["Alice", "Bob", "Carol", "Dave"]):
        r.add(Player(f"p{i}", f"u{i}", name, 0))
    r.assign_turn_order()
    return r


def test_join_order_is_turn_order(roster):
    assert [p.order for p in roster] == [0, 1, 2, 3]
    assert [p.seat for p in roster] == [1, 2, 3, 4]
    assert roster.by_seat(2).name == "Bob"
    assert roster.by_seat(5) is None
    assert roster.by_user("u2").name == "Carol"


def test_remove_keeps_order_contiguous(roster):
    roster.remove("p1")
    assert [p.name for p in roster] == ["Alice", "Carol", "Dave"]
    assert [p.order for p in roster] == [0, 1, 2]
    with pytest.raises(NotFoundError):
        roster.get("p1")


def test_apply_hit_reports_elimination_once(roster):
    player = roster.get("p0")
    player.lives = 2
    assert roster.apply_hit("p0") is False
    assert (player.lives, player.alive) == (1, True)
    assert roster.apply_hit("p0") is True
    assert (player.lives, player.alive) == (0, False)
    assert roster.apply_hit("p0") is False
    assert player.lives == 0


def test_apply_heal_is_capped(roster):
    player = roster.get("p0")
    assert roster.apply_heal("p0") == 5
    player.lives = 3
    assert roster.apply_heal("p0") == 4
    assert player.lives == 4


def test_alive_in_turn_order_skips_eliminated(roster):
    roster.eliminate("p2")
    assert [p.name for p in roster.alive_in_turn_order()] == ["Alice", "Bob", "Dave"]


def test_next_alive_after_wraps_and_skips(roster):
    assert roster.next_alive_after("p0").name == "Bob"
    assert roster.next_alive_after("p3").name == "Alice"
    roster.eliminate("p1")
    assert roster.next_alive_after("p0").name == "Carol"
    # an eliminated reference still marks a position in the rotation
    assert roster.next_alive_after("p1").name == "Carol"


def test_next_alive_after_last_survivor(roster):
    for pid in ("p1", "p2", "p3"):
        roster.eliminate(pid)
    assert roster.next_alive_after("p0") is None
