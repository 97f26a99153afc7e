import random

import nonebot
import pytest

# The package root registers NoneBot matchers, so NoneBot must be up before any import.
nonebot.init(driver="~none")
nonebot.load_plugin("nonebot_plugin_roulette")

from nonebot_plugin_roulette.game.chamber import Chamber  # noqa: E402
from nonebot_plugin_roulette.game.session import GameSession  # noqa: E402

NAMES = ["Alice", "Bob", "Carol", "Dave"]


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def make_session():
    """Build a started session with players u1..uN and an optional scripted chamber."""

    def factory(n=3, shells=None, cursor=0, seed=7):
        session = GameSession("g1", rng=random.Random(seed))
        for i in range(n):
            session.join(f"u{i + 1}", NAMES[i])
        session.start_game("u1")
        if shells is not None:
            session.state.chamber = Chamber(shells, cursor)
        return session

    return factory


def pid(session, user_id):
    return session.player_for(user_id).player_id


def give(session, user_id, item_cls, item_id=None):
    """Hand a specific item to a player and return it."""
    player = session.player_for(user_id)
    item = item_cls(item_id or f"test-{user_id}-{len(player.items)}", player)
    player.items.append(item)
    return item
