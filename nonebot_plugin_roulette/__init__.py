# 命令处理
from typing import Awaitable, Callable

from nonebot import CommandGroup, get_plugin_config
from nonebot.adapters.onebot.v11 import Bot, GroupMessageEvent, Message, MessageEvent
from nonebot.log import logger
from nonebot.matcher import Matcher
from nonebot.params import CommandArg
from nonebot.plugin import PluginMetadata
from nonebot.rule import to_me

from .config import Config
from .game.errors import AuthorizationError, RouletteError
from .game.room import Room
from .room_manager import RoomManager

__plugin_meta__ = PluginMetadata(
    name="Shotgun Roulette",
    description="Multiplayer shotgun roulette for group chats",
    usage=(
        "/roulette init - open a lobby\n"
        "/roulette join | exit | start\n"
        "/roulette shoot <seat|me>\n"
        "/roulette use <number|item name>\n"
        "/roulette items | status | end"
    ),
    type="application",
    config=Config,
    supported_adapters={"~onebot.v11"},
)

plugin_config = get_plugin_config(Config)

enabled_groups: set[str] = set(plugin_config.roulette_enabled_groups)
room_manager = RoomManager()


async def is_enabled(event: MessageEvent) -> bool:
    if isinstance(event, GroupMessageEvent):
        # 在允许的群聊中启用
        return str(event.group_id) in enabled_groups
    return False


async def is_admin(bot: Bot, event: MessageEvent) -> bool:
    if isinstance(event, GroupMessageEvent):
        user_info: dict = await bot.call_api(
            "get_group_member_info",
            group_id=event.group_id,
            user_id=int(event.get_user_id()),
        )
        # 只允许管理员使用
        return user_info.get("role") in ["owner", "admin"]
    # 禁用私聊
    return False


def _display_name(event: GroupMessageEvent) -> str:
    sender = event.sender
    return sender.card or sender.nickname or event.get_user_id()


def _new_room(bot: Bot) -> Callable[[str], Room]:
    def factory(group_id: str) -> Room:
        return Room(
            group_id, bot.send_group_msg, bot.send_private_msg, plugin_config.rules()
        )

    return factory


async def _run_in_room(
    matcher: type[Matcher],
    event: GroupMessageEvent,
    action: Callable[[Room], Awaitable[object]],
) -> None:
    """Run a command against the group's room while holding the group lock."""
    group_id = str(event.group_id)
    async with room_manager.locked(group_id):
        try:
            await action(room_manager.get(group_id))
        except RouletteError as error:
            logger.warning(f"Rejected command in group {group_id}: {error}")
            await matcher.finish(str(error))


commandConfig = CommandGroup("rouletteconfig", rule=is_admin)
commandEnable = commandConfig.command("enable", aliases={"启用轮盘"})
commandDisable = commandConfig.command("disable", aliases={"禁用轮盘"})


@commandEnable.handle()
async def _(event: GroupMessageEvent):
    group_id = str(event.group_id)
    if group_id in enabled_groups:
        await commandEnable.finish(f"Group {group_id} is already enabled")
    enabled_groups.add(group_id)
    await commandEnable.send(f"Group {group_id} enabled")


@commandDisable.handle()
async def _(event: GroupMessageEvent):
    group_id = str(event.group_id)
    if group_id not in enabled_groups:
        await commandDisable.finish(f"Group {group_id} is not enabled")
    enabled_groups.remove(group_id)
    await commandDisable.send(f"Group {group_id} disabled")


commandPrefix = CommandGroup("roulette", rule=is_enabled)

commandInit = commandPrefix.command("init", aliases={"创建", "开房"}, rule=to_me())
commandEnd = commandPrefix.command("end", aliases={"结束", "中止"})
commandJoin = commandPrefix.command("join", aliases={"加入", "加"})
commandExit = commandPrefix.command("exit", aliases={"退出", "离开"})
commandStart = commandPrefix.command("start", aliases={"开始"})
commandShoot = commandPrefix.command("shoot", aliases={"开枪", "射击"})
commandUse = commandPrefix.command("use", aliases={"道具", "使用"})
commandItems = commandPrefix.command("items", aliases={"背包", "物品"})
commandStatus = commandPrefix.command("status", aliases={"状态"})


@commandInit.handle()
async def _(bot: Bot, event: GroupMessageEvent):
    group_id = str(event.group_id)
    async with room_manager.locked(group_id):
        try:
            room = room_manager.create(group_id, _new_room(bot))
            await room.add_player(event.get_user_id(), _display_name(event))
        except RouletteError as error:
            await commandInit.finish(str(error))
    logger.info(f"Roulette lobby opened in group {group_id}")


@commandEnd.handle()
async def _(bot: Bot, event: GroupMessageEvent):
    group_id = str(event.group_id)
    user_id = event.get_user_id()

    async def end(room: Room) -> None:
        if room.session.host_user_id != user_id and not await is_admin(bot, event):
            raise AuthorizationError("Only the host or a group admin can end the game.")
        room_manager.remove(group_id)

    await _run_in_room(commandEnd, event, end)
    await commandEnd.finish("The game has been ended.")


@commandJoin.handle()
async def _(event: GroupMessageEvent):
    await _run_in_room(
        commandJoin,
        event,
        lambda room: room.add_player(event.get_user_id(), _display_name(event)),
    )


@commandExit.handle()
async def _(event: GroupMessageEvent):
    group_id = str(event.group_id)

    async def leave(room: Room) -> None:
        await room.remove_player(event.get_user_id())
        if not room.session.players:
            room_manager.remove(group_id)

    await _run_in_room(commandExit, event, leave)


@commandStart.handle()
async def _(event: GroupMessageEvent):
    await _run_in_room(
        commandStart, event, lambda room: room.start_game(event.get_user_id())
    )


@commandShoot.handle()
async def _(event: GroupMessageEvent, args: Message = CommandArg()):
    target = args.extract_plain_text().strip()
    await _run_in_room(
        commandShoot, event, lambda room: room.shoot(event.get_user_id(), target)
    )


@commandUse.handle()
async def _(event: GroupMessageEvent, args: Message = CommandArg()):
    choice = args.extract_plain_text().strip()
    await _run_in_room(
        commandUse, event, lambda room: room.use_item(event.get_user_id(), choice)
    )


@commandItems.handle()
async def _(event: GroupMessageEvent):
    await _run_in_room(
        commandItems, event, lambda room: room.send_items(event.get_user_id())
    )


@commandStatus.handle()
async def _(event: GroupMessageEvent):
    async def show(room: Room) -> None:
        await room.broadcast(room.status_text())

    await _run_in_room(commandStatus, event, show)
