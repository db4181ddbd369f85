# slackmud/commands/general.py
"""
General player commands: look, character, help, and the unknown-command reply.
"""
import logging
from typing import Dict, List, Optional, TYPE_CHECKING

from .. import utils
from ..definitions import slots
from ..response import Response
from .context import Source

if TYPE_CHECKING:
    from .context import CommandContext
    from .parser import Intent
    from ..player import Player
    from ..room import Room

log = logging.getLogger(__name__)

HELP_TOPICS = {
    "GENERAL": {
        "look": "`look` (l) [target]\n  Look around your current room, at another player, or at an item.",
        "character": "`character` (char, c)\n  Show your character sheet and the available classes and races.",
        "help": "`help` (h) [topic]\n  Shows a list of help topics, or detailed help for a specific topic.",
    },
    "MOVEMENT": {
        "move": "`move <direction>` (go, n, s, e, w, u, d)\n  Follow an exit out of your current room.",
    },
    "COMMUNICATION": {
        "say": "`say <message>`\n  Say something to everyone in your room.",
        "tell": "`tell <player> <message>`\n  Send a private message to another player.",
        "shout": "`shout <message>`\n  Shout to every player in the game.",
    },
    "EQUIPMENT": {
        "inventory": "`inventory` (inv, i)\n  See what you are carrying.",
        "equipment": "`equipment` (eq)\n  See what you are wearing and wielding.",
        "wear": "`wear <item>`\n  Wear a piece of armor, jewelry or clothing you are carrying.",
        "wield": "`wield <weapon>`\n  Wield a weapon you are carrying, swapping out your current one.",
        "get": "`get <item>` (take)\n  Pick up an item lying in your room.",
        "drop": "`drop <item>`\n  Drop an item you are carrying.",
        "remove": "`remove <item>` (rem)\n  Take off something you are wearing.",
    },
}

# Only listed for wizards; to everyone else these topics do not exist.
WIZARD_HELP_TOPICS = {
    "WIZARD": {
        "dig": "`dig <direction> #channel`\n  Create a one-way exit from your current room to the room for #channel.",
        "attach": "`attach #channel`\n  Show public actions in your current room in #channel.",
        "detach": "`detach`\n  Make your current room virtual (no channel visibility).",
        "teleport": "`teleport <vnum>` or `teleport <player> <vnum>`\n  Jump to a room directly.",
    },
}


def _help_topics(is_wizard: bool) -> Dict[str, Dict[str, str]]:
    topics = dict(HELP_TOPICS)
    if is_wizard:
        topics.update(WIZARD_HELP_TOPICS)
    return topics


def format_room_description(room: 'Room', viewer: 'Player', exits: List[tuple],
                            others: List['Player'], items: List) -> str:
    """Builds the private description of a room for the player looking at it."""
    title = f"*You look around #{room.name}*"
    if viewer.is_wizard:
        where = f"`{room.vnum}`" if room.is_virtual else "non-vnum"
        if room.attached_channel_id:
            title = f"*You look around #{room.name} [{where} | attached to <#{room.attached_channel_id}>]*"
        elif room.is_virtual:
            title = f"*You look around #{room.name} [{where}]*"
        else:
            title = f"*You look around #{room.name} [non-vnum room]*"

    sections = [title, room.description]

    if exits:
        lines = ["*Exits:*"]
        for direction, _to_id, to_name in exits:
            lines.append(f"• *{direction}* → #{to_name}")
        sections.append("\n".join(lines))

    if others:
        sections.append("*Players here:*\n" + "\n".join(f"• {p.name}" for p in others))
    else:
        sections.append("*Players here:*\n_You are alone._")

    if items:
        lines = ["*Items here:*"]
        for item in items:
            text = item.definition.long_description if item.definition else item.name
            lines.append(f"• {text}")
        sections.append("\n".join(lines))

    return "\n\n".join(sections)


async def cmd_look(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Handles 'look': the current room, or a player/item when given a target."""
    if intent.arguments:
        return await _look_at(ctx, intent.args_str)

    player = ctx.player
    welcome = ""
    room: Optional['Room'] = None

    if not player.current_room_id:
        if ctx.caller.source is Source.DM or not ctx.caller.channel_id:
            return Response.private(
                "You haven't entered any room yet! Use `/mud look` in a channel to enter a room."
            )
        # First look from a channel: that channel becomes the player's room.
        async with ctx.db.transaction() as conn:
            room = await ctx.rooms.ensure_room(ctx.caller.channel_id, ctx.caller.channel_name, conn=conn)
            await ctx.players.set_current_room(player.slack_user_id, room.id, conn=conn)
        player.current_room_id = room.id
        welcome = f"Welcome to SlackMUD! You have entered #{room.name}.\n\n"
    else:
        room = await ctx.rooms.get_room(player.current_room_id)
        if room is None:
            log.warning("Player %s is in missing room %s.", player.slack_user_id, player.current_room_id)
            return Response.private("Your current location is unknown. Try using `/mud look` in a channel!")

    exits = await ctx.rooms.exits_for(room.id)
    others = [p for p in await ctx.rooms.players_in(room.id) if p.slack_user_id != player.slack_user_id]
    items = await ctx.equipment.in_room(room.id)

    private_text = welcome + format_room_description(room, player, exits, others, items)
    public_text = f"_{player.name} looks around the room carefully._"
    return Response.in_room(room, private_text, public_text)


async def _look_at(ctx: 'CommandContext', target: str) -> Response:
    """Looks at a player in the same room first, then at a carried or nearby object."""
    player = ctx.player
    if not player.current_room_id:
        return Response.private("You need to be in a room first! Use `/mud look` in a channel to enter a room.")

    word = target.split()[0].lower()
    for other in await ctx.rooms.players_in(player.current_room_id):
        if word in other.name.lower():
            return Response.private(await _describe_player(ctx, other))

    for item in await ctx.equipment.inventory_for(player.slack_user_id):
        if item.matches_keyword(word):
            return Response.private(item.definition.describe("You are carrying:"))
    for item in await ctx.equipment.in_room(player.current_room_id):
        if item.matches_keyword(word):
            return Response.private(item.definition.describe("You examine:"))

    return Response.private(f"You don't see '{target}' here.")


async def _describe_player(ctx: 'CommandContext', target: 'Player') -> str:
    class_names = {c['id']: c['name'] for c in await ctx.players.list_classes()}
    race_names = {r['id']: r['name'] for r in await ctx.players.list_races()}
    race = race_names.get(target.race_id, "Unknown").lower()
    klass = class_names.get(target.class_id, "Unknown").lower()
    gender = target.gender or "neutral"

    lines = [f"*{target.name}* is a {gender} {race} {klass}, level {target.level}.", ""]
    worn = await ctx.equipment.equipped_for(target.slack_user_id)
    if worn:
        lines.append(f"*{target.name} is using:*")
        for item in worn:
            lines.append(f"{slots.label_for(item.equipped_slot):<20} {item.name}")
    else:
        lines.append(f"{target.name} isn't wearing any equipment.")
    return "\n".join(lines)


async def cmd_character(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Handles the 'character' command: sheet plus the class and race lists."""
    player = ctx.player
    classes = await ctx.players.list_classes()
    races = await ctx.players.list_races()
    class_names = {c['id']: c['name'] for c in classes}
    race_names = {r['id']: r['name'] for r in races}

    output = ["*Your Character*"]
    output.append(f"*Name:* {player.name}")
    output.append(f"*Level:* {player.level}")
    output.append(f"*XP:* {player.experience_points}")
    output.append(f"*Class:* {utils.format_not_set(class_names.get(player.class_id))}")
    output.append(f"*Race:* {utils.format_not_set(race_names.get(player.race_id))}")
    output.append(f"*Gender:* {utils.format_not_set(player.gender)}")

    output.append("\n*Available Classes:*")
    for c in classes:
        output.append(f"• *{c['name']}* - {c['description']}")
    output.append("\n*Available Races:*")
    for r in races:
        output.append(f"• *{r['name']}* - {r['description']}")

    return Response.private("\n".join(output))


async def cmd_help(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Handles the dynamic 'help' command; wizard topics only exist for wizards."""
    topics = _help_topics(ctx.is_wizard)
    topic = intent.args_str.strip().lower()

    # No topic: every command, grouped by category
    if not topic:
        output = ["*SlackMUD Commands*"]
        for category, commands in topics.items():
            output.append(f"\n*{category.title()}*")
            for description in commands.values():
                output.append(description.split("\n")[0])
        output.append("\nType `help <command>` for more information.")
        return Response.private("\n".join(output))

    if topic.upper() in topics:
        category_name = topic.upper()
        output = [f"*Help: {category_name.title()}*"]
        for description in topics[category_name].values():
            output.append(description)
        return Response.private("\n".join(output))

    for category_data in topics.values():
        if topic in category_data:
            return Response.private(f"*Help: {topic.title()}*\n{category_data[topic]}")

    return Response.private(f"Sorry, no help topic found for '{topic}'.")


async def cmd_unknown(ctx: 'CommandContext', intent: 'Intent') -> Response:
    word = intent.word or intent.raw_text.strip()
    return Response.private(f"Unknown command: `{word}`. Type `help` for available commands.")


async def cmd_say(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Handles the 'say' command."""
    room = await ctx.current_room()
    if room is None:
        return Response.private("You need to be in a room first!")
    message = intent.args_str.strip()
    if not message:
        return Response.private("Say what?")
    return Response.in_room(room, f"You say '{message}'", f"_{ctx.player.name} says '{message}'_")


TELL_USAGE = "Usage: `tell <player> <message>`"


async def cmd_tell(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Sends a private message to another player, wherever they are."""
    if not intent.arguments:
        return Response.private(f"Tell whom what?\n{TELL_USAGE}")
    target_name = intent.arguments[0]
    message = " ".join(intent.arguments[1:]).strip()
    if not message:
        return Response.private(f"Tell them what?\n{TELL_USAGE}")

    target = await ctx.players.find_by_name(target_name)
    if target is None:
        return Response.private(f"No player named '{target_name}' found.")
    if target.slack_user_id == ctx.player.slack_user_id:
        return Response.private("You have a nice conversation with yourself.")

    response = Response.private(f"You tell {target.name} '{message}'")
    response.direct_messages.append((target.slack_user_id, f"_{ctx.player.name} tells you '{message}'_"))
    return response


async def cmd_shout(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Shouts to every player in the game."""
    player = ctx.player
    if not player.current_room_id:
        return Response.private("You need to be in a room first!")
    message = intent.args_str.strip()
    if not message:
        return Response.private("Shout what?")

    response = Response.private(f"You shout '{message}'")
    broadcast = f"_{player.name} shouts '{message}'_"
    for uid in await ctx.players.all_ids():
        if uid != player.slack_user_id:
            response.direct_messages.append((uid, broadcast))
    return response
