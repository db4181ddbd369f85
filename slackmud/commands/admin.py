# slackmud/commands/admin.py
"""
Wizard-only world building commands: dig, attach, detach, teleport.
The router only sends wizards here.
"""
import logging
from typing import TYPE_CHECKING

import config
from .. import utils
from ..errors import DuplicateExit
from ..response import Response

if TYPE_CHECKING:
    from .context import CommandContext
    from .parser import Intent

log = logging.getLogger(__name__)

DIG_USAGE = (
    "Usage: `dig <direction> #channel`\n"
    "Example: `dig north #kitchen`\n"
    f"Valid directions: {utils.VALID_DIRECTIONS_TEXT}"
)


async def cmd_dig(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Creates a one-way exit from the current room to the room for a channel."""
    player = ctx.player
    if not player.current_room_id:
        return Response.private("You need to be in a room to dig. Use `/mud look` in a channel first!")

    if not intent.arguments or intent.channel is None:
        return Response.private(DIG_USAGE)

    direction = utils.get_canonical_direction(intent.arguments[0])
    if not direction:
        return Response.private(
            f"Invalid direction: `{intent.arguments[0]}`. Valid directions: {utils.VALID_DIRECTIONS_TEXT}"
        )

    target = intent.channel
    try:
        # Destination room and exit commit together or not at all.
        async with ctx.db.transaction() as conn:
            from_room = await ctx.rooms.ensure_room(player.current_room_id, conn=conn)
            to_room = await ctx.rooms.ensure_room(target.room_id, target.display_name, conn=conn)
            await ctx.rooms.add_exit(from_room.id, direction, to_room.id, player.slack_user_id, conn=conn)
    except DuplicateExit:
        existing = await ctx.rooms.get_exit(player.current_room_id, direction)
        leads_to = existing.to_room_id if existing else target.room_id
        dest = await ctx.rooms.get_room(leads_to)
        return Response.private(
            f"An exit to the {direction} already exists, leading to #{dest.name if dest else leads_to}."
        )

    private_text = f"✨ You dig an exit to the *{direction}* from #{from_room.name}, leading to #{to_room.name}!"
    public_text = f"_{player.name} utters some strange words. An exit to the {direction} flashes into existence!_"
    return Response.in_room(from_room, private_text, public_text)


async def cmd_attach(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Binds the current room's public actions to a Slack channel."""
    room = await ctx.current_room()
    if room is None:
        return Response.private("You need to be in a room to attach it! Use `/mud look` in a channel first.")
    if intent.channel is None:
        return Response.private("Usage: `attach #channel-name`\nExample: `attach #general`")

    channel_id = intent.channel.room_id
    await ctx.rooms.attach(room.id, channel_id)
    log.info("%s attached room %s to channel %s.", ctx.player.name, room.id, channel_id)
    return Response.private(
        f"✨ Room '{room.name}' is now attached to <#{channel_id}>. "
        "Public actions in this room will be visible in that channel."
    )


async def cmd_detach(ctx: 'CommandContext', intent: 'Intent') -> Response:
    room = await ctx.current_room()
    if room is None:
        return Response.private("You need to be in a room to detach it!")

    await ctx.rooms.detach(room.id)
    log.info("%s detached room %s.", ctx.player.name, room.id)
    return Response.private(
        f"✨ Room '{room.name}' has been detached. It is now a virtual room with no Slack channel visibility."
    )


TELEPORT_USAGE = (
    "Usage:\n"
    "• `teleport <vnum>` - Teleport yourself to a room\n"
    "• `teleport <player_name> <vnum>` - Teleport another player to a room\n\n"
    "Example: `teleport 3001`"
)


def _room_id_for(destination: str) -> str:
    if destination.startswith(config.VIRTUAL_ROOM_PREFIX):
        return destination
    return f"{config.VIRTUAL_ROOM_PREFIX}{destination}"


async def cmd_teleport(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """
    'teleport <vnum>' moves the wizard; 'teleport <player> <vnum>' moves someone else.
    A channel mention may stand in for the vnum.
    """
    args = list(intent.arguments)
    if intent.channel is not None:
        room_id, shown = intent.channel.room_id, intent.channel.display_name
    elif args:
        shown = args.pop()
        room_id = _room_id_for(shown)
    else:
        return Response.private(TELEPORT_USAGE)

    if len(args) > 1:
        return Response.private(TELEPORT_USAGE)

    room = await ctx.rooms.get_room(room_id)
    if room is None:
        return Response.private(f"❌ Room with vnum `{shown}` does not exist.")

    arrival_notice = "✨ *{name}* appears in a flash of light!"
    teleported_text = f"✨ *You have been teleported!*\n\n*{room.name}*\n{room.description}"

    if not args:
        await ctx.players.set_current_room(ctx.player.slack_user_id, room.id)
        ctx.player.current_room_id = room.id
        return Response.in_room(room, teleported_text, arrival_notice.format(name=ctx.player.name))

    target = await ctx.players.find_by_name(args[0])
    if target is None:
        return Response.private(f"❌ Player '{args[0]}' not found.")

    await ctx.players.set_current_room(target.slack_user_id, room.id)
    log.info("%s teleported %s to %s.", ctx.player.name, target.name, room.id)
    response = Response.in_room(
        room, f"✅ Teleported *{target.name}* to room `{shown}`", arrival_notice.format(name=target.name)
    )
    if target.slack_user_id != ctx.player.slack_user_id:
        response.direct_messages.append((target.slack_user_id, teleported_text))
    return response
