# slackmud/commands/movement.py
"""
Movement through exits.
"""
import logging
from typing import TYPE_CHECKING

from .. import utils
from ..response import Response
from .general import format_room_description

if TYPE_CHECKING:
    from .context import CommandContext
    from .parser import Intent

log = logging.getLogger(__name__)

MOVE_USAGE = (
    "Usage: `move <direction>`\n"
    "Example: `move north`\n"
    f"Valid directions: {utils.VALID_DIRECTIONS_TEXT}"
)


async def cmd_move(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Follows the exit in the given direction, if there is one."""
    player = ctx.player
    if not player.current_room_id:
        return Response.private("You need to be in a room first! Use `/mud look` in a channel to enter a room.")

    if not intent.arguments:
        return Response.private(MOVE_USAGE)

    direction = utils.get_canonical_direction(intent.arguments[0])
    if not direction:
        return Response.private(
            f"Invalid direction: `{intent.arguments[0]}`. Valid directions: {utils.VALID_DIRECTIONS_TEXT}"
        )

    exit_ = await ctx.rooms.get_exit(player.current_room_id, direction)
    if exit_ is None:
        return Response.private(f"There is no exit to the {direction} from here.")

    from_room = await ctx.rooms.get_room(player.current_room_id)
    to_room = await ctx.rooms.ensure_room(exit_.to_room_id)
    await ctx.players.set_current_room(player.slack_user_id, to_room.id)
    player.current_room_id = to_room.id
    log.debug("%s moved %s from %s to %s.", player.name, direction, exit_.from_room_id, to_room.id)

    from_name = from_room.name if from_room else exit_.from_room_id
    exits = await ctx.rooms.exits_for(to_room.id)
    others = [p for p in await ctx.rooms.players_in(to_room.id) if p.slack_user_id != player.slack_user_id]
    items = await ctx.equipment.in_room(to_room.id)
    private_text = (
        f"You travel {direction} from #{from_name} to #{to_room.name}.\n\n"
        + format_room_description(to_room, player, exits, others, items)
    )

    response = Response.in_room(to_room, private_text, f"_{player.name} arrives._")
    departure = f"_{player.name} heads {direction}._"
    if from_room and from_room.attached_channel_id:
        response.channel_notices.append((from_room.attached_channel_id, departure))
    else:
        for left_behind in await ctx.rooms.players_in(exit_.from_room_id):
            response.direct_messages.append((left_behind.slack_user_id, departure))
    return response
