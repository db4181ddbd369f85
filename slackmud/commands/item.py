# slackmud/commands/item.py
"""
Inventory and equipment commands.
"""
import logging
from typing import List, Optional, TYPE_CHECKING

from ..definitions import slots
from ..errors import NotCarried, SlotConflict
from ..item import LocationType, ObjectInstance
from ..response import Response

if TYPE_CHECKING:
    from .context import CommandContext
    from .parser import Intent

log = logging.getLogger(__name__)


def _find(items: List[ObjectInstance], word: str) -> Optional[ObjectInstance]:
    for item in items:
        if item.matches_keyword(word):
            return item
    return None


async def _with_room_notice(ctx: 'CommandContext', private_text: str, public_text: str) -> Response:
    room = await ctx.current_room()
    if room is None:
        return Response.private(private_text)
    return Response.in_room(room, private_text, public_text)


async def cmd_inventory(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Displays the object instances a player is carrying."""
    items = await ctx.equipment.inventory_for(ctx.player.slack_user_id)
    if not items:
        return Response.private("*Inventory:*\nYou aren't carrying anything.")
    output = ["*You are carrying:*"]
    output.extend(f"• {item.name}" for item in items)
    return Response.private("\n".join(output))


async def cmd_equipment(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Displays worn and wielded items in slot order."""
    worn = await ctx.equipment.equipped_for(ctx.player.slack_user_id)
    if not worn:
        return Response.private("*Equipment:*\nYou aren't wearing anything.")
    output = ["*You are using:*"]
    for item in worn:
        output.append(f"{slots.label_for(item.equipped_slot):<20} {item.name}")
    return Response.private("\n".join(output))


async def cmd_wear(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Wears a carried item in the first free slot its wear flags allow."""
    if not intent.arguments:
        return Response.private("Usage: `wear <item>`\nExample: `wear helm`")
    player = ctx.player
    word = intent.arguments[0]

    item = _find(await ctx.equipment.inventory_for(player.slack_user_id), word)
    if item is None:
        return Response.private(f"You aren't carrying '{word}'.")

    # Weapons go through 'wield'.
    candidates = [s for s in item.definition.wearable_slots if s != slots.WIELD]
    if not candidates:
        return Response.private(f"You can't wear {item.name}.")

    full_message = f"You're already wearing something in all available slots for {item.name}."
    slot = await ctx.equipment.free_slot_for(player.slack_user_id, candidates)
    if slot is None:
        return Response.private(full_message)

    try:
        await ctx.equipment.equip(item.id, player.slack_user_id, slot, swap=False)
    except SlotConflict:
        return Response.private(full_message)
    except NotCarried:
        return Response.private(f"You aren't carrying '{word}'.")

    return await _with_room_notice(
        ctx,
        f"You wear {item.name} {slots.location_text_for(slot)}.",
        f"_{player.name} wears {item.name}._",
    )


async def cmd_wield(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Wields a carried weapon; whatever was wielded before goes back to inventory."""
    if not intent.arguments:
        return Response.private("Usage: `wield <weapon>`\nExample: `wield sword`")
    player = ctx.player
    word = intent.arguments[0]

    item = _find(await ctx.equipment.inventory_for(player.slack_user_id), word)
    if item is None:
        return Response.private(f"You aren't carrying '{word}'.")
    if slots.WIELD not in item.definition.wearable_slots:
        return Response.private(f"You can't wield {item.name}.")

    previous = {i.id: i for i in await ctx.equipment.equipped_for(player.slack_user_id)
                if i.equipped_slot == slots.WIELD}
    try:
        result = await ctx.equipment.equip(item.id, player.slack_user_id, slots.WIELD, swap=True)
    except NotCarried:
        return Response.private(f"You aren't carrying '{word}'.")

    private_text = f"You wield {item.name}."
    if result.displaced_id is not None:
        displaced = previous.get(result.displaced_id)
        private_text = f"You stop wielding {displaced.name if displaced else 'your weapon'}. " + private_text

    return await _with_room_notice(ctx, private_text, f"_{player.name} wields {item.name}._")


async def cmd_remove(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Takes off an equipped item, returning it to inventory."""
    if not intent.arguments:
        return Response.private("Usage: `remove <item>`\nExample: `remove helm`")
    player = ctx.player
    word = intent.arguments[0]

    item = _find(await ctx.equipment.equipped_for(player.slack_user_id), word)
    if item is None:
        return Response.private(f"You aren't wearing '{word}'.")

    if not await ctx.equipment.unequip(item.id, player.slack_user_id):
        return Response.private(f"You aren't wearing '{word}'.")

    return await _with_room_notice(ctx, f"You remove {item.name}.", f"_{player.name} removes {item.name}._")


NO_ROOM = "You need to be in a room first! Use `/mud look` in a channel to enter a room."


async def cmd_get(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Picks up an object lying in the current room."""
    player = ctx.player
    room = await ctx.current_room()
    if room is None:
        return Response.private(NO_ROOM)
    if not intent.arguments:
        return Response.private("Usage: `get <item>`\nExample: `get barrel`")
    word = intent.arguments[0]

    item = _find(await ctx.equipment.in_room(room.id), word)
    if item is None or not await ctx.equipment.move_instance(item.id, LocationType.PLAYER, player.slack_user_id):
        return Response.private(f"You don't see '{word}' here.")

    log.debug("%s picked up instance %s in %s.", player.name, item.id, room.id)
    return Response.in_room(room, f"You pick up {item.name}.", f"_{player.name} picks up {item.name}._")


async def cmd_drop(ctx: 'CommandContext', intent: 'Intent') -> Response:
    """Drops a carried object into the current room."""
    player = ctx.player
    room = await ctx.current_room()
    if room is None:
        return Response.private(NO_ROOM)
    if not intent.arguments:
        return Response.private("Usage: `drop <item>`\nExample: `drop barrel`")
    word = intent.arguments[0]

    item = _find(await ctx.equipment.inventory_for(player.slack_user_id), word)
    if item is None or not await ctx.equipment.move_instance(item.id, LocationType.ROOM, room.id):
        return Response.private(f"You aren't carrying '{word}'.")

    log.debug("%s dropped instance %s in %s.", player.name, item.id, room.id)
    return Response.in_room(room, f"You drop {item.name}.", f"_{player.name} drops {item.name}._")
