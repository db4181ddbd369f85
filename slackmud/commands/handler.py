# slackmud/commands/handler.py
"""
Routes parsed intents to command handlers.
Each handler is keyed by Verb and returns a Response; the router never sends
anything itself.
"""
import logging
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, TYPE_CHECKING

from ..errors import ParseFailure, PermissionDenied, StoreUnavailable
from ..response import Response
from .context import Caller, CommandContext
from .parser import Intent, Verb, parse_command

# Import command modules
from . import general as general_cmds
from . import movement as movement_cmds
from . import admin as admin_cmds
from . import item as item_cmds

if TYPE_CHECKING:
    from ..database import DatabaseManager
    from ..player import PlayerRepository
    from ..room import RoomGraph
    from ..equipment import EquipmentManager

log = logging.getLogger(__name__)

CommandHandlerFunc = Callable[[CommandContext, Intent], Awaitable[Response]]

# --- Command Map ---
HANDLERS: Dict[Verb, CommandHandlerFunc] = {
    # General Commands
    Verb.LOOK: general_cmds.cmd_look,
    Verb.CHARACTER: general_cmds.cmd_character,
    Verb.HELP: general_cmds.cmd_help,
    Verb.UNKNOWN: general_cmds.cmd_unknown,

    # Communication Commands
    Verb.SAY: general_cmds.cmd_say,
    Verb.TELL: general_cmds.cmd_tell,
    Verb.SHOUT: general_cmds.cmd_shout,

    # Movement Command
    Verb.MOVE: movement_cmds.cmd_move,

    # Item Commands
    Verb.INVENTORY: item_cmds.cmd_inventory,
    Verb.EQUIPMENT: item_cmds.cmd_equipment,
    Verb.WEAR: item_cmds.cmd_wear,
    Verb.WIELD: item_cmds.cmd_wield,
    Verb.REMOVE: item_cmds.cmd_remove,
    Verb.GET: item_cmds.cmd_get,
    Verb.DROP: item_cmds.cmd_drop,

    # Wizard Commands
    Verb.DIG: admin_cmds.cmd_dig,
    Verb.ATTACH: admin_cmds.cmd_attach,
    Verb.DETACH: admin_cmds.cmd_detach,
    Verb.TELEPORT: admin_cmds.cmd_teleport,
}

WIZARD_VERBS: FrozenSet[Verb] = frozenset({Verb.DIG, Verb.ATTACH, Verb.DETACH, Verb.TELEPORT})

_missing = set(Verb) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No command handler for: {sorted(v.name for v in _missing)}")

GENERIC_FAILURE = "Ope! Something went wrong with your command."


class CommandRouter:
    """Maps (verb, permission level) to a handler and runs it for one caller."""

    def __init__(self, db: 'DatabaseManager', players: 'PlayerRepository', rooms: 'RoomGraph',
                 equipment: 'EquipmentManager', wizards: Iterable[str] = ()):
        self.db = db
        self.players = players
        self.rooms = rooms
        self.equipment = equipment
        self.wizards: FrozenSet[str] = frozenset(wizards)

    def _check_permission(self, verb: Verb, ctx: CommandContext):
        if verb in WIZARD_VERBS and not ctx.is_wizard:
            raise PermissionDenied(verb.value)

    async def _notify_occupants(self, response: Response, caller: Caller):
        """
        Copies the public text to every other player in a room with no attached
        channel (virtual or detached), since nothing is posted there.
        Players who already have a direct message in the response are skipped.
        """
        if not (response.public_text and response.public_room_id) or response.public_channel_id:
            return
        skip = {caller.user_id} | {uid for uid, _ in response.direct_messages}
        for occupant in await self.rooms.players_in(response.public_room_id):
            if occupant.slack_user_id not in skip:
                response.direct_messages.append((occupant.slack_user_id, response.public_text))

    async def handle_text(self, text: str, caller: Caller) -> Response:
        try:
            intent = parse_command(text)
        except ParseFailure as e:
            log.info("Could not parse '%s' from %s: %s", text, caller.user_id, e)
            intent = Intent(verb=Verb.UNKNOWN, raw_text=text or "")
        return await self.dispatch(intent, caller)

    async def dispatch(self, intent: Intent, caller: Caller) -> Response:
        """Upserts the caller's player, gates wizard verbs, and runs the handler."""
        try:
            player = await self.players.get_or_create(
                caller.user_id, caller.user_name, wizard=caller.user_id in self.wizards
            )
            ctx = CommandContext(
                caller=caller, player=player, db=self.db,
                players=self.players, rooms=self.rooms, equipment=self.equipment,
            )

            try:
                self._check_permission(intent.verb, ctx)
            except PermissionDenied:
                # Looks exactly like an unknown command so wizard verbs are not disclosed.
                log.info("Non-wizard %s tried '%s'.", caller.user_id, intent.verb.value)
                return await general_cmds.cmd_unknown(ctx, intent)

            command_func = HANDLERS[intent.verb]
            log.info("Executing command '%s' for %s (args: '%s')",
                     intent.verb.value, player.name, intent.args_str)
            response = await command_func(ctx, intent)
            await self._notify_occupants(response, caller)
            return response
        except StoreUnavailable:
            log.exception("Store unavailable while running '%s' for %s:", intent.verb.value, caller.user_id)
            return Response.private(GENERIC_FAILURE)
        except Exception:
            log.exception("Error executing command '%s' for %s:", intent.verb.value, caller.user_id)
            return Response.private(GENERIC_FAILURE)
