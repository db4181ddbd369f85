# slackmud/commands/context.py
"""
Per-request state handed to every command handler.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..database import DatabaseManager
    from ..player import Player, PlayerRepository
    from ..room import Room, RoomGraph
    from ..equipment import EquipmentManager


class Source(Enum):
    SLASH = "slash"   # /mud <text> in a channel
    DM = "dm"         # direct message to the bot


@dataclass(frozen=True)
class Caller:
    """Who sent the command and from where."""
    user_id: str
    user_name: str
    source: Source = Source.SLASH
    channel_id: Optional[str] = None
    channel_name: Optional[str] = None


@dataclass
class CommandContext:
    caller: Caller
    player: 'Player'
    db: 'DatabaseManager'
    players: 'PlayerRepository'
    rooms: 'RoomGraph'
    equipment: 'EquipmentManager'

    @property
    def is_wizard(self) -> bool:
        return self.player.is_wizard

    async def current_room(self) -> Optional['Room']:
        if not self.player.current_room_id:
            return None
        return await self.rooms.get_room(self.player.current_room_id)
