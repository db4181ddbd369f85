# slackmud/equipment.py
"""
The location state machine for object instances.

An instance lives in exactly one place: a room, a player's inventory, a
container, or one of a player's equipment slots. A player never has two
instances in the same slot; equip() enforces that inside one transaction and
the partial unique index on object_instances backs it up at the store level.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

import asyncpg

from . import utils
from .definitions import slots
from .errors import NotCarried, SlotConflict
from .item import LocationType, ObjectDefinition, ObjectInstance

if TYPE_CHECKING:
    from .database import DatabaseManager

log = logging.getLogger(__name__)

_DEFINITION_COLUMNS = (
    "o.vnum, o.area_name, o.keywords, o.short_description, o.long_description, "
    "o.material, o.item_type, o.extra_flags, o.wear_flags, o.weight, o.cost, o.level"
)
_INSTANCE_SELECT = (
    f"SELECT i.*, {_DEFINITION_COLUMNS} "
    "FROM object_instances i JOIN objects o ON o.vnum = i.object_vnum"
)


@dataclass
class EquipResult:
    """Outcome of an equip: the slot used and any instance swapped back to inventory."""
    instance_id: int
    slot: str
    displaced_id: Optional[int] = None


def _joined(record) -> ObjectInstance:
    return ObjectInstance(record, ObjectDefinition(record))


class EquipmentManager:
    """Moves object instances between locations and equipment slots."""

    def __init__(self, db: 'DatabaseManager'):
        self.db = db

    async def equip(self, instance_id: int, player_id: str, slot: str, swap: bool = True) -> EquipResult:
        """
        Puts a carried (or already worn) instance into `slot`.
        With swap=True any other instance in that slot goes back to inventory in
        the same transaction; with swap=False an occupied slot raises SlotConflict.
        """
        if not slots.is_valid_slot(slot):
            raise ValueError(f"Unknown equipment slot: {slot}")
        slot = slot.lower()
        now = utils.now_epoch()
        try:
            async with self.db.transaction() as conn:
                # Serializes concurrent equips for the same player.
                owner = await conn.fetchrow(
                    "SELECT slack_user_id FROM players WHERE slack_user_id = $1 FOR UPDATE", player_id
                )
                instance = await conn.fetchrow(
                    "SELECT * FROM object_instances WHERE id = $1 FOR UPDATE", instance_id
                )
                if (owner is None or instance is None or instance['location_id'] != player_id
                        or instance['location_type'] not in (LocationType.PLAYER.value, LocationType.EQUIPPED.value)):
                    raise NotCarried(player_id, instance_id)

                if instance['equipped_slot'] == slot:
                    return EquipResult(instance_id, slot)

                occupant = await conn.fetchrow(
                    """
                    SELECT id FROM object_instances
                    WHERE location_type = 'equipped' AND location_id = $1 AND equipped_slot = $2 AND id <> $3
                    FOR UPDATE
                    """,
                    player_id, slot, instance_id,
                )
                displaced_id = None
                if occupant:
                    if not swap:
                        raise SlotConflict(player_id, slot, occupant['id'])
                    displaced_id = occupant['id']
                    await conn.execute(
                        """
                        UPDATE object_instances
                        SET location_type = 'player', equipped_slot = NULL, updated_at = $2
                        WHERE id = $1
                        """,
                        displaced_id, now,
                    )
                await conn.execute(
                    """
                    UPDATE object_instances
                    SET location_type = 'equipped', location_id = $2, equipped_slot = $3, updated_at = $4
                    WHERE id = $1
                    """,
                    instance_id, player_id, slot, now,
                )
        except asyncpg.UniqueViolationError:
            # Lost a race against another equip into the same slot.
            raise SlotConflict(player_id, slot)

        log.info("%s equipped instance %s in %s (displaced %s).", player_id, instance_id, slot, displaced_id)
        return EquipResult(instance_id, slot, displaced_id)

    async def unequip(self, instance_id: int, player_id: str) -> bool:
        """Moves an equipped instance back into the player's inventory."""
        status = await self.db.execute_query(
            """
            UPDATE object_instances
            SET location_type = 'player', equipped_slot = NULL, updated_at = $3
            WHERE id = $1 AND location_id = $2 AND location_type = 'equipped'
            """,
            instance_id, player_id, utils.now_epoch(),
        )
        return status == "UPDATE 1"

    async def move_instance(self, instance_id: int, location_type: LocationType, location_id: str) -> bool:
        """Moves an instance to a room, inventory or container. Always clears its slot."""
        if location_type is LocationType.EQUIPPED:
            raise ValueError("Use equip() to put an instance into an equipment slot.")
        status = await self.db.execute_query(
            """
            UPDATE object_instances
            SET location_type = $2, location_id = $3, equipped_slot = NULL, updated_at = $4
            WHERE id = $1
            """,
            instance_id, location_type.value, location_id, utils.now_epoch(),
        )
        return status == "UPDATE 1"

    async def equipped_for(self, player_id: str) -> List[ObjectInstance]:
        """Equipped instances in slot display order."""
        rows = await self.db.fetch_all_query(
            f"{_INSTANCE_SELECT} WHERE i.location_type = 'equipped' AND i.location_id = $1", player_id
        )
        instances = [_joined(r) for r in rows]
        instances.sort(key=lambda i: slots.ALL_SLOTS.index(i.equipped_slot)
                       if i.equipped_slot in slots.ALL_SLOTS else len(slots.ALL_SLOTS))
        return instances

    async def inventory_for(self, player_id: str) -> List[ObjectInstance]:
        rows = await self.db.fetch_all_query(
            f"{_INSTANCE_SELECT} WHERE i.location_type = 'player' AND i.location_id = $1 ORDER BY i.id", player_id
        )
        return [_joined(r) for r in rows]

    async def in_room(self, room_id: str) -> List[ObjectInstance]:
        rows = await self.db.fetch_all_query(
            f"{_INSTANCE_SELECT} WHERE i.location_type = 'room' AND i.location_id = $1 ORDER BY i.id", room_id
        )
        return [_joined(r) for r in rows]

    async def free_slot_for(self, player_id: str, candidates: List[str]) -> Optional[str]:
        """First of the candidate slots (in order) that the player is not using."""
        if not candidates:
            return None
        used = {i.equipped_slot for i in await self.equipped_for(player_id)}
        for slot in candidates:
            if slot not in used:
                return slot
        return None
