# slackmud/item.py
"""
Object definitions (immutable templates) and the instances spawned from them.
"""
import logging
from enum import Enum
from typing import Any, Mapping, Optional

from . import utils
from .definitions import slots

log = logging.getLogger(__name__)


class LocationType(Enum):
    ROOM = "room"
    PLAYER = "player"        # carried in inventory
    CONTAINER = "container"
    EQUIPPED = "equipped"


class ObjectDefinition:
    """An object template keyed by vnum."""

    def __init__(self, db_data: Mapping[str, Any]):
        self.vnum: int = db_data.get('vnum', db_data.get('object_vnum'))
        self.area_name: str = db_data.get('area_name', '')
        self.keywords: str = db_data.get('keywords', '')
        self.short_description: str = db_data.get('short_description', '')
        self.long_description: str = db_data.get('long_description', '')
        self.material: str = db_data.get('material', '')
        self.item_type: str = db_data.get('item_type', '')
        self.extra_flags: str = db_data.get('extra_flags', '')
        self.wear_flags: str = db_data.get('wear_flags', '')
        self.weight: int = db_data.get('weight', 0)
        self.cost: int = db_data.get('cost', 0)
        self.level: int = db_data.get('level', 0)

    def matches_keyword(self, word: str) -> bool:
        return utils.matches_keyword(self.keywords, word)

    @property
    def wearable_slots(self):
        return slots.slots_for_wear_flags(self.wear_flags)

    def describe(self, heading: str) -> str:
        """Detailed description shown by 'look <object>'."""
        lines = [f"*{heading}*", f"*{self.short_description}*", "", self.long_description, ""]
        lines.append(f"*Item Type:* {self.item_type}")
        lines.append(f"*Material:* {self.material}")
        lines.append(f"*Weight:* {self.weight} lbs")
        if self.level > 0:
            lines.append(f"*Level:* {self.level}")
        if self.cost > 0:
            lines.append(f"*Value:* {self.cost} gold")
        if self.extra_flags and self.extra_flags != "0":
            lines.append(f"*Flags:* {self.extra_flags}")
        if self.wear_flags and self.wear_flags != "0":
            lines.append(f"*Can be worn:* {self.wear_flags}")
        return "\n".join(lines)


class ObjectInstance:
    """
    A spawned copy of an ObjectDefinition with its own location.
    equipped_slot is set if and only if location_type is EQUIPPED.
    """

    def __init__(self, db_data: Mapping[str, Any], definition: Optional[ObjectDefinition] = None):
        self.id: int = db_data['id']
        self.object_vnum: int = db_data['object_vnum']
        self.location_type = LocationType(db_data['location_type'])
        self.location_id: str = db_data['location_id']
        self.equipped_slot: Optional[str] = db_data.get('equipped_slot')
        self.current_condition: int = db_data.get('current_condition', 100)
        self.timer: Optional[int] = db_data.get('timer')
        self.definition = definition

    @property
    def name(self) -> str:
        if self.definition:
            return self.definition.short_description
        return f"object #{self.object_vnum}"

    def matches_keyword(self, word: str) -> bool:
        return bool(self.definition) and self.definition.matches_keyword(word)

    def __repr__(self) -> str:
        return f"<ObjectInstance {self.id} vnum={self.object_vnum} {self.location_type.value}:{self.location_id}>"
