# tests/fakes.py
"""
In-memory stand-ins for the database and repositories, used by the command tests.
"""
import sys
import os
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import config
from slackmud import utils
from slackmud.definitions import slots
from slackmud.definitions import classes as class_defs
from slackmud.definitions import races as race_defs
from slackmud.equipment import EquipResult
from slackmud.errors import DuplicateExit, InvalidDirection, NotCarried, SlotConflict
from slackmud.item import LocationType, ObjectDefinition, ObjectInstance
from slackmud.player import Player
from slackmud.room import Exit, Room


def mock_db(conn):
    """A DatabaseManager double whose connection()/transaction() yield `conn`."""
    db = MagicMock()

    @asynccontextmanager
    async def _conn(c=None):
        yield c if c is not None else conn

    db.connection = _conn
    db.transaction = _conn
    db.execute_query = AsyncMock(return_value="UPDATE 1")
    db.fetch_one_query = AsyncMock(return_value=None)
    db.fetch_all_query = AsyncMock(return_value=[])
    return db


class FakeDB:
    def __init__(self):
        self.transactions = 0

    @asynccontextmanager
    async def transaction(self, conn=None):
        self.transactions += 1
        yield None

    @asynccontextmanager
    async def connection(self, conn=None):
        yield None


class FakeStore:
    def __init__(self):
        self.players = {}
        self.rooms = {}
        self.exits = {}
        self.definitions = {}
        self.instances = {}
        self._next_instance = 1

    def add_definition(self, vnum, keywords, short, wear_flags="take", long=None):
        self.definitions[vnum] = {
            'vnum': vnum, 'keywords': keywords, 'short_description': short,
            'long_description': long or f"{short} lies here.", 'item_type': 'armor',
            'wear_flags': wear_flags, 'material': 'iron',
        }

    def add_instance(self, vnum, location_type, location_id, equipped_slot=None):
        instance_id = self._next_instance
        self._next_instance += 1
        self.instances[instance_id] = {
            'id': instance_id, 'object_vnum': vnum, 'location_type': location_type,
            'location_id': location_id, 'equipped_slot': equipped_slot,
        }
        return instance_id


class FakePlayers:
    def __init__(self, store: FakeStore):
        self.store = store

    async def get_or_create(self, slack_user_id, name, wizard=False, conn=None):
        if slack_user_id in self.store.players:
            return Player(self.store.players[slack_user_id])
        record = {
            'slack_user_id': slack_user_id, 'name': name,
            'level': config.WIZARD_LEVEL if wizard else 1,
            'experience_points': 0, 'current_room_id': None,
        }
        self.store.players[slack_user_id] = record
        return Player(dict(record, inserted=True))

    async def all_ids(self):
        return list(self.store.players)

    async def find_by_name(self, name):
        for record in self.store.players.values():
            if record['name'].lower() == name.lower():
                return Player(record)
        return None

    async def set_current_room(self, slack_user_id, room_id, conn=None):
        self.store.players[slack_user_id]['current_room_id'] = room_id
        return "UPDATE 1"

    async def promote_to_wizard(self, slack_user_ids):
        for uid in slack_user_ids:
            if uid in self.store.players:
                record = self.store.players[uid]
                record['level'] = max(record['level'], config.WIZARD_LEVEL)

    async def list_classes(self):
        return [{'id': i + 1, 'name': n, 'description': d} for i, (n, d) in enumerate(class_defs.DEFAULT_CLASSES)]

    async def list_races(self):
        return [{'id': i + 1, 'name': n, 'description': d} for i, (n, d) in enumerate(race_defs.DEFAULT_RACES)]


class FakeRooms:
    def __init__(self, store: FakeStore):
        self.store = store

    async def ensure_room(self, room_id, name=None, conn=None):
        if room_id not in self.store.rooms:
            self.store.rooms[room_id] = {
                'id': room_id, 'name': name or room_id,
                'description': config.DEFAULT_ROOM_DESCRIPTION,
                'attached_channel_id': room_id,
            }
        return Room(self.store.rooms[room_id])

    async def get_room(self, room_id, conn=None):
        record = self.store.rooms.get(room_id)
        return Room(record) if record else None

    async def add_exit(self, from_room_id, direction, to_room_id, creator, conn=None):
        canonical = utils.get_canonical_direction(direction)
        if not canonical:
            raise InvalidDirection(direction)
        if (from_room_id, canonical) in self.store.exits:
            raise DuplicateExit(from_room_id, canonical, to_room_id)
        record = {'from_room_id': from_room_id, 'direction': canonical,
                  'to_room_id': to_room_id, 'created_by': creator}
        self.store.exits[(from_room_id, canonical)] = record
        return Exit(record)

    async def get_exit(self, from_room_id, direction, conn=None):
        record = self.store.exits.get((from_room_id, utils.get_canonical_direction(direction)))
        return Exit(record) if record else None

    async def exits_for(self, room_id):
        exits = []
        for (from_id, direction), record in self.store.exits.items():
            if from_id == room_id:
                dest = self.store.rooms.get(record['to_room_id'])
                exits.append((direction, record['to_room_id'], dest['name'] if dest else record['to_room_id']))
        exits.sort(key=lambda e: utils.direction_rank(e[0]))
        return exits

    async def players_in(self, room_id):
        found = [Player(p) for p in self.store.players.values() if p.get('current_room_id') == room_id]
        return sorted(found, key=lambda p: p.name)

    async def attach(self, room_id, channel_id):
        self.store.rooms[room_id]['attached_channel_id'] = channel_id
        return "UPDATE 1"

    async def detach(self, room_id):
        self.store.rooms[room_id]['attached_channel_id'] = None
        return "UPDATE 1"


class FakeEquipment:
    def __init__(self, store: FakeStore):
        self.store = store

    def _joined(self, record):
        return ObjectInstance(record, ObjectDefinition(self.store.definitions[record['object_vnum']]))

    def _where(self, location_type, location_id):
        return [self._joined(r) for r in self.store.instances.values()
                if r['location_type'] == location_type and r['location_id'] == location_id]

    async def equip(self, instance_id, player_id, slot, swap=True):
        record = self.store.instances.get(instance_id)
        if record is None or record['location_id'] != player_id \
                or record['location_type'] not in ('player', 'equipped'):
            raise NotCarried(player_id, instance_id)
        displaced_id = None
        for other in self.store.instances.values():
            if other['id'] != instance_id and other['location_type'] == 'equipped' \
                    and other['location_id'] == player_id and other['equipped_slot'] == slot:
                if not swap:
                    raise SlotConflict(player_id, slot, other['id'])
                other['location_type'] = 'player'
                other['equipped_slot'] = None
                displaced_id = other['id']
        record['location_type'] = 'equipped'
        record['equipped_slot'] = slot
        return EquipResult(instance_id, slot, displaced_id)

    async def unequip(self, instance_id, player_id):
        record = self.store.instances.get(instance_id)
        if not record or record['location_type'] != 'equipped' or record['location_id'] != player_id:
            return False
        record['location_type'] = 'player'
        record['equipped_slot'] = None
        return True

    async def move_instance(self, instance_id, location_type, location_id):
        if location_type is LocationType.EQUIPPED:
            raise ValueError("Use equip() to put an instance into an equipment slot.")
        record = self.store.instances.get(instance_id)
        if record is None:
            return False
        record['location_type'] = location_type.value
        record['location_id'] = location_id
        record['equipped_slot'] = None
        return True

    async def equipped_for(self, player_id):
        worn = self._where('equipped', player_id)
        return sorted(worn, key=lambda i: slots.ALL_SLOTS.index(i.equipped_slot))

    async def inventory_for(self, player_id):
        return self._where('player', player_id)

    async def in_room(self, room_id):
        return self._where(LocationType.ROOM.value, room_id)

    async def free_slot_for(self, player_id, candidates):
        used = {i.equipped_slot for i in await self.equipped_for(player_id)}
        for slot in candidates:
            if slot not in used:
                return slot
        return None
