# slackmud/room.py
"""
Rooms, exits, and the graph service that wires them together.
The graph is an arbitrary directed graph: exits are one-way and cycles are allowed.
"""
import logging
from typing import Any, List, Mapping, Optional, Tuple, TYPE_CHECKING

import asyncpg

import config
from . import utils
from .errors import DuplicateExit, InvalidDirection
from .player import Player

if TYPE_CHECKING:
    from .database import DatabaseManager

log = logging.getLogger(__name__)


class Room:
    """A persistent location node, optionally bound to a Slack channel."""

    def __init__(self, db_data: Mapping[str, Any]):
        self.id: str = db_data['id']
        self.name: str = db_data['name']
        self.description: str = db_data.get('description') or config.DEFAULT_ROOM_DESCRIPTION
        self.attached_channel_id: Optional[str] = db_data.get('attached_channel_id')
        self.created_at: int = db_data.get('created_at', 0)
        self.updated_at: int = db_data.get('updated_at', 0)

    @property
    def is_virtual(self) -> bool:
        return self.id.startswith(config.VIRTUAL_ROOM_PREFIX)

    @property
    def vnum(self) -> Optional[str]:
        return self.id[len(config.VIRTUAL_ROOM_PREFIX):] if self.is_virtual else None

    def __repr__(self) -> str:
        return f"<Room {self.id} '{self.name}'>"


class Exit:
    """A one-way connection from one room to another."""

    def __init__(self, db_data: Mapping[str, Any]):
        self.id: int = db_data.get('id', 0)
        self.from_room_id: str = db_data['from_room_id']
        self.direction: str = db_data['direction']
        self.to_room_id: str = db_data['to_room_id']
        self.created_by: Optional[str] = db_data.get('created_by')
        self.created_at: int = db_data.get('created_at', 0)

    def __repr__(self) -> str:
        return f"<Exit {self.from_room_id} -{self.direction}-> {self.to_room_id}>"


class RoomGraph:
    """Rooms and the directed exits between them."""

    def __init__(self, db: 'DatabaseManager'):
        self.db = db

    async def ensure_room(self, room_id: str, name: Optional[str] = None,
                          conn: Optional[asyncpg.Connection] = None) -> Room:
        """
        Idempotent get-or-create. The description (and the self-attachment) is
        only written when the row is first inserted.
        """
        now = utils.now_epoch()
        async with self.db.connection(conn) as c:
            inserted = await c.fetchrow(
                """
                INSERT INTO rooms (id, name, description, attached_channel_id, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $5)
                ON CONFLICT (id) DO NOTHING
                RETURNING *
                """,
                room_id, name or room_id, config.DEFAULT_ROOM_DESCRIPTION, room_id, now,
            )
            if inserted:
                log.info("Created room %s (%s).", room_id, name or room_id)
                return Room(inserted)
            record = await c.fetchrow("SELECT * FROM rooms WHERE id = $1", room_id)
        return Room(record)

    async def get_room(self, room_id: str, conn: Optional[asyncpg.Connection] = None) -> Optional[Room]:
        async with self.db.connection(conn) as c:
            record = await c.fetchrow("SELECT * FROM rooms WHERE id = $1", room_id)
        return Room(record) if record else None

    async def add_exit(self, from_room_id: str, direction: str, to_room_id: str, creator: str,
                       conn: Optional[asyncpg.Connection] = None) -> Exit:
        """Inserts a directed edge. Never creates the reverse edge."""
        canonical = utils.get_canonical_direction(direction)
        if not canonical:
            raise InvalidDirection(direction)
        try:
            async with self.db.connection(conn) as c:
                record = await c.fetchrow(
                    """
                    INSERT INTO exits (from_room_id, direction, to_room_id, created_by, created_at)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING *
                    """,
                    from_room_id, canonical, to_room_id, creator, utils.now_epoch(),
                )
        except asyncpg.UniqueViolationError:
            log.info("Exit %s from %s already exists.", canonical, from_room_id)
            raise DuplicateExit(from_room_id, canonical, to_room_id)
        log.info("%s dug exit %s -%s-> %s.", creator, from_room_id, canonical, to_room_id)
        return Exit(record)

    async def get_exit(self, from_room_id: str, direction: str,
                       conn: Optional[asyncpg.Connection] = None) -> Optional[Exit]:
        canonical = utils.get_canonical_direction(direction)
        if not canonical:
            return None
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(
                "SELECT * FROM exits WHERE from_room_id = $1 AND direction = $2",
                from_room_id, canonical,
            )
        return Exit(record) if record else None

    async def exits_for(self, room_id: str) -> List[Tuple[str, str, str]]:
        """
        Returns (direction, destination id, destination name) for every exit,
        ordered north, south, east, west, up, down. A destination with no room
        row yet falls back to its id for the name.
        """
        rows = await self.db.fetch_all_query(
            """
            SELECT e.direction, e.to_room_id, COALESCE(r.name, e.to_room_id) AS to_room_name
            FROM exits e
            LEFT JOIN rooms r ON r.id = e.to_room_id
            WHERE e.from_room_id = $1
            """,
            room_id,
        )
        exits = [(r['direction'], r['to_room_id'], r['to_room_name']) for r in rows]
        exits.sort(key=lambda e: utils.direction_rank(e[0]))
        return exits

    async def players_in(self, room_id: str) -> List[Player]:
        rows = await self.db.fetch_all_query(
            "SELECT * FROM players WHERE current_room_id = $1 ORDER BY name", room_id
        )
        return [Player(r) for r in rows]

    async def attach(self, room_id: str, channel_id: str) -> str:
        return await self.db.execute_query(
            "UPDATE rooms SET attached_channel_id = $1, updated_at = $2 WHERE id = $3",
            channel_id, utils.now_epoch(), room_id,
        )

    async def detach(self, room_id: str) -> str:
        return await self.db.execute_query(
            "UPDATE rooms SET attached_channel_id = NULL, updated_at = $1 WHERE id = $2",
            utils.now_epoch(), room_id,
        )
