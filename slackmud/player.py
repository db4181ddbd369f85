# slackmud/player.py
"""
Player records and the repository that loads and updates them.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, TYPE_CHECKING

import config
from . import utils

if TYPE_CHECKING:
    import asyncpg
    from .database import DatabaseManager

log = logging.getLogger(__name__)


class Player:
    """A Slack user's character, keyed by their Slack user id."""

    def __init__(self, db_data: Mapping[str, Any]):
        self.slack_user_id: str = db_data['slack_user_id']
        self.name: str = db_data['name']
        self.level: int = db_data.get('level', 1)
        self.experience_points: int = db_data.get('experience_points', 0)
        self.class_id: Optional[int] = db_data.get('class_id')
        self.race_id: Optional[int] = db_data.get('race_id')
        self.gender: Optional[str] = db_data.get('gender')
        self.current_room_id: Optional[str] = db_data.get('current_room_id')
        self.created_at: int = db_data.get('created_at', 0)
        self.updated_at: int = db_data.get('updated_at', 0)
        # Only set by get_or_create
        self.is_new: bool = bool(db_data.get('inserted', False))

    @property
    def is_wizard(self) -> bool:
        return self.level >= config.WIZARD_LEVEL

    def __repr__(self) -> str:
        return f"<Player {self.slack_user_id} '{self.name}' L{self.level}>"


class PlayerRepository:
    """Loads/creates/updates player rows plus the class and race lookups."""

    def __init__(self, db: 'DatabaseManager'):
        self.db = db

    async def get_or_create(self, slack_user_id: str, name: str, wizard: bool = False,
                            conn: Optional['asyncpg.Connection'] = None) -> Player:
        """
        Atomic upsert. A new row starts at level 1, or at the wizard level when
        the user is on the allow-list. Existing rows are returned untouched.
        """
        level = config.WIZARD_LEVEL if wizard else 1
        now = utils.now_epoch()
        query = """
            INSERT INTO players (slack_user_id, name, level, experience_points, created_at, updated_at)
            VALUES ($1, $2, $3, 0, $4, $4)
            ON CONFLICT (slack_user_id) DO UPDATE SET slack_user_id = EXCLUDED.slack_user_id
            RETURNING *, (xmax = 0) AS inserted
        """
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(query, slack_user_id, name, level, now)
        player = Player(record)
        if player.is_new:
            log.info("Created player %s (%s) at level %d.", player.name, slack_user_id, player.level)
        return player

    async def find_by_name(self, name: str) -> Optional[Player]:
        record = await self.db.fetch_one_query(
            "SELECT * FROM players WHERE LOWER(name) = LOWER($1) ORDER BY created_at LIMIT 1", name
        )
        return Player(record) if record else None

    async def all_ids(self) -> List[str]:
        rows = await self.db.fetch_all_query("SELECT slack_user_id FROM players ORDER BY created_at")
        return [r['slack_user_id'] for r in rows]

    async def set_current_room(self, slack_user_id: str, room_id: str,
                               conn: Optional['asyncpg.Connection'] = None) -> str:
        query = "UPDATE players SET current_room_id = $1, updated_at = $2 WHERE slack_user_id = $3"
        async with self.db.connection(conn) as c:
            return await c.execute(query, room_id, utils.now_epoch(), slack_user_id)

    async def promote_to_wizard(self, slack_user_ids: Sequence[str]) -> str:
        """Raises listed players to the wizard level; never lowers anyone."""
        if not slack_user_ids:
            return "UPDATE 0"
        query = """
            UPDATE players SET level = GREATEST(level, $1), updated_at = $2
            WHERE slack_user_id = ANY($3::text[])
        """
        status = await self.db.execute_query(query, config.WIZARD_LEVEL, utils.now_epoch(), list(slack_user_ids))
        log.info("Wizard promotion: %s", status)
        return status

    async def list_classes(self) -> List[Dict[str, Any]]:
        rows = await self.db.fetch_all_query("SELECT id, name, description FROM classes ORDER BY id")
        return [dict(r) for r in rows]

    async def list_races(self) -> List[Dict[str, Any]]:
        rows = await self.db.fetch_all_query("SELECT id, name, description FROM races ORDER BY id")
        return [dict(r) for r in rows]
