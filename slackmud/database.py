# slackmud/database.py
"""
Handles asynchronous database interactions using asyncpg for PostgreSQL.
Encapsulates the pool, the schema bootstrap and the connection/transaction
helpers the repositories build on.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, List, AsyncIterator

import asyncpg

import config
from .errors import StoreUnavailable
from .definitions import slots
from .definitions import classes as class_defs
from .definitions import races as race_defs
from . import utils

log = logging.getLogger(__name__)

# Failures that mean "the store is not reachable", as opposed to integrity errors
# which the repositories translate themselves.
CONNECTION_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.PostgresConnectionError,
    asyncpg.InterfaceError,
    asyncpg.CannotConnectNowError,
    asyncpg.TooManyConnectionsError,
)

_DIRECTION_LIST = ", ".join(f"'{d}'" for d in utils.DIRECTIONS)
_SLOT_LIST = ", ".join(f"'{s}'" for s in slots.ALL_SLOTS)


class DatabaseManager:
    """A class to manage the application's PostgreSQL connection pool and queries."""

    def __init__(self, dsn: Optional[str] = None):
        self.dsn = dsn
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self, dsn: Optional[str] = None):
        """Creates the connection pool."""
        if dsn:
            self.dsn = dsn
        try:
            self.pool = await asyncpg.create_pool(
                dsn=self.dsn,
                min_size=config.DB_POOL_MIN_SIZE,
                max_size=config.DB_POOL_MAX_SIZE,
            )
            log.info("Successfully connected to PostgreSQL and created connection pool.")
        except Exception:
            log.exception("!!! Failed to connect to PostgreSQL database. Server cannot start.")
            raise

    async def close(self):
        """Closes the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            log.info("PostgreSQL connection pool closed.")

    @asynccontextmanager
    async def connection(self, conn: Optional[asyncpg.Connection] = None) -> AsyncIterator[asyncpg.Connection]:
        """
        Yields a connection. When the caller already holds one (e.g. inside a
        transaction) it is reused so every statement shares that transaction.
        """
        if conn is not None:
            yield conn
            return
        if not self.pool:
            raise StoreUnavailable("Database pool not initialized.")
        try:
            async with self.pool.acquire() as acquired:
                yield acquired
        except CONNECTION_ERRORS as e:
            log.error("Database connection failure: %s", e)
            raise StoreUnavailable(str(e)) from e

    @asynccontextmanager
    async def transaction(self, conn: Optional[asyncpg.Connection] = None) -> AsyncIterator[asyncpg.Connection]:
        """Yields a connection with an open transaction; rolls back on any exception."""
        async with self.connection(conn) as c:
            async with c.transaction():
                yield c

    async def execute_query(self, query: str, *params) -> str:
        """Executes a data-modifying query. Returns the status string."""
        async with self.connection() as conn:
            return await conn.execute(query, *params)

    async def fetch_one_query(self, query: str, *params) -> Optional[asyncpg.Record]:
        """Executes a query that is expected to return at most one row."""
        async with self.connection() as conn:
            return await conn.fetchrow(query, *params)

    async def fetch_all_query(self, query: str, *params) -> List[asyncpg.Record]:
        """Executes a query that returns multiple rows."""
        async with self.connection() as conn:
            return await conn.fetch(query, *params)

    async def init_db(self):
        """Initializes the database schema for PostgreSQL. Safe to run on every start."""
        log.info("--- Initializing PostgreSQL database schema ---")
        async with self.transaction() as conn:
            # --- Lookup Tables ---
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS classes (
                    id SERIAL PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT NOT NULL
                )
            """)
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS races (
                    id SERIAL PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT NOT NULL
                )
            """)

            # --- Core Tables ---
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS players (
                    slack_user_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    level INTEGER NOT NULL DEFAULT 1 CHECK (level >= 1),
                    experience_points INTEGER NOT NULL DEFAULT 0,
                    class_id INTEGER REFERENCES classes(id),
                    race_id INTEGER REFERENCES races(id),
                    gender TEXT,
                    current_room_id TEXT,
                    created_at BIGINT NOT NULL DEFAULT EXTRACT(EPOCH FROM NOW())::BIGINT,
                    updated_at BIGINT NOT NULL DEFAULT EXTRACT(EPOCH FROM NOW())::BIGINT
                )
            """)
            await conn.execute(f"""
                CREATE TABLE IF NOT EXISTS rooms (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '{config.DEFAULT_ROOM_DESCRIPTION}',
                    attached_channel_id TEXT,
                    created_at BIGINT NOT NULL DEFAULT EXTRACT(EPOCH FROM NOW())::BIGINT,
                    updated_at BIGINT NOT NULL DEFAULT EXTRACT(EPOCH FROM NOW())::BIGINT
                )
            """)
            await conn.execute(f"""
                CREATE TABLE IF NOT EXISTS exits (
                    id SERIAL PRIMARY KEY,
                    from_room_id TEXT NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
                    direction TEXT NOT NULL CHECK (direction IN ({_DIRECTION_LIST})),
                    to_room_id TEXT NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
                    created_by TEXT NOT NULL REFERENCES players(slack_user_id),
                    created_at BIGINT NOT NULL DEFAULT EXTRACT(EPOCH FROM NOW())::BIGINT,
                    UNIQUE (from_room_id, direction)
                )
            """)
            await conn.execute("CREATE INDEX IF NOT EXISTS idx_exits_from_room ON exits(from_room_id)")
            await conn.execute("CREATE INDEX IF NOT EXISTS idx_exits_to_room ON exits(to_room_id)")

            await conn.execute("""
                CREATE TABLE IF NOT EXISTS areas (
                    id SERIAL PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    filename TEXT NOT NULL,
                    min_vnum INTEGER NOT NULL,
                    max_vnum INTEGER NOT NULL,
                    rooms_count INTEGER NOT NULL DEFAULT 0,
                    exits_count INTEGER NOT NULL DEFAULT 0,
                    imported_at BIGINT NOT NULL,
                    updated_at BIGINT NOT NULL
                )
            """)

            # --- Object Tables ---
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS objects (
                    id SERIAL PRIMARY KEY,
                    vnum INTEGER NOT NULL UNIQUE,
                    area_name TEXT NOT NULL,
                    keywords TEXT NOT NULL,
                    short_description TEXT NOT NULL,
                    long_description TEXT NOT NULL,
                    material TEXT NOT NULL DEFAULT '',
                    item_type TEXT NOT NULL,
                    extra_flags TEXT NOT NULL DEFAULT '',
                    wear_flags TEXT NOT NULL DEFAULT '',
                    value0 INTEGER NOT NULL DEFAULT 0,
                    value1 INTEGER NOT NULL DEFAULT 0,
                    value2 TEXT NOT NULL DEFAULT '',
                    value3 INTEGER NOT NULL DEFAULT 0,
                    value4 INTEGER NOT NULL DEFAULT 0,
                    weight INTEGER NOT NULL DEFAULT 0,
                    cost INTEGER NOT NULL DEFAULT 0,
                    level INTEGER NOT NULL DEFAULT 0,
                    condition TEXT NOT NULL DEFAULT 'P',
                    extra_descriptions JSONB DEFAULT '[]'::jsonb,
                    created_at BIGINT NOT NULL,
                    updated_at BIGINT NOT NULL
                )
            """)
            await conn.execute("CREATE INDEX IF NOT EXISTS idx_objects_area_name ON objects(area_name)")

            # equipped_slot is the only slot column; it is set exactly when the
            # instance is equipped.
            await conn.execute(f"""
                CREATE TABLE IF NOT EXISTS object_instances (
                    id SERIAL PRIMARY KEY,
                    object_vnum INTEGER NOT NULL REFERENCES objects(vnum) ON DELETE CASCADE,
                    location_type TEXT NOT NULL
                        CHECK (location_type IN ('room', 'player', 'container', 'equipped')),
                    location_id TEXT NOT NULL,
                    equipped_slot TEXT
                        CHECK (equipped_slot IS NULL OR equipped_slot IN ({_SLOT_LIST})),
                    current_condition INTEGER NOT NULL DEFAULT 100
                        CHECK (current_condition BETWEEN 0 AND 100),
                    timer INTEGER,
                    created_at BIGINT NOT NULL,
                    updated_at BIGINT NOT NULL,
                    CHECK ((location_type = 'equipped') = (equipped_slot IS NOT NULL))
                )
            """)
            await conn.execute("CREATE INDEX IF NOT EXISTS idx_object_instances_vnum ON object_instances(object_vnum)")
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_object_instances_location "
                "ON object_instances(location_type, location_id)"
            )
            await conn.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_object_instances_equipped
                ON object_instances(location_id, location_type, equipped_slot)
                WHERE location_type = 'equipped'
            """)

            # --- Seed Data ---
            await conn.executemany(
                "INSERT INTO classes (name, description) VALUES ($1, $2) ON CONFLICT (name) DO NOTHING",
                class_defs.DEFAULT_CLASSES,
            )
            await conn.executemany(
                "INSERT INTO races (name, description) VALUES ($1, $2) ON CONFLICT (name) DO NOTHING",
                race_defs.DEFAULT_RACES,
            )
        log.info("--- Database schema ready ---")


db_manager = DatabaseManager()
