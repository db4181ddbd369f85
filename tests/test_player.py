# tests/test_player.py
import unittest
from unittest.mock import AsyncMock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import config
from slackmud.player import Player, PlayerRepository
from fakes import mock_db


def _record(**overrides):
    record = {
        'slack_user_id': 'U1', 'name': 'Alice', 'level': 1, 'experience_points': 0,
        'class_id': None, 'race_id': None, 'gender': None, 'current_room_id': None,
        'created_at': 1, 'updated_at': 1, 'inserted': True,
    }
    record.update(overrides)
    return record


class TestPlayerRepository(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.conn = AsyncMock()
        self.db = mock_db(self.conn)
        self.repo = PlayerRepository(self.db)

    async def test_get_or_create_is_a_single_upsert(self):
        self.conn.fetchrow.return_value = _record()
        player = await self.repo.get_or_create('U1', 'Alice')

        self.assertEqual(self.conn.fetchrow.await_count, 1)
        query, uid, name, level, _now = self.conn.fetchrow.await_args.args
        self.assertIn("ON CONFLICT (slack_user_id)", query)
        self.assertIn("RETURNING", query)
        self.assertEqual((uid, name, level), ('U1', 'Alice', 1))
        self.assertTrue(player.is_new)
        self.assertEqual(player.level, 1)
        self.assertFalse(player.is_wizard)

    async def test_allow_listed_user_created_as_wizard(self):
        self.conn.fetchrow.return_value = _record(level=config.WIZARD_LEVEL)
        player = await self.repo.get_or_create('U1', 'Alice', wizard=True)

        self.assertEqual(self.conn.fetchrow.await_args.args[3], config.WIZARD_LEVEL)
        self.assertTrue(player.is_wizard)

    async def test_existing_player_returned(self):
        self.conn.fetchrow.return_value = _record(level=7, current_room_id='C_GENERAL', inserted=False)
        player = await self.repo.get_or_create('U1', 'Alice')
        self.assertFalse(player.is_new)
        self.assertEqual(player.current_room_id, 'C_GENERAL')

    async def test_promote_to_wizard_never_demotes(self):
        await self.repo.promote_to_wizard(['U1', 'U2'])
        query, level, _now, ids = self.db.execute_query.await_args.args
        self.assertIn("GREATEST(level, $1)", query)
        self.assertEqual(level, config.WIZARD_LEVEL)
        self.assertEqual(ids, ['U1', 'U2'])

    async def test_promote_nobody_skips_store(self):
        await self.repo.promote_to_wizard([])
        self.db.execute_query.assert_not_awaited()

    async def test_all_ids(self):
        self.db.fetch_all_query.return_value = [{'slack_user_id': 'U1'}, {'slack_user_id': 'U2'}]
        self.assertEqual(await self.repo.all_ids(), ['U1', 'U2'])
        self.assertIn("FROM players", self.db.fetch_all_query.await_args.args[0])


class TestPlayerModel(unittest.TestCase):
    def test_wizard_threshold(self):
        self.assertFalse(Player(_record(level=config.WIZARD_LEVEL - 1)).is_wizard)
        self.assertTrue(Player(_record(level=config.WIZARD_LEVEL)).is_wizard)


if __name__ == '__main__':
    unittest.main()
