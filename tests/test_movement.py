# tests/test_movement.py
import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slackmud.commands.context import Caller, Source
from slackmud.commands.handler import CommandRouter
from fakes import FakeDB, FakeStore, FakePlayers, FakeRooms, FakeEquipment

WIZARD = "UWIZ"


def slash(user_id, name, channel_id="C_GENERAL", channel_name="general"):
    return Caller(user_id, name, Source.SLASH, channel_id, channel_name)


class TestMovementCommands(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = FakeStore()
        self.router = CommandRouter(
            FakeDB(), FakePlayers(self.store), FakeRooms(self.store), FakeEquipment(self.store),
            wizards={WIZARD},
        )
        self.wizard = slash(WIZARD, "Merlin")
        self.player = slash("U1", "Alice")
        await self.router.handle_text("look", self.wizard)
        await self.router.handle_text("dig north <#C0KITCHEN1|kitchen>", self.wizard)
        await self.router.handle_text("look", self.player)

    async def test_move_north(self):
        response = await self.router.handle_text("move north", self.player)

        self.assertEqual(self.store.players["U1"]['current_room_id'], "C0KITCHEN1")
        self.assertTrue(response.private_text.startswith("You travel north from #general to #kitchen.\n\n"))
        self.assertIn("*You look around #kitchen*", response.private_text)

    async def test_arrival_and_departure_notices(self):
        response = await self.router.handle_text("n", self.player)

        self.assertEqual(response.public_text, "_Alice arrives._")
        self.assertEqual(response.public_channel_id, "C0KITCHEN1")
        self.assertEqual(response.channel_notices, [("C_GENERAL", "_Alice heads north._")])

    async def test_departure_from_detached_room_reaches_occupants(self):
        await self.router.handle_text("look", slash("U2", "Bob"))
        self.store.rooms["C_GENERAL"]['attached_channel_id'] = None

        response = await self.router.handle_text("n", self.player)

        self.assertEqual(response.channel_notices, [])
        self.assertEqual(response.direct_messages, [
            ("U2", "_Alice heads north._"),
            (WIZARD, "_Alice heads north._"),
        ])

    async def test_exits_are_one_way(self):
        await self.router.handle_text("north", self.player)
        response = await self.router.handle_text("south", self.player)

        self.assertEqual(response.private_text, "There is no exit to the south from here.")
        self.assertEqual(self.store.players["U1"]['current_room_id'], "C0KITCHEN1")

    async def test_move_no_exit(self):
        response = await self.router.handle_text("go west", self.player)
        self.assertEqual(response.private_text, "There is no exit to the west from here.")
        self.assertFalse(response.has_public)

    async def test_move_invalid_direction(self):
        response = await self.router.handle_text("move sideways", self.player)
        self.assertTrue(response.private_text.startswith("Invalid direction: `sideways`."))

    async def test_move_without_direction_shows_usage(self):
        response = await self.router.handle_text("move", self.player)
        self.assertTrue(response.private_text.startswith("Usage: `move <direction>`"))

    async def test_move_before_entering_any_room(self):
        response = await self.router.handle_text("north", slash("U9", "Newbie"))
        self.assertEqual(
            response.private_text,
            "You need to be in a room first! Use `/mud look` in a channel to enter a room.",
        )


if __name__ == '__main__':
    unittest.main()
