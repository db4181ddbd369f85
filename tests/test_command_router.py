# tests/test_command_router.py
import unittest
from unittest.mock import AsyncMock, patch
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import config
from slackmud.commands.context import Caller, Source
from slackmud.commands.handler import CommandRouter, GENERIC_FAILURE, HANDLERS
from slackmud.commands.parser import Verb
from slackmud.errors import ParseFailure, StoreUnavailable
from fakes import FakeDB, FakeStore, FakePlayers, FakeRooms, FakeEquipment

WIZARD = "UWIZ"


def slash(user_id="U1", name="Alice", channel_id="C_GENERAL", channel_name="general"):
    return Caller(user_id, name, Source.SLASH, channel_id, channel_name)


def dm(user_id="U1", name="Alice"):
    return Caller(user_id, name, Source.DM, "D1")


class RouterTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = FakeStore()
        self.db = FakeDB()
        self.players = FakePlayers(self.store)
        self.rooms = FakeRooms(self.store)
        self.router = CommandRouter(
            self.db, self.players, self.rooms, FakeEquipment(self.store), wizards={WIZARD}
        )


class TestLook(RouterTestCase):
    async def test_first_look_creates_player_and_room(self):
        response = await self.router.handle_text("look", slash())

        player = self.store.players["U1"]
        self.assertEqual(player['level'], 1)
        self.assertEqual(player['current_room_id'], "C_GENERAL")
        room = self.store.rooms["C_GENERAL"]
        self.assertEqual(room['description'], config.DEFAULT_ROOM_DESCRIPTION)
        self.assertEqual(self.db.transactions, 1)

        self.assertTrue(response.private_text.startswith("Welcome to SlackMUD! You have entered #general."))
        self.assertIn(config.DEFAULT_ROOM_DESCRIPTION, response.private_text)
        self.assertIn("_You are alone._", response.private_text)
        self.assertEqual(response.public_text, "_Alice looks around the room carefully._")
        self.assertEqual(response.public_channel_id, "C_GENERAL")

    async def test_second_look_has_no_welcome(self):
        await self.router.handle_text("look", slash())
        response = await self.router.handle_text("l", slash())
        self.assertFalse(response.private_text.startswith("Welcome"))
        self.assertEqual(len(self.store.rooms), 1)

    async def test_dm_look_without_room_gives_guidance(self):
        response = await self.router.handle_text("look", dm())
        self.assertEqual(
            response.private_text,
            "You haven't entered any room yet! Use `/mud look` in a channel to enter a room.",
        )
        self.assertFalse(response.has_public)
        self.assertEqual(self.store.rooms, {})

    async def test_other_players_listed(self):
        await self.router.handle_text("look", slash("U2", "Bob"))
        response = await self.router.handle_text("look", slash())
        self.assertIn("*Players here:*\n• Bob", response.private_text)

    async def test_look_at_player(self):
        await self.router.handle_text("look", slash("U2", "Bob"))
        await self.router.handle_text("look", slash())
        response = await self.router.handle_text("look bob", slash())
        self.assertIn("*Bob* is a neutral unknown unknown, level 1.", response.private_text)
        self.assertIn("Bob isn't wearing any equipment.", response.private_text)

    async def test_attached_room_occupants_read_the_channel(self):
        await self.router.handle_text("look", slash("U2", "Bob"))
        response = await self.router.handle_text("look", slash())
        self.assertEqual(response.public_channel_id, "C_GENERAL")
        self.assertEqual(response.direct_messages, [])

    async def test_look_at_nothing(self):
        await self.router.handle_text("look", slash())
        response = await self.router.handle_text("look unicorn", slash())
        self.assertEqual(response.private_text, "You don't see 'unicorn' here.")


class TestWizardGate(RouterTestCase):
    async def test_non_wizard_dig_looks_like_unknown(self):
        await self.router.handle_text("look", slash())
        dig = await self.router.handle_text("dig east #shop", slash())
        unknown = await self.router.handle_text("blorp east #shop", slash())

        self.assertEqual(dig.private_text, "Unknown command: `dig`. Type `help` for available commands.")
        self.assertEqual(dig.private_text.replace("dig", "blorp"), unknown.private_text)
        self.assertFalse(dig.has_public)
        self.assertEqual(self.store.exits, {})

    async def test_allow_listed_user_created_as_wizard(self):
        await self.router.handle_text("look", slash(WIZARD, "Merlin"))
        self.assertEqual(self.store.players[WIZARD]['level'], config.WIZARD_LEVEL)

    async def test_help_hides_wizard_topics(self):
        mortal = await self.router.handle_text("help", slash())
        wizard = await self.router.handle_text("help", slash(WIZARD, "Merlin"))
        self.assertNotIn("dig", mortal.private_text)
        self.assertIn("`dig <direction> #channel`", wizard.private_text)
        hidden = await self.router.handle_text("help dig", slash())
        self.assertEqual(hidden.private_text, "Sorry, no help topic found for 'dig'.")


class TestDig(RouterTestCase):
    async def asyncSetUp(self):
        await self.router.handle_text("look", slash(WIZARD, "Merlin"))

    async def test_dig_creates_destination_and_one_exit(self):
        response = await self.router.handle_text("dig east <#C0SHOP123|shop>", slash(WIZARD, "Merlin"))

        self.assertEqual(
            response.private_text, "✨ You dig an exit to the *east* from #general, leading to #shop!"
        )
        self.assertEqual(
            response.public_text,
            "_Merlin utters some strange words. An exit to the east flashes into existence!_",
        )
        self.assertEqual(self.store.rooms["C0SHOP123"]['description'], config.DEFAULT_ROOM_DESCRIPTION)
        self.assertEqual(list(self.store.exits), [("C_GENERAL", "east")])
        self.assertNotIn(("C0SHOP123", "west"), self.store.exits)

    async def test_second_dig_same_direction_rejected(self):
        await self.router.handle_text("dig east #shop", slash(WIZARD, "Merlin"))
        response = await self.router.handle_text("dig e #bakery", slash(WIZARD, "Merlin"))
        self.assertEqual(response.private_text, "An exit to the east already exists, leading to #shop.")
        self.assertEqual(len(self.store.exits), 1)

    async def test_invalid_direction(self):
        response = await self.router.handle_text("dig sideways #shop", slash(WIZARD, "Merlin"))
        self.assertTrue(response.private_text.startswith("Invalid direction: `sideways`."))

    async def test_dig_without_channel_shows_usage(self):
        response = await self.router.handle_text("dig east", slash(WIZARD, "Merlin"))
        self.assertTrue(response.private_text.startswith("Usage: `dig <direction> #channel`"))

    async def test_dug_exit_shows_in_look(self):
        await self.router.handle_text("dig north #hall", slash(WIZARD, "Merlin"))
        await self.router.handle_text("dig down #cellar", slash(WIZARD, "Merlin"))
        response = await self.router.handle_text("look", slash(WIZARD, "Merlin"))
        self.assertIn("*Exits:*\n• *north* → #hall\n• *down* → #cellar", response.private_text)


class TestTeleport(RouterTestCase):
    async def asyncSetUp(self):
        self.store.rooms["vnum_3001"] = {
            'id': "vnum_3001", 'name': "Temple", 'description': "A quiet temple.",
            'attached_channel_id': None,
        }
        await self.router.handle_text("look", slash(WIZARD, "Merlin"))
        await self.router.handle_text("look", slash("U2", "Bob"))

    async def test_self_teleport_to_virtual_room(self):
        response = await self.router.handle_text("teleport 3001", slash(WIZARD, "Merlin"))
        self.assertEqual(self.store.players[WIZARD]['current_room_id'], "vnum_3001")
        self.assertTrue(response.private_text.startswith("✨ *You have been teleported!*"))
        # Virtual room: nothing to post publicly
        self.assertFalse(response.has_public)

    async def test_teleport_other_player_notifies_them(self):
        response = await self.router.handle_text("teleport bob 3001", slash(WIZARD, "Merlin"))
        self.assertEqual(self.store.players["U2"]['current_room_id'], "vnum_3001")
        self.assertEqual(response.private_text, "✅ Teleported *Bob* to room `3001`")
        self.assertEqual(response.direct_messages[0][0], "U2")

    async def test_virtual_room_occupants_hear_each_other(self):
        await self.router.handle_text("teleport 3001", slash(WIZARD, "Merlin"))
        await self.router.handle_text("teleport bob 3001", slash(WIZARD, "Merlin"))

        response = await self.router.handle_text("look", dm("U2", "Bob"))

        self.assertFalse(response.has_public)
        self.assertEqual(response.direct_messages, [(WIZARD, "_Bob looks around the room carefully._")])

    async def test_missing_room(self):
        response = await self.router.handle_text("tele 9999", slash(WIZARD, "Merlin"))
        self.assertEqual(response.private_text, "❌ Room with vnum `9999` does not exist.")


class TestCharacterAndFailures(RouterTestCase):
    async def test_character_sheet(self):
        response = await self.router.handle_text("char", slash())
        text = response.private_text
        self.assertIn("*Name:* Alice", text)
        self.assertIn("*Level:* 1", text)
        self.assertIn("*Class:* _Not set_", text)
        self.assertIn("• *Warrior* -", text)
        self.assertIn("• *Halfling* -", text)

    async def test_store_outage_is_generic_failure(self):
        self.players.get_or_create = AsyncMock(side_effect=StoreUnavailable("pool closed"))
        with self.assertLogs('slackmud.commands.handler', level='ERROR'):
            response = await self.router.handle_text("look", slash())
        self.assertEqual(response.private_text, GENERIC_FAILURE)
        self.assertFalse(response.has_public)

    async def test_unparseable_text_answers_like_unknown(self):
        with patch("slackmud.commands.handler.parse_command", side_effect=ParseFailure("bad input")):
            response = await self.router.handle_text("???", slash())
        self.assertEqual(response.private_text, "Unknown command: `???`. Type `help` for available commands.")

    async def test_every_verb_has_a_handler(self):
        self.assertEqual(set(HANDLERS), set(Verb))


if __name__ == '__main__':
    unittest.main()
