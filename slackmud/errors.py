# slackmud/errors.py
"""
Exception types raised by the game core.
Handlers catch the recoverable ones and turn them into player-facing text;
the web layer maps Unauthorized to a 401.
"""
from typing import Optional


class MudError(Exception):
    """Base class for every error raised by the game core."""


class Unauthorized(MudError):
    """Request signature missing, stale, or not matching."""


class ParseFailure(MudError):
    """Command text could not be turned into an intent."""


class PermissionDenied(MudError):
    """A player tried a command above their permission level."""

    def __init__(self, verb: str):
        super().__init__(f"Permission denied for '{verb}'")
        self.verb = verb


class InvalidDirection(MudError):
    """Direction outside north, south, east, west, up, down."""

    def __init__(self, direction: str):
        super().__init__(f"Invalid direction: {direction}")
        self.direction = direction


class DuplicateExit(MudError):
    """An exit already exists for the (room, direction) pair."""

    def __init__(self, from_room_id: str, direction: str, to_room_id: Optional[str] = None):
        super().__init__(f"Exit {direction} from {from_room_id} already exists")
        self.from_room_id = from_room_id
        self.direction = direction
        self.to_room_id = to_room_id


class SlotConflict(MudError):
    """The equipment slot is already occupied and swapping was not allowed."""

    def __init__(self, player_id: str, slot: str, occupant_id: Optional[int] = None):
        super().__init__(f"Slot {slot} for {player_id} is occupied")
        self.player_id = player_id
        self.slot = slot
        self.occupant_id = occupant_id


class NotCarried(MudError):
    """The object instance is not in the player's inventory or equipment."""

    def __init__(self, player_id: str, instance_id: int):
        super().__init__(f"{player_id} does not carry instance {instance_id}")
        self.player_id = player_id
        self.instance_id = instance_id


class StoreUnavailable(MudError):
    """The database could not be reached or the transaction failed."""
