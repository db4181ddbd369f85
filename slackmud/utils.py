# slackmud/utils.py
"""
General utility functions for the game.
"""
import time
import logging
from typing import Dict, Optional, Tuple

log = logging.getLogger(__name__)

# Fixed display/ranking order for exits.
DIRECTIONS: Tuple[str, ...] = ("north", "south", "east", "west", "up", "down")

DIRECTION_RANK: Dict[str, int] = {d: i for i, d in enumerate(DIRECTIONS)}

DIRECTION_ALIASES: Dict[str, str] = {
    "north": "north", "n": "north",
    "south": "south", "s": "south",
    "east": "east", "e": "east",
    "west": "west", "w": "west",
    "up": "up", "u": "up",
    "down": "down", "d": "down",
}

VALID_DIRECTIONS_TEXT = ", ".join(DIRECTIONS)


def get_canonical_direction(direction: str) -> Optional[str]:
    """Returns the full lowercase direction for a direction or its alias."""
    if not direction:
        return None
    return DIRECTION_ALIASES.get(direction.lower())


def direction_rank(direction: str) -> int:
    """Sort key for exits; unknown directions sort last."""
    return DIRECTION_RANK.get(direction, len(DIRECTIONS))


def now_epoch() -> int:
    """Timestamps are stored as integer epoch seconds."""
    return int(time.time())


def matches_keyword(keywords: str, word: str) -> bool:
    """Case-insensitive match of a single word against a space separated keyword list."""
    if not word:
        return False
    word = word.lower()
    return any(k.lower() == word for k in (keywords or "").split())


def format_not_set(value: Optional[str]) -> str:
    return value if value else "_Not set_"
