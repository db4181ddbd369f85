# slackmud/definitions/classes.py
"""
Defines the playable classes seeded into the 'classes' table.
"""
from typing import List, Tuple

# (name, description) in seed order; ids are assigned by the database.
DEFAULT_CLASSES: List[Tuple[str, str]] = [
    ("Warrior", "A fierce fighter skilled in melee combat and defense."),
    ("Mage", "A wielder of arcane magic, casting powerful spells."),
    ("Rogue", "A stealthy character adept at sneaking and quick strikes."),
    ("Cleric", "A holy warrior who can heal allies and smite foes."),
]
