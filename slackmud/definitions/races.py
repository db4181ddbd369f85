# slackmud/definitions/races.py
"""
Defines the playable races seeded into the 'races' table.
"""
from typing import List, Tuple

DEFAULT_RACES: List[Tuple[str, str]] = [
    ("Human", "Versatile and adaptable, humans excel in all paths."),
    ("Elf", "Graceful and long-lived, with affinity for magic."),
    ("Dwarf", "Sturdy and resilient, masters of crafting and combat."),
    ("Halfling", "Small and nimble, with a knack for avoiding danger."),
]
