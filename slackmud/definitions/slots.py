# slackmud/definitions/slots.py
"""
Central definition for all character equipment slots.
This provides a canonical, ordered list for storage and display commands.
"""
from typing import Dict, List

# --- SLOT CONSTANTS ---
# These are the string values stored in object_instances.equipped_slot.
LIGHT = "light"
FINGER_L = "finger_l"
FINGER_R = "finger_r"
NECK_1 = "neck_1"
NECK_2 = "neck_2"
BODY = "body"
HEAD = "head"
LEGS = "legs"
FEET = "feet"
HANDS = "hands"
ARMS = "arms"
SHIELD = "shield"
ABOUT = "about"
WAIST = "waist"
WRIST_L = "wrist_l"
WRIST_R = "wrist_r"
WIELD = "wield"
HOLD = "hold"
FLOAT = "float"

# --- CANONICAL LIST OF ALL SLOTS ---
# The order dictates the display order in the 'equipment' command (top to bottom).
ALL_SLOTS = [
    LIGHT,
    FINGER_L,
    FINGER_R,
    NECK_1,
    NECK_2,
    BODY,
    HEAD,
    LEGS,
    FEET,
    HANDS,
    ARMS,
    SHIELD,
    ABOUT,
    WAIST,
    WRIST_L,
    WRIST_R,
    WIELD,
    HOLD,
    FLOAT,
]

SLOT_LABELS: Dict[str, str] = {
    LIGHT: "<used as light>",
    FINGER_L: "<worn on finger>",
    FINGER_R: "<worn on finger>",
    NECK_1: "<worn around neck>",
    NECK_2: "<worn around neck>",
    BODY: "<worn on body>",
    HEAD: "<worn on head>",
    LEGS: "<worn on legs>",
    FEET: "<worn on feet>",
    HANDS: "<worn on hands>",
    ARMS: "<worn on arms>",
    SHIELD: "<worn as shield>",
    ABOUT: "<worn about body>",
    WAIST: "<worn about waist>",
    WRIST_L: "<worn around wrist>",
    WRIST_R: "<worn around wrist>",
    WIELD: "<wielded>",
    HOLD: "<held>",
    FLOAT: "<floating nearby>",
}

# Used in "You wear X on your head."
SLOT_LOCATION_TEXT: Dict[str, str] = {
    LIGHT: "as a light",
    FINGER_L: "on your finger",
    FINGER_R: "on your finger",
    NECK_1: "around your neck",
    NECK_2: "around your neck",
    BODY: "on your body",
    HEAD: "on your head",
    LEGS: "on your legs",
    FEET: "on your feet",
    HANDS: "on your hands",
    ARMS: "on your arms",
    SHIELD: "as a shield",
    ABOUT: "about your body",
    WAIST: "about your waist",
    WRIST_L: "around your wrist",
    WRIST_R: "around your wrist",
    WIELD: "in your hand",
    HOLD: "in your hand",
    FLOAT: "floating nearby",
}

# Wear flag keyword -> candidate slots, in preference order.
# 'light' is not a wear flag; light sources are equipped by item type.
WEAR_FLAG_SLOTS: List[tuple] = [
    ("finger", [FINGER_L, FINGER_R]),
    ("neck", [NECK_1, NECK_2]),
    ("body", [BODY]),
    ("head", [HEAD]),
    ("legs", [LEGS]),
    ("feet", [FEET]),
    ("hands", [HANDS]),
    ("arms", [ARMS]),
    ("shield", [SHIELD]),
    ("about", [ABOUT]),
    ("waist", [WAIST]),
    ("wrist", [WRIST_L, WRIST_R]),
    ("wield", [WIELD]),
    ("hold", [HOLD]),
    ("float", [FLOAT]),
]


def is_valid_slot(slot_name: str) -> bool:
    """Checks if a given slot name is a valid, defined equipment slot."""
    return bool(slot_name) and slot_name.lower() in ALL_SLOTS


def slots_for_wear_flags(wear_flags: str) -> List[str]:
    """Returns every slot an item with these wear flags may occupy."""
    flags = (wear_flags or "").lower()
    slots: List[str] = []
    for keyword, candidates in WEAR_FLAG_SLOTS:
        if keyword in flags:
            slots.extend(candidates)
    return slots


def label_for(slot_name: str) -> str:
    return SLOT_LABELS.get(slot_name, f"<{slot_name}>")


def location_text_for(slot_name: str) -> str:
    return SLOT_LOCATION_TEXT.get(slot_name, "")
