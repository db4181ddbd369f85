# slackmud/commands/parser.py
"""
Turns raw command text into an Intent.
Used for both slash-command payloads and direct-message bodies.
"""
import re
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .. import utils

log = logging.getLogger(__name__)


class Verb(Enum):
    LOOK = "look"
    CHARACTER = "character"
    HELP = "help"
    DIG = "dig"
    MOVE = "move"
    INVENTORY = "inventory"
    EQUIPMENT = "equipment"
    WEAR = "wear"
    WIELD = "wield"
    REMOVE = "remove"
    GET = "get"
    DROP = "drop"
    SAY = "say"
    TELL = "tell"
    SHOUT = "shout"
    ATTACH = "attach"
    DETACH = "detach"
    TELEPORT = "teleport"
    UNKNOWN = "unknown"


VERB_ALIASES: Dict[str, Verb] = {
    "look": Verb.LOOK, "l": Verb.LOOK,
    "character": Verb.CHARACTER, "char": Verb.CHARACTER, "c": Verb.CHARACTER,
    "help": Verb.HELP, "h": Verb.HELP,
    "dig": Verb.DIG,
    "move": Verb.MOVE, "go": Verb.MOVE,
    "inventory": Verb.INVENTORY, "inv": Verb.INVENTORY, "i": Verb.INVENTORY,
    "equipment": Verb.EQUIPMENT, "eq": Verb.EQUIPMENT,
    "wear": Verb.WEAR,
    "wield": Verb.WIELD,
    "remove": Verb.REMOVE, "rem": Verb.REMOVE,
    "get": Verb.GET, "take": Verb.GET,
    "drop": Verb.DROP,
    "say": Verb.SAY,
    "tell": Verb.TELL,
    "shout": Verb.SHOUT,
    "attach": Verb.ATTACH,
    "detach": Verb.DETACH,
    "teleport": Verb.TELEPORT, "tele": Verb.TELEPORT,
}

# <#C123|name>, <#C123>, or a plain #name
_MENTION_RE = re.compile(r"^<#([A-Z0-9]+)(?:\|([^>]*))?>$")
_HASH_RE = re.compile(r"^#([\w.-]+)$")
_ID_RE = re.compile(r"^[CG][A-Z0-9]{7,}$")

# Only these verbs take a channel argument; everything else keeps '#words' as text.
CHANNEL_VERBS = frozenset({Verb.DIG, Verb.ATTACH, Verb.TELEPORT})
# A bare channel id is only accepted where a channel is the sole possible argument.
BARE_ID_VERBS = frozenset({Verb.DIG, Verb.ATTACH})


@dataclass(frozen=True)
class ChannelRef:
    """A channel mention extracted from the arguments."""
    channel_id: Optional[str]
    name: Optional[str]

    @property
    def room_id(self) -> str:
        """A bare '#name' has no id yet; the name stands in for it."""
        return self.channel_id or self.name or ""

    @property
    def display_name(self) -> str:
        return self.name or self.channel_id or ""


@dataclass(frozen=True)
class Intent:
    verb: Verb
    arguments: Tuple[str, ...] = ()
    raw_text: str = ""
    word: str = ""
    channel: Optional[ChannelRef] = field(default=None)

    @property
    def args_str(self) -> str:
        return " ".join(self.arguments)


def parse_channel_ref(token: str, allow_bare_id: bool = True) -> Optional[ChannelRef]:
    """Recognizes Slack's channel mention syntax; returns None for ordinary words."""
    m = _MENTION_RE.match(token)
    if m:
        return ChannelRef(channel_id=m.group(1), name=m.group(2) or None)
    m = _HASH_RE.match(token)
    if m:
        return ChannelRef(channel_id=None, name=m.group(1))
    if allow_bare_id and _ID_RE.match(token):
        return ChannelRef(channel_id=token, name=None)
    return None


def parse_command(text: str) -> Intent:
    """
    Splits text on whitespace (no quoting), resolves the verb through its aliases
    and, for verbs that take a channel, pulls the first channel mention out of
    the arguments.
    Bare directions (n, north, ...) are shorthand for 'move <direction>'.
    Empty text is treated as a request for help.
    """
    raw_text = text or ""
    tokens = raw_text.split()
    if not tokens:
        return Intent(verb=Verb.HELP, raw_text=raw_text)

    word = tokens[0].lower()
    rest = tokens[1:]

    verb = VERB_ALIASES.get(word)
    if verb is None:
        direction = utils.get_canonical_direction(word)
        if direction:
            verb = Verb.MOVE
            rest = [direction] + rest
        else:
            verb = Verb.UNKNOWN

    channel: Optional[ChannelRef] = None
    arguments = []
    wants_channel = verb in CHANNEL_VERBS
    allow_bare_id = verb in BARE_ID_VERBS
    for token in rest:
        ref = parse_channel_ref(token, allow_bare_id) if wants_channel and channel is None else None
        if ref is not None:
            channel = ref
        else:
            arguments.append(token)

    log.debug("Parsed '%s' as %s (args=%s, channel=%s)", raw_text, verb.name, arguments, channel)
    return Intent(verb=verb, arguments=tuple(arguments), raw_text=raw_text, word=tokens[0], channel=channel)
