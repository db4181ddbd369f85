# slackmud/response.py
"""
The response descriptor every command handler returns.
It says what to tell whom; delivering it is the composer's job.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class Response:
    private_text: Optional[str] = None
    public_text: Optional[str] = None
    # Room the public text belongs to, and the Slack channel attached to it.
    # A room with no attached channel (virtual room) gets no public post.
    public_room_id: Optional[str] = None
    public_channel_id: Optional[str] = None
    # Extra private notices for other players: (slack_user_id, text)
    direct_messages: List[Tuple[str, str]] = field(default_factory=list)
    # Extra public notices for other channels: (channel_id, text)
    channel_notices: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def private(cls, text: str) -> 'Response':
        return cls(private_text=text)

    @classmethod
    def in_room(cls, room, private_text: Optional[str], public_text: Optional[str]) -> 'Response':
        """Private text for the caller plus a public notice for `room`'s attached channel."""
        return cls(
            private_text=private_text,
            public_text=public_text,
            public_room_id=room.id if room else None,
            public_channel_id=room.attached_channel_id if room else None,
        )

    @property
    def has_public(self) -> bool:
        return bool(self.public_text and self.public_channel_id)
