# slackmud/slack/types.py
"""
Pydantic models for the payloads Slack sends us.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SlashCommand(BaseModel):
    """Form fields of a slash command; Slack sends more than we read."""
    command: str = "/mud"
    text: str = ""
    user_id: str
    user_name: str = ""
    channel_id: str
    channel_name: str = ""
    team_id: Optional[str] = None
    response_url: Optional[str] = None
    trigger_id: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class MessageEvent(BaseModel):
    type: str
    user: Optional[str] = None
    text: str = ""
    channel: Optional[str] = None
    channel_type: Optional[str] = None
    subtype: Optional[str] = None
    bot_id: Optional[str] = None
    ts: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_from_bot(self) -> bool:
        return bool(self.bot_id) or self.subtype == "bot_message"

    @property
    def is_dm(self) -> bool:
        return self.channel_type == "im"

    @property
    def is_command(self) -> bool:
        """A plain DM typed by a human (edits, joins, etc. carry a subtype)."""
        return self.type == "message" and self.is_dm and not self.is_from_bot \
            and not self.subtype and bool(self.user)


class EventEnvelope(BaseModel):
    """Either a url_verification handshake or an event_callback."""
    type: str
    challenge: Optional[str] = None
    token: Optional[str] = None
    team_id: Optional[str] = None
    event_id: Optional[str] = None
    event: Optional[MessageEvent] = Field(default=None)

    model_config = ConfigDict(extra="ignore")
