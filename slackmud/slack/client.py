# slackmud/slack/client.py
"""
Outbound Slack Web API calls and delivery of command responses.
"""
import logging
from typing import Any, Dict, Optional

import httpx

import config
from ..response import Response

log = logging.getLogger(__name__)


class SlackApiError(Exception):
    """Slack answered with ok=false."""

    def __init__(self, method: str, error: str):
        super().__init__(f"{method} failed: {error}")
        self.method = method
        self.error = error


class SlackClient:
    """A thin wrapper over the few Web API methods the game needs."""

    def __init__(self, bot_token: str, base_url: str = config.SLACK_API_BASE_URL,
                 http: Optional[httpx.AsyncClient] = None):
        self.http = http or httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {bot_token}"},
            timeout=config.SLACK_API_TIMEOUT_SECONDS,
        )

    async def close(self):
        await self.http.aclose()

    async def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Raises httpx.HTTPError, ValueError for a non-JSON body, or SlackApiError."""
        response = await self.http.post(f"/{method}", json=payload)
        response.raise_for_status()
        data = response.json()
        if not data.get("ok"):
            raise SlackApiError(method, data.get("error", "unknown_error"))
        return data

    async def post_message(self, channel: str, text: str) -> Dict[str, Any]:
        return await self._call("chat.postMessage", {"channel": channel, "text": text})

    async def open_dm(self, user_id: str) -> str:
        data = await self._call("conversations.open", {"users": user_id})
        return data["channel"]["id"]

    async def send_dm(self, user_id: str, text: str) -> Dict[str, Any]:
        channel = await self.open_dm(user_id)
        return await self.post_message(channel, text)

    async def get_user_real_name(self, user_id: str) -> str:
        """Display name for a user id; falls back to the id if Slack will not say."""
        try:
            response = await self.http.get("/users.info", params={"user": user_id})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("users.info failed for %s: %s", user_id, e)
            return user_id
        if not data.get("ok"):
            log.warning("users.info failed for %s: %s", user_id, data.get("error"))
            return user_id
        user = data.get("user", {})
        profile = user.get("profile", {})
        return profile.get("real_name") or user.get("real_name") or user.get("name") or user_id


class ResponseComposer:
    """Delivers a Response: private text by DM, public text to the room's channel."""

    def __init__(self, client: SlackClient):
        self.client = client

    async def deliver(self, response: Response, user_id: str, include_private: bool = True):
        if include_private and response.private_text:
            await self._send(self.client.send_dm, user_id, response.private_text)
        if response.has_public:
            await self._send(self.client.post_message, response.public_channel_id, response.public_text)
        for channel_id, text in response.channel_notices:
            await self._send(self.client.post_message, channel_id, text)
        for other_user, text in response.direct_messages:
            await self._send(self.client.send_dm, other_user, text)

    async def _send(self, sender, target: str, text: str):
        # Delivery problems never undo game state; log and move on.
        try:
            await sender(target, text)
        except (httpx.HTTPError, SlackApiError, ValueError) as e:
            log.error("Failed to deliver message to %s: %s", target, e)
