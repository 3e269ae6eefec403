"""
Messaging-platform tools (send, contacts, chats, history, media).

The transport lives outside this package; tools talk to it through the
MessagingClient protocol. Sends are bounded by a timeout.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Protocol

import structlog

from .base import BaseTool, ToolResult

logger = structlog.get_logger()

SEND_TIMEOUT_SECONDS = 10.0
MAX_CONTACTS = 20


class MessagingClient(Protocol):
    """What a messaging bridge must provide to back these tools."""

    @property
    def is_ready(self) -> bool: ...

    async def send_message(self, recipient: str, text: str) -> Any: ...

    async def send_media(self, recipient: str, media_url: str, caption: str | None = None) -> Any: ...

    async def get_contacts(self) -> list[dict[str, Any]]: ...

    async def get_chats(self) -> list[dict[str, Any]]: ...

    async def get_messages(self, chat_id: str, limit: int) -> list[dict[str, Any]]: ...


class _MessagingTool(BaseTool):
    def __init__(self, client: MessagingClient, timeout: float = SEND_TIMEOUT_SECONDS):
        self.client = client
        self.timeout = timeout

    def _not_ready(self) -> ToolResult | None:
        if not self.client.is_ready:
            logger.warning("Messaging client not ready", tool=self.name)
            return ToolResult(
                success=False,
                error="Messaging client is not ready. Please try again in a moment.",
            )
        return None


class MessagingSendTool(_MessagingTool):
    """Send a text message to a contact or group."""

    @property
    def name(self) -> str:
        return "messaging_send"

    @property
    def description(self) -> str:
        return (
            "Sends a message to a contact or group. recipient is the phone number "
            "with country code and no '+', e.g. 573001234567."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "recipient": {"type": "string", "description": "Recipient phone number or chat id"},
                "message": {"type": "string", "description": "Message text"},
            },
            "required": ["recipient", "message"],
        }

    async def execute(self, recipient: str = "", message: str = "", **kwargs: Any) -> ToolResult:
        not_ready = self._not_ready()
        if not_ready:
            return not_ready
        if not recipient or not message:
            return ToolResult(success=False, error="Both recipient and message are required")

        try:
            await asyncio.wait_for(self.client.send_message(recipient, message), self.timeout)
        except asyncio.TimeoutError:
            logger.error("Message send timed out", recipient=recipient)
            return ToolResult(
                success=False,
                error="Could not send the message right now. The messaging service may be busy.",
            )

        logger.info("Message sent", recipient=recipient)
        return ToolResult(
            success=True,
            result={
                "recipient": recipient,
                "message": message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )


class MessagingSendMediaTool(_MessagingTool):
    """Send a media file by URL."""

    @property
    def name(self) -> str:
        return "messaging_send_media"

    @property
    def description(self) -> str:
        return "Sends a media file (by URL) to a contact, with an optional caption."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "recipient": {"type": "string", "description": "Recipient phone number or chat id"},
                "media_url": {"type": "string", "description": "URL of the media file"},
                "caption": {"type": "string", "description": "Optional caption"},
            },
            "required": ["recipient", "media_url"],
        }

    async def execute(
        self,
        recipient: str = "",
        media_url: str = "",
        caption: str | None = None,
        **kwargs: Any,
    ) -> ToolResult:
        not_ready = self._not_ready()
        if not_ready:
            return not_ready
        if not recipient or not media_url:
            return ToolResult(success=False, error="Both recipient and media_url are required")

        try:
            await asyncio.wait_for(
                self.client.send_media(recipient, media_url, caption),
                self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error("Media send timed out", recipient=recipient)
            return ToolResult(success=False, error="Timed out sending media")

        logger.info("Media sent", recipient=recipient)
        return ToolResult(
            success=True,
            result={
                "recipient": recipient,
                "media_url": media_url,
                "caption": caption,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )


class MessagingGetContactsTool(_MessagingTool):
    """List saved contacts."""

    @property
    def name(self) -> str:
        return "messaging_get_contacts"

    @property
    def description(self) -> str:
        return "Gets the list of saved messaging contacts."

    @property
    def parameters(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}}

    async def execute(self, **kwargs: Any) -> ToolResult:
        not_ready = self._not_ready()
        if not_ready:
            return not_ready

        contacts = [
            {
                "name": c.get("name") or "Unnamed",
                "number": c.get("number"),
                "id": c.get("id"),
            }
            for c in await self.client.get_contacts()
            if c.get("is_contact", True)
        ][:MAX_CONTACTS]

        return ToolResult(success=True, result={"total": len(contacts), "contacts": contacts})


class MessagingGetChatsTool(_MessagingTool):
    """List recent chats."""

    @property
    def name(self) -> str:
        return "messaging_get_chats"

    @property
    def description(self) -> str:
        return "Gets the list of recent chats."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "integer",
                    "description": "Maximum number of chats to return",
                    "default": 10,
                },
            },
        }

    async def execute(self, limit: int = 10, **kwargs: Any) -> ToolResult:
        not_ready = self._not_ready()
        if not_ready:
            return not_ready

        chats = (await self.client.get_chats())[: int(limit)]
        return ToolResult(success=True, result={"total": len(chats), "chats": chats})


class MessagingGetMessagesTool(_MessagingTool):
    """Fetch recent messages from one chat."""

    @property
    def name(self) -> str:
        return "messaging_get_messages"

    @property
    def description(self) -> str:
        return "Gets recent messages from a specific chat."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "chat_id": {"type": "string", "description": "Chat id"},
                "limit": {
                    "type": "integer",
                    "description": "Number of messages to fetch",
                    "default": 10,
                },
            },
            "required": ["chat_id"],
        }

    async def execute(self, chat_id: str = "", limit: int = 10, **kwargs: Any) -> ToolResult:
        not_ready = self._not_ready()
        if not_ready:
            return not_ready
        if not chat_id:
            return ToolResult(success=False, error="chat_id is required")

        messages = await self.client.get_messages(chat_id, int(limit))
        return ToolResult(
            success=True,
            result={"chat_id": chat_id, "total": len(messages), "messages": messages},
        )


def create_messaging_tools(client: MessagingClient) -> list[BaseTool]:
    """Create all messaging tools bound to one client."""
    return [
        MessagingSendTool(client),
        MessagingSendMediaTool(client),
        MessagingGetContactsTool(client),
        MessagingGetChatsTool(client),
        MessagingGetMessagesTool(client),
    ]
