"""Pydantic models for inbound slash commands and outbound replies.

WHY: Slack reads a slash command reply as JSON with a response_type and
text. Typed models keep the two visibility values closed and give the
/health endpoint an OpenAPI schema.

RULES:
- SlashCommandReply is immutable once built
- response_type is "in_channel" (everyone sees it) or "ephemeral"
  (only the invoking user sees it)
- Python 3.9+ compatible (no PEP 604 unions)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

IN_CHANNEL = "in_channel"
EPHEMERAL = "ephemeral"


class CommandRequest(BaseModel):
    """The form fields of one slash command invocation.

    RULES:
    - Missing form fields arrive as empty strings
    - command is the route name without the slash ("status", "grass")
    """

    model_config = ConfigDict(frozen=True)

    command: str
    token: str = ""
    text: str = ""
    channel_id: str = ""

    def username(self) -> str:
        """First whitespace-delimited word of the argument, or ""."""
        parts = self.text.split()
        return parts[0] if parts else ""


class SlashCommandReply(BaseModel):
    """JSON body returned to Slack for a slash command."""

    model_config = ConfigDict(frozen=True)

    response_type: Literal["in_channel", "ephemeral"] = Field(
        description="'in_channel' is visible to the channel, 'ephemeral' only to the sender.",
    )
    text: str = Field(description="Slack mrkdwn message body.")

    @classmethod
    def in_channel(cls, text: str) -> SlashCommandReply:
        return cls(response_type=IN_CHANNEL, text=text)

    @classmethod
    def ephemeral(cls, text: str) -> SlashCommandReply:
        return cls(response_type=EPHEMERAL, text=text)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="Service version string.", json_schema_extra={"example": "0.1.0"})
