"""Pydantic models for messages, users and tool results."""

import json

from pydantic import BaseModel, ConfigDict


class UserInfo(BaseModel):
    """Resolved identity of a Slack user.

    Attributes:
        id: Slack user ID (e.g. U06025G6B28).
        name: Slack handle.
        display_name: Best human-readable name (display name, real name, then handle).
        real_name: Profile real name.
        is_bot: Whether the account is a bot user.
        is_deleted: Whether the account is deactivated or could not be found.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ''
    display_name: str = ''
    real_name: str = ''
    is_bot: bool = False
    is_deleted: bool = False


class _AuthoredItem(BaseModel):
    """Shared author annotation for messages and search matches."""

    user: str = ''
    user_name: str | None = None
    display_name: str | None = None
    real_name: str | None = None

    def apply_user(self, user_info: UserInfo) -> None:
        """Attach resolved author names to this item."""
        self.user_name = user_info.name
        self.display_name = user_info.display_name
        self.real_name = user_info.real_name


class Message(_AuthoredItem):
    """A Slack message.

    ``user`` is empty for system messages. ``reply_count`` is only meaningful
    on thread parents. The ``user_name``/``display_name``/``real_name`` fields
    are local annotations and never sent back to Slack.
    """

    text: str = ''
    timestamp: str
    thread_ts: str | None = None
    reply_count: int = 0


class SearchMatch(_AuthoredItem):
    """A single message returned by search."""

    channel_id: str = ''
    channel_name: str = ''
    text: str = ''
    timestamp: str = ''
    permalink: str = ''


class MessageCoordinate(BaseModel):
    """Location of a message parsed from a Slack URL."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    timestamp: str
    thread_ts: str | None = None
    is_thread: bool = False


class ToolResult(BaseModel):
    """Base for serialized tool envelopes; unset optional fields are omitted."""

    def to_json(self) -> str:
        return json.dumps(self.model_dump(exclude_none=True), ensure_ascii=False)


class ReadMessageResult(ToolResult):
    message: Message
    thread: list[Message] | None = None
    channel_id: str
    current_user: UserInfo | None = None
    user_mapping: dict[str, UserInfo] | None = None


class ListChannelMessagesResult(ToolResult):
    messages: list[Message]
    channel_id: str
    has_more: bool = False
    current_user: UserInfo | None = None
    user_mapping: dict[str, UserInfo] | None = None


class SearchMessagesResult(ToolResult):
    query: str
    total: int = 0
    matches: list[SearchMatch]
    current_user: UserInfo | None = None
