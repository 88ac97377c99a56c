"""Abstract Slack capabilities consumed by the tools."""

from abc import ABC, abstractmethod

from slack_mcp.models import Message, SearchMatch, UserInfo


class UserDirectory(ABC):
    """Lookup of Slack users."""

    @abstractmethod
    async def get_user_info(self, user_id: str) -> UserInfo:
        """Fetch a user's profile.

        Raises:
            UserNotFoundError: If Slack has no such user.
            SlackToolError: For any other failure.
        """

    @abstractmethod
    async def get_current_user_id(self) -> str:
        """Return the user ID the configured token authenticates as."""


class SlackPort(UserDirectory):
    """Read-only message retrieval. All methods raise SlackToolError on failure."""

    @abstractmethod
    async def get_message(self, channel_id: str, timestamp: str) -> Message:
        """Fetch the single message at ``timestamp`` in ``channel_id``."""

    @abstractmethod
    async def get_thread(self, channel_id: str, thread_ts: str) -> list[Message]:
        """Fetch a whole thread in chronological order, parent first."""

    @abstractmethod
    async def get_channel_history(
        self,
        channel_id: str,
        limit: int,
        oldest: str | None = None,
        latest: str | None = None,
    ) -> tuple[list[Message], bool]:
        """Fetch one page of channel history, newest first.

        Returns:
            Tuple of (messages, has_more).
        """

    @abstractmethod
    async def search_messages(self, query: str, count: int, sort: str) -> tuple[list[SearchMatch], int]:
        """Run a workspace search.

        Returns:
            Tuple of (matches, total match count).
        """

    @staticmethod
    def has_thread(message: Message | None) -> bool:
        """True if the message is a thread parent with replies."""
        return message is not None and message.reply_count > 0
