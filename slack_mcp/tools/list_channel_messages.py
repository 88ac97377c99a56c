"""Tool for listing recent messages in a channel."""

from typing import Any

from slack_mcp.errors import ArgumentError, ErrorKind, SlackToolError
from slack_mcp.models import ListChannelMessagesResult
from slack_mcp.tools.base import SlackTool
from slack_mcp.tools.requests import ListChannelMessagesRequest


class ListChannelMessagesTool(SlackTool):
    """Lists one page of a channel's history, newest first."""

    action = 'list channel messages'
    error_messages = {
        ErrorKind.CHANNEL_NOT_FOUND: (
            'Channel not found. The channel may have been deleted, or the channel_id is incorrect.'
        ),
    }

    @property
    def name(self) -> str:
        return 'list_channel_messages'

    @property
    def description(self) -> str:
        return """List recent messages from a Slack channel, newest first.
Returns one page of messages with author names, a has_more flag,
and a mapping of every mentioned user ID to their profile."""

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            'type': 'object',
            'properties': {
                'channel_id': {
                    'type': 'string',
                    'description': 'Channel ID (e.g., C1234567890)',
                },
                'limit': {
                    'type': 'number',
                    'description': 'Maximum number of messages to return (1-200, default: 100)',
                    'default': ListChannelMessagesRequest.DEFAULT_LIMIT,
                },
                'oldest': {
                    'type': 'string',
                    'description': 'Only messages after this Unix timestamp (e.g., 1234567890.123456)',
                },
                'latest': {
                    'type': 'string',
                    'description': 'Only messages before this Unix timestamp (e.g., 1234567890.123456)',
                },
            },
            'required': ['channel_id'],
        }

    async def execute(self, **kwargs: Any) -> str:
        """List channel messages.

        Returns:
            ListChannelMessagesResult JSON.
        """
        try:
            request = ListChannelMessagesRequest.from_arguments(kwargs)
            messages, has_more = await self._client.get_channel_history(
                request.channel_id,
                request.limit,
                request.oldest,
                request.latest,
            )
        except (ArgumentError, SlackToolError) as e:
            raise self.fail(e) from e

        for message in messages:
            await self._resolve_author(message)

        result = ListChannelMessagesResult(
            messages=messages,
            channel_id=request.channel_id,
            has_more=has_more,
        )
        result.user_mapping = await self._build_user_mapping([message.text for message in messages])
        result.current_user = await self._current_user()
        return result.to_json()
