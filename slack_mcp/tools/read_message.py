"""Tool for reading a Slack message and its thread by URL."""

import logging
from typing import Any

from slack_mcp.errors import ArgumentError, SlackToolError
from slack_mcp.formatting.resolver import UserResolver
from slack_mcp.models import Message, MessageCoordinate, ReadMessageResult
from slack_mcp.slack.ports import SlackPort
from slack_mcp.slack.urls import DEFAULT_DOMAIN_SUFFIX, parse_message_url
from slack_mcp.tools.base import SlackTool
from slack_mcp.tools.requests import ReadMessageRequest


logger = logging.getLogger(__name__)


class ReadMessageTool(SlackTool):
    """Reads the message a permalink points to, plus its thread if it has one."""

    action = 'read message'

    def __init__(
        self,
        client: SlackPort,
        resolver: UserResolver,
        domain_suffix: str = DEFAULT_DOMAIN_SUFFIX,
        strict_thread_ts: bool = False,
    ):
        super().__init__(client, resolver)
        self._domain_suffix = domain_suffix
        self._strict_thread_ts = strict_thread_ts

    @property
    def name(self) -> str:
        return 'read_message'

    @property
    def description(self) -> str:
        return (
            'Read a Slack message and its thread by URL. '
            'Provide a Slack message URL to retrieve the message content, author, '
            'timestamp, and any thread replies.'
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            'type': 'object',
            'properties': {
                'url': {
                    'type': 'string',
                    'description': (
                        'Slack message or thread URL to read. '
                        'Format: https://workspace.slack.com/archives/{channel_id}/p{timestamp}'
                    ),
                },
            },
            'required': ['url'],
        }

    async def execute(self, **kwargs: Any) -> str:
        """Read a message by permalink.

        The thread is fetched when the URL carries ``thread_ts`` or the message
        has replies. A failed thread fetch still returns the message, with a
        note appended after the JSON.

        Returns:
            ReadMessageResult JSON, possibly followed by a thread-failure note.
        """
        try:
            request = ReadMessageRequest.from_arguments(kwargs)
            coordinate = parse_message_url(
                request.url,
                domain_suffix=self._domain_suffix,
                strict_thread_ts=self._strict_thread_ts,
            )
            message = await self._client.get_message(coordinate.channel_id, coordinate.timestamp)
        except (ArgumentError, SlackToolError) as e:
            raise self.fail(e) from e

        await self._resolve_author(message)
        result = ReadMessageResult(message=message, channel_id=coordinate.channel_id)

        thread_error: SlackToolError | None = None
        if coordinate.is_thread or self._client.has_thread(message):
            try:
                result.thread = await self._fetch_thread(coordinate, message)
            except SlackToolError as e:
                logger.warning(f'Thread fetch failed for {coordinate.channel_id}/{message.timestamp}: {e.detail}')
                thread_error = e

        texts = [message.text] + [reply.text for reply in result.thread or []]
        result.user_mapping = await self._build_user_mapping(texts)
        result.current_user = await self._current_user()

        payload = result.to_json()
        if thread_error is not None:
            return f'{payload}\n\nNote: Failed to fetch thread replies: {thread_error.detail}'
        return payload

    async def _fetch_thread(self, coordinate: MessageCoordinate, message: Message) -> list[Message]:
        # Without thread_ts in the URL the message itself is the thread parent
        thread_ts = coordinate.thread_ts or message.timestamp
        thread = await self._client.get_thread(coordinate.channel_id, thread_ts)
        for reply in thread:
            await self._resolve_author(reply)
        return thread
