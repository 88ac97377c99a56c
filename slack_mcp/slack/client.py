"""Slack Web API client implementing SlackPort."""

import asyncio
import logging
from typing import Any

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from slack_mcp.errors import ErrorKind, SlackToolError, UserNotFoundError, classify_error
from slack_mcp.models import Message, SearchMatch, UserInfo
from slack_mcp.slack.ports import SlackPort
from slack_mcp.slack.urls import format_url_timestamp


logger = logging.getLogger(__name__)

SEARCH_SORT_DIRECTION = 'desc'
THREAD_PAGE_SIZE = 200
# Errors mapped through classify_error; asyncio.CancelledError is not among them.
TRANSPORT_ERRORS = (SlackApiError, aiohttp.ClientError, asyncio.TimeoutError)


def convert_message(raw: dict[str, Any]) -> Message:
    """Convert a Slack API message dict to a Message."""
    return Message(
        user=raw.get('user') or '',
        text=raw.get('text') or '',
        timestamp=raw.get('ts') or '',
        thread_ts=raw.get('thread_ts') or None,
        reply_count=raw.get('reply_count') or 0,
    )


def convert_user(raw: dict[str, Any]) -> UserInfo:
    """Convert a Slack API user dict to UserInfo.

    Display name falls back to the profile real name, then to the handle.
    """
    profile = raw.get('profile') or {}
    name = raw.get('name') or ''
    real_name = profile.get('real_name') or ''
    display_name = profile.get('display_name') or real_name or name
    return UserInfo(
        id=raw.get('id') or '',
        name=name,
        display_name=display_name,
        real_name=real_name,
        is_bot=bool(raw.get('is_bot')),
        is_deleted=bool(raw.get('deleted')),
    )


def convert_search_match(raw: dict[str, Any]) -> SearchMatch:
    """Convert a search.messages match dict to a SearchMatch."""
    channel = raw.get('channel') or {}
    return SearchMatch(
        channel_id=channel.get('id') or '',
        channel_name=channel.get('name') or '',
        user=raw.get('user') or '',
        text=raw.get('text') or '',
        timestamp=raw.get('ts') or '',
        permalink=raw.get('permalink') or '',
    )


class SlackClient(SlackPort):
    """Async Slack API client.

    Reads use the bot token. Search requires a user token because Slack only
    allows search.messages for user tokens.
    """

    def __init__(self, token: str, user_token: str | None = None):
        """Initialize Slack client.

        Args:
            token: Slack bot OAuth token (xoxb-...).
            user_token: Optional Slack user OAuth token (xoxp-...) with search:read.
        """
        self.client = AsyncWebClient(token=token)
        self.user_client = AsyncWebClient(token=user_token) if user_token else None

    async def get_message(self, channel_id: str, timestamp: str) -> Message:
        try:
            response = await self.client.conversations_history(
                channel=channel_id,
                oldest=timestamp,
                latest=timestamp,
                inclusive=True,
                limit=1,
            )
        except TRANSPORT_ERRORS as e:
            raise classify_error(e) from e

        messages = response.get('messages') or []
        if not messages:
            raise SlackToolError(
                ErrorKind.MESSAGE_NOT_FOUND,
                f'message not found in channel {channel_id} with timestamp {timestamp}',
            )
        return convert_message(messages[0])

    async def get_thread(self, channel_id: str, thread_ts: str) -> list[Message]:
        messages: list[Message] = []
        cursor = None

        try:
            while True:
                kwargs: dict[str, Any] = {
                    'channel': channel_id,
                    'ts': thread_ts,
                    'limit': THREAD_PAGE_SIZE,
                }
                if cursor:
                    kwargs['cursor'] = cursor

                response = await self.client.conversations_replies(**kwargs)
                messages.extend(convert_message(raw) for raw in response.get('messages') or [])

                cursor = (response.get('response_metadata') or {}).get('next_cursor')
                if not response.get('has_more') or not cursor:
                    break
        except TRANSPORT_ERRORS as e:
            raise classify_error(e) from e

        if not messages:
            raise SlackToolError(
                ErrorKind.MESSAGE_NOT_FOUND,
                f'thread not found in channel {channel_id} with timestamp {thread_ts}',
            )
        logger.debug(f'Fetched {len(messages)} thread messages for {channel_id}/{thread_ts}')
        return messages

    async def get_channel_history(
        self,
        channel_id: str,
        limit: int,
        oldest: str | None = None,
        latest: str | None = None,
    ) -> tuple[list[Message], bool]:
        kwargs: dict[str, Any] = {
            'channel': channel_id,
            'limit': limit,
        }
        if oldest:
            kwargs['oldest'] = oldest
        if latest:
            kwargs['latest'] = latest

        try:
            response = await self.client.conversations_history(**kwargs)
        except TRANSPORT_ERRORS as e:
            raise classify_error(e) from e

        messages = [convert_message(raw) for raw in response.get('messages') or []]
        return messages, bool(response.get('has_more'))

    async def search_messages(self, query: str, count: int, sort: str) -> tuple[list[SearchMatch], int]:
        if self.user_client is None:
            raise SlackToolError(ErrorKind.USER_TOKEN_NOT_CONFIGURED)

        try:
            response = await self.user_client.search_messages(
                query=query,
                count=count,
                sort=sort,
                sort_dir=SEARCH_SORT_DIRECTION,
            )
        except TRANSPORT_ERRORS as e:
            raise classify_error(e) from e

        result = response.get('messages') or {}
        matches = [convert_search_match(raw) for raw in result.get('matches') or []]
        for match in matches:
            if not match.permalink and match.channel_id and match.timestamp:
                match.permalink = self.get_message_link(match.channel_id, match.timestamp)
        return matches, int(result.get('total') or 0)

    async def get_user_info(self, user_id: str) -> UserInfo:
        try:
            response = await self.client.users_info(user=user_id)
        except TRANSPORT_ERRORS as e:
            if isinstance(e, SlackApiError) and ('user_not_found' in str(e) or 'users_not_found' in str(e)):
                raise UserNotFoundError(user_id) from e
            raise classify_error(e) from e

        user = response.get('user')
        if not user:
            raise UserNotFoundError(user_id)
        return convert_user(user)

    async def get_current_user_id(self) -> str:
        try:
            response = await self.client.auth_test()
        except TRANSPORT_ERRORS as e:
            raise classify_error(e) from e
        return response['user_id']

    def get_message_link(self, channel_id: str, message_ts: str, thread_ts: str | None = None) -> str:
        """Generate a Slack message permalink."""
        base_url = f'https://slack.com/archives/{channel_id}/p{format_url_timestamp(message_ts)}'
        if thread_ts and thread_ts != message_ts:
            base_url += f'?thread_ts={thread_ts}&cid={channel_id}'
        return base_url
