"""Shared pytest fixtures for Slack MCP tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from slack_mcp.formatting.resolver import TTLCache, UserResolver
from slack_mcp.models import Message, UserInfo
from slack_mcp.slack.ports import SlackPort


ALICE = UserInfo(id='U111', name='alice', display_name='Alice', real_name='Alice Smith')
BOB = UserInfo(id='U222', name='bob', display_name='Bobby', real_name='Bob Jones')
ME = UserInfo(id='UBOT', name='reader-bot', display_name='Reader', real_name='Reader Bot', is_bot=True)

KNOWN_USERS = {user.id: user for user in (ALICE, BOB, ME)}


@pytest.fixture
def slack_port():
    """SlackPort fake backed by AsyncMocks.

    Users in KNOWN_USERS resolve; anything else raises UserNotFoundError.
    """
    from slack_mcp.errors import UserNotFoundError

    async def get_user_info(user_id):
        if user_id in KNOWN_USERS:
            return KNOWN_USERS[user_id]
        raise UserNotFoundError(user_id)

    port = MagicMock(spec=SlackPort)
    port.get_message = AsyncMock(
        return_value=Message(user='U111', text='hi', timestamp='1355517523.000008'),
    )
    port.get_thread = AsyncMock(return_value=[])
    port.get_channel_history = AsyncMock(return_value=([], False))
    port.search_messages = AsyncMock(return_value=([], 0))
    port.get_user_info = AsyncMock(side_effect=get_user_info)
    port.get_current_user_id = AsyncMock(return_value='UBOT')
    port.has_thread = SlackPort.has_thread
    return port


@pytest.fixture
def resolver(slack_port):
    """UserResolver over the fake port with a fresh cache."""
    return UserResolver(slack_port, TTLCache(ttl_seconds=60, max_size=100))


@pytest.fixture
def mock_slack_web_client():
    """Mocked AsyncWebClient for testing."""
    client = MagicMock()
    client.conversations_history = AsyncMock(return_value={'ok': True, 'messages': [], 'has_more': False})
    client.conversations_replies = AsyncMock(return_value={'ok': True, 'messages': [], 'has_more': False})
    client.users_info = AsyncMock(return_value={'ok': True, 'user': {}})
    client.search_messages = AsyncMock(return_value={'ok': True, 'messages': {'total': 0, 'matches': []}})
    client.auth_test = AsyncMock(
        return_value={
            'ok': True,
            'user_id': 'U123456',
            'user': 'testuser',
            'team_id': 'T123456',
        }
    )
    return client
