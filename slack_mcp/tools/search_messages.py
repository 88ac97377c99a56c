"""Tool for searching Slack messages."""

from typing import Any

from slack_mcp.errors import ArgumentError, ErrorKind, SlackToolError
from slack_mcp.models import SearchMessagesResult
from slack_mcp.tools.base import SlackTool
from slack_mcp.tools.requests import SearchMessagesRequest


class SearchMessagesTool(SlackTool):
    """Full-text search over the workspace. Needs SLACK_USER_TOKEN."""

    action = 'search messages'
    error_messages = {
        ErrorKind.RATE_LIMITED: 'Rate limit exceeded. Slack limits API requests. Please wait and try again.',
        ErrorKind.INVALID_TOKEN: (
            'Authentication failed. Please check that SLACK_USER_TOKEN is valid and not expired.'
        ),
        ErrorKind.PERMISSION_DENIED: 'Permission denied. The user token may lack the search:read scope.',
    }

    @property
    def name(self) -> str:
        return 'search_messages'

    @property
    def description(self) -> str:
        return """Search for Slack messages matching a query.
Supports Slack search modifiers (in:#channel, from:@user, before:, after:).
Returns the total match count and one page of matches with permalinks.
Requires SLACK_USER_TOKEN with the search:read scope."""

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            'type': 'object',
            'properties': {
                'query': {
                    'type': 'string',
                    'description': 'Search query text',
                },
                'count': {
                    'type': 'number',
                    'description': 'Number of matches to return (1-100, default: 20)',
                    'default': SearchMessagesRequest.DEFAULT_COUNT,
                },
                'sort': {
                    'type': 'string',
                    'description': "Sort order: 'score' (relevance, default) or 'timestamp'",
                    'default': 'score',
                },
            },
            'required': ['query'],
        }

    async def execute(self, **kwargs: Any) -> str:
        """Search messages.

        Returns:
            SearchMessagesResult JSON.
        """
        try:
            request = SearchMessagesRequest.from_arguments(kwargs)
            matches, total = await self._client.search_messages(request.query, request.count, request.sort)
        except (ArgumentError, SlackToolError) as e:
            raise self.fail(e) from e

        for match in matches:
            await self._resolve_author(match)

        result = SearchMessagesResult(query=request.query, total=total, matches=matches)
        result.current_user = await self._current_user()
        return result.to_json()
