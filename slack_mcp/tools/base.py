"""Base tool classes and registry."""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from slack_mcp.errors import ArgumentError, ErrorKind, SlackToolError
from slack_mcp.formatting.patterns import collect_mentions
from slack_mcp.formatting.resolver import UserResolver
from slack_mcp.models import Message, SearchMatch, UserInfo
from slack_mcp.slack.ports import SlackPort


logger = logging.getLogger(__name__)


class ToolError(Exception):
    """Fatal tool failure; the message is shown to the caller as-is."""


class BaseTool(ABC):
    """Abstract base class for MCP tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool identifier used by the MCP client."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Description shown to the agent."""

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for tool input parameters."""

    @abstractmethod
    async def execute(self, **kwargs: Any) -> str:
        """Execute the tool with given parameters.

        Args:
            **kwargs: Raw tool arguments.

        Returns:
            Serialized tool result.

        Raises:
            ToolError: With an operator-facing message on fatal failures.
        """

    def to_dict(self) -> dict[str, Any]:
        """Convert tool to a name/description/input_schema dict."""
        return {
            'name': self.name,
            'description': self.description,
            'input_schema': self.input_schema,
        }


class SlackTool(BaseTool):
    """Shared enrichment and error rendering for the Slack read tools.

    Enrichment steps (author names, mention mapping, current user) never fail
    the call; a failed lookup only leaves the corresponding field unset.
    """

    # Verb phrase used in "Failed to <action>: ..." messages.
    action: ClassVar[str] = 'call Slack'
    # Per-tool replacements for ErrorKind.remediation.
    error_messages: ClassVar[dict[ErrorKind, str]] = {}

    def __init__(self, client: SlackPort, resolver: UserResolver):
        self._client = client
        self._resolver = resolver

    async def _resolve_author(self, item: Message | SearchMatch) -> None:
        """Attach the author's names to a message or match, if resolvable."""
        if not item.user:
            return
        try:
            user_info = await self._resolver.resolve(item.user)
        except SlackToolError as e:
            logger.warning(f'Could not resolve author {item.user}: {e.detail}')
            return
        if user_info is not None:
            item.apply_user(user_info)

    async def _build_user_mapping(self, texts: list[str | None]) -> dict[str, UserInfo] | None:
        """Resolve every user mentioned in ``texts``.

        Returns:
            Mapping of user ID to UserInfo, or None if nothing was resolved.
        """
        mapping: dict[str, UserInfo] = {}
        for user_id in collect_mentions(texts):
            try:
                user_info = await self._resolver.resolve(user_id)
            except SlackToolError as e:
                logger.warning(f'Could not resolve mentioned user {user_id}: {e.detail}')
                continue
            if user_info is not None:
                mapping[user_id] = user_info
        return mapping or None

    async def _current_user(self) -> UserInfo | None:
        try:
            return await self._resolver.current_user()
        except SlackToolError as e:
            logger.warning(f'Could not resolve current user: {e.detail}')
            return None

    def render_error(self, error: SlackToolError | ArgumentError) -> str:
        """Build the operator-facing message for a fatal error."""
        if isinstance(error, ArgumentError):
            return str(error)
        if error.kind is ErrorKind.INVALID_URL:
            return f'{error.kind.remediation}\n\nDetails: {error.detail}'
        if error.kind is ErrorKind.UNCLASSIFIED:
            return f'Failed to {self.action}: {error.detail}'
        return self.error_messages.get(error.kind, error.kind.remediation)

    def fail(self, error: SlackToolError | ArgumentError) -> ToolError:
        """Log a fatal error and convert it to a ToolError."""
        message = self.render_error(error)
        if isinstance(error, SlackToolError):
            logger.warning(f'{self.name} failed ({error.kind.code}): {error.detail}')
        else:
            logger.info(f'{self.name} rejected arguments: {error}')
        return ToolError(message)


class ToolRegistry:
    """Registry for managing available tools."""

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register.
        """
        self._tools[tool.name] = tool
        logger.debug(f'Registered tool: {tool.name}')

    def get(self, name: str) -> BaseTool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def get_tool_definitions(self) -> list[dict[str, Any]]:
        """Get tool definitions for the MCP tools/list response."""
        return [tool.to_dict() for tool in self._tools.values()]

    async def execute(self, name: str, **kwargs: Any) -> str:
        """Execute a tool by name.

        Args:
            name: Tool name.
            **kwargs: Tool parameters.

        Returns:
            Tool execution result.

        Raises:
            ToolError: If the tool is unknown or fails.
        """
        tool = self.get(name)
        if not tool:
            raise ToolError(f'Unknown tool: {name}')

        logger.debug(f'Executing tool: {name}')
        return await tool.execute(**kwargs)
