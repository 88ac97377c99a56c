"""MCP stdio server entrypoint."""

import argparse
import asyncio
import logging
import sys
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import ValidationError

from slack_mcp import __version__
from slack_mcp.config import ConfigError, Settings, get_config
from slack_mcp.formatting.resolver import TTLCache, UserResolver
from slack_mcp.slack.client import SlackClient
from slack_mcp.slack.ports import SlackPort
from slack_mcp.tools import ListChannelMessagesTool, ReadMessageTool, SearchMessagesTool, ToolRegistry


logger = logging.getLogger(__name__)

SERVER_NAME = 'slack-mcp'

USAGE = """Slack MCP Server

An MCP (Model Context Protocol) server that lets AI agents read Slack
messages, threads and search results.

ENVIRONMENT VARIABLES:
    SLACK_BOT_TOKEN    Required. Bot token (xoxb-...).
    SLACK_USER_TOKEN   Optional. User token (xoxp-...) with search:read,
                       required for search_messages.
    SLACK_WORKSPACE_DOMAIN, SLACK_USER_CACHE_TTL_SECONDS,
    SLACK_USER_CACHE_MAX_SIZE, SLACK_STRICT_THREAD_TS, LOG_LEVEL

REQUIRED SLACK SCOPES:
    channels:history, groups:history, im:history, mpim:history, users:read

MCP TOOLS:
    read_message            Read a message and its thread by URL.
    list_channel_messages   List recent messages in a channel.
    search_messages         Search messages across the workspace.
"""


def build_registry(client: SlackPort, settings: Settings) -> ToolRegistry:
    """Create the tools around one shared user resolver.

    Args:
        client: Slack port implementation.
        settings: Server settings.

    Returns:
        ToolRegistry with all tools registered.
    """
    cache: TTLCache = TTLCache(
        ttl_seconds=settings.user_cache_ttl_seconds,
        max_size=settings.user_cache_max_size,
    )
    resolver = UserResolver(client, cache)

    registry = ToolRegistry()
    registry.register(
        ReadMessageTool(
            client,
            resolver,
            domain_suffix=settings.workspace_domain,
            strict_thread_ts=settings.strict_thread_ts,
        )
    )
    registry.register(ListChannelMessagesTool(client, resolver))
    registry.register(SearchMessagesTool(client, resolver))
    return registry


def build_server(registry: ToolRegistry) -> Server:
    """Expose a tool registry over MCP."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=tool['name'], description=tool['description'], inputSchema=tool['input_schema'])
            for tool in registry.get_tool_definitions()
        ]

    # Arguments are validated by the tools themselves (clamping, sort fallback)
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        text = await registry.execute(name, **(arguments or {}))
        return [types.TextContent(type='text', text=text)]

    return server


async def serve(server: Server) -> None:
    """Run the server over stdio until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='slack-mcp-server',
        description=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-v', '--version', action='version', version=f'slack-mcp-server version {__version__}')
    parser.add_argument('--log-level', help='Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)')
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Console entrypoint."""
    args = parse_args(argv)

    try:
        settings = get_config()
    except ValidationError as e:
        print(f'Error: invalid configuration\n\n{e}', file=sys.stderr)
        return 1

    # stdout carries the MCP protocol
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        stream=sys.stderr,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        settings.validate_tokens()
    except ConfigError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    client = SlackClient(settings.slack_bot_token, settings.slack_user_token)
    server = build_server(build_registry(client, settings))
    if not settings.slack_user_token:
        logger.info('SLACK_USER_TOKEN not set; search_messages will be unavailable')

    logger.info(f'Starting {SERVER_NAME} {__version__} on stdio')
    asyncio.run(serve(server))
    return 0


if __name__ == '__main__':
    sys.exit(main())
