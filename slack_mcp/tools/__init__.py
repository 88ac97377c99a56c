"""MCP tools for reading Slack messages."""

from slack_mcp.tools.base import BaseTool, SlackTool, ToolError, ToolRegistry
from slack_mcp.tools.list_channel_messages import ListChannelMessagesTool
from slack_mcp.tools.read_message import ReadMessageTool
from slack_mcp.tools.search_messages import SearchMessagesTool


__all__ = [
    'BaseTool',
    'ListChannelMessagesTool',
    'ReadMessageTool',
    'SearchMessagesTool',
    'SlackTool',
    'ToolError',
    'ToolRegistry',
]
