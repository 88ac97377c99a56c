"""Mention extraction and user identity resolution."""

from slack_mcp.formatting.patterns import collect_mentions, extract_mentions
from slack_mcp.formatting.resolver import TTLCache, UserResolver


__all__ = [
    'TTLCache',
    'UserResolver',
    'collect_mentions',
    'extract_mentions',
]
