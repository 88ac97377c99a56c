"""Typed tool requests built from raw MCP argument maps.

All argument validation happens here, before any Slack call. Numeric
arguments outside their range are clamped, not rejected.
"""

import math
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict

from slack_mcp.errors import ArgumentError


_MISSING = object()


def _required_string(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key, _MISSING)
    if value is _MISSING or value is None:
        raise ArgumentError(key, f"missing required argument '{key}'")
    if not isinstance(value, str):
        raise ArgumentError(key, f"argument '{key}' must be a string")
    if not value:
        raise ArgumentError(key, f"argument '{key}' cannot be empty")
    return value


def _optional_string(arguments: dict[str, Any], key: str, hint: str = '') -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ArgumentError(key, f"argument '{key}' must be a string{hint}")
    return value or None


def _clamped_int(arguments: dict[str, Any], key: str, default: int, low: int, high: int) -> int:
    value = arguments.get(key)
    if value is None:
        return default
    # bool is an int subclass but not a meaningful count
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ArgumentError(key, f"argument '{key}' must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ArgumentError(key, f"argument '{key}' must be a finite number")
    return max(low, min(high, int(value)))


class ReadMessageRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> 'ReadMessageRequest':
        return cls(url=_required_string(arguments, 'url'))


class ListChannelMessagesRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    DEFAULT_LIMIT: ClassVar[int] = 100
    MIN_LIMIT: ClassVar[int] = 1
    MAX_LIMIT: ClassVar[int] = 200

    channel_id: str
    limit: int = DEFAULT_LIMIT
    oldest: str | None = None
    latest: str | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> 'ListChannelMessagesRequest':
        return cls(
            channel_id=_required_string(arguments, 'channel_id'),
            limit=_clamped_int(arguments, 'limit', cls.DEFAULT_LIMIT, cls.MIN_LIMIT, cls.MAX_LIMIT),
            oldest=_optional_string(arguments, 'oldest', ' (Unix timestamp)'),
            latest=_optional_string(arguments, 'latest', ' (Unix timestamp)'),
        )


SortOrder = Literal['score', 'timestamp']


class SearchMessagesRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    DEFAULT_COUNT: ClassVar[int] = 20
    MIN_COUNT: ClassVar[int] = 1
    MAX_COUNT: ClassVar[int] = 100
    SORT_ORDERS: ClassVar[tuple[str, ...]] = ('score', 'timestamp')

    query: str
    count: int = DEFAULT_COUNT
    sort: SortOrder = 'score'

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> 'SearchMessagesRequest':
        sort = arguments.get('sort')
        return cls(
            query=_required_string(arguments, 'query'),
            count=_clamped_int(arguments, 'count', cls.DEFAULT_COUNT, cls.MIN_COUNT, cls.MAX_COUNT),
            # Unknown sort values fall back to relevance without an error
            sort=sort if sort in cls.SORT_ORDERS else 'score',
        )
