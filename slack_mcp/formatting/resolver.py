"""User identity resolution with caching."""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from slack_mcp.errors import UserNotFoundError
from slack_mcp.models import UserInfo
from slack_mcp.slack.ports import UserDirectory


logger = logging.getLogger(__name__)

K = TypeVar('K')
V = TypeVar('V')

DELETED_USER_NAME = 'deleted_user'
DELETED_USER_DISPLAY_NAME = 'Deleted User'


@dataclass
class _CacheEntry(Generic[V]):
    """Internal cache entry with expiration."""

    value: V
    expires_at: float


class TTLCache(Generic[K, V]):
    """Bounded, thread-safe cache whose entries expire after a fixed TTL.

    Expired entries count as misses and are dropped on access. When full, the
    oldest inserted entry is evicted. Writes for an existing key overwrite it.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_size: int = 5000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[K, _CacheEntry[V]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: K) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: K, value: V) -> None:
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = _CacheEntry(value=value, expires_at=self._clock() + self.ttl_seconds)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def deleted_user(user_id: str) -> UserInfo:
    """Placeholder identity for users Slack no longer knows about."""
    return UserInfo(
        id=user_id,
        name=DELETED_USER_NAME,
        display_name=DELETED_USER_DISPLAY_NAME,
        real_name=DELETED_USER_DISPLAY_NAME,
        is_bot=False,
        is_deleted=True,
    )


class UserResolver:
    """Resolves Slack user IDs to UserInfo, caching results.

    One instance is shared by all tools for the life of the process.

    Usage:
        resolver = UserResolver(client)
        user = await resolver.resolve('U123ABC')
    """

    def __init__(self, directory: UserDirectory, cache: TTLCache[str, UserInfo] | None = None):
        self._directory = directory
        self._cache: TTLCache[str, UserInfo] = cache if cache is not None else TTLCache()

    @property
    def cache(self) -> TTLCache[str, UserInfo]:
        return self._cache

    async def resolve(self, user_id: str) -> UserInfo | None:
        """Resolve a user ID.

        Args:
            user_id: Slack user ID.

        Returns:
            None for an empty ID, otherwise the cached, fetched or deleted-user identity.

        Raises:
            SlackToolError: On transport or auth failures (nothing is cached).
        """
        if not user_id:
            return None

        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        try:
            user_info = await self._directory.get_user_info(user_id)
        except UserNotFoundError:
            logger.debug(f'User {user_id} not found, caching deleted-user placeholder')
            user_info = deleted_user(user_id)

        self._cache.set(user_id, user_info)
        return user_info

    async def current_user(self) -> UserInfo | None:
        """Resolve the identity the token authenticates as.

        Raises:
            SlackToolError: If auth.test or the user lookup fails.
        """
        user_id = await self._directory.get_current_user_id()
        return await self.resolve(user_id)
