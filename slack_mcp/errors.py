"""Error taxonomy for Slack API failures.

Slack reports failures as free text (``SlackApiError`` carries the ``error`` field
inside its string form), so classification is keyword matching. It is kept in this
one module so a change in the upstream error surface only touches ``classify_error``.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds surfaced to the tool caller."""

    INVALID_URL = 'invalid_url'
    MESSAGE_NOT_FOUND = 'message_not_found'
    CHANNEL_NOT_FOUND = 'channel_not_found'
    NOT_IN_CHANNEL = 'not_in_channel'
    RATE_LIMITED = 'rate_limited'
    INVALID_TOKEN = 'invalid_token'
    PERMISSION_DENIED = 'permission_denied'
    USER_TOKEN_NOT_CONFIGURED = 'user_token_not_configured'
    UNCLASSIFIED = 'slack_error'

    @property
    def code(self) -> str:
        """Stable machine-readable code."""
        return self.value

    @property
    def remediation(self) -> str:
        """Default operator-facing guidance for this kind."""
        return _REMEDIATIONS[self]


_REMEDIATIONS: dict[ErrorKind, str] = {
    ErrorKind.INVALID_URL: (
        'Invalid Slack URL format. Expected: https://workspace.slack.com/archives/{channel_id}/p{timestamp}'
    ),
    ErrorKind.MESSAGE_NOT_FOUND: (
        'Message not found. The message may have been deleted, or the timestamp in the URL is incorrect.'
    ),
    ErrorKind.CHANNEL_NOT_FOUND: (
        'Channel not found. The channel may have been deleted, or the ID in the URL is incorrect.'
    ),
    ErrorKind.NOT_IN_CHANNEL: (
        'The bot is not a member of this channel. Please invite the bot to the channel first.'
    ),
    ErrorKind.RATE_LIMITED: (
        'Rate limit exceeded. Slack limits API requests to approximately 1 per minute '
        'for non-marketplace apps. Please wait and try again.'
    ),
    ErrorKind.INVALID_TOKEN: 'Authentication failed. Please check that SLACK_BOT_TOKEN is valid and not expired.',
    ErrorKind.PERMISSION_DENIED: (
        'Permission denied. The bot may lack required scopes or the channel is archived.'
    ),
    ErrorKind.USER_TOKEN_NOT_CONFIGURED: (
        'SLACK_USER_TOKEN not configured. The search_messages tool requires a user token (xoxp-) '
        'with the search:read scope. Please set the SLACK_USER_TOKEN environment variable.'
    ),
    ErrorKind.UNCLASSIFIED: 'Slack API error.',
}


class SlackToolError(Exception):
    """A classified failure from URL parsing or the Slack API.

    Attributes:
        kind: Taxonomy entry.
        detail: Underlying error text (raw Slack text for UNCLASSIFIED).
    """

    def __init__(self, kind: ErrorKind, detail: str | None = None):
        self.kind = kind
        self.detail = detail or kind.remediation
        super().__init__(self.detail)

    def __repr__(self) -> str:
        return f'SlackToolError({self.kind.name}, {self.detail!r})'


class UserNotFoundError(Exception):
    """Raised by the directory port when Slack has no such user."""

    def __init__(self, user_id: str):
        super().__init__(f'user not found: {user_id}')
        self.user_id = user_id


class ArgumentError(ValueError):
    """Invalid or missing tool argument."""

    def __init__(self, argument: str, message: str):
        super().__init__(message)
        self.argument = argument


# Ordered: first matching rule wins.
_RULES: list[tuple[tuple[str, ...], ErrorKind, str]] = [
    (
        ('rate_limit', 'ratelimited'),
        ErrorKind.RATE_LIMITED,
        'Slack API rate limit exceeded. Please wait and try again.',
    ),
    (
        ('invalid_auth', 'not_authed', 'account_inactive', 'token_revoked'),
        ErrorKind.INVALID_TOKEN,
        'Invalid or expired Slack token.',
    ),
    (
        ('missing_scope', 'token_expired'),
        ErrorKind.INVALID_TOKEN,
        'Slack token lacks required scopes or has expired.',
    ),
    (
        ('channel_not_found',),
        ErrorKind.CHANNEL_NOT_FOUND,
        'Channel not found. The channel may have been deleted or the ID is incorrect.',
    ),
    (
        ('not_in_channel',),
        ErrorKind.NOT_IN_CHANNEL,
        'Bot is not a member of this channel. Please invite the bot to the channel.',
    ),
    (
        ('access_denied', 'is_archived'),
        ErrorKind.PERMISSION_DENIED,
        'Access denied. The channel may be archived or the bot lacks permissions.',
    ),
    (
        ('message_not_found', 'thread_not_found'),
        ErrorKind.MESSAGE_NOT_FOUND,
        'Message or thread not found.',
    ),
]


def classify_error(error: BaseException | str) -> SlackToolError:
    """Map a transport failure into the error taxonomy.

    Args:
        error: ``SlackApiError``, any other exception, or raw error text.

    Returns:
        SlackToolError. Already-classified errors are returned unchanged.
    """
    if isinstance(error, SlackToolError):
        return error

    text = str(error)
    for keywords, kind, detail in _RULES:
        if any(keyword in text for keyword in keywords):
            return SlackToolError(kind, detail)

    return SlackToolError(ErrorKind.UNCLASSIFIED, text)
