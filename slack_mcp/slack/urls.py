"""Parsing of Slack message permalinks.

Supported shapes:
    https://{workspace}.slack.com/archives/{channel_id}/p{16 digits}
    ...same with ?thread_ts={ts}[&cid={channel_id}]
    ...same with any other query parameters or a #fragment (ignored)
"""

import re
import urllib.parse

from slack_mcp.errors import ErrorKind, SlackToolError
from slack_mcp.models import MessageCoordinate


DEFAULT_DOMAIN_SUFFIX = '.slack.com'
URL_TIMESTAMP_DIGITS = 16
# Seconds part of a Slack ts; the remaining 6 digits are microseconds.
SECONDS_DIGITS = 10

_PATH_PATTERN = re.compile(r'/archives/([A-Z0-9]+)/p(\d+)')
_API_TIMESTAMP = re.compile(r'\d{10}\.\d{6}')

EXPECTED_FORMAT = 'https://workspace.slack.com/archives/{channel_id}/p{timestamp}'


def _invalid(message: str) -> SlackToolError:
    return SlackToolError(ErrorKind.INVALID_URL, message)


def convert_timestamp(url_timestamp: str) -> str:
    """Convert the digits of a URL path timestamp to Slack API form.

    ``1355517523000008`` becomes ``1355517523.000008``.

    Raises:
        SlackToolError: INVALID_URL if not exactly 16 ASCII digits.
    """
    if len(url_timestamp) != URL_TIMESTAMP_DIGITS:
        raise _invalid(
            f'invalid timestamp format: expected {URL_TIMESTAMP_DIGITS} digits, got {len(url_timestamp)}'
        )
    if not (url_timestamp.isascii() and url_timestamp.isdigit()):
        raise _invalid('invalid timestamp format: contains non-digit characters')
    return f'{url_timestamp[:SECONDS_DIGITS]}.{url_timestamp[SECONDS_DIGITS:]}'


def format_url_timestamp(api_timestamp: str) -> str:
    """Inverse of convert_timestamp: ``1355517523.000008`` -> ``1355517523000008``."""
    return api_timestamp.replace('.', '')


def _base_pattern(domain_suffix: str) -> re.Pattern:
    return re.compile(r'https://[^/]+' + re.escape(domain_suffix) + _PATH_PATTERN.pattern)


def parse_message_url(
    url: str,
    *,
    domain_suffix: str = DEFAULT_DOMAIN_SUFFIX,
    strict_thread_ts: bool = False,
) -> MessageCoordinate:
    """Parse a Slack message URL into a MessageCoordinate.

    Args:
        url: Slack message or thread permalink.
        domain_suffix: Host suffix the URL must end with.
        strict_thread_ts: If True, ``thread_ts`` must look like ``1234567890.123456``.
            Otherwise it is passed through verbatim.

    Returns:
        MessageCoordinate with channel ID, API timestamp and optional thread anchor.

    Raises:
        SlackToolError: INVALID_URL for anything outside the supported grammar.
    """
    if not url:
        raise _invalid('URL cannot be empty')

    try:
        parsed = urllib.parse.urlsplit(url)
    except ValueError as e:
        raise _invalid(f'failed to parse URL: {e}') from e

    if not parsed.netloc.endswith(domain_suffix):
        raise _invalid(f'URL must be a {domain_suffix.lstrip(".")} URL')

    # Query and fragment are not part of the grammar
    base_url = f'{parsed.scheme}://{parsed.netloc}{parsed.path}'
    match = _base_pattern(domain_suffix).fullmatch(base_url)
    if not match:
        raise _invalid(f'invalid Slack message URL format. Expected: {EXPECTED_FORMAT}')

    channel_id, raw_timestamp = match.groups()
    timestamp = convert_timestamp(raw_timestamp)

    query = urllib.parse.parse_qs(parsed.query)
    thread_ts = query.get('thread_ts', [''])[0]
    if not thread_ts:
        return MessageCoordinate(channel_id=channel_id, timestamp=timestamp)

    if strict_thread_ts and not _API_TIMESTAMP.fullmatch(thread_ts):
        raise _invalid(f'invalid thread_ts {thread_ts!r}: expected format 1234567890.123456')

    return MessageCoordinate(channel_id=channel_id, timestamp=timestamp, thread_ts=thread_ts, is_thread=True)


def is_valid_slack_url(url: str, domain_suffix: str = DEFAULT_DOMAIN_SUFFIX) -> bool:
    """Quick check whether a URL looks like a Slack message URL."""
    if not url:
        return False
    try:
        parsed = urllib.parse.urlsplit(url)
    except ValueError:
        return False
    if not parsed.netloc.endswith(domain_suffix):
        return False
    base_url = f'{parsed.scheme}://{parsed.netloc}{parsed.path}'
    return _base_pattern(domain_suffix).fullmatch(base_url) is not None
