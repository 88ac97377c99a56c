"""Slack message markup patterns and mention extraction."""

import re


# Only the bare <@U...> form. Labelled mentions (<@U1|name>), W-prefixed ids,
# channel links and special mentions (<!here>) are not collected.
USER_MENTION = re.compile(r'<@(U[A-Z0-9]+)>')


def extract_mentions(text: str | None) -> list[str]:
    """Extract mentioned user IDs from message text.

    Args:
        text: Raw Slack message text with markup.

    Returns:
        Unique user IDs in order of first occurrence; empty if none.
    """
    if not text:
        return []

    # dict preserves insertion order
    seen: dict[str, None] = {}
    for match in USER_MENTION.finditer(text):
        seen.setdefault(match.group(1), None)
    return list(seen)


def collect_mentions(texts: list[str | None]) -> list[str]:
    """Extract mentions across several texts, deduplicated in first-occurrence order."""
    seen: dict[str, None] = {}
    for text in texts:
        for user_id in extract_mentions(text):
            seen.setdefault(user_id, None)
    return list(seen)
