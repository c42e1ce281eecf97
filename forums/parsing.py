"""
Forum Tools - Field Extraction Helpers

Small, independent extractors shared by the per-forum page parsers.
Each one takes a parsed element (or plain text) and returns a value or a
default; none of them raise.
"""

import re
from datetime import datetime, timezone, tzinfo
from typing import Optional, Pattern, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from bs4.element import Tag

from forums.html_blocks import node_text

# Spanish short month names, as the forums display them
SPANISH_MONTHS = [
    "ene", "feb", "mar", "abr", "may", "jun",
    "jul", "ago", "sept", "oct", "nov", "dic",
]

# Both forums are Spanish; dates render in peninsular time
FORUM_TIMEZONE = "Europe/Madrid"

UNIX_SECONDS = re.compile(r"^\d+$")

# Tried in order: full date + time, relative day + time, long-form date
INLINE_DATE_PATTERNS = [
    re.compile(r"(\d{1,2}-\w{3,4}-\d{4}),?\s*(\d{1,2}:\d{2})", re.IGNORECASE),
    re.compile(r"\b(Hoy|Ayer|Today|Yesterday),?\s*(\d{1,2}:\d{2})", re.IGNORECASE),
    re.compile(r"(\d{1,2}\s+\w+\s+\d{4})", re.IGNORECASE),
]


def first_match(text: str, patterns: Sequence[Pattern[str]]) -> Optional["re.Match[str]"]:
    """Return the match of the first pattern that matches, or None."""
    if not text:
        return None
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def first_group(text: str, patterns: Sequence[Pattern[str]], default: str = "") -> str:
    """Group 1 of the first matching pattern, stripped, or ``default``."""
    match = first_match(text, patterns)
    if match is None or match.group(1) is None:
        return default
    value = match.group(1).strip()
    return value or default


def parse_int(value: Optional[str], default: int = 0) -> int:
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def get_forum_timezone() -> tzinfo:
    """The forums' display timezone (UTC if the tz database is unavailable)."""
    try:
        return ZoneInfo(FORUM_TIMEZONE)
    except ZoneInfoNotFoundError:
        return timezone.utc


def format_unix_date(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """
    Render a unix timestamp the way the forum shows it: "9 feb 2026".

    Args:
        timestamp: Seconds since the epoch
        tz: Display timezone (forum timezone if not given)
    """
    try:
        moment = datetime.fromtimestamp(timestamp, tz or get_forum_timezone())
    except (OverflowError, OSError, ValueError):
        return ""
    return f"{moment.day} {SPANISH_MONTHS[moment.month - 1]} {moment.year}"


def extract_post_date(node: Optional[Tag], tz: Optional[tzinfo] = None) -> str:
    """
    Find a post's date inside a parsed element.

    A ``data-time`` unix timestamp (on ``node`` or a descendant) wins when
    present. Otherwise the element's text is tried against the inline
    patterns in order ("09-feb-2026, 11:26", "Ayer, 20:06",
    "9 febrero 2026"). Returns "" if nothing matches.

    Pass the narrowest element that holds the date (the post header),
    since post bodies can mention dates too.
    """
    if node is None:
        return ""

    stamped = node if node.get("data-time") else node.find(attrs={"data-time": UNIX_SECONDS})
    if stamped is not None:
        seconds = stamped.get("data-time", "")
        if UNIX_SECONDS.match(seconds):
            date = format_unix_date(int(seconds), tz)
            if date:
                return date

    match = first_match(node_text(node), INLINE_DATE_PATTERNS)
    return match.group(0).strip() if match else ""


def clean_title(raw: Optional[str], suffix_pattern: Optional[Pattern[str]] = None) -> str:
    """
    Collapse a page title's whitespace and drop the site-name suffix.

    Returns:
        Plain (unsanitized) title text, or "" if there was none
    """
    if not raw:
        return ""
    title = " ".join(raw.split())
    if suffix_pattern is not None:
        title = suffix_pattern.sub("", title).strip()
    return title


def truncate(text: str, max_chars: int) -> str:
    """Cut text to ``max_chars`` with an ellipsis when it overflows."""
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "..."
