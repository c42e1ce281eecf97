"""
Forum Tools - Quote Tracker

Checks a profile's "quotes" page and reports which quotes are new since
the last check.

State is one cursor per profile URL: the post ID of the newest quote
seen so far, persisted as a JSON object in a small file:

    {"https://forocoches.com/foro/member.php?u=1&tab=quotes": "901234567"}

Cursors are never deleted here. Removing the file resets every profile.
"""

import asyncio
import json
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional

from core.logger import log_info, log_warning
from forums import forocoches
from forums.models import ForumQuote, QuoteCheck
from forums.orchestrator import PageSource


class QuoteCursorStore:
    """
    Last-seen quote ID per profile URL, backed by a JSON file.

    Every read goes to disk so separate processes see each other's
    updates. Writes replace the whole file.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = Lock()

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log_warning(f"Quote cursor file unreadable, starting fresh: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items() if value is not None}

    def get(self, profile_url: str) -> Optional[str]:
        """Stored cursor for ``profile_url``, or None if it was never checked."""
        with self._lock:
            return self._read().get(profile_url)

    def set(self, profile_url: str, post_id: str) -> None:
        """Persist ``post_id`` as the cursor for ``profile_url``."""
        with self._lock:
            data = self._read()
            data[profile_url] = post_id
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self._path)


def is_seen(post_id: str, cursor: str) -> bool:
    """
    True if ``post_id`` is the cursor or older than it.

    Post IDs grow over time, so numeric IDs compare numerically. Anything
    else only matches on equality.
    """
    if post_id == cursor:
        return True
    if post_id.isdigit() and cursor.isdigit():
        return int(post_id) <= int(cursor)
    return False


def count_new(quotes: List[ForumQuote], cursor: str) -> int:
    """Number of leading (newest) quotes not yet seen."""
    count = 0
    for quote in quotes:
        if is_seen(quote.post_id, cursor):
            break
        count += 1
    return count


class QuoteTracker:
    """
    Fetches a profile's quotes page and classifies quotes as new or seen.

    The first check of a profile only records a baseline: it reports
    ``new_count == 0`` with ``first_check`` set, so callers can tell it
    apart from a later check that simply found nothing new.
    """

    def __init__(
        self,
        cursor_store: QuoteCursorStore,
        fetch_html: PageSource,
        base_url: str = forocoches.BASE_URL,
        preview_max_chars: int = 200,
    ):
        """
        Initialize the tracker.

        Args:
            cursor_store: Where cursors are read and written
            fetch_html: Async page source for the profile page
            base_url: Forum root used to absolutize thread links
            preview_max_chars: Preview length before truncation
        """
        self._cursors = cursor_store
        self._fetch_html = fetch_html
        self._base_url = base_url
        self._preview_max_chars = preview_max_chars
        self._url_locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, profile_url: str) -> asyncio.Lock:
        if profile_url not in self._url_locks:
            self._url_locks[profile_url] = asyncio.Lock()
        return self._url_locks[profile_url]

    async def get_quotes(self, profile_url: str) -> QuoteCheck:
        """
        Check ``profile_url`` for quotes and advance its cursor.

        Checks of the same URL never overlap: the fetch, compare and
        cursor write happen as one step per URL. Cursor file reads and
        writes run in a worker thread.
        """
        async with self._lock_for(profile_url):
            html = await self._fetch_html(profile_url)
            quotes = forocoches.parse_quotes_page(html, self._base_url, self._preview_max_chars)

            last_seen_id = await asyncio.to_thread(self._cursors.get, profile_url)
            first_check = last_seen_id is None
            new_count = 0 if first_check else count_new(quotes, last_seen_id)

            if quotes:
                await asyncio.to_thread(self._cursors.set, profile_url, quotes[0].post_id)

            log_info(
                f"Quote check: {len(quotes)} quotes, {new_count} new"
                + (" (baseline)" if first_check else ""),
                prefix="💬"
            )
            return QuoteCheck(
                quotes=quotes,
                new_count=new_count,
                last_seen_id=last_seen_id,
                first_check=first_check,
            )
