"""
Forum Tools - Thread Fetch Orchestrator

Walks a thread page by page and assembles one ForumThread.

Pages are fetched strictly one after another with a fixed pause in
between. If any page fails, the whole fetch fails: a thread is never
returned with pages missing.
"""

import asyncio
from typing import Awaitable, Callable, List

from core.logger import log_info
from forums import mediavida
from forums.models import ForumPost, ForumThread, ParsedPage, ThreadSearchResult
from forums.registry import ForumParser

# Async page source: URL in, page HTML out. In production this is
# ForumBrowser.fetch_html; tests pass a fake.
PageSource = Callable[[str], Awaitable[str]]


class ThreadFetcher:
    """Fetches and parses thread pages for one forum."""

    def __init__(self, parser: ForumParser, fetch_html: PageSource, page_delay: float = 0.5):
        """
        Initialize the fetcher.

        Args:
            parser: The forum's parsing and URL capabilities
            fetch_html: Async page source
            page_delay: Seconds to wait between consecutive page fetches
        """
        self._parser = parser
        self._fetch_html = fetch_html
        self._page_delay = page_delay

    @property
    def parser(self) -> ForumParser:
        return self._parser

    async def get_thread_page(self, url: str, page: int = 1) -> ParsedPage:
        """Fetch and parse a single page of a thread."""
        page = max(1, page)
        html = await self._fetch_html(self._parser.build_page_url(url, page))
        return self._parser.parse_page(html, page)

    async def get_thread(self, url: str, max_pages: int = 10) -> ForumThread:
        """
        Fetch up to ``max_pages`` pages of a thread.

        Page 1 decides the page count: pages 2..min(total, max_pages) follow
        sequentially. The returned ``total_pages`` is that clamped count.

        Raises:
            ForumFetchError / SessionError: from the page source, on any page
        """
        first = await self.get_thread_page(url, 1)
        pages_to_fetch = max(1, min(first.total_pages, max_pages))

        posts: List[ForumPost] = list(first.posts)
        for page in range(2, pages_to_fetch + 1):
            await asyncio.sleep(self._page_delay)
            parsed = await self.get_thread_page(url, page)
            posts.extend(parsed.posts)

        thread = ForumThread(
            id=self._parser.extract_thread_id(url),
            title=first.title,
            url=url,
            total_pages=pages_to_fetch,
            posts=posts,
        )
        log_info(
            f"Fetched {self._parser.name} thread {thread.id}: "
            f"{thread.post_count} posts from {pages_to_fetch}/{first.total_pages} pages",
            prefix="🧵"
        )
        return thread


async def search_threads(
    fetch_html: PageSource,
    subforum: str,
    query: str,
    base_url: str = mediavida.BASE_URL
) -> List[ThreadSearchResult]:
    """Search a Mediavida subforum and return the matching threads."""
    html = await fetch_html(mediavida.build_search_url(subforum, query, base_url))
    results = mediavida.parse_search_results(html, base_url)
    log_info(f"Search '{query}' in {subforum}: {len(results)} threads", prefix="🔍")
    return results
