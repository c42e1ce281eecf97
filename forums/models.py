"""
Forum Tools - Forum Data Models
Value objects produced by the parsers and the fetch orchestrator.

All text fields that come from the forum (authors, titles, content,
quotes, previews) are sanitized by the parser before one of these
objects is built. Nothing downstream sanitizes again.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ForumPost:
    """A single post within a thread page."""
    id: str                 # Forum-assigned numeric post ID
    author: str             # Sanitized display name ("Unknown" if missing)
    author_id: str          # Numeric member ID ("0" if missing)
    date: str               # Forum-local display string, not normalized
    content: str            # Sanitized reply text, quotes removed
    quotes: List[str] = field(default_factory=list)  # Sanitized "@author: text" entries
    likes: int = 0
    page_number: int = 1


@dataclass
class ParsedPage:
    """Result of parsing one thread page."""
    posts: List[ForumPost]
    total_pages: int
    title: str


@dataclass
class ForumThread:
    """A thread assembled from one or more fetched pages."""
    id: str
    title: str
    url: str
    total_pages: int        # Pages actually fetched (clamped by max_pages)
    posts: List[ForumPost] = field(default_factory=list)

    @property
    def post_count(self) -> int:
        return len(self.posts)


@dataclass
class ForumQuote:
    """An entry from a profile's quotes/mentions page."""
    post_id: str
    author: str
    date: str
    time: str
    thread_title: str
    thread_url: str
    preview: str = ""


@dataclass
class QuoteCheck:
    """
    Outcome of one quote check against a profile URL.

    Attributes:
        quotes: All quotes on the page, newest first
        new_count: Leading quotes newer than the stored cursor
        last_seen_id: Cursor value before this check (None on first check)
        first_check: True when no cursor existed, so this call only
                     established the baseline
    """
    quotes: List[ForumQuote]
    new_count: int
    last_seen_id: Optional[str]
    first_check: bool = False


@dataclass
class ThreadSearchResult:
    """A thread link found on a search results page."""
    id: str
    title: str
    url: str


@dataclass
class SubmitResult:
    """Outcome of posting a reply or editing a post."""
    success: bool
    post_url: Optional[str] = None
    error: Optional[str] = None
