"""
Forum Tools - Mediavida Parser
Page parsing and URL handling for Mediavida.

Markup this relies on:
    - Posts: the element carrying ``id="post-ID"``
    - Author: ``data-autor="name"`` (or an ``autor`` class link)
    - Author ID: ``data-id="ID"`` (or a ``/id/ID`` profile link)
    - Date: ``data-time="<unix seconds>"``, in ``.post-meta`` when present
    - Body: ``<div class="post-contents">``, quotes nested as ``<blockquote>``
    - Likes: count inside the ``btnmola`` button
    - Pagination: ``<ul class="pg">`` with one link per page number

Thread URLs end with the thread ID (``/foro/dev/some-title-123456``);
further pages are ``.../some-title-123456/2``.
"""

import re
from datetime import tzinfo
from typing import List, Optional, Tuple
from urllib.parse import quote_plus, urlsplit, urlunsplit

from bs4.element import Tag

from forums.html_blocks import make_soup, node_text
from forums.models import ForumPost, ParsedPage, ThreadSearchResult
from forums.parsing import clean_title, extract_post_date, parse_int
from forums.sanitizer import sanitize_content

BASE_URL = "https://www.mediavida.com"

TITLE_SUFFIX_PATTERN = re.compile(r"\s*[|\-]\s*Mediavida\s*$", re.IGNORECASE)
POST_ID_PATTERN = re.compile(r"^post-(\d+)$")
PROFILE_ID_HREF = re.compile(r"/id/(\d+)")
DIGITS = re.compile(r"^\d+$")
QUOTE_AUTHOR_CLASS = re.compile(r"^(?:autor|quote-author)")
THREAD_PATH_PATTERN = re.compile(r"^/foro/[^/]+/[^/]+-(\d+)$")


# =============================================================================
# FIELD EXTRACTION
# =============================================================================

def extract_title(page: Tag) -> str:
    """Thread title from the ``thread-title`` heading or ``<title>``, sanitized."""
    title_tag = page.select_one("h1.thread-title") or page.find("title")
    title = clean_title(title_tag.get_text() if title_tag else "", TITLE_SUFFIX_PATTERN)
    return sanitize_content(title or "Unknown")


def extract_total_pages(page: Tag) -> int:
    """Highest page number in the ``ul.pg`` pagination control (1 if absent)."""
    pagination = page.select_one("ul.pg")
    if pagination is None:
        return 1

    numbers = [
        parse_int(item.get_text(strip=True))
        for item in pagination.find_all(["a", "em", "span"])
    ]
    return max(numbers + [1])


def split_posts(page: Tag) -> List[Tuple[str, Tag]]:
    """``(post_id, element)`` for every element whose id is ``post-N``, in page order."""
    posts = []
    for element in page.find_all(id=POST_ID_PATTERN):
        posts.append((POST_ID_PATTERN.match(element["id"]).group(1), element))
    return posts


def _own_author_link(post: Tag) -> Optional[Tag]:
    """First ``autor`` element of the post that is not inside a quote."""
    for link in post.select(".autor"):
        if link.find_parent("blockquote") is None:
            return link
    return None


def extract_author(post: Tag) -> str:
    author = post.get("data-autor") or node_text(_own_author_link(post))
    return sanitize_content(" ".join(author.split()) or "Unknown")


def extract_author_id(post: Tag) -> str:
    author_id = post.get("data-id", "")
    if DIGITS.match(author_id):
        return author_id

    profile_link = post.find("a", href=PROFILE_ID_HREF)
    if profile_link is not None:
        return PROFILE_ID_HREF.search(profile_link["href"]).group(1)
    return "0"


def extract_likes(post: Tag) -> int:
    button = post.select_one(".btnmola")
    counter = button.find("span") if button is not None else None
    if counter is None:
        counter = post.select_one(".numvotes")
    if counter is not None:
        return parse_int(counter.get_text(strip=True), 0)
    return parse_int(post.get("data-likes"), 0)


def extract_post_header(post: Tag) -> Tag:
    """The ``.post-meta`` strip holding author and date (whole post if missing)."""
    return post.select_one(".post-meta") or post


def extract_body(post: Tag) -> Optional[Tag]:
    return post.select_one("div.post-contents") or post.select_one("div.post-body")


def _quote_from_blockquote(quote: Tag) -> str:
    author_link = quote.find(class_=QUOTE_AUTHOR_CLASS)
    author = quote.get("data-autor") or node_text(author_link)
    if author_link is not None:
        author_link.decompose()

    text = node_text(quote)
    if text.startswith(":"):
        text = text[1:].lstrip()

    prefix = f"@{author}: " if author else ""
    return f"{prefix}{text}"


def split_quotes(body: Optional[Tag]) -> Tuple[List[str], str]:
    """
    Separate ``<blockquote>`` quotes from the poster's own text.

    Removes the quotes from ``body``.

    Returns:
        (sanitized quotes, unsanitized reply text)
    """
    if body is None:
        return [], ""

    blockquotes = [
        quote for quote in body.find_all("blockquote")
        if quote.find_parent("blockquote") is None
    ]

    quotes = []
    for quote in blockquotes:
        quotes.append(sanitize_content(_quote_from_blockquote(quote)))
        quote.decompose()

    return quotes, node_text(body)


def _drop_trailing_likes(text: str, likes: int) -> str:
    """The like counter renders inside the body on some layouts; trim it off the end."""
    if likes > 0 and text.endswith(str(likes)):
        head = text[:-len(str(likes))]
        if not head or not head[-1].isdigit():
            return head.rstrip()
    return text


# =============================================================================
# PAGE PARSING
# =============================================================================

def parse_thread_page(html: str, page_number: int = 1, tz: Optional[tzinfo] = None) -> ParsedPage:
    """
    Parse one Mediavida thread page.

    Args:
        html: Page HTML
        page_number: Page this HTML came from (stored on each post)
        tz: Timezone used to render ``data-time`` dates

    Never raises: missing fields fall back to "Unknown" / "0" / "" / 0.
    """
    page = make_soup(html)
    posts: List[ForumPost] = []

    for post_id, post in split_posts(page):
        if not post_id:
            continue

        likes = extract_likes(post)
        author = extract_author(post)
        author_id = extract_author_id(post)
        date = extract_post_date(extract_post_header(post), tz)
        quotes, reply = split_quotes(extract_body(post))

        posts.append(ForumPost(
            id=post_id,
            author=author,
            author_id=author_id,
            date=date,
            content=sanitize_content(_drop_trailing_likes(reply, likes)),
            quotes=quotes,
            likes=likes,
            page_number=page_number,
        ))

    return ParsedPage(
        posts=posts,
        total_pages=extract_total_pages(page),
        title=extract_title(page),
    )


def parse_search_results(html: str, base_url: str = BASE_URL) -> List[ThreadSearchResult]:
    """Thread links on a subforum search page, first occurrence of each thread only."""
    results: List[ThreadSearchResult] = []
    seen = set()

    for link in make_soup(html).find_all("a", href=True):
        path = urlsplit(link["href"]).path
        match = THREAD_PATH_PATTERN.match(path)
        if not match:
            continue

        thread_id = match.group(1)
        title = node_text(link)
        if thread_id in seen or not title:
            continue
        seen.add(thread_id)
        results.append(ThreadSearchResult(
            id=thread_id,
            title=sanitize_content(title),
            url=f"{base_url.rstrip('/')}{path}",
        ))

    return results


# =============================================================================
# URLS
# =============================================================================

def extract_thread_id(url: str) -> str:
    """Last run of digits before the query string, fragment or end of the URL."""
    match = re.search(r"(\d+)/?(?:[?#]|$)", url or "")
    return match.group(1) if match else ""


def build_page_url(url: str, page: int) -> str:
    """Thread URL for ``page``: ``/<page>`` appended to the path when page > 1."""
    parts = urlsplit(url)
    if page <= 1:
        return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))
    path = f"{parts.path.rstrip('/')}/{page}"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def build_search_url(subforum: str, query: str, base_url: str = BASE_URL) -> str:
    subforum = subforum.strip().strip("/")
    return f"{base_url.rstrip('/')}/foro/{subforum}/buscar?q={quote_plus(query)}"
