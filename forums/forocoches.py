"""
Forum Tools - Forocoches Parser
Page parsing and URL handling for Forocoches (vBulletin 3.x markup).

Markup this relies on:
    - Post boundaries: ``<!-- post #ID -->`` ... ``<!-- / post #ID -->``
    - Author: ``<a class="bigusername" href="member.php?u=ID">name</a>``
    - Date: plain text in the post header cell ``td.thead``
      ("09-feb-2026, 11:26", "Ayer, 20:06")
    - Body: ``<div id="post_message_ID">``, quotes nested inside as
      ``<div style="margin:20px...">Cita de <b>X</b>: <table>...</table></div>``
    - Pagination: "Page X of Y" / "Página X de Y" in a ``td.vbmenu_control`` cell

Forocoches has no like button, so every post reports 0 likes.
"""

import re
from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from bs4.element import Tag

from forums.html_blocks import extract_balanced_block, make_soup, node_text
from forums.models import ForumPost, ForumQuote, ParsedPage
from forums.parsing import clean_title, extract_post_date, first_group, parse_int, truncate
from forums.sanitizer import sanitize_content

BASE_URL = "https://forocoches.com/foro"

TITLE_SUFFIX_PATTERN = re.compile(r"\s*-\s*ForoCoches.*$", re.IGNORECASE)
TOTAL_PAGES_PATTERN = re.compile(r"(?:Page|P[áa]gina)\s+\d+\s+(?:of|de)\s+(\d+)", re.IGNORECASE)
POST_BLOCK_PATTERN = re.compile(r"<!-- post #(\d+) -->(.*?)<!-- / post #\1 -->", re.DOTALL)

MEMBER_HREF = re.compile(r"member\.php\?(?:[^#]*&)?u=\d+", re.IGNORECASE)

QUOTE_CONTAINER_STYLE = re.compile(r"^\s*margin:\s*20px", re.IGNORECASE)
QUOTE_TEXT_STYLE = re.compile(r"font-style:\s*italic", re.IGNORECASE)
QUOTE_AUTHOR_LABEL = re.compile(r"Cita de", re.IGNORECASE)
QUOTE_HEADER_PATTERN = re.compile(r"^Cita(?:\s+de\s+.*?)?:\s*", re.IGNORECASE)

# Profile "quotes" tab: each entry is a table row or list item linking to the quoting post
POST_LINK_HREF = re.compile(r"showthread\.php\?(?:[^#]*&)?p=(\d+)", re.IGNORECASE)
THREAD_LINK_HREF = re.compile(r"showthread\.php\?(?:[^#]*&)?t=\d+", re.IGNORECASE)
PREVIEW_CLASS = re.compile(r"quote|preview|excerpt", re.IGNORECASE)
QUOTE_DATE_PATTERN = re.compile(
    r"\b(\d{1,2}[-/]\w{2,4}[-/]\d{2,4}|Hoy|Ayer|Today|Yesterday)\b", re.IGNORECASE
)
QUOTE_TIME_PATTERN = re.compile(r"\b(\d{1,2}:\d{2})\b")

LAST_PAGE_TITLE = re.compile(r"^\s*(?:Last Page|[ÚU]ltima P[áa]gina)", re.IGNORECASE)


# =============================================================================
# FIELD EXTRACTION
# =============================================================================

def extract_title(page: Tag) -> str:
    """Thread title from ``<title>``, minus the " - ForoCoches" suffix, sanitized."""
    title_tag = page.find("title")
    title = clean_title(title_tag.get_text() if title_tag else "", TITLE_SUFFIX_PATTERN)
    return sanitize_content(title or "Unknown")


def extract_total_pages(page: Tag) -> int:
    """Total pages from the "Page X of Y" pagination cell (1 if absent)."""
    for cell in page.select("td.vbmenu_control"):
        match = TOTAL_PAGES_PATTERN.search(cell.get_text(" "))
        if match:
            return max(1, parse_int(match.group(1), 1))
    return 1


def split_posts(html: str) -> List[Tuple[str, str]]:
    """Split a page into ``(post_id, block_html)`` using vBulletin's comment markers."""
    return [(m.group(1), m.group(2)) for m in POST_BLOCK_PATTERN.finditer(html or "")]


def _author_link(node: Tag) -> Optional[Tag]:
    return node.select_one("a.bigusername") or node.find("a", href=MEMBER_HREF)


def extract_author(block: Tag) -> str:
    return sanitize_content(node_text(block.select_one("a.bigusername")) or "Unknown")


def extract_author_id(block: Tag) -> str:
    link = _author_link(block)
    if link is None:
        return "0"
    return dict(parse_qsl(urlsplit(link.get("href", "")).query)).get("u") or "0"


def extract_post_header(block: Tag) -> Tag:
    """The ``td.thead`` header cell holding the post date (whole block if missing)."""
    return block.select_one("td.thead") or block


def extract_message_html(block: str, post_id: str, page_html: str = "") -> str:
    """Raw HTML of ``post_message_<id>``, nested quote divs included."""
    marker = f'id="post_message_{post_id}"'
    message = extract_balanced_block(block, marker)
    if not message and page_html:
        message = extract_balanced_block(page_html, marker)
    return message


def _quote_from_container(container: Tag) -> str:
    """Build one unsanitized ``"@author: text"`` entry from a quote container."""
    label = container.find(string=QUOTE_AUTHOR_LABEL)
    author_tag = label.find_next_sibling("b") if label is not None else None
    author = node_text(author_tag)

    italic = container.find("div", style=QUOTE_TEXT_STYLE)
    if italic is not None:
        text = node_text(italic)
    else:
        text = QUOTE_HEADER_PATTERN.sub("", node_text(container), count=1)

    prefix = f"@{author}: " if author else ""
    return f"{prefix}{text}"


def split_quotes(message_html: str) -> Tuple[List[str], str]:
    """
    Separate quoted material from the replying user's own text.

    Only outermost quote containers count; a quote of a quote stays part
    of the outer quote's text.

    Returns:
        (sanitized quotes, sanitized reply content)
    """
    message = make_soup(message_html)
    containers = [
        div for div in message.find_all("div", style=QUOTE_CONTAINER_STYLE)
        if div.find_parent("div", style=QUOTE_CONTAINER_STYLE) is None
    ]

    quotes = []
    for container in containers:
        quotes.append(sanitize_content(_quote_from_container(container)))
        container.decompose()

    return quotes, sanitize_content(node_text(message))


# =============================================================================
# PAGE PARSING
# =============================================================================

def parse_thread_page(html: str, page_number: int = 1) -> ParsedPage:
    """
    Parse one Forocoches thread page.

    Never raises: missing fields fall back to "Unknown" / "0" / "", and a
    page without post markers parses to an empty post list.
    """
    html = html or ""
    posts: List[ForumPost] = []

    for post_id, block_html in split_posts(html):
        if not post_id:
            continue

        block = make_soup(block_html)
        quotes, content = split_quotes(extract_message_html(block_html, post_id, html))

        posts.append(ForumPost(
            id=post_id,
            author=extract_author(block),
            author_id=extract_author_id(block),
            date=extract_post_date(extract_post_header(block)),
            content=content,
            quotes=quotes,
            likes=0,
            page_number=page_number,
        ))

    page = make_soup(html)
    return ParsedPage(
        posts=posts,
        total_pages=extract_total_pages(page),
        title=extract_title(page),
    )


def _quote_entry(link: Tag) -> Tag:
    """The row (``<tr>`` / ``<li>``) holding a quote link, or the link's parent."""
    return link.find_parent(["tr", "li"]) or link.parent or link


def parse_quotes_page(html: str, base_url: str = BASE_URL, preview_max_chars: int = 200) -> List[ForumQuote]:
    """
    Parse a profile's quotes tab into quotes, in page order (newest first).

    Each entry is anchored on its link to the quoting post
    (``showthread.php?p=ID``); author, date, thread link and preview are
    looked up in the table row or list item holding that link. Repeated
    links to one post are collapsed into the first.
    """
    soup = make_soup(html)
    root = base_url.rstrip("/") + "/"
    quotes: List[ForumQuote] = []
    seen = set()

    for link in soup.find_all("a", href=POST_LINK_HREF):
        post_id = POST_LINK_HREF.search(link["href"]).group(1)
        if post_id in seen:
            continue
        seen.add(post_id)

        entry = _quote_entry(link)
        thread_link = entry.find("a", href=THREAD_LINK_HREF) or link
        thread_title = node_text(thread_link)
        thread_url = urljoin(root, thread_link["href"])
        author = node_text(_author_link(entry))

        # Dates and times are looked for outside the preview text
        preview_tag = entry.find(["div", "blockquote"], class_=PREVIEW_CLASS)
        preview = ""
        if preview_tag is not None:
            preview = node_text(preview_tag)
            preview_tag.decompose()
        header = node_text(entry)

        quotes.append(ForumQuote(
            post_id=post_id,
            author=sanitize_content(author or "Unknown"),
            date=first_group(header, [QUOTE_DATE_PATTERN]),
            time=first_group(header, [QUOTE_TIME_PATTERN]),
            thread_title=sanitize_content(thread_title or "Unknown"),
            thread_url=thread_url,
            preview=sanitize_content(truncate(preview, preview_max_chars)),
        ))

    return quotes


# =============================================================================
# URLS
# =============================================================================

def extract_thread_id(url: str) -> str:
    """
    Thread ID from a Forocoches URL.

    ``?t=123`` -> "123"; ``?p=456`` (post link) -> "p456"; otherwise the
    first number anywhere in the URL, or "".
    """
    params = dict(parse_qsl(urlsplit(url or "").query))
    if params.get("t"):
        return params["t"]
    if params.get("p"):
        return f"p{params['p']}"

    match = re.search(r"(\d+)", url or "")
    return match.group(1) if match else ""


def build_page_url(url: str, page: int) -> str:
    """Thread URL for ``page``: fragment dropped, ``page=N`` set (absent for page 1)."""
    parts = urlsplit(url)
    params = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != "page"]
    if page > 1:
        params.append(("page", str(page)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), ""))


def build_edit_url(post_id: str, base_url: str = BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/editpost.php?do=editpost&p={post_id}"


def build_post_url(post_id: str, base_url: str = BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/showthread.php?p={post_id}#post{post_id}"


def find_last_page_url(html: str, base_url: str = BASE_URL) -> Optional[str]:
    """Absolute URL of the "Last Page" pagination link, if the page has one."""
    link = make_soup(html).find("a", title=LAST_PAGE_TITLE, href=True)
    if link is None:
        return None
    return urljoin(base_url.rstrip("/") + "/", link["href"])
