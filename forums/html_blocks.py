"""
Forum Tools - HTML Block Extraction

Pulls container elements out of raw forum HTML and flattens markup to
plain text.

Quoted replies are rendered as same-tag children nested inside the post
body, so a lazy regex like ``<div ...>(.*?)</div>`` stops at the first
nested close tag and silently truncates the post. The scanner here counts
opening vs closing tags instead, starting at depth 1 after the container's
own opening tag, and ends the block when the depth returns to 0.

Field lookups and HTML-to-text go through BeautifulSoup (``make_soup``,
``node_text``). Nothing in this module raises on bad markup: a missing
marker or an unbalanced/truncated document just yields an empty result.
"""

from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

# Tags whose boundary separates words in the rendered text
SEPARATOR_TAGS = ["br", "p", "li", "h1", "h2", "h3", "h4", "h5", "h6"]
HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


def _match_close(html: str, content_start: int, tag: str) -> Optional[int]:
    """
    Scan forward from just after an opening tag to its matching close.

    Returns:
        Offset of the matching ``</tag>``, or None if the document ends first
    """
    open_token = f"<{tag}"
    close_token = f"</{tag}>"
    lower = html.lower()

    depth = 1
    pos = content_start
    while depth > 0 and pos < len(html):
        next_open = lower.find(open_token, pos)
        next_close = lower.find(close_token, pos)

        if next_close == -1:
            return None

        if next_open != -1 and next_open < next_close:
            depth += 1
            pos = next_open + len(open_token)
        else:
            depth -= 1
            if depth == 0:
                return next_close
            pos = next_close + len(close_token)

    return None


def extract_balanced_block(html: str, start_marker: str, tag: str = "div") -> str:
    """
    Return the inner HTML of the element identified by ``start_marker``.

    Args:
        html: Raw page or fragment HTML
        start_marker: Substring inside the container's opening tag,
                      e.g. ``id="post_message_42"``
        tag: Element name that nests (``div`` for posts, ``blockquote``, ...)

    Returns:
        Inner HTML with nested same-tag children intact, or "" if the
        marker is absent or the block never closes
    """
    if not html or not start_marker:
        return ""

    marker_pos = html.find(start_marker)
    if marker_pos == -1:
        return ""

    open_end = html.find(">", marker_pos)
    if open_end == -1:
        return ""

    close_pos = _match_close(html, open_end + 1, tag)
    if close_pos is None:
        return ""
    return html[open_end + 1:close_pos]


# =============================================================================
# SOUP HELPERS
# =============================================================================

def make_soup(html: Optional[str]) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def node_text(node: Optional[Tag]) -> str:
    """
    Flatten a parsed element to a single line of plain text.

    Line breaks, paragraph and list item ends and headings become one
    space; inline tags (``<b>``, ``<a>``, ...) join their text without one.
    Entities are already decoded by the parser. Whitespace runs collapse.

    Spacers are inserted into ``node``'s tree, so call this on elements
    that are about to be discarded or whose text is final.
    """
    if node is None:
        return ""

    for tag in node.find_all(SEPARATOR_TAGS):
        if tag.name in HEADING_TAGS:
            tag.insert_before(" ")
        tag.insert_after(" ")
    return " ".join(node.get_text().split())

