"""
Forum Tools - Forum Parser Registry

Each supported forum is described by a ForumParser record: the same set
of capabilities (parse a page, build a page URL, extract a thread ID)
filled in with that forum's own functions. Callers pick a record by
name; the two forums' URL schemes must never be mixed.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from core.errors import UnknownForumError
from forums import forocoches, mediavida
from forums.models import ParsedPage


@dataclass(frozen=True)
class ForumParser:
    """Per-forum parsing and URL capabilities."""
    name: str
    domain: str
    base_url: str
    parse_page: Callable[[str, int], ParsedPage]
    build_page_url: Callable[[str, int], str]
    extract_thread_id: Callable[[str], str]

    def handles_url(self, url: str) -> bool:
        """True if ``url`` points at this forum's domain."""
        return self.domain in (url or "").lower()


FOROCOCHES = ForumParser(
    name="forocoches",
    domain="forocoches.com",
    base_url=forocoches.BASE_URL,
    parse_page=forocoches.parse_thread_page,
    build_page_url=forocoches.build_page_url,
    extract_thread_id=forocoches.extract_thread_id,
)

MEDIAVIDA = ForumParser(
    name="mediavida",
    domain="mediavida.com",
    base_url=mediavida.BASE_URL,
    parse_page=mediavida.parse_thread_page,
    build_page_url=mediavida.build_page_url,
    extract_thread_id=mediavida.extract_thread_id,
)

FORUM_PARSERS: Dict[str, ForumParser] = {
    FOROCOCHES.name: FOROCOCHES,
    MEDIAVIDA.name: MEDIAVIDA,
}


def get_forum_parser(name: str) -> ForumParser:
    """
    Look up a forum's parser by name.

    Raises:
        UnknownForumError: if no forum is registered under ``name``
    """
    parser = FORUM_PARSERS.get((name or "").strip().lower())
    if parser is None:
        raise UnknownForumError(name, list(FORUM_PARSERS))
    return parser


def list_forums() -> List[str]:
    return sorted(FORUM_PARSERS)
