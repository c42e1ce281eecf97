"""
Forum Tools - Error Types
Exceptions raised by forum operations and tool handlers.

Parse degradation is never an error: parsers fall back to default
values instead of raising. Everything here is a real invocation failure
that the tool executor turns into an error-flagged text result.
"""

from typing import Optional


class ForumToolError(Exception):
    """Base class for all forum tool failures."""


class ToolInputError(ForumToolError):
    """A required tool argument is missing, empty, or the wrong type."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class SessionError(ForumToolError):
    """The authenticated browser session can't be built (e.g. no cookie file)."""


class ForumFetchError(ForumToolError):
    """A page could not be fetched from the forum."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class UnknownForumError(ForumToolError):
    """No parser is registered under the requested forum name."""

    def __init__(self, forum: str, available: list):
        self.forum = forum
        super().__init__(
            f"Unknown forum: {forum}. Available: {', '.join(sorted(available))}"
        )
