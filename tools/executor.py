"""
Forum Tools - Tool Executor
Maps tool calls to the forum services.

Each handler validates its arguments before any network access, runs the
async forum operation on the executor's own event loop and renders the
outcome as text. Failures come back as error-flagged results carrying a
readable message.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from core.errors import ForumToolError, ToolInputError, UnknownForumError
from core.logger import log_error, log_info, log_warning
from forums import formatter
from forums.browser import ForumBrowser
from forums.orchestrator import ThreadFetcher, search_threads
from forums.quotes import QuoteTracker
from forums.session import SessionStore
import config


@dataclass
class ToolResult:
    """Result from executing a tool."""
    tool_use_id: str
    tool_name: str
    content: Any  # Text payload (error message when is_error)
    is_error: bool = False


@dataclass
class ForumServices:
    """Everything the handlers need for one forum."""
    session: SessionStore
    browser: ForumBrowser
    fetcher: ThreadFetcher


# =============================================================================
# ARGUMENT VALIDATION
# =============================================================================

def require_str(tool_input: Dict[str, Any], field: str) -> str:
    """Non-empty string argument, or ToolInputError naming the field."""
    value = tool_input.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ToolInputError(field)
    return value.strip()


def optional_str(tool_input: Dict[str, Any], field: str) -> Optional[str]:
    value = tool_input.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ToolInputError(field, f"{field} must be a string")
    return value.strip() or None


def positive_int(tool_input: Dict[str, Any], field: str, default: Optional[int] = None) -> int:
    """
    Integer argument >= 1.

    Numeric strings are accepted since some callers send every value as
    text. Missing values fall back to ``default`` (required if None).
    """
    value = tool_input.get(field)
    if value is None:
        if default is None:
            raise ToolInputError(field)
        return default

    if isinstance(value, bool):
        raise ToolInputError(field, f"{field} must be a positive integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value < 1:
        raise ToolInputError(field, f"{field} must be a positive integer")
    return value


def optional_bool(tool_input: Dict[str, Any], field: str, default: bool = False) -> bool:
    value = tool_input.get(field)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ToolInputError(field, f"{field} must be true or false")


class ToolExecutor:
    """
    Executes tool calls by routing to forum handlers.

    Services are injected per forum name; a forum without services is
    treated as disabled.
    """

    def __init__(
        self,
        forums: Dict[str, ForumServices],
        quote_tracker: Optional[QuoteTracker] = None,
        post_signature: str = "",
        edit_reason_max_chars: int = 200,
        default_max_pages: int = 10,
        event_loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize the executor.

        Args:
            forums: Services per enabled forum ("forocoches", "mediavida")
            quote_tracker: Forocoches quote tracker (None disables quote checks)
            post_signature: Text appended to every reply and edit
            edit_reason_max_chars: Edit reasons are cut to this length
            default_max_pages: Page cap when a thread tool gets no max_pages
            event_loop: Loop used to run async forum calls (created if None)
        """
        self._forums = forums
        self._quote_tracker = quote_tracker
        self._post_signature = post_signature
        self._edit_reason_max_chars = edit_reason_max_chars
        self._default_max_pages = default_max_pages
        self._loop = event_loop or asyncio.new_event_loop()

        # Map tool names to execution methods
        self._handlers: Dict[str, Callable[[Dict[str, Any], str], ToolResult]] = {
            # Forocoches tools
            "forocoches_thread": self._exec_forocoches_thread,
            "forocoches_page": self._exec_forocoches_page,
            "forocoches_reply": self._exec_forocoches_reply,
            "forocoches_edit": self._exec_forocoches_edit,
            "forocoches_quotes": self._exec_forocoches_quotes,
            # Mediavida tools
            "mediavida_thread": self._exec_mediavida_thread,
            "mediavida_page": self._exec_mediavida_page,
            "mediavida_search": self._exec_mediavida_search,
            # Session
            "forum_clear_session": self._exec_forum_clear_session,
        }

    @property
    def tool_names(self):
        return list(self._handlers.keys())

    def execute(
        self,
        tool_name: str,
        tool_input: Optional[Dict[str, Any]],
        tool_use_id: str = ""
    ) -> ToolResult:
        """
        Execute a tool call and return the result.

        Args:
            tool_name: Name of the tool to execute
            tool_input: Structured input arguments
            tool_use_id: Unique ID for this tool use (for result correlation)

        Returns:
            ToolResult with execution outcome
        """
        if tool_input is None:
            tool_input = {}

        handler_fn = self._handlers.get(tool_name)
        if not handler_fn:
            log_warning(f"Unknown tool: {tool_name}")
            return ToolResult(
                tool_use_id=tool_use_id,
                tool_name=tool_name,
                content=f"Unknown tool: {tool_name}. Available tools: {self.tool_names}",
                is_error=True
            )

        try:
            log_info(f"Executing tool: {tool_name}", prefix="🔧")
            return handler_fn(tool_input, tool_use_id)
        except ForumToolError as e:
            log_warning(f"Tool {tool_name} failed: {e}")
            return ToolResult(
                tool_use_id=tool_use_id,
                tool_name=tool_name,
                content=str(e),
                is_error=True
            )
        except Exception as e:
            log_error(f"Tool execution error ({tool_name}): {e}")
            return ToolResult(
                tool_use_id=tool_use_id,
                tool_name=tool_name,
                content=f"Tool execution error: {str(e)}",
                is_error=True
            )

    def close(self) -> None:
        """Close the event loop."""
        if not self._loop.is_closed():
            self._loop.close()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _run(self, coro):
        """Run a coroutine to completion on the executor's loop."""
        return self._loop.run_until_complete(coro)

    def _services(self, forum: str) -> ForumServices:
        services = self._forums.get(forum)
        if services is None:
            raise ForumToolError(f"{forum} tools are disabled")
        return services

    def _forum_url(self, tool_input: Dict[str, Any], forum: str, field: str = "url") -> str:
        """Required URL argument that must point at ``forum``."""
        url = require_str(tool_input, field)
        if not self._services(forum).fetcher.parser.handles_url(url):
            raise ToolInputError(field, f"{field} must be a {forum} link, got: {url}")
        return url

    def _sign(self, message: str) -> str:
        return f"{message}{self._post_signature}"

    # =========================================================================
    # THREAD READING
    # =========================================================================

    def _thread(self, forum: str, tool_name: str, input: Dict, id: str) -> ToolResult:
        url = self._forum_url(input, forum)
        max_pages = positive_int(input, "max_pages", self._default_max_pages)

        thread = self._run(self._services(forum).fetcher.get_thread(url, max_pages))
        return ToolResult(
            tool_use_id=id,
            tool_name=tool_name,
            content=formatter.format_thread_compact(thread)
        )

    def _page(self, forum: str, tool_name: str, input: Dict, id: str) -> ToolResult:
        url = self._forum_url(input, forum)
        page = positive_int(input, "page", 1)

        parsed = self._run(self._services(forum).fetcher.get_thread_page(url, page))
        return ToolResult(
            tool_use_id=id,
            tool_name=tool_name,
            content=formatter.format_page_compact(parsed, page)
        )

    def _exec_forocoches_thread(self, input: Dict, id: str) -> ToolResult:
        """Fetch a multi-page Forocoches thread."""
        return self._thread("forocoches", "forocoches_thread", input, id)

    def _exec_forocoches_page(self, input: Dict, id: str) -> ToolResult:
        return self._page("forocoches", "forocoches_page", input, id)

    def _exec_mediavida_thread(self, input: Dict, id: str) -> ToolResult:
        """Fetch a multi-page Mediavida thread."""
        return self._thread("mediavida", "mediavida_thread", input, id)

    def _exec_mediavida_page(self, input: Dict, id: str) -> ToolResult:
        return self._page("mediavida", "mediavida_page", input, id)

    def _exec_mediavida_search(self, input: Dict, id: str) -> ToolResult:
        """Search threads in a Mediavida subforum."""
        subforum = require_str(input, "subforum")
        query = require_str(input, "query")
        services = self._services("mediavida")

        results = self._run(search_threads(
            services.browser.fetch_html, subforum, query, services.fetcher.parser.base_url
        ))
        return ToolResult(
            tool_use_id=id,
            tool_name="mediavida_search",
            content=formatter.format_search_results(results, subforum, query)
        )

    # =========================================================================
    # POSTING (Forocoches)
    # =========================================================================

    def _exec_forocoches_reply(self, input: Dict, id: str) -> ToolResult:
        """Post a reply through the quick reply form."""
        url = self._forum_url(input, "forocoches")
        message = require_str(input, "message")
        services = self._services("forocoches")

        result = self._run(services.browser.post_reply(
            url, self._sign(message), services.fetcher.parser.base_url
        ))

        if not result.success:
            return ToolResult(
                tool_use_id=id,
                tool_name="forocoches_reply",
                content=f"Failed to post reply: {result.error}",
                is_error=True
            )

        return ToolResult(
            tool_use_id=id,
            tool_name="forocoches_reply",
            content=f"Reply posted successfully.\nURL: {result.post_url}"
        )

    def _exec_forocoches_edit(self, input: Dict, id: str) -> ToolResult:
        """Edit one of the user's posts."""
        post_id = require_str(input, "post_id").lstrip("#")
        if not post_id.isdigit():
            raise ToolInputError("post_id", f"post_id must be numeric, got: {post_id}")
        message = require_str(input, "message")
        reason = optional_str(input, "reason")
        if reason:
            reason = reason[:self._edit_reason_max_chars]
        services = self._services("forocoches")

        result = self._run(services.browser.edit_post(
            post_id, self._sign(message), reason, services.fetcher.parser.base_url
        ))

        if not result.success:
            return ToolResult(
                tool_use_id=id,
                tool_name="forocoches_edit",
                content=f"Failed to edit post #{post_id}: {result.error}",
                is_error=True
            )

        return ToolResult(
            tool_use_id=id,
            tool_name="forocoches_edit",
            content=f"Post #{post_id} edited successfully.\nURL: {result.post_url}"
        )

    # =========================================================================
    # QUOTES (Forocoches)
    # =========================================================================

    def _exec_forocoches_quotes(self, input: Dict, id: str) -> ToolResult:
        """Check a profile's quotes page for new quotes."""
        url = self._forum_url(input, "forocoches")
        show_all = optional_bool(input, "show_all")
        if self._quote_tracker is None:
            raise ForumToolError("Quote tracking is disabled")

        check = self._run(self._quote_tracker.get_quotes(url))
        return ToolResult(
            tool_use_id=id,
            tool_name="forocoches_quotes",
            content=formatter.format_quote_check(check, show_all)
        )

    # =========================================================================
    # SESSION
    # =========================================================================

    def _exec_forum_clear_session(self, input: Dict, id: str) -> ToolResult:
        """Drop cached cookies and user agent for a forum."""
        forum = require_str(input, "forum").lower()
        services = self._forums.get(forum)
        if services is None:
            raise UnknownForumError(forum, list(self._forums))

        services.session.invalidate()
        return ToolResult(
            tool_use_id=id,
            tool_name="forum_clear_session",
            content=(
                f"Session cache cleared for {forum}. "
                f"Cookies will be re-read from {services.session.cookies_path} on next use."
            )
        )


# =============================================================================
# FACTORY
# =============================================================================

def build_forum_services(forum: str) -> ForumServices:
    """Wire session, browser and fetcher for one forum from config."""
    from forums.registry import get_forum_parser
    from forums.session import build_session_store

    session = build_session_store(forum)
    browser = ForumBrowser(
        session,
        navigation_timeout_ms=config.BROWSER_NAVIGATION_TIMEOUT_MS,
        selector_timeout_ms=config.BROWSER_SELECTOR_TIMEOUT_MS,
        submit_timeout_ms=config.BROWSER_SUBMIT_TIMEOUT_MS,
    )
    fetcher = ThreadFetcher(
        get_forum_parser(forum),
        browser.fetch_html,
        page_delay=config.FORUM_PAGE_DELAY_SECONDS,
    )
    return ForumServices(session=session, browser=browser, fetcher=fetcher)


# Global instance
_tool_executor: Optional[ToolExecutor] = None


def get_tool_executor() -> ToolExecutor:
    """Get the global tool executor instance, built from config on first use."""
    global _tool_executor
    if _tool_executor is None:
        from forums.quotes import QuoteCursorStore

        forums: Dict[str, ForumServices] = {}
        if config.FOROCOCHES_ENABLED:
            forums["forocoches"] = build_forum_services("forocoches")
        if config.MEDIAVIDA_ENABLED:
            forums["mediavida"] = build_forum_services("mediavida")

        quote_tracker = None
        if "forocoches" in forums:
            quote_tracker = QuoteTracker(
                QuoteCursorStore(config.QUOTE_CURSOR_PATH),
                forums["forocoches"].browser.fetch_html,
                base_url=config.FOROCOCHES_BASE_URL,
                preview_max_chars=config.QUOTE_PREVIEW_MAX_CHARS,
            )

        _tool_executor = ToolExecutor(
            forums,
            quote_tracker=quote_tracker,
            post_signature=config.FORUM_POST_SIGNATURE,
            edit_reason_max_chars=config.FORUM_EDIT_REASON_MAX_CHARS,
            default_max_pages=config.FORUM_DEFAULT_MAX_PAGES,
        )
    return _tool_executor
