"""
Forum Tools - Headless Browser

Fetches forum pages and submits forms with Playwright (headless Chromium),
authenticated with the cookies and user agent from a SessionStore.

Every call launches its own browser and tears it down when done. Nothing
is shared between two page loads, not even the browser process.

Usage:
    browser = ForumBrowser(session_store)

    html = await browser.fetch_html("https://forocoches.com/foro/showthread.php?t=123")

    result = await browser.post_reply(thread_url, "message")
    if not result.success:
        print(result.error)
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from core.errors import ForumFetchError, ForumToolError
from core.logger import log_info, log_success, log_warning
from forums import forocoches
from forums.models import SubmitResult
from forums.session import SessionStore

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
]

# vBulletin form elements
QUICK_REPLY_TEXTAREA = "#vB_Editor_QR_textarea"
QUICK_REPLY_SUBMIT = "#qr_submit"
EDIT_TEXTAREA = "#vB_Editor_001_textarea"
EDIT_REASON_INPUT = 'input[name="reason"]'
EDIT_SUBMIT = 'input[name="sbutton"]'
ERROR_PANEL = ".panel .blockrow.error, .standard_error"


def _import_playwright():
    """Import Playwright lazily so parsing works without it installed."""
    try:
        from playwright.async_api import async_playwright
        from playwright.async_api import Error as PlaywrightError
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError
    except ImportError:
        raise RuntimeError(
            "Playwright is not installed. Run: pip install playwright && playwright install chromium"
        )
    return async_playwright, PlaywrightError, PlaywrightTimeoutError


class ForumBrowser:
    """
    Short-lived headless browser sessions for one forum.

    Cookies and user agent come from the injected SessionStore, so a
    missing cookie file fails before any browser is launched.
    """

    def __init__(
        self,
        session_store: SessionStore,
        navigation_timeout_ms: int = 30000,
        selector_timeout_ms: int = 10000,
        submit_timeout_ms: int = 60000,
    ):
        """
        Initialize the browser.

        Args:
            session_store: Cookie and user agent source for this forum
            navigation_timeout_ms: Timeout for each page navigation
            selector_timeout_ms: Timeout waiting for a form element
            submit_timeout_ms: Timeout waiting for the redirect after a submit
        """
        self._session = session_store
        self._navigation_timeout_ms = navigation_timeout_ms
        self._selector_timeout_ms = selector_timeout_ms
        self._submit_timeout_ms = submit_timeout_ms

    @asynccontextmanager
    async def _open_page(self) -> AsyncIterator:
        """Launch a browser, yield an authenticated page, always close the browser."""
        cookies = self._session.cookies()
        user_agent = self._session.user_agent()
        async_playwright, _, _ = _import_playwright()

        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=True, args=LAUNCH_ARGS)
            try:
                context = await browser.new_context(
                    viewport={"width": 1280, "height": 720},
                    user_agent=user_agent,
                )
                if cookies:
                    await context.add_cookies(cookies)
                yield await context.new_page()
            finally:
                await browser.close()

    async def _goto(self, page, url: str) -> None:
        await page.goto(url, wait_until="networkidle", timeout=self._navigation_timeout_ms)

    async def fetch_html(self, url: str) -> str:
        """
        Load a page as the logged-in user and return its HTML.

        Raises:
            SessionError: if the cookie file is missing
            ForumFetchError: if the browser fails to load the page
        """
        _, PlaywrightError, _ = _import_playwright()
        log_info(f"Fetching {url}", prefix="🌐")

        try:
            async with self._open_page() as page:
                await self._goto(page, url)
                return await page.content()
        except PlaywrightError as e:
            raise ForumFetchError(url, str(e)) from e

    # =========================================================================
    # FORM SUBMISSION
    # =========================================================================

    async def _submit_and_inspect(self, page, submit_selector: str) -> SubmitResult:
        """
        Click a submit button, wait for the redirect and check for an error panel.

        A navigation timeout after the click is not a failure: vBulletin often
        saves the post and redirects slowly. The resulting page decides the
        outcome. A button that can't be found or clicked raises, since
        nothing was submitted.
        """
        _, _, PlaywrightTimeoutError = _import_playwright()

        await page.wait_for_selector(submit_selector, state="visible", timeout=self._selector_timeout_ms)

        clicked = False
        try:
            async with page.expect_navigation(wait_until="load", timeout=self._submit_timeout_ms):
                await page.click(submit_selector, timeout=self._selector_timeout_ms)
                clicked = True
        except PlaywrightTimeoutError:
            if not clicked:
                raise
            log_warning("Redirect after submit timed out, checking the page for errors")

        error_panel = await page.query_selector(ERROR_PANEL)
        if error_panel:
            error_text = ((await error_panel.text_content()) or "").strip()
            return SubmitResult(success=False, error=error_text or "Unknown error")

        return SubmitResult(success=True, post_url=page.url)

    async def post_reply(
        self,
        thread_url: str,
        message: str,
        base_url: str = forocoches.BASE_URL
    ) -> SubmitResult:
        """
        Post a reply through a thread's quick reply form.

        The form lives on the thread's last page, so the "Last Page" link is
        followed first when the thread has more than one page.

        Args:
            thread_url: Any page of the thread
            message: BBCode message body
            base_url: Forum root used to resolve the last page link

        Returns:
            SubmitResult with the final page URL, or the forum's error text
        """
        _, PlaywrightError, _ = _import_playwright()

        try:
            async with self._open_page() as page:
                await self._goto(page, thread_url)

                last_page_url = forocoches.find_last_page_url(await page.content(), base_url)
                if last_page_url:
                    await self._goto(page, last_page_url)

                await page.wait_for_selector(QUICK_REPLY_TEXTAREA, timeout=self._selector_timeout_ms)
                await page.fill(QUICK_REPLY_TEXTAREA, message)
                result = await self._submit_and_inspect(page, QUICK_REPLY_SUBMIT)
        except PlaywrightError as e:
            raise ForumFetchError(thread_url, str(e)) from e

        self._log_submit("Reply", result)
        return result

    async def edit_post(
        self,
        post_id: str,
        message: str,
        reason: Optional[str] = None,
        base_url: str = forocoches.BASE_URL
    ) -> SubmitResult:
        """
        Replace the text of one of your posts.

        Args:
            post_id: Numeric post ID
            message: New BBCode message body
            reason: Optional edit reason (ignored if the form has no reason field)
            base_url: Forum root
        """
        if not post_id:
            raise ForumToolError("post_id is required to edit a post")

        _, PlaywrightError, _ = _import_playwright()
        edit_url = forocoches.build_edit_url(post_id, base_url)

        try:
            async with self._open_page() as page:
                await self._goto(page, edit_url)
                await page.wait_for_selector(EDIT_TEXTAREA, timeout=self._selector_timeout_ms)
                await page.fill(EDIT_TEXTAREA, message)

                if reason:
                    reason_input = await page.query_selector(EDIT_REASON_INPUT)
                    if reason_input:
                        await reason_input.fill(reason)

                result = await self._submit_and_inspect(page, EDIT_SUBMIT)
        except PlaywrightError as e:
            raise ForumFetchError(edit_url, str(e)) from e

        if result.success:
            result.post_url = forocoches.build_post_url(post_id, base_url)
        self._log_submit("Edit", result)
        return result

    def _log_submit(self, action: str, result: SubmitResult) -> None:
        if result.success:
            log_success(f"{action} submitted on '{self._session.forum}'")
        else:
            log_warning(f"{action} rejected on '{self._session.forum}': {result.error}")
