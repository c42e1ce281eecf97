"""
Tests for the browser's navigation and submit handling.

Playwright is replaced with fake page objects, so no browser is launched.
"""

import unittest
from contextlib import asynccontextmanager
from unittest.mock import patch

from core.errors import ForumFetchError
from forums.browser import (
    EDIT_SUBMIT,
    EDIT_TEXTAREA,
    ERROR_PANEL,
    QUICK_REPLY_SUBMIT,
    QUICK_REPLY_TEXTAREA,
    ForumBrowser,
)


class FakePlaywrightError(Exception):
    pass


class FakeTimeoutError(FakePlaywrightError):
    pass


def fake_import():
    return None, FakePlaywrightError, FakeTimeoutError


class FakeElement:
    def __init__(self, text):
        self.text = text
        self.filled = None

    async def text_content(self):
        return self.text

    async def fill(self, value):
        self.filled = value


class FakeNavigation:
    def __init__(self, page):
        self.page = page

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None and self.page.navigation_times_out:
            raise FakeTimeoutError("Timeout 60000ms exceeded")
        return False


class FakePage:
    """Records interactions; every URL serves the same HTML."""

    def __init__(self, html="", error_text=None, navigation_times_out=False, goto_error=None,
                 missing_selectors=(), click_times_out=False):
        self.html = html
        self.error_text = error_text
        self.navigation_times_out = navigation_times_out
        self.goto_error = goto_error
        self.missing_selectors = missing_selectors
        self.click_times_out = click_times_out
        self.url = "https://forocoches.com/foro/showthread.php?p=5#post5"
        self.visited = []
        self.filled = {}
        self.clicked = []
        self.reason_input = FakeElement("")

    async def goto(self, url, wait_until, timeout):
        if self.goto_error:
            raise self.goto_error
        self.visited.append(url)

    async def content(self):
        return self.html

    async def wait_for_selector(self, selector, timeout, state="visible"):
        if selector in self.missing_selectors:
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return FakeElement("")

    async def fill(self, selector, value):
        self.filled[selector] = value

    def expect_navigation(self, wait_until, timeout):
        return FakeNavigation(self)

    async def click(self, selector, timeout=None):
        if self.click_times_out:
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded clicking {selector}")
        self.clicked.append(selector)

    async def query_selector(self, selector):
        if selector == ERROR_PANEL:
            return FakeElement(self.error_text) if self.error_text is not None else None
        if selector == 'input[name="reason"]':
            return self.reason_input
        return None


class FakeSession:
    forum = "forocoches"


def browser_with(page) -> ForumBrowser:
    browser = ForumBrowser(FakeSession())

    @asynccontextmanager
    async def open_page():
        yield page

    browser._open_page = open_page
    return browser


@patch("forums.browser._import_playwright", fake_import)
class TestFetchHtml(unittest.IsolatedAsyncioTestCase):

    async def test_returns_content(self):
        page = FakePage(html="<html>ok</html>")
        html = await browser_with(page).fetch_html("https://forocoches.com/foro/x")
        self.assertEqual(html, "<html>ok</html>")
        self.assertEqual(page.visited, ["https://forocoches.com/foro/x"])

    async def test_navigation_error_wrapped(self):
        page = FakePage(goto_error=FakeTimeoutError("Timeout 30000ms exceeded"))
        with self.assertRaises(ForumFetchError) as ctx:
            await browser_with(page).fetch_html("https://forocoches.com/foro/x")
        self.assertEqual(ctx.exception.url, "https://forocoches.com/foro/x")
        self.assertIn("Timeout 30000ms", str(ctx.exception))


@patch("forums.browser._import_playwright", fake_import)
class TestPostReply(unittest.IsolatedAsyncioTestCase):

    THREAD = "https://forocoches.com/foro/showthread.php?t=123"
    LAST_PAGE_HTML = '<a href="showthread.php?t=123&amp;page=4" title="Last Page - Results 61 to 70">Last</a>'

    async def test_follows_last_page_and_submits(self):
        page = FakePage(html=self.LAST_PAGE_HTML)
        result = await browser_with(page).post_reply(self.THREAD, "hola")

        self.assertEqual(page.visited, [
            self.THREAD,
            "https://forocoches.com/foro/showthread.php?t=123&page=4",
        ])
        self.assertEqual(page.filled, {QUICK_REPLY_TEXTAREA: "hola"})
        self.assertEqual(page.clicked, [QUICK_REPLY_SUBMIT])
        self.assertTrue(result.success)
        self.assertEqual(result.post_url, page.url)

    async def test_single_page_thread(self):
        page = FakePage(html="<html>no nav</html>")
        await browser_with(page).post_reply(self.THREAD, "hola")
        self.assertEqual(page.visited, [self.THREAD])

    async def test_slow_redirect_is_not_failure(self):
        page = FakePage(navigation_times_out=True)
        result = await browser_with(page).post_reply(self.THREAD, "hola")
        self.assertTrue(result.success)

    async def test_unclickable_quick_reply_raises(self):
        page = FakePage(click_times_out=True)
        with self.assertRaises(ForumFetchError):
            await browser_with(page).post_reply(self.THREAD, "hola")

    async def test_error_panel_reported(self):
        page = FakePage(navigation_times_out=True, error_text="  Debes esperar 30 segundos  ")
        result = await browser_with(page).post_reply(self.THREAD, "hola")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Debes esperar 30 segundos")

    async def test_empty_error_panel(self):
        page = FakePage(error_text="")
        result = await browser_with(page).post_reply(self.THREAD, "hola")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Unknown error")

    async def test_navigation_failure_raises(self):
        page = FakePage(goto_error=FakePlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        with self.assertRaises(ForumFetchError):
            await browser_with(page).post_reply(self.THREAD, "hola")


@patch("forums.browser._import_playwright", fake_import)
class TestEditPost(unittest.IsolatedAsyncioTestCase):

    async def test_edit_with_reason(self):
        page = FakePage()
        result = await browser_with(page).edit_post("321", "nuevo texto", "typo")

        self.assertEqual(page.visited, ["https://forocoches.com/foro/editpost.php?do=editpost&p=321"])
        self.assertEqual(page.filled, {EDIT_TEXTAREA: "nuevo texto"})
        self.assertEqual(page.reason_input.filled, "typo")
        self.assertEqual(page.clicked, [EDIT_SUBMIT])
        self.assertTrue(result.success)
        self.assertEqual(result.post_url, "https://forocoches.com/foro/showthread.php?p=321#post321")

    async def test_edit_without_reason(self):
        page = FakePage()
        await browser_with(page).edit_post("321", "nuevo texto")
        self.assertIsNone(page.reason_input.filled)

    async def test_edit_rejected(self):
        page = FakePage(error_text="No tienes permiso")
        result = await browser_with(page).edit_post("321", "x")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "No tienes permiso")

    async def test_unclickable_submit_raises(self):
        page = FakePage(click_times_out=True, navigation_times_out=True)
        with self.assertRaises(ForumFetchError) as ctx:
            await browser_with(page).edit_post("321", "x")
        self.assertIn(EDIT_SUBMIT, str(ctx.exception))
        self.assertEqual(page.clicked, [])

    async def test_missing_submit_button_raises(self):
        page = FakePage(missing_selectors=[EDIT_SUBMIT])
        with self.assertRaises(ForumFetchError) as ctx:
            await browser_with(page).edit_post("321", "x")
        self.assertEqual(ctx.exception.url, "https://forocoches.com/foro/editpost.php?do=editpost&p=321")
        self.assertEqual(page.clicked, [])


if __name__ == "__main__":
    unittest.main()
