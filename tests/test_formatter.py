"""
Tests for compact text rendering.
"""

import unittest

from forums.formatter import (
    CONTENT_END,
    CONTENT_START,
    format_page_compact,
    format_post_compact,
    format_quote_check,
    format_quote_compact,
    format_search_results,
    format_thread_compact,
)
from forums.models import ForumPost, ForumQuote, ForumThread, ParsedPage, QuoteCheck, ThreadSearchResult


def make_post(post_id="1", likes=0, quotes=None, content="hola"):
    return ForumPost(
        id=post_id,
        author="alice",
        author_id="7",
        date="9 feb 2026",
        content=content,
        quotes=quotes or [],
        likes=likes,
    )


def make_quote(post_id, preview=""):
    return ForumQuote(
        post_id=post_id,
        author="bob",
        date="Hoy",
        time="10:00",
        thread_title="Motores",
        thread_url="https://forocoches.com/foro/showthread.php?t=1",
        preview=preview,
    )


class TestPostLine(unittest.TestCase):

    def test_basic(self):
        self.assertEqual(format_post_compact(make_post()), "#1 @alice (9 feb 2026): hola")

    def test_likes_shown_when_positive(self):
        self.assertEqual(format_post_compact(make_post(likes=4)), "#1 @alice (9 feb 2026) [4❤]: hola")

    def test_quotes_prepended(self):
        post = make_post(quotes=["@bob: antes", "@carl: otro"], content="respuesta")
        self.assertEqual(
            format_post_compact(post),
            "#1 @alice (9 feb 2026): > @bob: antes > @carl: otro | respuesta"
        )


class TestThreadAndPage(unittest.TestCase):

    def test_thread_wrapped(self):
        thread = ForumThread(
            id="5", title="Hilo", url="https://x/5", total_pages=2,
            posts=[make_post("1"), make_post("2")],
        )
        lines = format_thread_compact(thread).split("\n")
        self.assertEqual(lines[0], CONTENT_START)
        self.assertEqual(lines[1], "Hilo | 2p, 2 posts | https://x/5")
        self.assertEqual(lines[2], "")
        self.assertTrue(lines[3].startswith("#1 @alice"))
        self.assertEqual(lines[-1], CONTENT_END)

    def test_page_header(self):
        page = ParsedPage(posts=[make_post()], total_pages=9, title="Hilo")
        text = format_page_compact(page, 4)
        self.assertIn("Hilo | p4/9", text)
        self.assertTrue(text.startswith(CONTENT_START))
        self.assertTrue(text.endswith(CONTENT_END))

    def test_warning_in_marker(self):
        self.assertIn("user-generated", CONTENT_START)
        self.assertIn("manipulate", CONTENT_START)


class TestQuoteRendering(unittest.TestCase):

    def test_quote_line(self):
        line = format_quote_compact(make_quote("9"), is_new=True)
        self.assertEqual(
            line,
            '🆕 #9 @bob (Hoy 10:00) "Motores" https://forocoches.com/foro/showthread.php?t=1'
        )

    def test_quote_preview(self):
        line = format_quote_compact(make_quote("9", preview="texto"), is_new=False)
        self.assertTrue(line.startswith("#9"))
        self.assertTrue(line.endswith("\n  > texto"))

    def test_no_quotes(self):
        check = QuoteCheck(quotes=[], new_count=0, last_seen_id=None, first_check=True)
        self.assertEqual(format_quote_check(check), "No quotes found on your profile page.")

    def test_first_check_is_baseline(self):
        check = QuoteCheck(
            quotes=[make_quote("3"), make_quote("2")], new_count=0,
            last_seen_id=None, first_check=True,
        )
        text = format_quote_check(check)
        self.assertIn("First check", text)
        self.assertIn("baseline", text)
        self.assertNotIn("🆕", text)
        self.assertIn("#3 @bob", text)
        self.assertIn("#2 @bob", text)

    def test_steady_state_no_new(self):
        check = QuoteCheck(quotes=[make_quote("3")], new_count=0, last_seen_id="3")
        text = format_quote_check(check)
        self.assertIn("No new quotes since last check. 1 total quotes on page.", text)
        self.assertNotIn("#3", text)
        self.assertNotIn("First check", text)

    def test_new_quotes_only(self):
        check = QuoteCheck(
            quotes=[make_quote("5"), make_quote("4"), make_quote("3")],
            new_count=2, last_seen_id="3",
        )
        text = format_quote_check(check)
        self.assertIn("2 new quotes since last check", text)
        self.assertIn("🆕 #5", text)
        self.assertIn("🆕 #4", text)
        self.assertNotIn("#3 ", text)

    def test_single_new_quote_wording(self):
        check = QuoteCheck(quotes=[make_quote("5"), make_quote("3")], new_count=1, last_seen_id="3")
        self.assertIn("1 new quote since last check", format_quote_check(check))

    def test_show_all_marks_new(self):
        check = QuoteCheck(
            quotes=[make_quote("5"), make_quote("3")], new_count=1, last_seen_id="3",
        )
        text = format_quote_check(check, show_all=True)
        self.assertIn("Showing all 2 quotes (1 new)", text)
        self.assertIn("🆕 #5", text)
        self.assertIn("\n#3 @bob", text)


class TestSearchResults(unittest.TestCase):

    def test_results(self):
        results = [ThreadSearchResult("1", "Rust", "https://www.mediavida.com/foro/dev/rust-1")]
        text = format_search_results(results, "dev", "rust")
        self.assertIn('1 threads for "rust" in dev', text)
        self.assertIn("#1 Rust | https://www.mediavida.com/foro/dev/rust-1", text)
        self.assertTrue(text.startswith(CONTENT_START))

    def test_no_results(self):
        self.assertEqual(format_search_results([], "dev", "cobol"), 'No threads found for "cobol" in dev.')


if __name__ == "__main__":
    unittest.main()
