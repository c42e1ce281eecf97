"""
Tests for the Mediavida parser and URL helpers.
"""

import unittest
from datetime import timezone

from forums import mediavida

# 2026-02-09 12:00 UTC: same calendar day in UTC and in Madrid
NOON_9_FEB_2026 = 1770638400

THREAD_PAGE = f"""<html><head><title>Hilo de pruebas | Mediavida</title></head><body>
<h1 class="thread-title">Hilo de pruebas</h1>
<ul class="pg">
  <li><em class="current">1</em></li>
  <li><a href="/foro/dev/hilo-de-pruebas-123456/2">2</a></li>
  <li><a href="/foro/dev/hilo-de-pruebas-123456/5">5</a></li>
</ul>
<div id="post-1" class="cf post" data-autor="alice" data-id="77">
  <div class="post-meta"><a class="autor" href="/id/alice">alice</a>
    <span class="rd" data-time="{NOON_9_FEB_2026}">9 feb</span></div>
  <div class="post-contents"><p>Primer post</p></div>
  <div class="post-controls"><button class="btnmola"><i class="fa fa-thumbs-up"></i><span>3</span></button></div>
</div>
<div id="post-2" class="cf post" data-autor="bob" data-id="78">
  <span class="rd" data-time="{NOON_9_FEB_2026}"></span>
  <div class="post-contents"><blockquote><a class="autor" href="/id/alice">alice</a>: Primer post</blockquote><p>Estoy de acuerdo</p></div>
</div>
</body></html>"""


class TestParseThreadPage(unittest.TestCase):

    def setUp(self):
        self.page = mediavida.parse_thread_page(THREAD_PAGE, page_number=1, tz=timezone.utc)

    def test_title(self):
        self.assertEqual(self.page.title, "Hilo de pruebas")

    def test_total_pages_is_highest_link(self):
        self.assertEqual(self.page.total_pages, 5)

    def test_posts(self):
        self.assertEqual([p.id for p in self.page.posts], ["1", "2"])
        self.assertEqual([p.author for p in self.page.posts], ["alice", "bob"])
        self.assertEqual([p.author_id for p in self.page.posts], ["77", "78"])

    def test_unix_date(self):
        self.assertEqual(self.page.posts[0].date, "9 feb 2026")

    def test_likes(self):
        self.assertEqual(self.page.posts[0].likes, 3)
        self.assertEqual(self.page.posts[1].likes, 0)

    def test_content(self):
        self.assertEqual(self.page.posts[0].content, "Primer post")
        self.assertEqual(self.page.posts[0].quotes, [])

    def test_blockquote_separated(self):
        second = self.page.posts[1]
        self.assertEqual(second.quotes, ["@alice: Primer post"])
        self.assertEqual(second.content, "Estoy de acuerdo")

    def test_forum_timezone_default(self):
        page = mediavida.parse_thread_page(THREAD_PAGE)
        self.assertEqual(page.posts[0].date, "9 feb 2026")


class TestParseDegradation(unittest.TestCase):

    def test_no_posts(self):
        page = mediavida.parse_thread_page("<html><title>Mediavida</title></html>")
        self.assertEqual(page.posts, [])
        self.assertEqual(page.total_pages, 1)

    def test_author_from_link(self):
        html = '<div id="post-9"><a class="autor" href="/id/carol">carol</a></div>'
        post = mediavida.parse_thread_page(html).posts[0]
        self.assertEqual(post.author, "carol")
        self.assertEqual(post.author_id, "0")
        self.assertEqual(post.content, "")

    def test_quoted_author_not_taken_as_poster(self):
        html = (
            '<div id="post-4"><div class="post-contents"><blockquote>'
            '<a class="autor" href="/id/zoe">zoe</a>: hola</blockquote>vale</div></div>'
        )
        post = mediavida.parse_thread_page(html).posts[0]
        self.assertEqual(post.author, "Unknown")
        self.assertEqual(post.quotes, ["@zoe: hola"])
        self.assertEqual(post.content, "vale")

    def test_trailing_like_counter_dropped(self):
        self.assertEqual(mediavida._drop_trailing_likes("buen aporte 4", 4), "buen aporte")
        self.assertEqual(mediavida._drop_trailing_likes("en 2014", 4), "en 2014")
        self.assertEqual(mediavida._drop_trailing_likes("nada", 0), "nada")

    def test_inline_date_fallback(self):
        html = '<div id="post-3" data-autor="x">escrito el 3 marzo 2025<div class="post-contents">hola</div></div>'
        post = mediavida.parse_thread_page(html).posts[0]
        self.assertEqual(post.date, "3 marzo 2025")


class TestSearchResults(unittest.TestCase):

    HTML = """
    <a href="/foro/dev/aprender-python-654321" class="hb">Aprender <b>Python</b></a>
    <a href="/foro/dev/aprender-python-654321">Aprender Python</a>
    <a href="/foro/dev/otro-hilo-111">Otro &lt;hilo&gt;</a>
    <a href="/foro/dev">Dev</a>
    """

    def test_results_deduplicated(self):
        results = mediavida.parse_search_results(self.HTML)
        self.assertEqual([r.id for r in results], ["654321", "111"])

    def test_result_fields(self):
        first = mediavida.parse_search_results(self.HTML)[0]
        self.assertEqual(first.title, "Aprender Python")
        self.assertEqual(first.url, "https://www.mediavida.com/foro/dev/aprender-python-654321")

    def test_titles_sanitized(self):
        second = mediavida.parse_search_results(self.HTML)[1]
        self.assertNotIn("<", second.title)
        self.assertTrue(second.title.startswith("Otro "))


class TestUrls(unittest.TestCase):

    URL = "https://www.mediavida.com/foro/dev/hilo-de-pruebas-123456"

    def test_thread_id(self):
        self.assertEqual(mediavida.extract_thread_id(self.URL), "123456")
        self.assertEqual(mediavida.extract_thread_id(self.URL + "?foo=1"), "123456")
        self.assertEqual(mediavida.extract_thread_id(self.URL + "#post-4"), "123456")
        self.assertEqual(mediavida.extract_thread_id("https://www.mediavida.com/foro/"), "")

    def test_build_page_url(self):
        self.assertEqual(mediavida.build_page_url(self.URL, 3), self.URL + "/3")
        self.assertEqual(mediavida.build_page_url(self.URL + "/", 2), self.URL + "/2")

    def test_build_page_url_first_page(self):
        self.assertEqual(mediavida.build_page_url(self.URL + "#post-4", 1), self.URL)

    def test_build_search_url(self):
        self.assertEqual(
            mediavida.build_search_url("dev", "coche eléctrico"),
            "https://www.mediavida.com/foro/dev/buscar?q=coche+el%C3%A9ctrico"
        )


if __name__ == "__main__":
    unittest.main()
