"""
Forum Tools - Forum Scraping and Posting

Reads threads, tracks quotes and posts replies on Forocoches and Mediavida.

Components:
    - sanitizer: Neutralizes markup and injection phrases in forum text
    - html_blocks: Nesting-aware block extraction and HTML-to-text
    - forocoches / mediavida: Per-forum page parsers and URL handling
    - registry: ForumParser records selected by forum name
    - session: Exported cookies and user agent, loaded once per process
    - browser: Headless Playwright page loads and form submissions
    - orchestrator: Multi-page thread fetching
    - quotes: New-quote detection with a per-profile cursor
    - formatter: Compact text rendering inside untrusted-content markers

Usage:
    from forums.registry import get_forum_parser
    from forums.orchestrator import ThreadFetcher

    fetcher = ThreadFetcher(get_forum_parser("mediavida"), browser.fetch_html)
    thread = await fetcher.get_thread(url, max_pages=3)
"""
