"""
Forum Tools - Configuration
Feature flags, paths, constants and timeouts
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =============================================================================
# PATHS
# =============================================================================
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = Path(os.getenv("FORUM_TOOLS_DATA_DIR", str(PROJECT_ROOT / "data")))
LOGS_DIR = PROJECT_ROOT / "logs"
DIAGNOSTIC_LOG_PATH = LOGS_DIR / "diagnostic.log"

# =============================================================================
# VERSION
# =============================================================================
VERSION = "0.1.0"
PROJECT_NAME = "Forum Tools"

# =============================================================================
# LOGGING
# =============================================================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"

# =============================================================================
# BROWSER CONFIGURATION
# =============================================================================
# Forum pages are fetched with Playwright (headless Chromium), authenticated
# with cookies exported from a real browser session.
# Requires: pip install playwright && playwright install chromium
#
# Every page fetch launches and tears down its own browser. Reusing one
# browser across pages gets flagged by the anti-bot layer in front of
# both forums.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/144.0.0.0 Safari/537.36"
)
BROWSER_NAVIGATION_TIMEOUT_MS = int(os.getenv("BROWSER_NAVIGATION_TIMEOUT_MS", "30000"))
BROWSER_SELECTOR_TIMEOUT_MS = int(os.getenv("BROWSER_SELECTOR_TIMEOUT_MS", "10000"))
# vBulletin can take a long time to redirect after a submit. A timeout here
# is treated as "probably posted" and the resulting page is inspected.
BROWSER_SUBMIT_TIMEOUT_MS = int(os.getenv("BROWSER_SUBMIT_TIMEOUT_MS", "60000"))

# =============================================================================
# THREAD FETCHING
# =============================================================================
FORUM_PAGE_DELAY_SECONDS = float(os.getenv("FORUM_PAGE_DELAY_SECONDS", "0.5"))  # Between page fetches
FORUM_DEFAULT_MAX_PAGES = int(os.getenv("FORUM_DEFAULT_MAX_PAGES", "10"))

# =============================================================================
# FOROCOCHES CONFIGURATION
# =============================================================================
# vBulletin 3.x forum. Thread pages are addressed with ?t=ID&page=N.
#
# Setup:
# 1. Log in to forocoches.com in Chrome
# 2. Export cookies with the "Get cookies.txt LOCALLY" extension
# 3. Save the export to the FOROCOCHES_COOKIES_PATH location
# 4. Optionally save your browser's user agent string next to it
FOROCOCHES_ENABLED = os.getenv("FOROCOCHES_ENABLED", "true").lower() == "true"
FOROCOCHES_BASE_URL = "https://forocoches.com/foro"
FOROCOCHES_DOMAIN = "forocoches.com"
FOROCOCHES_COOKIES_PATH = Path(os.getenv(
    "FOROCOCHES_COOKIES_PATH", str(DATA_DIR / "forocoches" / "cookies.txt")
))
FOROCOCHES_USER_AGENT_PATH = Path(os.getenv(
    "FOROCOCHES_USER_AGENT_PATH", str(DATA_DIR / "forocoches" / "user-agent.txt")
))

# =============================================================================
# MEDIAVIDA CONFIGURATION
# =============================================================================
# Custom forum engine behind Cloudflare. Thread pages are addressed with a
# trailing /N path segment.
MEDIAVIDA_ENABLED = os.getenv("MEDIAVIDA_ENABLED", "true").lower() == "true"
MEDIAVIDA_BASE_URL = "https://www.mediavida.com"
MEDIAVIDA_DOMAIN = "mediavida.com"
MEDIAVIDA_COOKIES_PATH = Path(os.getenv(
    "MEDIAVIDA_COOKIES_PATH", str(DATA_DIR / "mediavida" / "cookies.txt")
))
MEDIAVIDA_USER_AGENT_PATH = Path(os.getenv(
    "MEDIAVIDA_USER_AGENT_PATH", str(DATA_DIR / "mediavida" / "user-agent.txt")
))

# =============================================================================
# QUOTE TRACKING
# =============================================================================
# Last-seen quote ID per profile URL, so each check reports only what's new.
QUOTE_CURSOR_PATH = DATA_DIR / "quote_cursors.json"
QUOTE_PREVIEW_MAX_CHARS = 200

# =============================================================================
# POSTING
# =============================================================================
# BBCode appended to every reply and edit. Set to an empty string to disable.
FORUM_POST_SIGNATURE = os.getenv(
    "FORUM_POST_SIGNATURE",
    "\n\n[size=1]Posted using forum-tools[/size]",
)
FORUM_EDIT_REASON_MAX_CHARS = 200
