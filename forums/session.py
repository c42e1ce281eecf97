"""
Forum Tools - Forum Session Credentials

Loads the browser identity used to fetch forum pages as a logged-in user:
cookies exported from a real browser (Netscape cookies.txt format) and an
optional user agent override.

Cookie file format (one cookie per line, tab-separated):

    # Netscape HTTP Cookie File
    .forocoches.com	TRUE	/	TRUE	1767225600	bbsessionhash	abc123
    #HttpOnly_.forocoches.com	TRUE	/	TRUE	1767225600	bbpassword	def456

Both files are read once and cached on the SessionStore until
invalidate() is called (e.g. after exporting fresh cookies).
"""

from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

from core.errors import SessionError, UnknownForumError
from core.logger import log_info

HTTP_ONLY_PREFIX = "#HttpOnly_"


def parse_cookie_file(content: str) -> List[Dict[str, Any]]:
    """
    Parse a Netscape-format cookie export into Playwright cookie dicts.

    Comment and blank lines are skipped; lines with fewer than 7 fields
    are ignored. ``#HttpOnly_`` prefixed lines are kept and flagged.

    Args:
        content: Full text of a cookies.txt export

    Returns:
        List of cookie dicts accepted by ``BrowserContext.add_cookies``
    """
    cookies: List[Dict[str, Any]] = []

    for raw_line in content.splitlines():
        line = raw_line.rstrip("\r\n")
        http_only = False
        if line.startswith(HTTP_ONLY_PREFIX):
            line = line[len(HTTP_ONLY_PREFIX):]
            http_only = True
        elif not line.strip() or line.startswith("#"):
            continue

        parts = line.split("\t")
        if len(parts) < 7:
            continue

        domain, _include_subdomains, path, secure, expiry, name, value = parts[:7]
        try:
            expires = int(expiry)
        except ValueError:
            expires = 0

        cookies.append({
            "name": name,
            "value": value,
            "domain": domain if domain.startswith(".") else f".{domain}",
            "path": path or "/",
            "secure": secure.upper() == "TRUE",
            "httpOnly": http_only,
            "sameSite": "Lax",
            "expires": expires if expires > 0 else -1,
        })

    return cookies


class SessionStore:
    """
    Cached cookies and user agent for one forum.

    Loading happens on first use. A missing cookie file is an error with
    export instructions; a missing user agent file falls back to the
    configured default.
    """

    def __init__(
        self,
        forum: str,
        domain: str,
        cookies_path: Path,
        user_agent_path: Optional[Path],
        default_user_agent: str,
    ):
        """
        Initialize the store.

        Args:
            forum: Forum name, used in messages
            domain: Site domain, used in export instructions
            cookies_path: Path to the cookies.txt export
            user_agent_path: Optional file holding a user agent string
            default_user_agent: User agent used when no override file exists
        """
        self.forum = forum
        self.domain = domain
        self._cookies_path = Path(cookies_path)
        self._user_agent_path = Path(user_agent_path) if user_agent_path else None
        self._default_user_agent = default_user_agent
        self._cookies: Optional[List[Dict[str, Any]]] = None
        self._user_agent: Optional[str] = None
        self._lock = Lock()

    @property
    def cookies_path(self) -> Path:
        return self._cookies_path

    def _missing_cookies_message(self) -> str:
        return (
            f"Cookies file not found: {self._cookies_path}\n"
            "Please export cookies from your browser.\n\n"
            "Using Chrome:\n"
            '1. Install the "Get cookies.txt LOCALLY" extension\n'
            f"2. Go to {self.domain} and log in\n"
            "3. Click the extension and export cookies\n"
            f"4. Save the export as {self._cookies_path}"
        )

    def cookies(self) -> List[Dict[str, Any]]:
        """
        Get the session cookies, loading them on first call.

        Raises:
            SessionError: if the cookie file doesn't exist
        """
        with self._lock:
            if self._cookies is None:
                if not self._cookies_path.exists():
                    raise SessionError(self._missing_cookies_message())

                content = self._cookies_path.read_text(encoding="utf-8")
                self._cookies = parse_cookie_file(content)
                log_info(
                    f"Loaded {len(self._cookies)} cookies for '{self.forum}'",
                    prefix="🍪"
                )
            return list(self._cookies)

    def user_agent(self) -> str:
        """Get the user agent: the override file's contents, or the default."""
        with self._lock:
            if self._user_agent is None:
                agent = ""
                if self._user_agent_path and self._user_agent_path.exists():
                    agent = self._user_agent_path.read_text(encoding="utf-8").strip()
                self._user_agent = agent or self._default_user_agent
            return self._user_agent

    def invalidate(self) -> None:
        """Drop cached cookies and user agent so the next use re-reads the files."""
        with self._lock:
            self._cookies = None
            self._user_agent = None
        log_info(f"Cleared cached session for '{self.forum}'", prefix="🍪")


def build_session_store(forum: str) -> SessionStore:
    """
    Create the SessionStore for a forum from config.

    Raises:
        UnknownForumError: if ``forum`` isn't a supported forum
    """
    import config

    settings = {
        "forocoches": (
            config.FOROCOCHES_DOMAIN,
            config.FOROCOCHES_COOKIES_PATH,
            config.FOROCOCHES_USER_AGENT_PATH,
        ),
        "mediavida": (
            config.MEDIAVIDA_DOMAIN,
            config.MEDIAVIDA_COOKIES_PATH,
            config.MEDIAVIDA_USER_AGENT_PATH,
        ),
    }
    name = (forum or "").strip().lower()
    if name not in settings:
        raise UnknownForumError(forum, list(settings))

    domain, cookies_path, user_agent_path = settings[name]
    return SessionStore(
        forum=name,
        domain=domain,
        cookies_path=cookies_path,
        user_agent_path=user_agent_path,
        default_user_agent=config.DEFAULT_USER_AGENT,
    )
