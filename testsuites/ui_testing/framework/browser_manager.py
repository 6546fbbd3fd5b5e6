"""
================================================================================
Browser Manager
================================================================================

Driver session lifecycle management for UI automation.

Features:
    - One browser session per worker (thread id by default)
    - Closed set of browser kinds: chrome, firefox, edge
    - Maximized window, notification/popup suppression
    - Automation-detection suppression and realistic user agents
    - Implicit-wait and page-load timeouts from configuration

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional

from loguru import logger
from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright

from uiauto_tools.common.global_config import Settings


class UnsupportedBrowserError(ValueError):
    """Raised when a browser kind outside the supported set is requested."""
    pass


# Hide navigator.webdriver from page scripts
HIDE_WEBDRIVER_SCRIPT = "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"

# Viewport used when a maximized window is not available (headless)
HEADLESS_VIEWPORT: Dict[str, int] = {"width": 1920, "height": 1080}


@dataclass(frozen=True)
class BrowserProfile:
    """
    Launch recipe for one browser kind.

    Attributes:
        engine: Playwright browser type ('chromium' or 'firefox')
        channel: Branded browser channel, None for the bundled build
        user_agent: User agent presented to sites
        args: Extra command line switches
        firefox_prefs: about:config preferences (Firefox only)
    """
    engine: str
    channel: Optional[str]
    user_agent: str
    args: List[str] = field(default_factory=list)
    firefox_prefs: Dict[str, Any] = field(default_factory=dict)


CHROMIUM_ARGS: List[str] = [
    "--start-maximized",
    "--disable-notifications",
    "--disable-popup-blocking",
    # Automation-detection suppression
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-gpu",
    "--disable-extensions",
    "--dns-prefetch-disable",
    # Credential / password manager prompts
    "--disable-save-password-bubble",
    "--password-store=basic",
]

BROWSER_PROFILES: Dict[str, BrowserProfile] = {
    "chrome": BrowserProfile(
        engine="chromium",
        channel=None,
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        args=CHROMIUM_ARGS,
    ),
    "edge": BrowserProfile(
        engine="chromium",
        channel="msedge",
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0"
        ),
        args=CHROMIUM_ARGS,
    ),
    "firefox": BrowserProfile(
        engine="firefox",
        channel=None,
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
        firefox_prefs={
            "dom.webdriver.enabled": False,
            "useAutomationExtension": False,
            "dom.webnotifications.enabled": False,
            "dom.push.enabled": False,
            "signon.rememberSignons": False,
            "signon.autofillForms": False,
        },
    ),
}

SUPPORTED_BROWSERS = tuple(BROWSER_PROFILES)


def normalize_browser_kind(browser: str) -> str:
    """
    Validate a browser kind.

    Args:
        browser: Browser name, case-insensitive

    Returns:
        Lower-case browser kind

    Raises:
        UnsupportedBrowserError: If the kind is not one of SUPPORTED_BROWSERS
    """
    kind = (browser or "").strip().lower()
    if kind not in BROWSER_PROFILES:
        raise UnsupportedBrowserError(f"Unsupported browser: {browser}")
    return kind


def build_launch_options(kind: str, settings: Settings) -> Dict[str, Any]:
    """Browser launch options for a browser kind."""
    profile = BROWSER_PROFILES[normalize_browser_kind(kind)]
    options: Dict[str, Any] = {
        "headless": settings.headless,
        "args": list(profile.args),
    }
    if profile.channel:
        options["channel"] = profile.channel
    if profile.engine == "chromium":
        options["ignore_default_args"] = ["--enable-automation"]
    if profile.firefox_prefs:
        options["firefox_user_prefs"] = {
            **profile.firefox_prefs,
            "general.useragent.override": profile.user_agent,
        }
    return options


def build_context_options(kind: str, settings: Settings) -> Dict[str, Any]:
    """Browser context options for a browser kind."""
    profile = BROWSER_PROFILES[normalize_browser_kind(kind)]
    options: Dict[str, Any] = {
        "user_agent": profile.user_agent,
        "ignore_https_errors": True,
        "permissions": [],
    }
    if settings.headless or profile.engine == "firefox":
        # --start-maximized has no effect here
        options["viewport"] = dict(HEADLESS_VIEWPORT)
    else:
        options["no_viewport"] = True
    return options


@dataclass
class BrowserSession:
    """
    A live browser session owned by exactly one worker.

    Attributes:
        kind: Browser kind the session was created for
        page: Active page used by page objects
        context: Browser context holding the page
        browser: Launched browser
        playwright: Playwright driver instance
        worker_id: Owner worker identifier
    """
    kind: str
    page: Page
    context: Optional[BrowserContext] = None
    browser: Optional[Browser] = None
    playwright: Optional[Playwright] = None
    worker_id: Optional[Hashable] = None

    def screenshot(self, full_page: bool = True) -> bytes:
        """Capture the current page as PNG bytes."""
        return self.page.screenshot(full_page=full_page)

    def quit(self) -> None:
        """Close the context and browser and stop Playwright."""
        try:
            if self.context is not None:
                self.context.close()
            if self.browser is not None:
                self.browser.close()
        finally:
            if self.playwright is not None:
                self.playwright.stop()
        logger.debug(f"Browser closed: {self.kind}")


def launch_browser_session(kind: str, settings: Settings) -> BrowserSession:
    """
    Launch a configured Playwright browser session.

    Args:
        kind: Validated browser kind
        settings: Framework settings (headless, timeouts)

    Returns:
        New BrowserSession
    """
    profile = BROWSER_PROFILES[normalize_browser_kind(kind)]
    playwright = sync_playwright().start()
    try:
        browser_launcher = getattr(playwright, profile.engine)
        browser = browser_launcher.launch(**build_launch_options(kind, settings))
        context = browser.new_context(**build_context_options(kind, settings))
        context.add_init_script(HIDE_WEBDRIVER_SCRIPT)

        # Implicit wait bounds every action, page load bounds navigations
        context.set_default_timeout(settings.implicit_wait * 1000)
        context.set_default_navigation_timeout(settings.page_load_timeout * 1000)

        page = context.new_page()
    except Exception:
        playwright.stop()
        raise

    logger.debug(f"Browser started: {kind} (headless={settings.headless})")
    return BrowserSession(
        kind=kind,
        page=page,
        context=context,
        browser=browser,
        playwright=playwright,
    )


Launcher = Callable[[str, Settings], BrowserSession]


class DriverManager:
    """
    Creates, hands out and releases one browser session per worker.

    Sessions live in an explicit mapping keyed by worker id. The id defaults
    to the calling thread's identifier, so parallel worker threads each get
    an isolated session; callers may pass their own ids instead.

    Usage:
        manager = DriverManager(settings)
        session = manager.initialize_driver("chrome")
        session.page.goto(settings.base_url)
        manager.quit_driver()
    """

    def __init__(self, settings: Settings, launcher: Optional[Launcher] = None):
        """
        Initialize driver manager.

        Args:
            settings: Framework settings
            launcher: Session factory, defaults to launch_browser_session
        """
        self.settings = settings
        self._launcher = launcher or launch_browser_session
        self._sessions: Dict[Hashable, BrowserSession] = {}
        # Guards the mapping only, sessions are never shared
        self._lock = threading.Lock()

    @staticmethod
    def current_worker_id() -> Hashable:
        """Default worker id: the calling thread."""
        return threading.get_ident()

    def _resolve(self, worker_id: Optional[Hashable]) -> Hashable:
        return self.current_worker_id() if worker_id is None else worker_id

    def initialize_driver(
        self,
        browser: Optional[str] = None,
        worker_id: Optional[Hashable] = None,
    ) -> BrowserSession:
        """
        Create a browser session for the current worker.

        Args:
            browser: Browser kind, defaults to the configured browser
            worker_id: Owner id, defaults to the calling thread

        Returns:
            The new session

        Raises:
            UnsupportedBrowserError: If the browser kind is not supported
        """
        kind = normalize_browser_kind(browser or self.settings.browser)
        worker = self._resolve(worker_id)

        if self.get_driver(worker) is not None:
            logger.warning(f"Worker {worker} already owns a session, replacing it")
            self.quit_driver(worker)

        session = self._launcher(kind, self.settings)
        session.worker_id = worker

        with self._lock:
            self._sessions[worker] = session

        logger.info(
            f"Browser initialized: {kind} | Timeouts configured - "
            f"Implicit: {self.settings.implicit_wait}s, "
            f"Page Load: {self.settings.page_load_timeout}s"
        )
        return session

    def get_driver(self, worker_id: Optional[Hashable] = None) -> Optional[BrowserSession]:
        """Return the current worker's session, or None."""
        with self._lock:
            return self._sessions.get(self._resolve(worker_id))

    def quit_driver(self, worker_id: Optional[Hashable] = None) -> None:
        """Close and forget the current worker's session. No-op without one."""
        worker = self._resolve(worker_id)
        with self._lock:
            session = self._sessions.pop(worker, None)

        if session is None:
            return

        try:
            session.quit()
        except Exception as e:
            logger.warning(f"Error while closing {session.kind} session: {e}")

    def active_workers(self) -> List[Hashable]:
        """Ids of workers that currently own a session."""
        with self._lock:
            return list(self._sessions)

    def quit_all(self) -> None:
        """Close every remaining session."""
        for worker in self.active_workers():
            self.quit_driver(worker)


__all__ = [
    "BROWSER_PROFILES",
    "SUPPORTED_BROWSERS",
    "BrowserSession",
    "DriverManager",
    "UnsupportedBrowserError",
    "build_context_options",
    "build_launch_options",
    "launch_browser_session",
    "normalize_browser_kind",
]
