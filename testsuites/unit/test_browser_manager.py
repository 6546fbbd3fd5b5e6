import threading
from dataclasses import replace

import pytest

from testsuites.ui_testing.framework.browser_manager import (
    SUPPORTED_BROWSERS,
    DriverManager,
    UnsupportedBrowserError,
    build_context_options,
    build_launch_options,
)

pytestmark = pytest.mark.driver


def test_supported_browsers():
    assert set(SUPPORTED_BROWSERS) == {"chrome", "firefox", "edge"}


def test_lifecycle(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)

    session = manager.initialize_driver("chrome")

    assert manager.get_driver() is session
    assert session.kind == "chrome"
    assert session.worker_id == DriverManager.current_worker_id()

    manager.quit_driver()

    assert manager.get_driver() is None
    session.quit.assert_called_once()


def test_default_browser_comes_from_settings(settings, fake_launcher):
    manager = DriverManager(replace(settings, browser="firefox"), launcher=fake_launcher)

    assert manager.initialize_driver().kind == "firefox"


def test_browser_kind_is_case_insensitive(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)

    assert manager.initialize_driver("Edge").kind == "edge"


def test_unsupported_browser_creates_no_session(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)

    with pytest.raises(UnsupportedBrowserError):
        manager.initialize_driver("safari")

    assert fake_launcher.launched == []
    assert manager.get_driver() is None


def test_quit_without_session_is_noop(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)

    manager.quit_driver()

    assert manager.get_driver() is None


def test_quit_error_is_swallowed_and_session_released(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)
    session = manager.initialize_driver("chrome")
    session.quit.side_effect = RuntimeError("browser already gone")

    manager.quit_driver()

    assert manager.get_driver() is None


def test_reinitialize_replaces_existing_session(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)
    first = manager.initialize_driver("chrome")

    second = manager.initialize_driver("firefox")

    first.quit.assert_called_once()
    assert manager.get_driver() is second
    assert manager.active_workers() == [DriverManager.current_worker_id()]


def test_sessions_are_isolated_per_thread(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)
    barrier = threading.Barrier(2)
    seen = {}
    errors = []

    def worker(name, browser):
        try:
            session = manager.initialize_driver(browser)
            barrier.wait(timeout=5)
            seen[name] = (session, manager.get_driver())
            barrier.wait(timeout=5)
            manager.quit_driver()
            seen[name + "-after"] = manager.get_driver()
        except Exception as e:  # surfaced by the assertion below
            errors.append(e)

    threads = [
        threading.Thread(target=worker, args=("a", "chrome")),
        threading.Thread(target=worker, args=("b", "firefox")),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert errors == []
    session_a, current_a = seen["a"]
    session_b, current_b = seen["b"]
    assert current_a is session_a and current_a.kind == "chrome"
    assert current_b is session_b and current_b.kind == "firefox"
    assert session_a is not session_b
    assert seen["a-after"] is None and seen["b-after"] is None
    assert manager.active_workers() == []


def test_explicit_worker_ids(settings, fake_launcher):
    manager = DriverManager(settings, launcher=fake_launcher)
    manager.initialize_driver("chrome", worker_id="gw0")
    manager.initialize_driver("edge", worker_id="gw1")

    assert manager.get_driver("gw0").kind == "chrome"
    assert manager.get_driver("gw1").kind == "edge"
    assert manager.get_driver() is None

    manager.quit_all()

    assert manager.active_workers() == []
    for session in fake_launcher.launched:
        session.quit.assert_called_once()


class TestLaunchOptions:
    """Per-browser launch and context options."""

    def test_chrome(self, settings):
        options = build_launch_options("chrome", settings)

        assert options["headless"] is True
        assert "--start-maximized" in options["args"]
        assert "--disable-notifications" in options["args"]
        assert "--disable-blink-features=AutomationControlled" in options["args"]
        assert options["ignore_default_args"] == ["--enable-automation"]
        assert "channel" not in options

    def test_edge_uses_msedge_channel(self, settings):
        options = build_launch_options("edge", settings)

        assert options["channel"] == "msedge"
        assert "--disable-popup-blocking" in options["args"]

    def test_firefox_prefs(self, settings):
        options = build_launch_options("firefox", settings)

        prefs = options["firefox_user_prefs"]
        assert prefs["dom.webdriver.enabled"] is False
        assert prefs["dom.webnotifications.enabled"] is False
        assert "Firefox" in prefs["general.useragent.override"]
        assert "ignore_default_args" not in options

    def test_headed_chromium_has_no_fixed_viewport(self, settings):
        options = build_context_options("chrome", replace(settings, headless=False))

        assert options["no_viewport"] is True
        assert "viewport" not in options
        assert "Chrome" in options["user_agent"]

    def test_headless_uses_viewport(self, settings):
        options = build_context_options("edge", settings)

        assert options["viewport"] == {"width": 1920, "height": 1080}
        assert "Edg/" in options["user_agent"]

    def test_unsupported_kind(self, settings):
        with pytest.raises(UnsupportedBrowserError):
            build_launch_options("opera", settings)
