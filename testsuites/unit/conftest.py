from unittest.mock import MagicMock

import pytest

from testsuites.ui_testing.framework.browser_manager import BrowserSession
from uiauto_tools.common.global_config import Settings


class FakeLauncher:
    """Records launches and hands out mock-backed sessions."""

    def __init__(self):
        self.launched = []

    def __call__(self, kind, settings):
        page = MagicMock(name=f"page-{kind}-{len(self.launched)}")
        page.screenshot.return_value = b"\x89PNG fake"
        session = BrowserSession(kind=kind, page=page)
        session.quit = MagicMock(name="quit")
        self.launched.append(session)
        return session


@pytest.fixture
def settings(tmp_path):
    return Settings(
        screenshot_path=str(tmp_path / "screenshots"),
        extent_report_path=str(tmp_path / "reports"),
        extent_report_retention_count=3,
    )


@pytest.fixture
def fake_launcher():
    return FakeLauncher()
