"""
================================================================================
Scenario Orchestration
================================================================================

Per-scenario lifecycle shared by the BDD hooks:

    before scenario -> acquire a browser session for the current worker
    steps           -> share the session and cross-step state via ScenarioContext
    after scenario  -> optional screenshot (per pass/fail and configuration),
                       result recorded in the run report, session released

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from playwright.sync_api import Page

from uiauto_tools.common import ensure_directory
from uiauto_tools.common.global_config import Settings
from uiauto_tools.report_tools.allure_utils import attach_png, attach_text
from uiauto_tools.report_tools.html_report import HtmlRunReport, ScenarioResult

from .browser_manager import BrowserSession, DriverManager


@dataclass
class ScenarioContext:
    """
    State shared between the steps of one running scenario.

    Attributes:
        name: Scenario name
        tags: Scenario tags
        feature: Feature name
        session: Browser session owned by the scenario
        search_term: Last search term entered by a step
        values: Any other cross-step values
    """
    name: str
    tags: List[str] = field(default_factory=list)
    feature: str = ""
    session: Optional[BrowserSession] = None
    search_term: Optional[str] = None
    values: Dict[str, Any] = field(default_factory=dict)
    started_at: float = field(default_factory=time.monotonic)

    @property
    def page(self) -> Page:
        """Page of the scenario's browser session."""
        if self.session is None:
            raise RuntimeError(f"No browser session for scenario: {self.name}")
        return self.session.page

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


def should_capture_screenshot(failed: bool, settings: Settings) -> bool:
    """Decide whether a finished scenario gets a screenshot."""
    if failed:
        return settings.take_screenshot_on_failure
    return settings.take_screenshot_on_pass


def _safe_file_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "_", name).strip("_") or "scenario"


class ScenarioHooks:
    """
    Before/after scenario hooks.

    Usage:
        hooks = ScenarioHooks(settings, DriverManager(settings), HtmlRunReport())
        context = hooks.before_scenario("Search for a term", ["Smoke"])
        ...
        hooks.after_scenario(context, failed=False)
    """

    def __init__(
        self,
        settings: Settings,
        driver_manager: DriverManager,
        run_report: Optional[HtmlRunReport] = None,
    ):
        self.settings = settings
        self.driver_manager = driver_manager
        self.run_report = run_report

    def before_scenario(
        self,
        name: str,
        tags: Iterable[str] = (),
        feature: str = "",
    ) -> ScenarioContext:
        """
        Start a scenario: acquire a browser session for the current worker.

        Returns:
            Context holding the session
        """
        context = ScenarioContext(name=name, tags=list(tags), feature=feature)

        logger.info("=" * 40)
        logger.info(f"Starting scenario: {name}")
        logger.info(f"Tags: {context.tags}")
        logger.info("=" * 40)

        context.session = self.driver_manager.initialize_driver(self.settings.browser)
        return context

    def after_scenario(
        self,
        context: ScenarioContext,
        failed: bool,
        error: Optional[str] = None,
    ) -> Optional[bytes]:
        """
        Finish a scenario: screenshot if configured, record, release session.

        Args:
            context: Context returned by before_scenario
            failed: Whether the scenario failed
            error: Failure message for the run report

        Returns:
            Screenshot bytes, if one was captured
        """
        screenshot = None
        try:
            if error:
                attach_text(error, name=f"Failure - {context.name}")
            screenshot = self._capture_screenshot(context, failed)
        finally:
            status = "failed" if failed else "passed"
            if self.run_report is not None:
                self.run_report.add_result(
                    ScenarioResult(
                        name=context.name,
                        status=status,
                        duration=context.elapsed,
                        feature=context.feature,
                        tags=list(context.tags),
                        error=error,
                    )
                )

            logger.info("=" * 40)
            logger.info(f"Finishing scenario: {context.name}")
            logger.info(f"Status: {status.upper()}")
            logger.info("=" * 40)

            self.driver_manager.quit_driver()
            context.session = None

        return screenshot

    def _capture_screenshot(self, context: ScenarioContext, failed: bool) -> Optional[bytes]:
        outcome = "failed" if failed else "passed"

        if not should_capture_screenshot(failed, self.settings):
            logger.info(f"Screenshot skipped (as per configuration) for {outcome} scenario: {context.name}")
            return None

        if context.session is None:
            logger.warning(f"No browser session to capture for scenario: {context.name}")
            return None

        title = f"{'Failed' if failed else 'Passed'} - {context.name}"
        try:
            data = context.session.screenshot()
            attach_png(data, name=title)
            if self.run_report is not None:
                self.run_report.add_screenshot(context.name, data, title)
            self.save_screenshot(data, context.name)
        except Exception as e:
            logger.error(f"Error capturing screenshot: {e}")
            return None

        logger.info(f"Screenshot captured for {outcome} scenario: {context.name}")
        return data

    def save_screenshot(self, data: bytes, name: str) -> Path:
        """Save screenshot bytes under the configured screenshot directory."""
        directory = ensure_directory(self.settings.screenshot_path)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = directory / f"{_safe_file_name(name)}_{timestamp}.png"
        path.write_bytes(data)
        logger.debug(f"Screenshot saved: {path}")
        return path


__all__ = [
    "ScenarioContext",
    "ScenarioHooks",
    "should_capture_screenshot",
]
