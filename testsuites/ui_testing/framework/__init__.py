"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework.

Components:
    - browser_manager: Per-worker browser session lifecycle
    - element_actions: Wait-then-act helpers and the resilient click chain
    - page_base: Base page object for common operations
    - scenario: Scenario context and before/after scenario hooks

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserSession, DriverManager, UnsupportedBrowserError
from .element_actions import ElementActions, ElementInteractionError, ElementWaitTimeout, safe_click
from .page_base import BasePage
from .scenario import ScenarioContext, ScenarioHooks, should_capture_screenshot

__all__ = [
    "BasePage",
    "BrowserSession",
    "DriverManager",
    "ElementActions",
    "ElementInteractionError",
    "ElementWaitTimeout",
    "ScenarioContext",
    "ScenarioHooks",
    "UnsupportedBrowserError",
    "safe_click",
    "should_capture_screenshot",
]
