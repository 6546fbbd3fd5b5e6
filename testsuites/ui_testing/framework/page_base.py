"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation and page state (title, URL)
    - Wait-then-act element interactions bounded by the explicit wait
    - Resilient click with ordered fallbacks
    - Title / URL wait utilities
    - Screenshot capture attached to Allure

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional, Union

import allure
from loguru import logger
from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from uiauto_tools.common.global_config import Settings
from uiauto_tools.report_tools.allure_utils import attach_png

from .element_actions import ElementActions, ElementWaitTimeout


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class SearchPage(BasePage):
            SEARCH_BOX = "textarea[name='q'], input[name='q']"

            def search_for(self, term: str) -> None:
                self.type_text(self.SEARCH_BOX, term, description="search box")
                self.press_key("Enter", self.SEARCH_BOX)
    """

    def __init__(self, page: Page, settings: Optional[Settings] = None):
        """
        Initialize page object.

        Args:
            page: Playwright Page object of the current session
            settings: Framework settings, defaults apply when omitted
        """
        self.page = page
        self.settings = settings or Settings()
        self.explicit_wait_ms = self.settings.explicit_wait * 1000
        self.actions = ElementActions(page, default_timeout=self.explicit_wait_ms)

    # =========================================================================
    # Navigation
    # =========================================================================

    def navigate_to_url(self, url: str) -> None:
        """Navigate to a URL, bounded by the page-load timeout."""
        with allure.step(f"Navigate to {url}"):
            self.page.goto(url)
            logger.debug(f"Navigated to: {url}")

    def get_page_title(self) -> str:
        """Gets the current page title."""
        return self.page.title()

    def get_current_url(self) -> str:
        """Gets the current URL."""
        return self.page.url

    # =========================================================================
    # Element Interactions
    # =========================================================================

    def wait_for_element(
        self,
        selector: Union[str, Locator],
        state: str = "visible",
        timeout: int = None,
    ) -> Locator:
        """Wait for an element to be present, visible or clickable."""
        return self.actions.wait_for_element(selector, state, timeout)

    def click_element(self, selector: Union[str, Locator], description: str = "") -> None:
        """Click an element after waiting for it to be clickable."""
        self.actions.click_element(selector, description=description)

    def safe_click(self, selector: Union[str, Locator], description: str = "") -> bool:
        """Click with fallbacks; False when every strategy failed."""
        return self.actions.safe_click(selector, description=description)

    def type_text(self, selector: Union[str, Locator], text: str, description: str = "") -> None:
        """Clear an input and type text after waiting for it to be visible."""
        self.actions.type_text(selector, text, description=description)

    def get_text(self, selector: Union[str, Locator], description: str = "") -> str:
        """Get text from an element after waiting for it to be visible."""
        return self.actions.get_text(selector, description=description)

    def is_displayed(self, selector: Union[str, Locator], timeout: int = None) -> bool:
        """True if the element becomes visible in time."""
        return self.actions.is_visible(selector, timeout)

    def press_key(self, key: str, selector: Union[str, Locator] = None) -> None:
        self.actions.press_key(key, selector)

    # =========================================================================
    # Wait Utilities
    # =========================================================================

    def wait_for_title_contains(self, text: str, timeout: int = None) -> bool:
        """
        Wait for the page title to contain text.

        Raises:
            ElementWaitTimeout: If the title does not match in time
        """
        timeout = timeout or self.explicit_wait_ms
        try:
            self.page.wait_for_function(
                "text => document.title.includes(text)", arg=text, timeout=timeout
            )
        except PlaywrightTimeoutError as e:
            raise ElementWaitTimeout(f"Title did not contain '{text}' after {timeout}ms") from e
        return True

    def wait_for_url_contains(self, fragment: str, timeout: int = None) -> bool:
        """
        Wait for the URL to contain a fragment.

        Raises:
            ElementWaitTimeout: If the URL does not match in time
        """
        timeout = timeout or self.explicit_wait_ms
        try:
            self.page.wait_for_url(lambda url: fragment in url, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementWaitTimeout(f"URL did not contain '{fragment}' after {timeout}ms") from e
        return True

    # =========================================================================
    # Screenshot Utilities
    # =========================================================================

    def screenshot(self, name: str, full_page: bool = False) -> bytes:
        """
        Take a screenshot and attach it to Allure.

        Returns:
            Screenshot as PNG bytes
        """
        data = self.page.screenshot(full_page=full_page)
        attach_png(data, name=name)
        return data


__all__ = [
    "BasePage",
]
