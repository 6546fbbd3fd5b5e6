"""
================================================================================
Google Home Page Object
================================================================================

Search entry page: search box, search button and "I'm Feeling Lucky".

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from playwright.sync_api import Error as PlaywrightError

from testsuites.ui_testing.framework.element_actions import ElementInteractionError
from testsuites.ui_testing.framework.page_base import BasePage


class GoogleHomePage(BasePage):
    """Google home page object."""

    SEARCH_BOX = "[name='q']"
    SEARCH_BUTTON = "[name='btnK']"
    FEELING_LUCKY_BUTTON = "input[name='btnI']"

    @allure.step("Open Google home page")
    def navigate_to_google(self) -> "GoogleHomePage":
        """Navigate to the configured base URL."""
        self.navigate_to_url(self.settings.base_url)
        return self

    def is_page_loaded(self) -> bool:
        """True once the search box is visible."""
        try:
            self.wait_for_element(self.SEARCH_BOX, "visible")
            return True
        except (ElementInteractionError, PlaywrightError):
            return False

    @allure.step("Search for '{search_term}'")
    def search_for(self, search_term: str) -> None:
        """Type the term into the search box and submit with Enter."""
        self.type_text(self.SEARCH_BOX, search_term, description="search box")
        self.press_key("Enter", self.SEARCH_BOX)

    def enter_search_term(self, search_term: str) -> None:
        """Type in the search box without submitting."""
        self.type_text(self.SEARCH_BOX, search_term, description="search box")

    def click_search_button(self) -> None:
        self.click_element(self.SEARCH_BUTTON, description="search button")

    def click_feeling_lucky(self) -> bool:
        """Click "I'm Feeling Lucky" with fallbacks."""
        return self.safe_click(self.FEELING_LUCKY_BUTTON, description="feeling lucky button")

    def get_search_box_placeholder(self) -> Optional[str]:
        """Accessible label of the search box."""
        return self.actions.get_attribute(self.SEARCH_BOX, "aria-label")


__all__ = ["GoogleHomePage"]
