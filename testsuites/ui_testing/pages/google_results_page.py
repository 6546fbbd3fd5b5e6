"""
================================================================================
Google Results Page Object
================================================================================

Search results page: results container, result titles and the search box
echoing the submitted term.

================================================================================
"""

from __future__ import annotations

import allure
from playwright.sync_api import Error as PlaywrightError

from testsuites.ui_testing.framework.element_actions import ElementInteractionError
from testsuites.ui_testing.framework.page_base import BasePage


class GoogleResultsPage(BasePage):
    """Google search results page object."""

    RESULTS_CONTAINER = "#search"
    RESULT_TITLES = "#search h3"
    SEARCH_BOX = "[name='q']"
    RESULT_STATS = "#result-stats"

    def is_page_loaded(self) -> bool:
        """True once the results container is visible."""
        try:
            self.wait_for_element(self.RESULTS_CONTAINER, "visible")
            return True
        except (ElementInteractionError, PlaywrightError):
            return False

    def get_number_of_results(self) -> int:
        """Number of result titles on the page."""
        self.wait_for_element(self.RESULTS_CONTAINER, "visible")
        return self.actions.count(self.RESULT_TITLES)

    @allure.step("Check search results are present")
    def has_results(self) -> bool:
        return self.get_number_of_results() > 0

    def get_first_result_text(self) -> str:
        """Title of the first result, empty when there are none."""
        if self.get_number_of_results() > 0:
            first = self.page.locator(self.RESULT_TITLES).first
            return self.get_text(first, description="first result title")
        return ""

    def is_search_term_displayed(self, search_term: str) -> bool:
        """True if the search box still holds the term."""
        actual = self.actions.get_input_value(self.SEARCH_BOX)
        return search_term in (actual or "")

    def get_search_page_title(self) -> str:
        return self.get_page_title()


__all__ = ["GoogleResultsPage"]
