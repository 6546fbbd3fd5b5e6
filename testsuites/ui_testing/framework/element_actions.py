# ================================================================================
# Element Actions Module
# ================================================================================
#
# This module provides UI element interaction utilities built on the
# Playwright sync API, with bounded waits and Allure integration.
#
# Key Features:
#   - Wait-then-act helpers (present / visible / clickable)
#   - Resilient click: an ordered list of click strategies
#     (direct click -> pointer move-and-click -> script click)
#   - Allure step integration
#   - Keyboard actions
#
# ================================================================================

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import allure
from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


# Element states accepted by wait_for_state, mapped to Playwright wait states
ELEMENT_STATES = {
    "present": "attached",
    "visible": "visible",
    "clickable": "visible",
}

DIRECT_CLICK_TIMEOUT_MS = 5000


class ElementInteractionError(Exception):
    """Raised when the browser rejects an element lookup or action."""
    pass


class ElementWaitTimeout(ElementInteractionError):
    """Raised when an element does not reach the expected state in time."""
    pass


def wait_for_state(locator: Locator, state: str, timeout: int) -> Locator:
    """
    Block until the element reaches a state.

    Args:
        locator: Element locator
        state: 'present', 'visible' or 'clickable'
        timeout: Timeout in milliseconds

    Returns:
        The locator, ready for the action

    Raises:
        ElementWaitTimeout: If the state is not reached before the deadline
        ElementInteractionError: If the browser rejects the lookup, e.g. a
            locator that resolves to several elements
    """
    if state not in ELEMENT_STATES:
        raise ValueError(f"Unknown element state: {state}")

    try:
        locator.wait_for(state=ELEMENT_STATES[state], timeout=timeout)
        if state == "clickable":
            # Trial click runs the actionability checks (enabled, stable,
            # receives events) without clicking
            locator.click(trial=True, timeout=timeout)
    except PlaywrightTimeoutError as e:
        raise ElementWaitTimeout(
            f"Element {locator} not {state} after {timeout}ms"
        ) from e
    except PlaywrightError as e:
        raise ElementInteractionError(f"Element {locator} cannot be {state}: {e}") from e
    return locator


# ================================================================================
# Click Strategies
# ================================================================================

@dataclass
class ClickResult:
    """Outcome of a single click strategy attempt."""
    strategy: str
    success: bool
    error: Optional[Exception] = None


class ClickStrategy(ABC):
    """Base class for one way of clicking an element."""

    name = "click"

    @abstractmethod
    def perform(self, page: Page, locator: Locator) -> None:
        """Click the element, raising on failure."""

    def attempt(self, page: Page, locator: Locator) -> ClickResult:
        """Run the strategy and report success instead of raising."""
        try:
            self.perform(page, locator)
        except Exception as e:
            return ClickResult(self.name, False, e)
        return ClickResult(self.name, True)


class DirectClick(ClickStrategy):
    """Wait until clickable with a short timeout, then click."""

    name = "direct"

    def __init__(self, timeout: int = DIRECT_CLICK_TIMEOUT_MS):
        self.timeout = timeout

    def perform(self, page: Page, locator: Locator) -> None:
        wait_for_state(locator, "clickable", self.timeout)
        locator.click(timeout=self.timeout)


class PointerClick(ClickStrategy):
    """Move the mouse to the element centre and click there."""

    name = "pointer"

    def perform(self, page: Page, locator: Locator) -> None:
        locator.scroll_into_view_if_needed()
        box = locator.bounding_box()
        if box is None:
            raise RuntimeError("Element has no bounding box")

        x = box["x"] + box["width"] / 2
        y = box["y"] + box["height"] / 2
        page.mouse.move(x, y)
        page.mouse.click(x, y)


class ScriptClick(ClickStrategy):
    """Scroll into view and click from page script."""

    name = "script"

    def perform(self, page: Page, locator: Locator) -> None:
        locator.evaluate("element => element.scrollIntoView(true)")
        locator.evaluate("element => element.click()")


DEFAULT_CLICK_STRATEGIES: Sequence[ClickStrategy] = (
    DirectClick(),
    PointerClick(),
    ScriptClick(),
)


def safe_click(
    page: Page,
    locator: Locator,
    strategies: Sequence[ClickStrategy] = DEFAULT_CLICK_STRATEGIES,
    description: str = "",
) -> bool:
    """
    Try each click strategy in order until one succeeds.

    Failure of every strategy is not raised: the step's own assertion is
    expected to report the missing effect of the click.

    Args:
        page: Page owning the element
        locator: Element to click
        strategies: Ordered strategies to try
        description: Human-readable element name for logs

    Returns:
        True if some strategy clicked the element
    """
    target = description or str(locator)
    for strategy in strategies:
        result = strategy.attempt(page, locator)
        if result.success:
            logger.debug(f"Clicked {target} using {result.strategy} click")
            return True
        logger.debug(f"{result.strategy} click failed for {target}: {result.error}")

    logger.warning(f"All click strategies failed for {target}")
    return False


# ================================================================================
# Element Actions
# ================================================================================

class ElementActions:
    """
    Wait-then-act element interactions for one page.

    Every action waits (bounded by the explicit wait) for the element to reach
    the state it needs before acting. A wait that runs out raises
    ElementWaitTimeout to the caller.

    Example:
        actions = ElementActions(page, default_timeout=15000)
        actions.click_element("button#submit", description="Submit button")
        actions.type_text("#username", "testuser", description="Username field")
    """

    def __init__(self, page: Page, default_timeout: int = 15000):
        """
        Initialize ElementActions with a Playwright page.

        Args:
            page: Playwright Page object
            default_timeout: Explicit wait in milliseconds
        """
        self.page = page
        self.default_timeout = default_timeout

    def _get_locator(self, selector: Union[str, Locator]) -> Locator:
        """Convert selector to Locator if needed, taking the first match."""
        if isinstance(selector, Locator):
            return selector
        return self.page.locator(selector).first

    def wait_for_element(
        self,
        selector: Union[str, Locator],
        state: str = "visible",
        timeout: int = None
    ) -> Locator:
        """
        Wait for an element to reach a specific state.

        Args:
            selector: CSS selector or Locator object
            state: Expected state - "present", "visible", "clickable"
            timeout: Wait timeout in milliseconds

        Returns:
            The Locator object
        """
        timeout = timeout or self.default_timeout
        return wait_for_state(self._get_locator(selector), state, timeout)

    @allure.step("Click element: {description}")
    def click_element(
        self,
        selector: Union[str, Locator],
        description: str = "",
        timeout: int = None
    ) -> None:
        """
        Click on an element once it is clickable.

        Args:
            selector: CSS selector or Locator object
            description: Human-readable description for reporting
            timeout: Wait timeout in milliseconds
        """
        timeout = timeout or self.default_timeout
        logger.info(f"Clicking element: {description or selector}")

        locator = self.wait_for_element(selector, "clickable", timeout)
        locator.click(timeout=timeout)

    @allure.step("Safe click: {description}")
    def safe_click(
        self,
        selector: Union[str, Locator],
        description: str = "",
        strategies: Sequence[ClickStrategy] = DEFAULT_CLICK_STRATEGIES,
    ) -> bool:
        """
        Click with fallbacks: direct, then pointer, then script.

        Returns:
            True if the element was clicked
        """
        return safe_click(
            self.page,
            self._get_locator(selector),
            strategies=strategies,
            description=description or str(selector),
        )

    @allure.step("Type text: {description}")
    def type_text(
        self,
        selector: Union[str, Locator],
        text: str,
        description: str = "",
        clear_first: bool = True,
        timeout: int = None
    ) -> None:
        """
        Type text into an input once it is visible.

        Args:
            selector: CSS selector or Locator object
            text: Text to enter
            description: Human-readable description for reporting
            clear_first: Clear existing content before typing
            timeout: Wait timeout in milliseconds
        """
        timeout = timeout or self.default_timeout
        logger.info(f"Typing into: {description or selector}")

        locator = self.wait_for_element(selector, "visible", timeout)
        if clear_first:
            locator.clear(timeout=timeout)
        locator.fill(text, timeout=timeout)

    def get_text(
        self,
        selector: Union[str, Locator],
        description: str = "",
        timeout: int = None
    ) -> str:
        """
        Get the visible text of an element.

        Args:
            selector: CSS selector or Locator object
            description: Human-readable description for reporting
            timeout: Wait timeout in milliseconds

        Returns:
            Text content of the element
        """
        timeout = timeout or self.default_timeout
        locator = self.wait_for_element(selector, "visible", timeout)
        text = locator.inner_text(timeout=timeout)

        logger.debug(f"Got text from {description or selector}: '{text}'")
        return text

    def get_attribute(
        self,
        selector: Union[str, Locator],
        attribute: str,
        timeout: int = None
    ) -> Optional[str]:
        """
        Get attribute value of an element once present.

        Returns:
            Attribute value or None if not set
        """
        timeout = timeout or self.default_timeout
        locator = self.wait_for_element(selector, "present", timeout)
        return locator.get_attribute(attribute, timeout=timeout)

    def get_input_value(self, selector: Union[str, Locator], timeout: int = None) -> str:
        """Current value of an input element."""
        timeout = timeout or self.default_timeout
        locator = self.wait_for_element(selector, "present", timeout)
        return locator.input_value(timeout=timeout)

    def is_visible(self, selector: Union[str, Locator], timeout: int = None) -> bool:
        """
        Check if an element becomes visible within the timeout.

        Returns:
            True if visible, False otherwise
        """
        try:
            self.wait_for_element(selector, "visible", timeout)
            return True
        except ElementInteractionError:
            return False

    def count(self, selector: Union[str, Locator]) -> int:
        """Number of elements currently matching the selector."""
        if isinstance(selector, Locator):
            return selector.count()
        return self.page.locator(selector).count()

    @allure.step("Press key: {key}")
    def press_key(self, key: str, selector: Union[str, Locator] = None) -> None:
        """
        Press a keyboard key.

        Args:
            key: Key to press (e.g., "Enter", "Tab", "Escape")
            selector: Optional element to focus before pressing
        """
        if selector is not None:
            self._get_locator(selector).press(key)
        else:
            self.page.keyboard.press(key)

        logger.debug(f"Pressed key: {key}")


__all__ = [
    "ClickResult",
    "ClickStrategy",
    "DEFAULT_CLICK_STRATEGIES",
    "DirectClick",
    "ElementActions",
    "ElementInteractionError",
    "ElementWaitTimeout",
    "PointerClick",
    "ScriptClick",
    "safe_click",
    "wait_for_state",
]
