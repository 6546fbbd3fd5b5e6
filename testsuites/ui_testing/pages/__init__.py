"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for application pages.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .google_home_page import GoogleHomePage
from .google_results_page import GoogleResultsPage

__all__ = [
    "GoogleHomePage",
    "GoogleResultsPage",
]
