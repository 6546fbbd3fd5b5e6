"""
================================================================================
UI Automation Tools
================================================================================

Infrastructure shared by the UI scenario suites and the test runner.

Modules:
    - common: Configuration loading and logging setup
    - report_tools: HTML run reports, report retention and Allure attachments

Example:
    from uiauto_tools.common import load_settings
    from uiauto_tools.report_tools import ReportManager

    settings = load_settings()
    reports = ReportManager.from_settings(settings)
    reports.cleanup_old_reports()

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
