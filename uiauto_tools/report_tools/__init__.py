"""
================================================================================
Report Tools
================================================================================

Run report generation, retention and Allure attachment helpers.

================================================================================
"""

from .html_report import HtmlRunReport, ScenarioResult
from .report_manager import ReportManager, TEMP_REPORT_NAME

__all__ = [
    "HtmlRunReport",
    "ReportManager",
    "ScenarioResult",
    "TEMP_REPORT_NAME",
]
