"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the test suites.
It registers common markers and tags collected tests by directory.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "unit: Framework unit tests (no real browser)"
    )

    # Component markers
    config.addinivalue_line(
        "markers", "config: Tests related to configuration loading"
    )
    config.addinivalue_line(
        "markers", "reports: Tests related to run reports and retention"
    )
    config.addinivalue_line(
        "markers", "driver: Tests related to browser session lifecycle"
    )
    config.addinivalue_line(
        "markers", "interaction: Tests related to page interactions"
    )
    config.addinivalue_line(
        "markers", "scenario: Tests related to scenario hooks"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Auto-adds the 'unit' marker to tests in the unit directory.
    """
    for item in items:
        if "unit" in item.path.parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "UI Automation Framework",
        "=" * 60,
        "",
    ]
