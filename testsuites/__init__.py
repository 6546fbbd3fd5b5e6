"""
Test suites package.

Kept importable so that the behave steps, the unit tests and ``run_tests.py``
share the framework and page objects under ``testsuites.ui_testing``.
"""
