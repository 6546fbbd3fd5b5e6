"""
================================================================================
Allure Report Utilities
================================================================================

This module provides helpers for Allure attachments and for turning an
``allure-results`` directory into an HTML report and a run summary.

Features:
- Screenshot and text attachment helpers
- Result parsing and summary generation
- HTML report generation through the Allure CLI

================================================================================
"""

import json
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_png(data: bytes, name: str = "Screenshot"):
    """
    Attach PNG bytes to the Allure report.

    Args:
        data: Raw PNG bytes
        name: Attachment name
    """
    allure.attach(
        data,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


# ================================================================================
# Report Processing
# ================================================================================

@dataclass
class TestResultSummary:
    """Summary of test execution results."""
    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "broken": self.broken,
            "skipped": self.skipped,
            "unknown": self.unknown,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
        }


class AllureReportProcessor:
    """
    Processes Allure results and generates reports.
    """

    def __init__(self, results_dir: Path, report_dir: Optional[Path] = None):
        """
        Initialize processor.

        Args:
            results_dir: Allure results directory
            report_dir: Output report directory
        """
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")

    def parse_results(self) -> List[Dict[str, Any]]:
        """
        Parse Allure result files.

        Returns:
            List of test result dictionaries
        """
        results = []

        for result_file in self.results_dir.glob("*-result.json"):
            try:
                with open(result_file, encoding="utf-8") as f:
                    results.append(json.load(f))
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to parse {result_file}: {e}")

        return results

    def generate_summary(self) -> TestResultSummary:
        """
        Generate summary from results.

        Returns:
            TestResultSummary object
        """
        results = self.parse_results()
        summary = TestResultSummary()
        summary.total = len(results)

        for result in results:
            status = result.get("status", "unknown")
            if status == "passed":
                summary.passed += 1
            elif status == "failed":
                summary.failed += 1
            elif status == "broken":
                summary.broken += 1
            elif status == "skipped":
                summary.skipped += 1
            else:
                summary.unknown += 1

            summary.duration_ms += result.get("stop", 0) - result.get("start", 0)

        return summary

    def generate_report(self) -> bool:
        """
        Generate Allure HTML report.

        Returns:
            True if successful
        """
        cmd = [
            "allure", "generate",
            str(self.results_dir),
            "-o", str(self.report_dir),
            "--clean"
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.warning("Allure CLI not found. Please install Allure to generate reports.")
            return False

        if result.returncode == 0:
            logger.info(f"Report generated at {self.report_dir}")
            return True

        logger.error(f"Report generation failed: {result.stderr}")
        return False

    def log_summary(self) -> TestResultSummary:
        """Log the run summary."""
        summary = self.generate_summary()

        logger.info("=" * 60)
        logger.info("TEST EXECUTION SUMMARY")
        logger.info(f"Total Tests:    {summary.total}")
        logger.info(f"Passed:         {summary.passed}")
        logger.info(f"Failed:         {summary.failed}")
        logger.info(f"Broken:         {summary.broken}")
        logger.info(f"Skipped:        {summary.skipped}")
        logger.info(f"Pass Rate:      {summary.pass_rate:.2f}%")
        logger.info(f"Duration:       {summary.duration_ms / 1000:.2f}s")
        logger.info("=" * 60)
        return summary


__all__ = [
    "AllureReportProcessor",
    "TestResultSummary",
    "attach_png",
    "attach_text",
]
